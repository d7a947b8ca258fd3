from sqlalchemy.orm import Session
from feedcache.models.models import Option
from typing import Any, Optional, List


def get_option(db: Session, name: str) -> Optional[Option]:
    """Get a single option row by name. Returns None if not found."""
    return db.get(Option, name)


def get_option_value(db: Session, name: str, default: Any = None) -> Any:
    """
    Get the stored value of an option

    Args:
        db: Database session
        name: Option name
        default: Returned when the option does not exist

    Returns:
        The stored value, or ``default``
    """
    row = get_option(db, name)
    if row is None:
        return default
    return row.option_value


def update_option(db: Session, name: str, value: Any, autoload: bool = False) -> Option:
    """
    Insert or overwrite an option

    Args:
        db: Database session
        name: Option name
        value: Picklable value
        autoload: Whether the host should preload this option

    Returns:
        The stored Option row
    """
    row = get_option(db, name)
    if row is None:
        row = Option(option_name=name, option_value=value, autoload=autoload)
        db.add(row)
    else:
        row.option_value = value
        row.autoload = autoload
    db.commit()
    return row


def delete_option(db: Session, name: str) -> bool:
    """Delete an option. Returns False if it did not exist."""
    row = get_option(db, name)
    if row is None:
        return False
    db.delete(row)
    db.commit()
    return True


def list_option_names(db: Session, prefix: str) -> List[str]:
    """List option names starting with ``prefix`` (LIKE wildcards escaped)."""
    rows = (
        db.query(Option.option_name)
        .filter(Option.option_name.startswith(prefix, autoescape=True))
        .order_by(Option.option_name)
        .all()
    )
    return [row[0] for row in rows]
