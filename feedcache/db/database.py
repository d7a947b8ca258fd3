import logging
import os

from dotenv import load_dotenv
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

# Database holding the options table (persistent cache tier + settings)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./feedcache.db")
DEV_DATABASE_URL = os.getenv("DEV_DATABASE_URL", "sqlite:///./feedcache.db")


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {}


def check_connection(engine) -> bool:
    """Try a lightweight DB operation to confirm connectivity.

    Returns True on success, False on failure.
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


try:
    engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))
except ModuleNotFoundError:
    # Driver for DATABASE_URL (e.g. psycopg2) is not installed
    logger.warning("Database driver not found. Falling back to SQLite.")
    engine = create_engine(DEV_DATABASE_URL, **_engine_kwargs(DEV_DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db():
    """Create the options table. Safe to call more than once."""
    import feedcache.models.models  # noqa: F401 registers models on Base

    should_create = os.getenv("AUTO_CREATE_TABLES", "1")
    if "sqlite" in str(engine.url) or should_create == "1":
        try:
            Base.metadata.create_all(bind=engine)
        except Exception as e:
            # Let the runtime surface connection problems on first use
            logger.warning(f"Could not create tables on {engine.url}: {e}")
