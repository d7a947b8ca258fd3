"""
In-process publish/subscribe bus for content mutation events.

The host publishes an event whenever content that feeds are rendered from
changes; subscribers (the invalidation router) react to it.
"""
import enum
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class ContentEvent(str, enum.Enum):
    POST_SAVED = "save_post"
    POST_DELETED = "delete_post"
    POST_TRASHED = "trash_post"
    POST_UNTRASHED = "untrash_post"
    COMMENT_POSTED = "comment_post"
    COMMENT_STATUS_CHANGED = "set_comment_status"


# Handlers receive the content identifier, when the event carries one
Handler = Callable[[Optional[Any]], None]


class EventBus:
    """Typed event subscription. A failing handler never breaks the publisher."""

    def __init__(self):
        self._handlers: Dict[ContentEvent, List[Handler]] = defaultdict(list)

    def subscribe(self, event: Union[ContentEvent, str], handler: Handler) -> None:
        handlers = self._handlers[ContentEvent(event)]
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event: Union[ContentEvent, str], handler: Handler) -> bool:
        handlers = self._handlers.get(ContentEvent(event), [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def handlers(self, event: Union[ContentEvent, str]) -> List[Handler]:
        return list(self._handlers.get(ContentEvent(event), []))

    def publish(self, event: Union[ContentEvent, str], content_id: Optional[Any] = None) -> int:
        """
        Deliver an event to its subscribers.

        Returns:
            Number of handlers that ran without raising
        """
        event = ContentEvent(event)
        delivered = 0
        for handler in self.handlers(event):
            try:
                handler(content_id)
                delivered += 1
            except Exception:
                logger.exception(f"Handler {handler!r} failed for event {event.value}")
        return delivered
