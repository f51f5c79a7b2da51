"""Observer registration for customer lifecycle events and argument filters"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

# Notification events
CUSTOMER_CREATED = "customer_created"
SOURCE_ADDED = "source_added"
SOURCE_DELETED = "source_deleted"
DEFAULT_SOURCE_SET = "default_source_set"

# Filters applied while building the create-customer call
CUSTOMER_METADATA = "customer_metadata"
CREATE_CUSTOMER_ARGS = "create_customer_args"


class Hooks:
    """
    Explicit subscriber registry wired at composition time.

    Notifications are fire-and-forget: a failing subscriber is logged and the
    remaining subscribers still run. Filters are chained in registration order,
    each receiving the previous filter's return value.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callable[..., Any]]] = defaultdict(list)
        self._filters: Dict[str, List[Callable[..., Any]]] = defaultdict(list)

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        self._subscribers[event].append(callback)

    def emit(self, event: str, *payload: Any) -> None:
        for callback in list(self._subscribers[event]):
            try:
                callback(*payload)
            except Exception:
                logger.exception("Subscriber failed", extra={"event": event})

    def add_filter(self, name: str, fn: Callable[..., Any]) -> None:
        self._filters[name].append(fn)

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        for fn in self._filters[name]:
            value = fn(value, *args)
        return value
