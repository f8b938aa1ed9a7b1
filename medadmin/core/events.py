"""Change notification for cache / route invalidation."""

from typing import Callable, List

from .logger import get_logger


logger = get_logger(__name__)

ChangeCallback = Callable[[str, str], None]


class ChangeNotifier:
    """Fan-out of "entity X changed" signals to registered subscribers."""

    def __init__(self):
        self._subscribers: List[ChangeCallback] = []

    def subscribe(self, callback: ChangeCallback) -> None:
        self._subscribers.append(callback)

    def notify(self, entity_type: str, entity_id: str) -> None:
        for callback in list(self._subscribers):
            try:
                callback(entity_type, entity_id)
            except Exception:
                # Subscribers must not undo a committed decision
                logger.exception(
                    "Change subscriber failed for %s %s", entity_type, entity_id
                )
