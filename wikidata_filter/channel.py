import threading
from typing import Any

_EMPTY = object()


class HandOff:
    """Zero-capacity channel: ``put`` returns only once a consumer took the item.

    Any number of consumers may wait in ``get``; whichever is woken first
    claims the offered item.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._put_lock = threading.Lock()
        self._offered = threading.Condition(self._lock)
        self._taken = threading.Condition(self._lock)
        self._item: Any = _EMPTY

    def put(self, item: Any) -> None:
        # one offer at a time
        with self._put_lock:
            with self._lock:
                self._item = item
                self._offered.notify()
                while self._item is not _EMPTY:
                    self._taken.wait()

    def get(self) -> Any:
        with self._lock:
            while self._item is _EMPTY:
                self._offered.wait()
            item = self._item
            self._item = _EMPTY
            self._taken.notify()
            return item
