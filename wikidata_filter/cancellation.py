"""Graceful stop on the first interrupt, hard exit on the second."""

import logging
import os
import signal
import threading
from typing import Dict, Optional, Sequence

logger = logging.getLogger(__name__)

FORCED_EXIT_STATUS = 130

INTERRUPT = "interrupt"
FAILURE = "failure"


class CancellationToken:
    """Shared stop flag, written by signal handlers and workers, read by the producer."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: Optional[str] = None

    def cancel(self, reason: str = INTERRUPT) -> bool:
        """Set the flag. Returns False if it was already set."""
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
            return True

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason


class CancellationController:
    def __init__(
        self,
        token: CancellationToken,
        signals: Sequence[int] = (signal.SIGINT, signal.SIGTERM),
    ) -> None:
        self.token = token
        self.signals = tuple(signals)
        self._previous: Dict[int, object] = {}
        self._interrupts = 0

    def handle(self, signum, frame=None) -> None:
        # a worker failure also sets the token, so only our own signals count
        self._interrupts += 1
        if self._interrupts == 1:
            self.token.cancel(INTERRUPT)
            logger.warning(
                "Received %s, finishing in-flight work (repeat to exit immediately)",
                signal.Signals(signum).name,
            )
            return
        logger.error("Received %s again, exiting immediately", signal.Signals(signum).name)
        os._exit(FORCED_EXIT_STATUS)

    def install(self) -> "CancellationController":
        for signum in self.signals:
            self._previous[signum] = signal.signal(signum, self.handle)
        return self

    def uninstall(self) -> None:
        for signum, previous in self._previous.items():
            signal.signal(signum, previous)
        self._previous.clear()

    def __enter__(self) -> "CancellationController":
        return self.install()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.uninstall()
