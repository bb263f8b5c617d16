"""Fan-in synchronization for concurrent seed attempts."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

BarrierHandler = Callable[[Optional[BaseException]], None]


class CompletionBarrier:
    """Collapse ``required`` independent completions into one callback.

    ``signal`` may be called from any thread or task. The signal that brings
    the arrival count to ``required`` invokes the handler exactly once, with
    the first error seen among all signals (or None). Signals arriving after
    completion are ignored. A barrier with ``required == 0`` completes
    during construction.
    """

    def __init__(self, required: int, handler: BarrierHandler):
        """Initialize barrier.

        Args:
            required: Number of signals to wait for (>= 0)
            handler: Invoked once with the first error, or None

        """
        if required < 0:
            msg = f"required must be >= 0, got {required}"
            raise ValueError(msg)

        self._required = required
        self._handler = handler
        self._arrived = 0
        self._first_error: BaseException | None = None
        self._completed = False
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

        if required == 0:
            self._completed = True
            handler(None)

    @property
    def required(self) -> int:
        """Number of signals the barrier waits for."""
        return self._required

    @property
    def arrived(self) -> int:
        """Number of signals counted so far."""
        with self._lock:
            return self._arrived

    @property
    def completed(self) -> bool:
        """Whether the handler has been invoked."""
        with self._lock:
            return self._completed

    def signal(self, error: BaseException | None = None) -> bool:
        """Record one completion.

        Returns:
            True if the signal was counted, False if the barrier had
            already completed.

        """
        with self._lock:
            if self._completed:
                fire = False
                counted = False
            else:
                self._arrived += 1
                if error is not None and self._first_error is None:
                    self._first_error = error
                fire = self._arrived == self._required
                if fire:
                    self._completed = True
                counted = True
            first_error = self._first_error

        if not counted:
            self.logger.warning(
                "Ignoring signal after completion (%d/%d): %s",
                self._required,
                self._required,
                error,
            )
            return False

        if fire:
            self._handler(first_error)
        return True
