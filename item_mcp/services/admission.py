"""Admission control for full searches."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class AdmissionGate:
    """Bounded counter of full searches in flight.

    Acquisition never waits: callers that find the gate full are expected to
    take a cheaper path instead. All mutations happen without suspension
    points, so they are indivisible on the event loop.
    """

    def __init__(self, limit: int):
        if limit < 1:
            msg = f"Admission limit must be at least 1, got {limit}"
            raise ValueError(msg)
        self.limit = limit
        self._active = 0

    @property
    def active(self) -> int:
        """Number of slots currently held."""
        return self._active

    @property
    def is_full(self) -> bool:
        return self._active >= self.limit

    def try_acquire(self) -> bool:
        """Take a slot if one is free."""
        if self.is_full:
            return False
        self._active += 1
        return True

    def release(self) -> None:
        if self._active == 0:
            logger.warning("Admission gate released more often than acquired")
            return
        self._active -= 1

    @contextmanager
    def slot(self) -> Iterator[bool]:
        """Hold a slot for the duration of the block.

        Yields:
            True when a slot was acquired (and will be released on exit),
            False when the gate was full
        """
        acquired = self.try_acquire()
        try:
            yield acquired
        finally:
            if acquired:
                self.release()
