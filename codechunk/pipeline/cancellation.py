"""Cooperative cancellation for one transformation job.

The orchestrator calls :meth:`CancellationToken.raise_if_cancelled` before
each file and before each persist.  A token is cancelled either explicitly
(:meth:`cancel`) or implicitly once its deadline passes; in both cases the
job aborts with :class:`~codechunk.utils.errors.JobCancelledError` instead
of being killed mid-write by the hosting runtime.
"""

from __future__ import annotations

import time

from codechunk.utils.errors import JobCancelledError


class CancellationToken:
    """Deadline-aware cancellation flag.

    Parameters
    ----------
    timeout_seconds:
        Seconds from now until the token expires.  ``None`` means no
        deadline.
    clock:
        Monotonic clock, injectable for tests.
    """

    def __init__(self, timeout_seconds: float | None = None, clock=time.monotonic) -> None:  # noqa: ANN001
        self._clock = clock
        self._deadline = None if timeout_seconds is None else clock() + timeout_seconds
        self._reason: str | None = None

    @classmethod
    def from_remaining_millis(cls, remaining_ms: int, safety_margin_seconds: float) -> CancellationToken:
        """Build a token from a runtime's remaining-time budget minus a margin."""
        return cls(timeout_seconds=max(0.0, remaining_ms / 1000.0 - safety_margin_seconds))

    def cancel(self, reason: str = "cancelled") -> None:
        self._reason = reason

    @property
    def cancelled(self) -> bool:
        if self._reason is not None:
            return True
        return self._deadline is not None and self._clock() >= self._deadline

    def remaining_seconds(self) -> float | None:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def raise_if_cancelled(self, stage: str) -> None:
        """Raise ``JobCancelledError`` if the token is cancelled or expired."""
        if not self.cancelled:
            return
        reason = self._reason or "deadline exceeded"
        raise JobCancelledError(f"Job cancelled before {stage}: {reason}")
