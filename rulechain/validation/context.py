"""Validation Context

Carries cancellation and deadline signalling into context-aware rules, plus
the materializer and arbitrary request-scoped values a rule may consult.

Checking is advisory: Map rules check the context before each key, and any
other rule doing expensive work should call raise_if_done() itself.
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any

from rulechain.errors import cancelled
from rulechain.validation.introspect import Materializer


@dataclass(frozen=True)
class ValidationContext:
    """Cancellation/deadline-bearing execution context.

    Usage:
        ctx = ValidationContext(timeout=0.5)
        validate_with_context(ctx, payload, Map(...))
        ctx.cancel()  # from another thread
    """
    timeout: float | None = None
    materializer: Materializer | None = None
    values: dict[str, Any] = field(default_factory=dict)
    deadline: float | None = field(default=None, compare=False)
    _event: threading.Event = field(default_factory=threading.Event, repr=False, compare=False)

    def __post_init__(self):
        if self.deadline is None and self.timeout is not None:
            object.__setattr__(self, "deadline", time.monotonic() + self.timeout)

    @classmethod
    def background(cls) -> ValidationContext:
        """Context that is never cancelled and has no deadline."""
        return cls()

    def cancel(self) -> None: self._event.set()

    @property
    def cancelled(self) -> bool: return self._event.is_set()

    @property
    def expired(self) -> bool: return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def done(self) -> bool: return self.cancelled or self.expired

    def remaining(self) -> float | None:
        """Seconds left before the deadline, None without one."""
        if self.deadline is None: return None
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_done(self) -> None:
        """Raises ValidationCancelledError once cancelled or past the deadline."""
        if self.cancelled: raise cancelled()
        if self.expired: raise cancelled("context deadline exceeded")

    def value(self, key: str, default: Any = None) -> Any: return self.values.get(key, default)

    def child(self, *, timeout: float | None = None, **values: Any) -> ValidationContext:
        """Derive a context sharing this one's cancellation state.

        A child deadline never extends past the parent's.
        """
        deadline = self.deadline
        if timeout is not None:
            own = time.monotonic() + timeout
            deadline = own if deadline is None else min(deadline, own)
        return ValidationContext(timeout=timeout, materializer=self.materializer,
            values={**self.values, **values}, deadline=deadline, _event=self._event)
