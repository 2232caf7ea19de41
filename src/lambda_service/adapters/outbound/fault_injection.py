"""Injectable failure modes for the in-memory adapters.

A FaultPlan decides, before a port call touches any state, whether the
call should fail and with which error. Faults can target one call name,
one key, or every call after a call-count threshold.

Example:
    plan = FaultPlan()
    plan.fail_on("get", key="missing", kind=ErrorKind.NOT_FOUND)
    plan.fail_after(3, kind=ErrorKind.STORAGE_UNAVAILABLE)
"""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass

from lambda_service.domain.errors import (
    ErrorKind,
    InvalidArgumentError,
    NotFoundError,
    StorageUnavailableError,
)


class InjectedFault(RuntimeError):
    """Failure outside the port taxonomy, raised for UNCLASSIFIED faults."""


def make_error(kind: ErrorKind, call: str, key: str) -> Exception:
    """Build the exception a port would raise for a fault of this kind."""
    if kind is ErrorKind.NOT_FOUND:
        return NotFoundError(key)
    if kind is ErrorKind.INVALID_ARGUMENT:
        return InvalidArgumentError(f"Injected invalid argument on {call}({key!r})")
    if kind is ErrorKind.STORAGE_UNAVAILABLE:
        return StorageUnavailableError(f"Injected outage on {call}({key!r})")
    return InjectedFault(f"Injected unclassified failure on {call}({key!r})")


@dataclass(frozen=True, slots=True)
class _Rule:
    call: str | None
    key: str | None
    kind: ErrorKind

    def matches(self, call: str, key: str) -> bool:
        return (self.call is None or self.call == call) and (self.key is None or self.key == key)


class FaultPlan:
    """Thread-safe set of fault rules plus a per-call invocation counter."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rules: list[_Rule] = []
        self._threshold: int | None = None
        self._threshold_kind = ErrorKind.STORAGE_UNAVAILABLE
        self._calls: Counter[str] = Counter()

    def fail_on(
        self,
        call: str | None = None,
        key: str | None = None,
        kind: ErrorKind = ErrorKind.STORAGE_UNAVAILABLE,
    ) -> None:
        """Fail calls matching call name and/or key with the given kind."""
        with self._lock:
            self._rules.append(_Rule(call=call, key=key, kind=kind))

    def fail_after(self, count: int, kind: ErrorKind = ErrorKind.STORAGE_UNAVAILABLE) -> None:
        """Fail every call once `count` calls have already been made."""
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        with self._lock:
            self._threshold = count
            self._threshold_kind = kind

    def reset(self) -> None:
        """Drop all rules and zero the counters."""
        with self._lock:
            self._rules.clear()
            self._threshold = None
            self._calls.clear()

    def record(self, call: str, key: str) -> None:
        """Count a call, then raise if a fault applies to it."""
        with self._lock:
            made_before = sum(self._calls.values())
            self._calls[call] += 1
            if self._threshold is not None and made_before >= self._threshold:
                raise make_error(self._threshold_kind, call, key)
            for rule in self._rules:
                if rule.matches(call, key):
                    raise make_error(rule.kind, call, key)

    def call_count(self, call: str | None = None) -> int:
        """Number of calls made, for one call name or in total."""
        with self._lock:
            if call is None:
                return sum(self._calls.values())
            return self._calls[call]
