"""Single-flight memoization scoped to one build invocation."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class OnceKey:
    name: str


class _Pending:
    __slots__ = ("done", "owner", "value", "error")

    def __init__(self, owner: int) -> None:
        self.done = threading.Event()
        self.owner = owner
        self.value: Any = None
        self.error: BaseException | None = None


class OnceCache:
    """Computes each keyed value at most once and shares it with every caller.

    Concurrent first requests for a key wait for the single running factory
    instead of starting their own. Factories run outside the cache lock, so
    one derivation may request another key while it computes. A factory that
    raises publishes its error to the callers already waiting on it and
    leaves the key unset.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: dict[OnceKey, Any] = {}
        self._pending: dict[OnceKey, _Pending] = {}

    def get_or_compute(self, key: OnceKey, factory: Callable[[], T]) -> T:
        me = threading.get_ident()
        with self._lock:
            if key in self._values:
                return self._values[key]
            pending = self._pending.get(key)
            if pending is None:
                pending = _Pending(owner=me)
                self._pending[key] = pending
                owner = True
            else:
                owner = False

        if not owner:
            if pending.owner == me:
                raise RuntimeError(f"Recursive computation of once key {key.name!r}")
            pending.done.wait()
            if pending.error is not None:
                # Every waiter re-raises the owner's exception instance, so its
                # __traceback__ accumulates the frames of each raising thread.
                raise pending.error
            return pending.value

        try:
            value = factory()
        except BaseException as exc:
            pending.error = exc
            with self._lock:
                del self._pending[key]
            pending.done.set()
            raise

        pending.value = value
        with self._lock:
            self._values[key] = value
            del self._pending[key]
        pending.done.set()
        return value

    def peek(self, key: OnceKey) -> Any:
        """Return the published value for *key* without computing it.

        Raises ``KeyError`` when nothing has been published yet; a stored
        ``None`` is returned as is. Use ``key in cache`` to test first.
        """
        with self._lock:
            return self._values[key]

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)


__all__ = [
    "OnceCache",
    "OnceKey",
]
