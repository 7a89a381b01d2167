from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Generic, TypeVar, cast

from ._disposable import dispose_entry


if TYPE_CHECKING:
    from collections.abc import Callable


T = TypeVar("T")


class Lazy(Generic[T]):
    """Caches the result of a zero-argument factory on first access.

    The factory runs at most once per initialization, even when several threads
    hit `value` at the same time. If the factory raises, nothing is cached and
    the next access tries again.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._instance: T | None = None
        self._is_initialized = False
        self._lock = threading.RLock()

    @property
    def value(self) -> T:
        """The cached instance, created by the factory on first access."""
        if not self._is_initialized:
            with self._lock:
                if not self._is_initialized:
                    self._instance = self._factory()
                    self._is_initialized = True
        return cast("T", self._instance)

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def dispose(self) -> None:
        """Dispose the cached instance if it is `Disposable` and forget it.

        A later `value` access creates a new instance.
        """
        with self._lock:
            instance, was_initialized = self._instance, self._is_initialized
            self._instance = None
            self._is_initialized = False

        if was_initialized:
            dispose_entry(instance)

    def reset(self) -> None:
        """Force recreation on next access. Same effect as `dispose`."""
        self.dispose()

    def __repr__(self) -> str:
        state = "initialized" if self._is_initialized else "uninitialized"
        return f"<Lazy {getattr(self._factory, '__qualname__', self._factory)!r} {state}>"
