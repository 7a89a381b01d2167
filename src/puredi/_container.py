from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Self, TypeVar, overload

from ._disposable import dispose_entry
from ._exceptions import (
    ContainerDisposedError,
    DisposalError,
    ServiceAlreadyRegisteredError,
    ServiceNotRegisteredError,
)
from ._lazy import Lazy


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    T = TypeVar("T")

    Token = type[T] | str


class Container:
    """Registrations keyed by token, with singleton / lazy singleton / factory lifetimes.

    - singletons and lazy singletons live in one map, factories in another;
      a token is in at most one of them
    - `dispose()` disposes every `Disposable` singleton and makes the container unusable
    - each container is guarded by its own lock; factories run outside of it.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._instances: dict[Any, Any] = {}
        self._factories: dict[Any, Callable[[], Any]] = {}
        self._is_disposed = False
        self._lock = threading.RLock()

    def register(self, token: Token[T], factory: Callable[[], T], *, replace: bool = False) -> None:
        """Register a factory called on every `get` (transient).

        Example:
          container.register(UserRepository, lambda: UserRepository(container.get(Database)))

        """
        self._add(token, factory, self._factories, replace=replace)

    def register_singleton(self, token: Token[T], instance: T, *, replace: bool = False) -> None:
        """Register a pre-built instance returned as-is by every `get`."""
        self._add(token, instance, self._instances, replace=replace)

    def register_lazy_singleton(self, token: Token[T], factory: Callable[[], T], *, replace: bool = False) -> None:
        """Register a factory called once, on the first `get`; the result is cached."""
        self._add(token, Lazy(factory), self._instances, replace=replace)

    def _add(self, token: Token[T], entry: object, target: dict[Any, Any], *, replace: bool) -> None:
        replaced: object = None
        with self._lock:
            self._throw_if_disposed()
            if self._contains(token):
                if not replace:
                    raise ServiceAlreadyRegisteredError(token)
                replaced = self._pop(token)
            target[token] = entry

        logger.debug("Registered %r in %s (replace=%s)", token, self._describe(), replace)
        dispose_entry(replaced)

    @overload
    def get(self, token: type[T]) -> T: ...

    @overload
    def get(self, token: str) -> object: ...

    def get(self, token: Token[T]) -> object:
        """Resolve the token.

        - singleton: the registered instance
        - lazy singleton: the cached instance, built on first call
        - factory: a new instance.
        Errors raised by factories propagate unchanged.
        """
        with self._lock:
            self._throw_if_disposed()
            if token in self._instances:
                entry = self._instances[token]
                factory = None
            elif token in self._factories:
                entry = None
                factory = self._factories[token]
            else:
                raise ServiceNotRegisteredError(token)

        # Factories may resolve their own dependencies, so they run unlocked
        if factory is not None:
            return factory()
        if isinstance(entry, Lazy):
            return entry.value
        return entry

    def is_registered(self, token: Token[T]) -> bool:
        """Check for any registration of `token`. Never builds anything."""
        with self._lock:
            return self._contains(token)

    def unregister(self, token: Token[T]) -> None:
        """Remove `token` and dispose its singleton, if any. Unknown tokens are ignored."""
        with self._lock:
            self._throw_if_disposed()
            if not self._contains(token):
                return
            entry = self._pop(token)

        logger.debug("Unregistered %r from %s", token, self._describe())
        dispose_entry(entry)

    @property
    def is_disposed(self) -> bool:
        return self._is_disposed

    def dispose(self) -> None:
        """Dispose everything the container owns, then mark it disposed.

        Calling it again is a no-op. A failing `dispose()` on one value does not stop
        the others; failures are collected and raised together as `DisposalError`
        once the container is fully torn down.
        """
        with self._lock:
            if self._is_disposed:
                return
            self._is_disposed = True
            owned = self._detach()

        logger.debug("Disposing %s (%d owned)", self._describe(), len(owned))

        errors: list[BaseException] = []
        for item in owned:
            try:
                dispose_entry(item)
            except DisposalError as e:
                errors.extend(e.errors)
            except Exception as e:  # noqa: BLE001
                logger.warning("Failed to dispose %r in %s", item, self._describe(), exc_info=True)
                errors.append(e)

        if errors:
            raise DisposalError(self._describe(), errors) from errors[0]

    def _detach(self) -> list[object]:
        """Empty the container, returning what needs disposing in disposal order."""
        owned = list(self._instances.values())
        self._clear()
        return owned

    def _clear(self) -> None:
        self._instances.clear()
        self._factories.clear()

    def _contains(self, token: Any) -> bool:
        return token in self._instances or token in self._factories

    def _pop(self, token: Any) -> object:
        self._factories.pop(token, None)
        return self._instances.pop(token, None)

    def _throw_if_disposed(self) -> None:
        if self._is_disposed:
            raise ContainerDisposedError(self._describe())

    def _describe(self) -> str:
        return f"{type(self).__name__} {self.name!r}"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "disposed" if self._is_disposed else "active"
        return f"<{type(self).__name__} {self.name!r} {state}>"
