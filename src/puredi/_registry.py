from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import TYPE_CHECKING

from ._container import Container
from ._exceptions import DisposalError, DuplicateScopeError, ScopeNotFoundError
from ._scope import Scope


if TYPE_CHECKING:
    from collections.abc import Iterator


logger = logging.getLogger(__name__)


class Registry(Container):
    """Top-level container that also owns a set of named scopes.

    Construct one directly for an isolated registry, or use `get_registry()` for
    the process-wide instance.
    """

    def __init__(self, name: str = "registry") -> None:
        super().__init__(name)
        self._scopes: dict[str, Scope] = {}

    def create_scope(self, name: str) -> Scope:
        """Create and track a new scope. Names must be unique among live scopes."""
        with self._lock:
            self._throw_if_disposed()
            if self._live_scope(name) is not None:
                raise DuplicateScopeError(name)
            scope = Scope(name)
            self._scopes[name] = scope

        logger.debug("Created scope %r", name)
        return scope

    def get_scope(self, name: str) -> Scope:
        with self._lock:
            self._throw_if_disposed()
            scope = self._live_scope(name)
            if scope is None:
                raise ScopeNotFoundError(name)
            return scope

    def has_scope(self, name: str) -> bool:
        with self._lock:
            return self._live_scope(name) is not None

    def dispose_scope(self, name: str) -> None:
        """Stop tracking the scope and dispose it. Unknown names are ignored."""
        with self._lock:
            self._throw_if_disposed()
            scope = self._scopes.pop(name, None)

        if scope is not None:
            scope.dispose()

    @property
    def scope_names(self) -> list[str]:
        """Names of live scopes, in creation order."""
        with self._lock:
            return [name for name, scope in self._scopes.items() if not scope.is_disposed]

    @contextmanager
    def scoped(self, name: str) -> Iterator[Scope]:
        """Create a scope for the duration of a ``with`` block.

        Only the scope created here is released on exit, even if the block
        re-creates a scope under the same name. If the block raises, that error
        wins over a failure to dispose the scope.

        Example:
          with registry.scoped("request-42") as scope:
              scope.register_singleton(RequestContext, ctx)
              handle(scope.get(Handler))

        """
        scope = self.create_scope(name)
        try:
            yield scope
        except BaseException:
            try:
                self._release_scope(scope)
            except DisposalError:
                logger.warning("Failed to dispose scope %r while handling an error", name, exc_info=True)
            raise
        self._release_scope(scope)

    def _release_scope(self, scope: Scope) -> None:
        with self._lock:
            if self._scopes.get(scope.name) is scope:
                del self._scopes[scope.name]
        scope.dispose()

    def _live_scope(self, name: str) -> Scope | None:
        # Scopes disposed directly (e.g. ``with registry.create_scope(...)``) are forgotten here
        scope = self._scopes.get(name)
        if scope is not None and scope.is_disposed:
            del self._scopes[name]
            return None
        return scope

    def _detach(self) -> list[object]:
        # Scopes go first, then our own singletons
        scopes: list[object] = list(self._scopes.values())
        self._scopes.clear()
        return scopes + super()._detach()

    def _clear(self) -> None:
        super()._clear()
        self._scopes.clear()


@lru_cache
def get_registry() -> Registry:
    """Get the process-wide registry, creating it on first call."""
    return Registry()


def reset_registry() -> None:
    """Forget the process-wide registry; the next `get_registry()` creates a new one.

    Nothing is disposed. Call ``get_registry().dispose()`` first for a clean teardown.
    """
    if get_registry.cache_info().currsize:
        registry = get_registry()
        with registry._lock:  # noqa: SLF001
            registry._clear()  # noqa: SLF001
    get_registry.cache_clear()
