"""Minimal service locator.

This package provides a small typed instance registry for Python, allowing
registration and resolution of pre-built instances, lazy singletons and
factories, with named scopes that own their own lifetimes.

Exports:
- `Registry`: Top-level container that also creates and tracks named scopes.
- `Scope`: Named, isolated container torn down as a unit.
- `Container`: Shared base of `Registry` and `Scope`.
- `Lazy`: Holder that builds a value on first access and caches it.
- `Disposable`: Structural protocol for values that release resources on teardown.
- `get_registry` / `reset_registry`: Process-wide registry access.
"""

from ._container import Container
from ._disposable import Disposable
from ._exceptions import (
    ContainerDisposedError,
    DisposalError,
    DuplicateScopeError,
    PureDIError,
    ScopeNotFoundError,
    ServiceAlreadyRegisteredError,
    ServiceNotRegisteredError,
)
from ._lazy import Lazy
from ._registry import Registry, get_registry, reset_registry
from ._scope import Scope


__all__ = [
    "Container",
    "ContainerDisposedError",
    "DisposalError",
    "Disposable",
    "DuplicateScopeError",
    "Lazy",
    "PureDIError",
    "Registry",
    "Scope",
    "ScopeNotFoundError",
    "ServiceAlreadyRegisteredError",
    "ServiceNotRegisteredError",
    "get_registry",
    "reset_registry",
]
