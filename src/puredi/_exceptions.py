from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Sequence


def _token_name(token: Any) -> str:
    return getattr(token, "__qualname__", None) or repr(token)


class PureDIError(RuntimeError):
    """Base class for every error raised by puredi."""


class ServiceNotRegisteredError(PureDIError, LookupError):
    def __init__(self, token: Any) -> None:
        self.token = token
        super().__init__(f"Service {_token_name(token)} is not registered")


class ServiceAlreadyRegisteredError(PureDIError):
    def __init__(self, token: Any) -> None:
        self.token = token
        super().__init__(f"Service {_token_name(token)} is already registered. Pass replace=True to overwrite.")


class ScopeNotFoundError(PureDIError, LookupError):
    def __init__(self, scope_name: str) -> None:
        self.scope_name = scope_name
        super().__init__(f"Scope {scope_name!r} not found")


class DuplicateScopeError(PureDIError):
    def __init__(self, scope_name: str) -> None:
        self.scope_name = scope_name
        super().__init__(f"Scope {scope_name!r} already exists")


class ContainerDisposedError(PureDIError):
    def __init__(self, container_name: str) -> None:
        self.container_name = container_name
        super().__init__(f"{container_name} has been disposed")


class DisposalError(PureDIError):
    """Raised after a disposal cascade in which one or more values failed to dispose.

    The cascade runs to completion before this is raised; `errors` holds every
    collected exception in the order they occurred.
    """

    def __init__(self, container_name: str, errors: Sequence[BaseException]) -> None:
        self.container_name = container_name
        self.errors = list(errors)
        super().__init__(f"{len(self.errors)} error(s) while disposing {container_name}")
