from __future__ import annotations

import inspect
from typing import Protocol, runtime_checkable


@runtime_checkable
class Disposable(Protocol):
    """Anything exposing ``dispose()``; checked structurally, no subclassing needed."""

    def dispose(self) -> None: ...


def dispose_entry(entry: object) -> None:
    """Dispose a stored singleton entry.

    A `Lazy` holder delegates to its own `dispose` (which checks the held value),
    raw `Disposable` values are disposed directly, anything else is left alone.
    """
    # Classes registered as values expose `dispose` unbound
    if inspect.isclass(entry):
        return

    # Lazy satisfies the protocol too
    if isinstance(entry, Disposable):
        entry.dispose()
