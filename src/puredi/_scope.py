from __future__ import annotations

from ._container import Container


class Scope(Container):
    """A named container with its own registrations and lifetime.

    Scopes do not fall back to the registry that created them; each one resolves
    only what was registered in it. Useful for per-request/per-job object graphs
    that are torn down together.

    Usually created through `Registry.create_scope()` or `Registry.scoped()`,
    which also track the scope by name.
    """
