import pytest

from puredi import DisposalError, Registry


class Tracked:
    def __init__(self, log: list[str], name: str) -> None:
        self.log = log
        self.name = name

    def dispose(self) -> None:
        self.log.append(self.name)


class Broken:
    def dispose(self) -> None:
        msg = "cannot close"
        raise OSError(msg)


def test_dispose_registry_cascades_to_scopes():
    registry = Registry()
    log: list[str] = []
    s1 = registry.create_scope("s1")
    s2 = registry.create_scope("s2")
    s1.register_singleton("a", Tracked(log, "s1.a"))
    s2.register_lazy_singleton("b", lambda: Tracked(log, "s2.b"))
    s2.get("b")
    registry.register_singleton("c", Tracked(log, "root.c"))

    registry.dispose()

    assert s1.is_disposed
    assert s2.is_disposed
    assert registry.scope_names == []
    assert log == ["s1.a", "s2.b", "root.c"]


def test_dispose_empty_registry_is_safe():
    registry = Registry()

    registry.dispose()
    registry.dispose()

    assert registry.is_disposed


def test_each_value_disposed_once_across_repeated_dispose():
    registry = Registry()
    log: list[str] = []
    registry.register_singleton("a", Tracked(log, "a"))
    registry.create_scope("s").register_singleton("b", Tracked(log, "b"))

    registry.dispose()
    registry.dispose()

    assert sorted(log) == ["a", "b"]


def test_unbuilt_lazy_singletons_not_built_during_dispose():
    registry = Registry()

    def factory():
        pytest.fail("factory must not run")

    registry.register_lazy_singleton("lazy", factory)

    registry.dispose()


def test_failing_dispose_does_not_stop_cascade():
    registry = Registry()
    log: list[str] = []
    scope = registry.create_scope("s")
    scope.register_singleton("broken", Broken())
    scope.register_singleton("after", Tracked(log, "scope.after"))
    registry.register_lazy_singleton("broken", Broken)
    registry.get("broken")
    registry.register_singleton("root", Tracked(log, "root"))

    with pytest.raises(DisposalError) as exc_info:
        registry.dispose()

    assert log == ["scope.after", "root"]
    assert registry.is_disposed
    assert scope.is_disposed
    assert len(exc_info.value.errors) == 2
    assert all(isinstance(e, OSError) for e in exc_info.value.errors)
    assert exc_info.value.__cause__ is exc_info.value.errors[0]


def test_failing_dispose_is_logged(caplog):
    registry = Registry()
    registry.register_singleton("broken", Broken())

    with caplog.at_level("WARNING", logger="puredi"), pytest.raises(DisposalError):
        registry.dispose()

    assert "Failed to dispose" in caplog.text


def test_failing_dispose_on_unregister_propagates_after_removal():
    registry = Registry()
    registry.register_singleton(Broken, Broken())

    with pytest.raises(OSError, match="cannot close"):
        registry.unregister(Broken)

    assert not registry.is_registered(Broken)


def test_registry_context_manager_disposes():
    log: list[str] = []
    with Registry() as registry:
        registry.register_singleton("a", Tracked(log, "a"))

    assert registry.is_disposed
    assert log == ["a"]
