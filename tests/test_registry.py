import pytest

from insnfuzz.registry import ComponentRegistry, UnknownComponentError


class Widget:
    def __init__(self, stream, tag=None):
        self.stream = stream
        self.tag = tag


def test_instantiate_passes_arguments():
    registry = ComponentRegistry()
    registry.register("widget", "A widget", Widget)
    made = registry.instantiate("widget", "out", tag="t")
    assert isinstance(made, Widget)
    assert made.stream == "out"
    assert made.tag == "t"


def test_unknown_component_raises():
    registry = ComponentRegistry()
    with pytest.raises(UnknownComponentError) as info:
        registry.instantiate("missing")
    assert info.value.name == "missing"


def test_contains_and_iteration_sorted():
    registry = ComponentRegistry()
    registry.register("x86", "x86", Widget)
    registry.register("arm", "ARM", Widget)
    assert "arm" in registry
    assert "mips" not in registry
    assert list(registry) == ["arm", "x86"]
    assert len(registry) == 2


def test_reregister_replaces_factory():
    registry = ComponentRegistry()
    registry.register("w", "first", lambda: "one")
    registry.register("w", "second", lambda: "two")
    assert registry.instantiate("w") == "two"
    assert "\tw\t\tsecond" in registry.dump().splitlines()


def test_dump_layout():
    registry = ComponentRegistry()
    registry.register("thumb2", "Thumb-2", Widget)
    registry.register("arm", "ARM", Widget)
    lines = registry.dump().splitlines()
    assert lines[0] == "Registered Components: "
    assert lines[1] == "=" * 80
    assert lines[-1] == "=" * 80
    assert lines[2:-1] == ["\tarm\t\tARM", "\tthumb2\t\tThumb-2"]


def test_dump_empty_registry():
    lines = ComponentRegistry().dump().splitlines()
    assert len(lines) == 3
    assert lines[1] == lines[2]