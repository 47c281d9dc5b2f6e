import abc
import logging

import pytest

from depcontainer import (
    ConstructionFailed,
    DependencyResolutionFailed,
    NoConstructor,
    NotAComponent,
    NullComponent,
    PostConstructionFailed,
    Registry,
    TypeMismatch,
    autowired,
    component,
    post_construct,
)
from depcontainer.instantiator import select_constructor


@component
class Database:
    pass


@component
class Clock:
    def __init__(self):
        self.source = "init"

    @classmethod
    @autowired
    def from_zone(cls, zone: str) -> "Clock":
        clock = cls()
        clock.source = f"factory:{zone}"
        return clock


@component
class Ambiguous:
    def __init__(self):
        self.source = "init"

    @autowired
    @classmethod
    def first(cls) -> "Ambiguous":
        return cls()

    @staticmethod
    @autowired
    def second() -> "Ambiguous":
        return Ambiguous()


@component
class PrivateFactory:
    def __init__(self):
        self.source = "init"

    @classmethod
    @autowired
    def _build(cls) -> "PrivateFactory":
        instance = cls()
        instance.source = "factory"
        return instance


@component
class Nothing:
    @staticmethod
    @autowired
    def create() -> None:
        return None


@component
class Impostor:
    @staticmethod
    @autowired
    def create() -> "Database":
        return Database()


@component
class Shape(abc.ABC):
    @abc.abstractmethod
    def area(self) -> float: ...


@component
class Dangling:
    def __init__(self, ghost: "Ghost"):  # noqa: F821
        self.ghost = ghost


@component
class Settings:
    def __init__(self, db: Database, retries: int = 3):
        self.db = db
        self.retries = retries


@component
class Preferences(dict):
    pass


@component
class Labelled:
    def __init__(self, label: str = "unlabelled"):
        self.label = label


@component
class Positional:
    def __init__(self, db: Database, /, name: str):
        self.db = db
        self.name = name


@component
class Untyped:
    def __init__(self, thing):
        self.thing = thing


@component
class NeedsInt:
    def __init__(self, count: int):
        self.count = count


@component
class Lifecycle:
    def __init__(self):
        self.calls = []

    @post_construct
    def open(self):
        self.calls.append("open")

    def not_a_hook(self):
        self.calls.append("not_a_hook")

    @post_construct
    def warm(self):
        self.calls.append("warm")


class Base:
    def __init__(self):
        self.calls = []

    @post_construct
    def base_hook(self):
        self.calls.append("base")


@component
class Derived(Base):
    @post_construct
    def derived_hook(self):
        self.calls.append("derived")


@pytest.fixture
def registry() -> Registry:
    return Registry()


def test_single_autowired_factory_is_preferred(registry):
    assert registry.get(Clock, "utc").source == "factory:utc"


def test_several_autowired_constructors_fall_back_to_first(registry, caplog):
    with caplog.at_level(logging.WARNING, logger="depcontainer.instantiator"):
        ambiguous = registry.get(Ambiguous)

    assert ambiguous.source == "init"
    assert "Several constructors of Ambiguous are marked @autowired" in caplog.text


def test_private_factories_are_not_constructors(registry):
    assert registry.get(PrivateFactory).source == "init"


def test_no_constructor(registry, monkeypatch):
    monkeypatch.setattr("depcontainer.instantiator.constructors_of", lambda cls: [])

    with pytest.raises(NoConstructor, match="No public constructors in Database"):
        registry.get(Database)


def test_select_constructor_returns_initializer_by_default():
    assert select_constructor(Database).func is Database


def test_builtin_subclass_is_constructed_without_arguments(registry):
    preferences = registry.get(Preferences)

    assert isinstance(preferences, Preferences)
    assert preferences is registry.get(Preferences)
    assert select_constructor(Preferences).func is Preferences


def test_str_parameter_keeps_default_without_qualifier(registry):
    assert registry.get(Labelled).label == "unlabelled"
    assert registry.get(Labelled, "tagged").label == "tagged"


def test_factory_returning_none(registry):
    with pytest.raises(NullComponent):
        registry.get(Nothing)


def test_factory_returning_other_type(registry):
    with pytest.raises(TypeMismatch, match="got Database"):
        registry.get(Impostor)


def test_abstract_component_cannot_be_constructed(registry):
    with pytest.raises(ConstructionFailed, match="Shape") as exc_info:
        registry.get(Shape)

    assert isinstance(exc_info.value.cause, TypeError)


def test_unresolvable_annotation(registry):
    with pytest.raises(DependencyResolutionFailed, match="Dangling") as exc_info:
        registry.get(Dangling)

    assert isinstance(exc_info.value.cause, NameError)


def test_non_component_parameter_with_default_keeps_default(registry):
    settings = registry.get(Settings)

    assert settings.retries == 3
    assert settings.db is registry.get(Database)


def test_positional_only_parameters(registry):
    positional = registry.get(Positional, "p")

    assert positional.db is registry.get(Database)
    assert positional.name == "p"


def test_unannotated_parameter_without_default(registry):
    with pytest.raises(DependencyResolutionFailed, match="<thing> of Untyped") as exc_info:
        registry.get(Untyped)

    assert "is not annotated" in str(exc_info.value.cause)


def test_non_component_parameter_without_default(registry):
    with pytest.raises(DependencyResolutionFailed, match="<count>") as exc_info:
        registry.get(NeedsInt)

    assert isinstance(exc_info.value.cause, NotAComponent)


def test_hooks_run_in_declaration_order(registry):
    assert registry.get(Lifecycle).calls == ["open", "warm"]


def test_base_class_hooks_run_first(registry):
    assert registry.get(Derived).calls == ["base", "derived"]


def test_failing_hook_stops_later_hooks(registry):
    seen = []

    @component
    class HalfOpen:
        @post_construct
        def first(self):
            self.first_done = True
            seen.append(self)

        @post_construct
        def second(self):
            raise RuntimeError("cannot open")

        @post_construct
        def third(self):
            self.third_done = True

    with pytest.raises(PostConstructionFailed, match="Failed to call second") as exc_info:
        registry.get(HalfOpen)

    assert exc_info.value.hook_name == "second"
    assert isinstance(exc_info.value.cause, RuntimeError)
    assert seen[0].first_done
    assert not hasattr(seen[0], "third_done")
