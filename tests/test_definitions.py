import pytest

from systemic.components import Descriptor
from systemic.definitions import Definitions
from systemic.domain import CONFIG
from systemic.errors import (
    DuplicateComponentError,
    DuplicateDependencyError,
    InvalidComponentError,
)


@pytest.fixture
def definitions() -> Definitions:
    return Definitions()


def test_add_registers_in_insertion_order(definitions):
    definitions.add("b", 2)
    definitions.add("a", 1)

    assert list(definitions) == ["b", "a"]
    assert definitions["a"].contract.start({}) == 1
    assert not definitions["a"].scoped


def test_add_rejects_duplicates(definitions):
    definitions.add("foo", 1)

    with pytest.raises(DuplicateComponentError) as error:
        definitions.add("foo", 2)

    assert error.value.component == "foo"


def test_add_rejects_none(definitions):
    with pytest.raises(InvalidComponentError):
        definitions.add("foo", None)
    assert "foo" not in definitions


def test_set_replaces_and_resets_dependencies(definitions):
    definitions.add("foo", 1)
    definitions.depends_on("foo", ["bar"])
    definitions.set("foo", 2)

    assert definitions["foo"].contract.start({}) == 2
    assert definitions["foo"].dependencies == []


def test_remove_tolerates_missing_names(definitions):
    definitions.add("foo", 1)
    definitions.remove("foo")
    definitions.remove("foo")

    assert len(definitions) == 0


def test_configure_adds_scoped_config(definitions):
    definitions.configure({"foo": 1})

    assert definitions[CONFIG].scoped
    with pytest.raises(DuplicateComponentError):
        definitions.configure({})


def test_depends_on_requires_an_existing_definition(definitions):
    with pytest.raises(KeyError):
        definitions.depends_on("foo", ["bar"])


def test_merge_prefers_incoming_definitions(definitions):
    definitions.add("foo", 1)
    definitions.add("keep", "kept")
    first, second = Definitions(), Definitions()
    first.add("foo", 2)
    second.add("foo", 3)

    definitions.merge(first, second)

    assert definitions["foo"].contract.start({}) == 3
    assert definitions["keep"].contract.start({}) == "kept"


def test_merge_copies_definitions(definitions):
    other = Definitions()
    other.add("foo", 1)
    definitions.merge(other)

    definitions.depends_on("foo", ["bar"])

    assert other["foo"].dependencies == []


def test_copy_is_independent(definitions):
    definitions.add("foo", 1)
    copied = definitions.copy()
    copied.depends_on("foo", ["bar"])
    copied.add("baz", 2)

    assert definitions["foo"].dependencies == []
    assert "baz" not in definitions


def test_create_from_descriptors():
    definitions = Definitions.create(
        {
            "config": {"server": {"port": 1}},
            "server": Descriptor(init=object(), depends_on=["config"], comes_after=["db"]),
            "db": Descriptor(init="db", scoped=True),
        }
    )

    assert definitions["config"].scoped
    assert definitions["db"].scoped
    assert not definitions["server"].scoped
    assert [(d.component, d.inject) for d in definitions["server"].dependencies] == [
        ("config", True),
        ("db", False),
    ]


def test_create_rejects_duplicate_destinations_across_kinds():
    with pytest.raises(DuplicateDependencyError):
        Definitions.create({"server": Descriptor(depends_on=["db"], comes_after=["db"])})
