import pytest

from systemic.definitions import Definitions
from systemic.errors import CyclicDependencyError
from systemic.graph import DependencyGraph, sort_definitions


def assert_dependents_first(graph_edges, order):
    position = {name: index for index, name in enumerate(order)}
    for dependee, dependencies in graph_edges.items():
        for dependency in dependencies:
            assert position[dependee] < position[dependency], (dependee, dependency, order)


def test_sorts_dependents_before_dependencies():
    edges = {
        "server": ["db", "logger", "config"],
        "db": ["config", "logger"],
        "logger": ["config"],
        "config": [],
    }
    graph = DependencyGraph()
    for dependee, dependencies in edges.items():
        graph.add_dependencies(dependee, dependencies)

    order = graph.sort()

    assert sorted(order) == sorted(edges)
    assert_dependents_first(edges, order)


def test_order_is_deterministic():
    graph = DependencyGraph()
    graph.add_dependencies("foo", ["bar", "baz"])
    graph.add_dependencies("bar", ["baz"])

    assert graph.sort() == ["foo", "bar", "baz"]


def test_unrelated_nodes_are_started_in_the_order_they_were_added():
    graph = DependencyGraph()
    for name in ["a", "b", "c"]:
        graph.add_dependencies(name)

    assert list(reversed(graph.sort())) == ["a", "b", "c"]


def test_undeclared_dependencies_are_included():
    graph = DependencyGraph().add_dependencies("foo", ["bar"])

    assert graph.nodes == ["foo", "bar"]
    assert graph.sort() == ["foo", "bar"]


def test_detects_direct_cycle():
    graph = DependencyGraph().add_dependencies("foo", ["foo"])

    with pytest.raises(CyclicDependencyError) as error:
        graph.sort()

    assert error.value.chain == ["foo", "foo"]
    assert str(error.value) == (
        "Cyclic dependency found. foo is dependent of itself. Dependency chain: foo -> foo"
    )


def test_detects_indirect_cycle():
    graph = DependencyGraph()
    graph.add_dependencies("foo", ["bar"])
    graph.add_dependencies("bar", ["foo"])

    with pytest.raises(CyclicDependencyError, match="Dependency chain: foo -> bar -> foo"):
        graph.sort()


def test_cycle_chain_starts_at_the_repeated_node():
    graph = DependencyGraph()
    graph.add_dependencies("app", ["foo"])
    graph.add_dependencies("foo", ["bar"])
    graph.add_dependencies("bar", ["baz"])
    graph.add_dependencies("baz", ["foo"])

    with pytest.raises(CyclicDependencyError) as error:
        graph.sort()

    assert error.value.chain == ["foo", "bar", "baz", "foo"]


def test_diamond_is_not_a_cycle():
    graph = DependencyGraph()
    graph.add_dependencies("top", ["left", "right"])
    graph.add_dependencies("left", ["bottom"])
    graph.add_dependencies("right", ["bottom"])

    assert graph.sort() == ["top", "right", "left", "bottom"]


def test_long_chains_do_not_exhaust_the_stack():
    graph = DependencyGraph()
    names = [f"n{i}" for i in range(5000)]
    for dependee, dependency in zip(names, names[1:]):
        graph.add_dependencies(dependee, [dependency])

    assert graph.sort() == names


@pytest.mark.parametrize("name", ["", None, 1])
def test_rejects_invalid_names(name):
    with pytest.raises(TypeError, match="non-empty string"):
        DependencyGraph().add_dependencies(name)
    with pytest.raises(TypeError, match="non-empty string"):
        DependencyGraph().add_dependencies("foo", [name])


def test_sort_definitions_drops_undeclared_nodes():
    definitions = Definitions()
    definitions.add("foo", 1)
    definitions.depends_on("foo", ["bar"])

    assert sort_definitions(definitions) == ["foo"]
