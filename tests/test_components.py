import pytest

from systemic.components import (
    Descriptor,
    Factory,
    Lifecycle,
    Value,
    conform,
    conform_descriptor,
    pass_through,
)
from systemic.domain import Contract
from systemic.errors import InvalidComponentError


class Server:
    def __init__(self):
        self.stopped = False

    def start(self, dependencies):
        return self

    def stop(self):
        self.stopped = True


class StartOnly:
    def start(self, dependencies):
        return "started"


def test_plain_values_start_as_themselves():
    value = {"ok": True}
    assert conform("foo", value).start({"ignored": 1}) is value
    assert conform("foo", value).stop is None


def test_functions_are_values_unless_wrapped():
    def handler():
        return "handled"

    assert conform("handler", handler).start({}) is handler
    assert conform("handler", Factory(lambda deps: deps["x"] * 2)).start({"x": 21}) == 42


def test_lifecycle_objects_are_used_as_is():
    server = Server()
    contract = conform("server", server)

    assert contract.start({}) is server
    contract.stop()
    assert server.stopped


def test_stop_is_optional():
    contract = conform("foo", StartOnly())

    assert contract.start({}) == "started"
    assert contract.stop is None


def test_explicit_variants():
    stops = []
    lifecycle = conform("foo", Lifecycle(lambda deps: "up", lambda: stops.append(1)))
    lifecycle.stop()

    assert lifecycle.start({}) == "up"
    assert stops == [1]
    assert conform("foo", Value(Server)).start({}) is Server


def test_contracts_pass_straight_through():
    contract = Contract(lambda deps: 1)
    assert conform("foo", contract) is contract


@pytest.mark.parametrize("falsy", [0, "", [], False])
def test_falsy_values_are_components(falsy):
    assert conform("foo", falsy).start({}) == falsy


def test_none_is_rejected():
    with pytest.raises(InvalidComponentError, match="Component foo is null or undefined"):
        conform("foo", None)


def test_pass_through_exposes_value_under_its_own_name():
    contract = pass_through("foo")

    assert contract.start({"foo": {"one": 1, "two": 2}}) == {"one": 1, "two": 2}
    assert contract.start({}) is None


def test_pass_through_of_nested_name():
    assert pass_through("foo.bar").start({"foo": {"bar": {"baz": 1}}}) == {"baz": 1}


def test_pass_through_of_root_returns_whole_map():
    dependencies = {"a": 1}
    assert pass_through("").start(dependencies) is dependencies


def test_descriptor_with_init_is_conformed():
    server = Server()
    assert conform_descriptor("server", Descriptor(init=server)).start({}) is server


def test_descriptor_without_init():
    assert conform_descriptor("x", Descriptor(depends_on=["a"])).start({"a": 1}) == {"a": 1}
    assert conform_descriptor("x", Descriptor(comes_after=["a"])).start({}) == {}
    with pytest.raises(InvalidComponentError):
        conform_descriptor("x", Descriptor())


def test_classes_are_values():
    assert conform("server_class", Server).start({}) is Server
