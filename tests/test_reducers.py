"""
Unit tests for reducer composition.

Tests verify action type construction, pattern escaping, leaf reducer
isolation, reducer combination and that the composed reducer mirrors the
namespace graph.
"""

import pytest

import relay
from relay import reducers


def _action(path: tuple[str, ...], event: str, value) -> dict:
    return {"type": reducers.action_type(path, event), "reducer": lambda _: value}


def test_action_type_wire_format() -> None:
    """Test the 'event:<slash path>:<event>' type string."""
    assert reducers.action_type(("root", "foo"), "add") == "event:root/foo:add"
    assert reducers.action_type(("root",)) == "event:root:$generic"
    assert reducers.action_type(("root",), "") == "event:root:$generic"


def test_escape_covers_metacharacters() -> None:
    """Test that every pattern metacharacter is escaped."""
    assert reducers.escape("-[]/{}()*+?.\\^$|") == (
        "\\-\\[\\]\\/\\{\\}\\(\\)\\*\\+\\?\\.\\\\\\^\\$\\|"
    )
    assert reducers.escape("plain_name") == "plain_name"


def test_pattern_accepts_namespace_and_its_events() -> None:
    """Test that the pattern matches the namespace with or without an event."""
    pattern = reducers.action_pattern(("root", "foo"))

    assert pattern.fullmatch("event:root/foo")
    assert pattern.fullmatch("event:root/foo:add")
    assert pattern.fullmatch("event:root/foo:$generic")


@pytest.mark.parametrize(
    "action_type",
    [
        "event:root/foobar:add",
        "event:root/fo:add",
        "event:root:add",
        "event:root/foo/bar:add",
        "event:root/foo:",
        "other:root/foo:add",
        "xevent:root/foo:add",
    ],
)
def test_pattern_rejects_other_namespaces(action_type: str) -> None:
    """Test that siblings, prefixes and descendants are not matched."""
    pattern = reducers.action_pattern(("root", "foo"))

    assert pattern.fullmatch(action_type) is None


def test_metacharacters_do_not_widen_the_match() -> None:
    """Test that a segment like 'a.c' does not match 'abc'."""
    metachar = reducers.action_pattern(("a.c",))
    plus = reducers.action_pattern(("a+",))

    assert metachar.fullmatch("event:a.c:x")
    assert metachar.fullmatch("event:abc:x") is None
    assert plus.fullmatch("event:a+:x")
    assert plus.fullmatch("event:aa:x") is None


def test_namespace_reducer_uses_initial_state() -> None:
    """Test that a missing state falls back to the initial state."""
    reducer = reducers.make_namespace_reducer(("todos",), {"items": []})

    assert reducer(None, {"type": "@@INIT"}) == {"items": []}


def test_namespace_reducer_applies_matching_action() -> None:
    """Test that a matching action's reducer computes the new state."""
    reducer = reducers.make_namespace_reducer(("counter",), 0)
    action = {"type": "event:counter:add", "reducer": lambda state: state + 1}

    assert reducer(4, action) == 5


def test_namespace_reducer_ignores_other_actions() -> None:
    """Test that non-matching actions return the same state object."""
    reducer = reducers.make_namespace_reducer(("counter",), 0)
    state = {"value": 1}

    assert reducer(state, _action(("other",), "add", {"value": 2})) is state
    assert reducer(state, {"type": "@@INIT"}) is state


def test_combine_reducers_keeps_unchanged_state() -> None:
    """Test that the previous state object is returned when nothing changed."""
    combined = reducers.combine_reducers(
        {
            "a": reducers.make_namespace_reducer(("a",), 1),
            "b": reducers.make_namespace_reducer(("b",), 2),
        }
    )

    state = combined(None, {"type": "@@INIT"})
    assert state == {"a": 1, "b": 2}
    assert combined(state, {"type": "noop"}) is state


def test_combine_reducers_replaces_changed_state() -> None:
    """Test that a changed slice produces a new state dict."""
    combined = reducers.combine_reducers({"a": reducers.make_namespace_reducer(("a",), 1)})
    state = combined(None, {"type": "@@INIT"})

    next_state = combined(state, _action(("a",), "set", 10))

    assert next_state == {"a": 10}
    assert next_state is not state


def test_compose_mirrors_graph() -> None:
    """Test that nested namespaces produce nested state."""
    graph = {"root": {"foo": {}, "bar": {}}, "solo": {}}
    initial_states = {("root", "foo"): {"value": 5}, ("root", "bar"): {"value": 7}, ("solo",): "x"}

    reducer = reducers.compose(graph, initial_states)

    assert reducer(None, {"type": "@@INIT"}) == {
        "root": {"foo": {"value": 5}, "bar": {"value": 7}},
        "solo": "x",
    }


def test_compose_isolates_siblings() -> None:
    """Test that an action for one leaf leaves its siblings untouched."""
    graph = {"root": {"foo": {}, "foobar": {}, "bar": {}}}
    initial_states = {
        ("root", "foo"): {"value": 5},
        ("root", "foobar"): {"value": 6},
        ("root", "bar"): {"value": 7},
    }
    reducer = reducers.compose(graph, initial_states)
    state = reducer(None, {"type": "@@INIT"})

    next_state = reducer(state, _action(("root", "foo"), "set", {"value": 1}))

    assert next_state["root"]["foo"] == {"value": 1}
    assert next_state["root"]["foobar"] is state["root"]["foobar"]
    assert next_state["root"]["bar"] is state["root"]["bar"]


def test_compose_empty_graph() -> None:
    """Test that an empty registry composes to a reducer over {}."""
    reducer = reducers.compose({}, {})

    assert reducer(None, {"type": "@@INIT"}) == {}


def test_internal_namespace_state_is_its_children() -> None:
    """Test that a namespace with children holds no state of its own."""
    relay.clear()
    relay("root").init({"ignored": True})
    relay("root")("leaf").init(1)

    state = relay.get_reducer()(None, {"type": "@@INIT"})

    assert state == {"root": {"leaf": 1}}


def test_get_reducer_snapshots_graph() -> None:
    """Test that namespaces created after composition are not in the reducer."""
    relay.clear()
    relay("early").init(1)
    reducer = relay.get_reducer()
    relay("late").init(2)

    assert reducer(None, {"type": "@@INIT"}) == {"early": 1}
    assert relay.get_reducer()(None, {"type": "@@INIT"}) == {"early": 1, "late": 2}
