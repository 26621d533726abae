"""
Reducer composition for the relay.

Turns the namespace graph into one composite reducer whose shape mirrors the
graph. Internal nodes are combined with combine_reducers(), leaves are
namespace reducers that only accept actions addressed to their own
namespace.

Actions are plain dicts. The type string has the wire form
'event:<segments joined by "/">:<event name>'. Leaf reducers test the type
against an anchored pattern built from the escaped path, so segments holding
regex metacharacters can neither break the pattern nor match a sibling.

Composition is a snapshot. Namespaces created after compose() are inert until
the reducer is composed again.
"""

import logging
import re
from typing import Any
from typing import Callable
from typing import Mapping
from typing import Optional
from typing import TypedDict


logger = logging.getLogger(__name__)


GENERIC_EVENT = "$generic"
"""Event label used when an action is dispatched outside of any handler."""

_ESCAPE_PATTERN = re.compile(r"[\-\[\]/{}()*+?.\\^$|]")

STATE_REDUCER = Callable[[Any], Any]
"""The pure state transition carried on an action: state -> new state."""

REDUCER = Callable[[Any, Mapping[str, Any]], Any]
"""A store reducer: (state, action) -> new state."""

GRAPH = dict[str, "GRAPH"]
"""Nested namespace tree keyed by segment. Leaves are empty dicts."""


class Action(TypedDict, total=False):
    """An action sent to the store."""

    type: str
    """'event:<slash path>:<event>'. The only field used for matching."""

    reducer: STATE_REDUCER
    """Applied to the namespace's state slice when the type matches."""

    namespace: str
    """Dotted namespace key. Informational."""

    event: str
    """Resolved event label. Informational."""


def escape(segment: str) -> str:
    """Escape the characters - [ ] / { } ( ) * + ? . \\ ^ $ | in segment."""
    return _ESCAPE_PATTERN.sub(lambda m: "\\" + m.group(0), segment)


def action_type(path: tuple[str, ...], event: Optional[str] = None) -> str:
    """
    Build the wire type string for an action.

    Args:
        path (tuple[str, ...]): The namespace segments.
        event (Optional[str]): The event name. Falls back to GENERIC_EVENT
            when empty or None.
    Returns:
        str: 'event:<slash path>:<event>'.
    """
    return f"event:{'/'.join(path)}:{event or GENERIC_EVENT}"


def action_pattern(path: tuple[str, ...]) -> re.Pattern:
    """
    Compile the pattern a namespace reducer tests action types against.

    Matches exactly 'event:<slash path>' optionally followed by ':<anything>'.
    Use with fullmatch().
    """
    escaped = "/".join(escape(segment) for segment in path)
    return re.compile(f"event:{escaped}(?::.+)?")


def make_namespace_reducer(path: tuple[str, ...], initial_state: Any = None) -> REDUCER:
    """
    Create the leaf reducer for one namespace.

    Args:
        path (tuple[str, ...]): The namespace segments.
        initial_state (Any): Returned when the store has no state for this
            namespace yet.
    Returns:
        REDUCER: A reducer applying action['reducer'] to actions addressed to
            this namespace and returning the state unchanged otherwise.
    """
    pattern = action_pattern(path)

    def namespace_reducer(state: Any = None, action: Optional[Mapping[str, Any]] = None) -> Any:
        if state is None:
            state = initial_state

        if action is None or not pattern.fullmatch(action.get("type", "")):
            return state

        return action["reducer"](state)

    namespace_reducer.__qualname__ = f"namespace_reducer[{'.'.join(path)}]"
    return namespace_reducer


def combine_reducers(reducers: Mapping[str, REDUCER]) -> REDUCER:
    """
    Combine a mapping of reducers into one reducer over a dict keyed the same
    way.

    Each child reducer receives its own key's slice. When no slice changed
    (by identity) and the keys match, the previous state object is returned.
    """
    reducers = dict(reducers)

    def combination(state: Optional[Mapping[str, Any]] = None, action: Optional[Mapping[str, Any]] = None) -> Any:
        if state is None:
            state = {}

        has_changed = False
        next_state = {}
        for key, reducer in reducers.items():
            previous = state.get(key)
            next_state[key] = reducer(previous, action)
            has_changed = has_changed or next_state[key] is not previous

        has_changed = has_changed or len(reducers) != len(state)
        return next_state if has_changed else state

    return combination


def _compose_node(graph: GRAPH, initial_states: Mapping[tuple[str, ...], Any], prefix: tuple[str, ...]) -> REDUCER:
    if not graph:
        return make_namespace_reducer(prefix, initial_states.get(prefix))

    return combine_reducers(
        {
            segment: _compose_node(children, initial_states, prefix + (segment,))
            for segment, children in graph.items()
        }
    )


def compose(graph: GRAPH, initial_states: Mapping[tuple[str, ...], Any]) -> REDUCER:
    """
    Build the composite reducer for a namespace graph.

    Args:
        graph (GRAPH): Nested namespace tree keyed by segment.
        initial_states (Mapping[tuple[str, ...], Any]): Initial state per
            namespace path. Only consulted for leaves.
    Returns:
        REDUCER: A reducer whose state nests the same way the graph does.
    """
    reducer = combine_reducers(
        {segment: _compose_node(children, initial_states, (segment,)) for segment, children in graph.items()}
    )
    logger.debug(f"Composed reducer over {_count_leaves(graph)} namespace(s)")
    return reducer


def _count_leaves(graph: GRAPH) -> int:
    return sum(_count_leaves(children) if children else 1 for children in graph.values())
