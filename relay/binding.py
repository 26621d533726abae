"""
Data binding for namespace handles.

bind() rebuilds a handle's handlers against an external data object, such as
request or session data, so handler closures see that data instead of the
handle. The result is a BoundInstance.

Each handle caches a single bound instance. Binding again with data whose
fields are shallow-equal to the cached snapshot returns the cached instance,
so repeated binds with unchanged data keep handler identity and cost only a
field comparison.
"""

import dataclasses
import logging
from typing import Any
from typing import Mapping
from typing import TYPE_CHECKING

from relay import events

if TYPE_CHECKING:
    from relay.namespaces import NamespaceHandle


logger = logging.getLogger(__name__)


_SCALARS = (str, bytes, int, float, bool, complex, type(None))
"""Immutable types compared by value. Everything else compares by identity."""


def snapshot(data: Any) -> dict[str, Any]:
    """
    Take a shallow copy of the fields of a data object.

    Mappings contribute their items, dataclass instances their declared
    fields, any other object its instance __dict__.

    Raises:
        TypeError: If the object exposes no fields.
    """
    if isinstance(data, Mapping):
        return dict(data)

    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {field.name: getattr(data, field.name) for field in dataclasses.fields(data)}

    try:
        return dict(vars(data))
    except TypeError:
        raise TypeError(
            f"Cannot bind {type(data).__name__!r}: expected a mapping, a "
            f"dataclass instance or an object with attributes"
        ) from None


def _same_value(a: Any, b: Any) -> bool:
    if a is b:
        return True

    return type(a) is type(b) and isinstance(a, _SCALARS) and a == b


def shallow_equal(a: Mapping[str, Any], b: Mapping[str, Any]) -> bool:
    """Same keys, and every pair of values identical or equal scalars."""
    if a.keys() != b.keys():
        return False

    return all(_same_value(a[key], b[key]) for key in a)


class BoundInstance(events.EventSet):
    """
    A namespace's handlers re-materialized against one data object.

    The data object's fields are readable as attributes. Handlers, setup
    functions and mixins registered on the source handle have been replayed
    onto this instance, so they received it as their target.
    """

    def __init__(self, handle: "NamespaceHandle", data: Any, fields: dict[str, Any]) -> None:
        super().__init__(handle._registry, handle.path)
        self.data = data
        self.fields = fields

    def __getattr__(self, name: str) -> Any:
        fields = self.__dict__.get("fields")
        if fields is not None and name in fields:
            return fields[name]

        return super().__getattr__(name)

    def __repr__(self) -> str:
        return f"<BoundInstance {self.namespace or '<root>'} {self.fields!r}>"


def bind(handle: "NamespaceHandle", data: Any) -> BoundInstance:
    """
    Bind handle's handlers to data.

    Args:
        handle (NamespaceHandle): The handle whose registrations are replayed.
        data (Any): A mapping, dataclass instance or plain object.
    Returns:
        BoundInstance: The cached instance when its snapshot is shallow-equal
            to data's fields, otherwise a new instance that replaces the
            cached one.
    """
    fields = snapshot(data)

    cached = handle.bound_instance
    if cached is not None and shallow_equal(cached.fields, fields):
        logger.debug(f"Bind cache hit for '{handle.namespace or '<root>'}'")
        return cached

    instance = BoundInstance(handle, data, fields)
    handle.replay_onto(instance)
    handle.bound_instance = instance
    logger.debug(f"Bound new instance for '{handle.namespace or '<root>'}'")
    return instance
