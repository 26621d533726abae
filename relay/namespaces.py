"""
Namespace handles.

A NamespaceHandle is the long-lived object the registry hands out for one
namespace path. It carries the namespace's handlers, its setup functions and
at most one cached bound instance. Handles are callable:

    handle("child")            descend to (or create) handle.child
    handle(create_store, ...)  create the store from the composed reducer
    handle(data)               bind handlers to a data object

Paths are tuples of segments. Segments are non-empty strings without '.',
'/' or ':', which separate keys, wire paths and event names respectively.
"""

from typing import Any
from typing import Iterable
from typing import Optional
from typing import TYPE_CHECKING
from typing import Union

from relay import binding
from relay import errors
from relay import events

if TYPE_CHECKING:
    from relay.registry import Registry


PATH_LIKE = Union[str, Iterable[str]]
"""A dotted string ('root.foo') or a sequence of segments (['root', 'foo'])."""

_RESERVED = (".", "/", ":")


def validate_segment(segment: Any) -> str:
    """
    Check one namespace segment.

    Raises:
        InvalidNamespaceError: If segment is not a non-empty string or holds
            a reserved separator.
    """
    if not isinstance(segment, str) or not segment:
        raise errors.InvalidNamespaceError(
            f"Namespace segments must be non-empty strings, got {segment!r}"
        )

    for char in _RESERVED:
        if char in segment:
            raise errors.InvalidNamespaceError(
                f"Namespace segment {segment!r} may not contain {char!r}"
            )

    return segment


def parse_path(path: PATH_LIKE) -> tuple[str, ...]:
    """
    Normalize a dotted string or a sequence of segments to a path tuple.

    Raises:
        InvalidNamespaceError: If any segment is invalid.
    """
    if isinstance(path, str):
        segments = path.split(".")
    else:
        segments = list(path)

    return tuple(validate_segment(segment) for segment in segments)


class NamespaceHandle(events.EventSet):
    """The registry-resolved handle for one namespace."""

    def __init__(self, registry: "Registry", path: tuple[str, ...]) -> None:
        super().__init__(registry, path)
        self.bound_instance: Optional[binding.BoundInstance] = None

    def __repr__(self) -> str:
        return f"<NamespaceHandle {self.namespace or '<root>'}>"

    def __call__(self, arg: Any, /, *args: Any, **kwargs: Any) -> Any:
        """
        Descend, create the store or bind, depending on arg.

        Args:
            arg (Any): A string descends to the child namespace (dotted
                strings descend several levels). A callable is treated as a
                store factory and invoked as arg(reducer, *args, **kwargs).
                Anything else is bound as a data object.
        Raises:
            StoreAlreadyCreatedError: If arg is a store factory and a store
                is already attached.
        """
        if isinstance(arg, str):
            return self.child(arg)

        if callable(arg):
            return self._registry.create_store(arg, *args, **kwargs)

        return self.bind(arg)

    def child(self, path: PATH_LIKE) -> "NamespaceHandle":
        """Resolve a namespace below this one."""
        return self._registry.resolve(self.path + parse_path(path))

    def init(self, initial_state: Any, setup: Optional[events.SETUP] = None) -> "NamespaceHandle":
        """
        Register the initial state for this namespace.

        Args:
            initial_state (Any): Default state of this namespace's slice.
            setup (Optional[SETUP]): Forwarded to setup() when given.
        """
        self._registry.set_initial_state(self.path, initial_state)
        if setup is not None:
            self.setup(setup)

        return self

    @property
    def initial_state(self) -> Any:
        return self._registry.get_initial_state(self.path)

    def bind(self, data: Any) -> binding.BoundInstance:
        """Bind this namespace's handlers to data. See relay.binding.bind."""
        return binding.bind(self, data)
