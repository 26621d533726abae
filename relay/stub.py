"""
Required for static type checkers to accept these names as members of the
relay module.

This module gets imported into the relay module so stubs are accessible
through the relay namespace.

The doc strings for each function exists in the stubs for intellisense
fetching, instead of within the relay class itself because the relay class
is a module replacement at runtime, so the namespaces during inspection are
different.
"""

import os
from typing import Any
from typing import Callable
from typing import Optional
from typing import Union

from relay import hooks
from relay import namespaces
from relay import reducers


# -----General Stubs-----------------------------------------------------------


def clear() -> None:
    """
    Reset all module-wide state: namespaces, the namespace graph, initial
    states, the attached store and the handler exception hook.
    Intended for test isolation.
    """


# noinspection PyUnusedLocal
def resolve(path: namespaces.PATH_LIKE) -> namespaces.NamespaceHandle:
    """
    Return the handle for a namespace, creating it on first access.

    Args:
        path (PATH_LIKE): A dotted string ('root.foo') or a sequence of
            segments (['root', 'foo']).
    Returns:
        NamespaceHandle: The same object for every call with an equal path.
    Raises:
        InvalidNamespaceError: If a segment is empty or contains '.', '/' or
            ':'.
    """


def get_root() -> namespaces.NamespaceHandle:
    """Returns the root handle, the one the module delegates calls to."""


# -----Store Stubs-------------------------------------------------------------


# noinspection PyUnusedLocal
def attach(store: Any) -> None:
    """
    Attach an existing store. The store needs dispatch(action) and
    get_state().

    Raises:
        StoreAlreadyCreatedError: If a store is already attached.
    """


def detach() -> None:
    """Forget the attached store. A new one may be created afterwards."""


def is_attached() -> bool:
    """Returns True if a store is attached."""


# noinspection PyUnusedLocal
def create_store(factory: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
    """
    Create the store by calling factory(reducer, *args, **kwargs) with the
    reducer composed from the current namespaces, and attach it.
    Same as relay(factory, *args, **kwargs).

    Raises:
        StoreAlreadyCreatedError: If a store is already attached.
    """


def get_reducer() -> reducers.REDUCER:
    """Compose a reducer from the namespaces that exist right now."""


def recompose() -> reducers.REDUCER:
    """
    Compose a fresh reducer and pass it to the attached store's
    replace_reducer(). Namespaces created after the store become live.

    Raises:
        NoStoreAttachedError: If no store is attached.
        TypeError: If the store has no replace_reducer().
    """


def get_state() -> Any:
    """
    Returns the whole state tree of the attached store.

    Raises:
        NoStoreAttachedError: If no store is attached.
    """


# -----Configuration Stubs-----------------------------------------------------


# noinspection PyUnusedLocal
def set_handler_exception_hook(hook: Optional[hooks.HANDLER_EXCEPTION_HOOK]) -> None:
    """
    Set the hook called when an event handler raises.
    The hook observes only; the exception always reaches the caller.

    Args:
        Optional[hooks.HANDLER_EXCEPTION_HOOK]:
            Callable with signature (str, str, Exception) -> None receiving
            the namespace, the event name and the exception.
            Pass None to disable. clear() restores the default,
            hooks.log_handler_exception.
    """


# -----Introspection Stubs-----------------------------------------------------


def get_namespaces() -> list[str]:
    """Get all registered namespaces as sorted dotted keys."""


# noinspection PyUnusedLocal
def namespace_exists(namespace: namespaces.PATH_LIKE) -> bool:
    """Check if a namespace handle has been created."""


def get_graph() -> dict:
    """Returns a copy of the nested namespace graph keyed by segment."""


def get_initial_states() -> dict[str, Any]:
    """Returns the initial state table keyed by dotted namespace."""


# noinspection PyUnusedLocal
def get_namespace_info(namespace: namespaces.PATH_LIKE) -> Optional[dict[str, object]]:
    """
    Get detailed information about a namespace.

    Returns:
        Optional[dict[str, object]]: Dictionary with namespace details, or
            None if the namespace doesn't exist.
    Example:
        {
            'namespace': 'root.foo',
            'events': ['add', 'remove'],
            'setup_count': 1,
            'initial_state': {'value': 5},
            'has_bound_instance': False,
            'is_leaf': True,
        }
    """


def get_all_namespace_info() -> dict[str, dict[str, object]]:
    """Get detailed information for all namespaces."""


def to_dict() -> dict:
    """Convert the relay structure to a dictionary."""


def to_string() -> str:
    """Returns a string representation of the relay."""


# noinspection PyUnusedLocal
def export(filepath: Union[str, os.PathLike]) -> None:
    """Export relay structure to filepath."""
