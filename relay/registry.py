"""
Module-wide relay state.

The Registry owns everything that lives for the lifetime of the process:
the namespace handles, the namespace graph, the initial state table, the
attached store and the handler exception hook. The relay module keeps one
instance in a protective closure; clear() resets it for test isolation.

The attached store is any object with dispatch(action) and get_state().
Stores that also have replace_reducer(reducer) support recompose().
"""

import copy
import logging
from typing import Any
from typing import Callable
from typing import Optional

from relay import errors
from relay import hooks
from relay import namespaces
from relay import reducers


logger = logging.getLogger(__name__)


STORE_FACTORY = Callable[..., Any]
"""Called as factory(reducer, *args, **kwargs), returns a store."""


class Registry(object):
    """Namespace handles, graph, initial states and the store slot."""

    def __init__(self) -> None:
        self.namespaces: dict[tuple[str, ...], namespaces.NamespaceHandle] = {}
        self.graph: reducers.GRAPH = {}
        self.initial_states: dict[tuple[str, ...], Any] = {}
        self.store: Optional[Any] = None
        self.handler_exception_hook: Optional[hooks.HANDLER_EXCEPTION_HOOK] = hooks.log_handler_exception
        self.root = namespaces.NamespaceHandle(self, ())

    def clear(self) -> None:
        """Reset every namespace, initial state, the store and the hook."""
        self.namespaces.clear()
        self.graph.clear()
        self.initial_states.clear()
        self.store = None
        self.handler_exception_hook = hooks.log_handler_exception
        self.root = namespaces.NamespaceHandle(self, ())
        logger.debug("Registry cleared")

    # -----Namespaces----------------------------------------------------------

    def resolve(self, path: namespaces.PATH_LIKE) -> namespaces.NamespaceHandle:
        """
        Return the handle for path, creating it on first access.

        Repeated calls with an equal path return the same handle object.
        Creating a handle adds its path to the graph.
        """
        path = namespaces.parse_path(path)
        if not path:
            return self.root

        handle = self.namespaces.get(path)
        if handle is not None:
            return handle

        handle = namespaces.NamespaceHandle(self, path)
        self.namespaces[path] = handle

        node = self.graph
        for segment in path:
            node = node.setdefault(segment, {})

        logger.debug(f"Created namespace '{handle.namespace}'")
        return handle

    def set_initial_state(self, path: tuple[str, ...], initial_state: Any) -> None:
        self.initial_states[path] = initial_state

    def get_initial_state(self, path: tuple[str, ...]) -> Any:
        return self.initial_states.get(path)

    def is_leaf(self, path: tuple[str, ...]) -> bool:
        """True if path is in the graph and has no children."""
        node = self.graph
        for segment in path:
            if segment not in node:
                return False
            node = node[segment]

        return bool(path) and not node

    def get_graph(self) -> reducers.GRAPH:
        return copy.deepcopy(self.graph)

    # -----Reducer + Store-----------------------------------------------------

    def get_reducer(self) -> reducers.REDUCER:
        """Compose a reducer from the graph as it is right now."""
        return reducers.compose(self.graph, self.initial_states)

    def attach(self, store: Any) -> None:
        """
        Attach an existing store.

        Raises:
            StoreAlreadyCreatedError: If a store is already attached.
        """
        if self.store is not None:
            raise errors.StoreAlreadyCreatedError(
                "A store is already attached. Call detach() or clear() first."
            )

        self.store = store
        logger.debug(f"Attached store {type(store).__name__}")

    def detach(self) -> None:
        self.store = None
        logger.debug("Detached store")

    def create_store(self, factory: STORE_FACTORY, /, *args: Any, **kwargs: Any) -> Any:
        """
        Create the store from the composed reducer and attach it.

        Raises:
            StoreAlreadyCreatedError: If a store is already attached.
        """
        if self.store is not None:
            raise errors.StoreAlreadyCreatedError(
                "The store is already created. Call detach() or clear() first."
            )

        store = factory(self.get_reducer(), *args, **kwargs)
        self.store = store
        logger.debug(f"Created store with {hooks.get_callable_name(factory)}")
        return store

    def recompose(self) -> reducers.REDUCER:
        """
        Compose a fresh reducer and hand it to the attached store.

        Raises:
            NoStoreAttachedError: If no store is attached.
            TypeError: If the store has no replace_reducer().
        """
        store = self._require_store()
        replace_reducer = getattr(store, "replace_reducer", None)
        if replace_reducer is None:
            raise TypeError(f"Store {type(store).__name__} does not support replace_reducer()")

        reducer = self.get_reducer()
        replace_reducer(reducer)
        return reducer

    def dispatch(self, action: reducers.Action) -> Any:
        """
        Send action to the attached store.

        Raises:
            NoStoreAttachedError: If no store is attached.
        """
        store = self._require_store()
        logger.debug(f"Dispatching '{action['type']}'")
        return store.dispatch(action)

    def get_state(self) -> Any:
        """
        Read the whole state tree from the attached store.

        Raises:
            NoStoreAttachedError: If no store is attached.
        """
        return self._require_store().get_state()

    def _require_store(self) -> Any:
        if self.store is None:
            raise errors.NoStoreAttachedError(
                "No store is attached. Create one with relay(create_store) or "
                "call relay.attach(store)."
            )

        return self.store
