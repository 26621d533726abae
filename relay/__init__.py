"""
# Namespaced Event Relay

Herein is the relay itself as a callable module class, creating a protective
closure around the namespace registry.

    import relay

    todos = relay("todos").init([])

    @todos.on("add")
    def add(todos_, text):
        todos_.reduce(lambda state: state + [text])

    store = relay(create_store)
    todos.add("milk")
    relay.get_state()  # {'todos': ['milk']}

Handlers registered under hierarchical namespaces dispatch pure state
transitions to an external store. The relay composes the store's reducer from
the namespaces that exist when the store is created.

A reimport protection clause exists at the top of the file to prevent the
registry from being lost on import.

Function stubs exist in the stubs file for static type checkers to validate
correct calls.
"""

# Remember to update doc strings in the stub.py file so static type checkers
# and intellisense can receive accurate feedback!

import sys

# -----------------------------------------------------------------------------
# Prevent module reload - namespace registry would be lost!
if "relay" in sys.modules:
    existing_module = sys.modules["relay"]
    if hasattr(existing_module, "_RELAY_IMPORT_GUARD"):
        raise ImportError(
            "Module 'relay' has already been imported and cannot be reloaded. "
            "Namespace data would be lost. "
            "Restart your Python session to reimport."
        )
_RELAY_IMPORT_GUARD = True
# -----------------------------------------------------------------------------

import json
import os
from types import ModuleType

from relay.stub import *
from relay import binding
from relay import errors
from relay import events
from relay import hooks
from relay import namespaces
from relay import reducers
from relay import registry


version_major = 0
version_minor = 3
version_patch = 0
__version__ = f"{version_major}.{version_minor}.{version_patch}"

_REGISTRY = registry.Registry()
"""
Global relay registry.
Holds every namespace handle, the namespace graph, the initial state table,
the attached store and the handler exception hook.
"""


class Relay(ModuleType):
    """
    Root namespace accessor.

    Calling the module resolves namespaces, creates the store or binds data:

        relay("todos")              -> NamespaceHandle
        relay(create_store, *args)  -> store
        relay(data)                 -> BoundInstance of the root handle

    Register every namespace before creating the store. The reducer is
    composed once, at creation time; later namespaces stay inert until
    recompose() is called.
    """

    # -----Runtime Closures----------------------------------------------------
    # ---Constants---
    __version__ = __version__
    _RELAY_IMPORT_GUARD = _RELAY_IMPORT_GUARD
    GENERIC_EVENT = reducers.GENERIC_EVENT
    # Explicitly refuse to make closure for _REGISTRY so it stays protected!

    # ---Exceptions---
    RelayError = errors.RelayError
    StoreAlreadyCreatedError = errors.StoreAlreadyCreatedError
    NoStoreAttachedError = errors.NoStoreAttachedError
    NoSuchHandlerError = errors.NoSuchHandlerError
    InvalidNamespaceError = errors.InvalidNamespaceError

    # ---Types---
    NamespaceHandle = namespaces.NamespaceHandle
    BoundInstance = binding.BoundInstance

    # ---Modules---
    binding = binding
    errors = errors
    events = events
    hooks = hooks
    namespaces = namespaces
    reducers = reducers
    # -------------------------------------------------------------------------

    def __init__(self, name: str) -> None:
        super().__init__(name)
        assert self._RELAY_IMPORT_GUARD is True

    def __call__(self, arg: Any, /, *args: Any, **kwargs: Any) -> Any:
        return _REGISTRY.root(arg, *args, **kwargs)

    @staticmethod
    def clear() -> None:
        _REGISTRY.clear()

    @staticmethod
    def resolve(path: namespaces.PATH_LIKE) -> namespaces.NamespaceHandle:
        return _REGISTRY.resolve(path)

    @staticmethod
    def get_root() -> namespaces.NamespaceHandle:
        return _REGISTRY.root

    # -----Store Management----------------------------------------------------

    @staticmethod
    def attach(store: Any) -> None:
        _REGISTRY.attach(store)

    @staticmethod
    def detach() -> None:
        _REGISTRY.detach()

    @staticmethod
    def is_attached() -> bool:
        return _REGISTRY.store is not None

    @staticmethod
    def create_store(factory: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
        return _REGISTRY.create_store(factory, *args, **kwargs)

    @staticmethod
    def get_reducer() -> reducers.REDUCER:
        return _REGISTRY.get_reducer()

    @staticmethod
    def recompose() -> reducers.REDUCER:
        return _REGISTRY.recompose()

    @staticmethod
    def get_state() -> Any:
        return _REGISTRY.get_state()

    # -----Configuration-------------------------------------------------------

    @staticmethod
    def set_handler_exception_hook(hook: Optional[hooks.HANDLER_EXCEPTION_HOOK]) -> None:
        _REGISTRY.handler_exception_hook = hook

    # -----Introspection API---------------------------------------------------

    @staticmethod
    def get_namespaces() -> list[str]:
        return sorted(handle.namespace for handle in _REGISTRY.namespaces.values())

    @staticmethod
    def namespace_exists(namespace: namespaces.PATH_LIKE) -> bool:
        try:
            path = namespaces.parse_path(namespace)
        except errors.InvalidNamespaceError:
            return False

        return path in _REGISTRY.namespaces

    @staticmethod
    def get_graph() -> reducers.GRAPH:
        return _REGISTRY.get_graph()

    @staticmethod
    def get_initial_states() -> dict[str, Any]:
        return {".".join(path): state for path, state in _REGISTRY.initial_states.items()}

    @staticmethod
    def get_namespace_info(namespace: namespaces.PATH_LIKE) -> Optional[dict[str, object]]:
        path = namespaces.parse_path(namespace)
        handle = _REGISTRY.namespaces.get(path)
        if handle is None:
            return None

        return {
            "namespace": handle.namespace,
            "events": handle.events,
            "setup_count": len(handle.setups),
            "initial_state": _REGISTRY.get_initial_state(path),
            "has_bound_instance": handle.bound_instance is not None,
            "is_leaf": _REGISTRY.is_leaf(path),
        }

    def get_all_namespace_info(self) -> dict[str, dict[str, object]]:
        return {namespace: self.get_namespace_info(namespace) for namespace in self.get_namespaces()}

    @staticmethod
    def to_dict() -> dict:
        data = {}

        for path in sorted(_REGISTRY.namespaces):
            handle = _REGISTRY.namespaces[path]

            namespace_data = {}
            if handle.events:
                namespace_data["events"] = {
                    name: hooks.get_callable_name(handler)
                    for name, handler in sorted(handle.handlers.items())
                }
            if handle.setups:
                namespace_data["setups"] = [hooks.get_callable_name(fn) for fn in handle.setups]

            data[handle.namespace] = namespace_data

        return data

    def to_string(self) -> str:
        return json.dumps(self.to_dict(), indent=4)

    def export(self, filepath: Union[str, os.PathLike]) -> None:
        with open(filepath, "w") as outfile:
            json.dump(self.to_dict(), outfile, indent=4)


# This is here to protect the _REGISTRY, creating a protective closure.
custom_module = Relay(sys.modules[__name__].__name__)
sys.modules[__name__] = custom_module
