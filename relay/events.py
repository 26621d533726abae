"""
Event handler sets.

EventSet is the surface shared by namespace handles and bound instances: a
mapping of event name to handler, the current-event marker, and the
on/setup/use/trigger/reduce/get_state operations.

Handlers are called with the target they were triggered on as their first
argument, the way methods receive self:

    def add(todos, text):
        todos.reduce(lambda state: state + [text])

    relay("todos").init([]).on("add", add)
    relay("todos").trigger("add", "milk")

While a handler runs, current_event holds its name so reduce() can label the
dispatched action without being told. The previous value is restored when the
handler returns or raises.
"""

import functools
from typing import Any
from typing import Callable
from typing import Mapping
from typing import Optional
from typing import TYPE_CHECKING

from relay import errors
from relay import reducers

if TYPE_CHECKING:
    from relay.registry import Registry


HANDLER = Callable[..., Any]
"""An event handler. Receives the target first, then the trigger arguments."""

SETUP = Callable[["EventSet"], Any]
"""A deferred setup function. Receives the target, registers handlers on it."""

MIXIN = Callable[..., Any]
"""A registration function. Receives the target, then the use() arguments."""


class EventSet(object):
    """Handlers for one namespace, triggered and dispatched against a registry."""

    def __init__(self, registry: "Registry", path: tuple[str, ...]) -> None:
        self._registry = registry
        self.path: tuple[str, ...] = path
        self.current_event: Optional[str] = None

        self._handlers: dict[str, HANDLER] = {}
        self.setups: list[SETUP] = []

        # Replay log for bind(). Each step registers onto a new target.
        self._replay: list[Callable[["EventSet"], Any]] = []
        self._setup_depth = 0

    # -----Naming--------------------------------------------------------------

    @property
    def namespace(self) -> str:
        """Dotted registry key, e.g. 'root.foo'."""
        return ".".join(self.path)

    @property
    def slash_path(self) -> str:
        """Path as embedded in action types, e.g. 'root/foo'."""
        return "/".join(self.path)

    def __str__(self) -> str:
        return self.namespace

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails: expose handlers as methods.
        handlers = self.__dict__.get("_handlers")
        if handlers is not None and name in handlers:
            return functools.partial(self.trigger, name)

        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    # -----Registration--------------------------------------------------------

    def on(self, name: str, handler: Optional[HANDLER] = None) -> Any:
        """
        Register handler under name.

        Args:
            name (str): The event name.
            handler (Optional[HANDLER]): Called as handler(target, *args,
                **kwargs) on trigger. When omitted, a decorator is returned
                that registers the decorated function and returns it.
        Returns:
            This event set for chaining, or a decorator when handler is None.
        """
        if handler is None:
            def decorator(func: HANDLER) -> HANDLER:
                self.on(name, func)
                return func

            return decorator

        self._handlers[name] = handler
        if self._setup_depth == 0:
            self._replay.append(lambda target: target.on(name, handler))

        return self

    def setup(self, fn: SETUP) -> "EventSet":
        """
        Record fn as a deferred setup function and run it once now.

        The same function is replayed against every bound instance, so
        handlers it registers can close over the instance's data.

        fn is only recorded once it returns. A setup function that raises is
        not kept and will not be replayed.
        """
        top_level = self._setup_depth == 0

        self._setup_depth += 1
        try:
            fn(self)
        finally:
            self._setup_depth -= 1

        self.setups.append(fn)
        if top_level:
            self._replay.append(lambda target: target.setup(fn))

        return self

    def use(self, mixin: MIXIN, /, *args: Any, **kwargs: Any) -> "EventSet":
        """Call mixin(self, *args, **kwargs). Not memoized, return value ignored."""
        mixin(self, *args, **kwargs)
        return self

    @property
    def events(self) -> list[str]:
        """Registered event names, sorted."""
        return sorted(self._handlers)

    @property
    def handlers(self) -> dict[str, HANDLER]:
        """Copy of the event name to handler mapping."""
        return dict(self._handlers)

    # -----Triggering----------------------------------------------------------

    def trigger(self, name: str, /, *args: Any, **kwargs: Any) -> Any:
        """
        Run the handler registered under name and return its result.

        current_event is set to name while the handler runs and restored
        afterwards, also when the handler raises. Exceptions are passed to
        the registry's exception hook once, in the innermost trigger they
        pass through, and then re-raised.

        Raises:
            NoSuchHandlerError: If no handler is registered under name.
        """
        try:
            handler = self._handlers[name]
        except KeyError:
            raise errors.NoSuchHandlerError(
                f"No handler registered for event '{name}' in namespace "
                f"'{self.namespace or '<root>'}'"
            ) from None

        previous = self.current_event
        self.current_event = name
        try:
            return handler(self, *args, **kwargs)
        except Exception as e:
            hook = self._registry.handler_exception_hook
            if hook is not None and not getattr(e, "_relay_reported", False):
                e._relay_reported = True
                hook(self.namespace, name, e)
            raise
        finally:
            self.current_event = previous

    # -----Dispatching---------------------------------------------------------

    def reduce(
        self,
        event: Any,
        reducer: Optional[reducers.STATE_REDUCER] = None,
    ) -> Any:
        """
        Dispatch a state transition for this namespace.

        Two call shapes are accepted:
            reduce(reducer)         label taken from current_event
            reduce(event, reducer)  explicit label

        Outside of any handler the label falls back to GENERIC_EVENT.

        Returns:
            Whatever the store's dispatch() returns.
        Raises:
            NoStoreAttachedError: If no store is attached.
        """
        if reducer is None and callable(event):
            reducer = event
            event = self.current_event

        if not callable(reducer):
            raise TypeError(f"reduce() expects a reducer function, got {reducer!r}")

        label = event or reducers.GENERIC_EVENT
        action: reducers.Action = {
            "type": reducers.action_type(self.path, label),
            "reducer": reducer,
            "namespace": self.namespace,
            "event": label,
        }
        return self._registry.dispatch(action)

    def get_state(self) -> Any:
        """
        Read this namespace's slice of the store's state.

        Returns None when the slice does not exist, which is the case for
        namespaces created after the reducer was composed.

        Raises:
            NoStoreAttachedError: If no store is attached.
        """
        state = self._registry.get_state()
        for segment in self.path:
            if not isinstance(state, Mapping) or segment not in state:
                return None
            state = state[segment]

        return state

    # -----Binding-------------------------------------------------------------

    def replay_onto(self, target: "EventSet") -> None:
        """Re-run every setup function and direct registration onto target."""
        for step in self._replay:
            step(target)
