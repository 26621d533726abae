"""
Handler exception hooks for the relay.

A hook observes an exception raised by an event handler. It is called after
the handler fails and before the exception continues to the caller of
trigger(). Hooks never swallow the exception; they exist for logging and
collection only.

Built-in hooks: log_handler_exception (the default),
silent_handler_exception and collect_handler_exception.
"""

import logging
import sys
from typing import Callable


logger = logging.getLogger(__name__)


HANDLER_EXCEPTION_HOOK = Callable[[str, str, Exception], None]
"""
Signature for handler exception hooks.

Hooks receive the dotted namespace, the event name and the exception raised
by the handler.
"""


def get_callable_name(callable_: Callable) -> str:
    """
    Returns the name of the callable, using class name for items with __self__,
    __qualname__ for anything with __qualname__, or str(callable_) if neither
    are found.
    """
    if hasattr(callable_, "__self__") and hasattr(callable_, "__name__"):
        return f"{callable_.__self__.__class__.__name__}.{callable_.__name__}"
    elif hasattr(callable_, "__qualname__"):
        return callable_.__qualname__
    else:
        return str(callable_)


def log_handler_exception(namespace: str, event: str, exception: Exception) -> None:
    """Log the failing handler at ERROR level. The exception still propagates."""
    logger.error(
        f"Exception in event handler:\n"
        f"  Namespace: {namespace or '<root>'}\n"
        f"  Event:     {event}\n"
        f"  Exception: {exception.__class__.__name__}: {exception}",
        exc_info=True,
    )


def silent_handler_exception(_: str, __: str, ___: Exception) -> None:
    """Do nothing."""


exceptions_caught = []


def collect_handler_exception(namespace: str, event: str, exception: Exception) -> None:
    """
    Collect handler exceptions for later inspection.
    This appends to relay.hooks.exceptions_caught which is a list.
    Either manage the list manually or use this function as an example to
    create a more robust collector.
    """
    exceptions_caught.append(
        {
            "namespace": namespace,
            "event": event,
            "exception": f"{exception.__class__.__name__}: {exception}",
            "exc_info": sys.exc_info(),
        }
    )
