"""
Exception types raised by the relay.

All failures are immediate and synchronous. Every exception derives from
RelayError and from the builtin it most resembles, so callers may catch
either.
"""


class RelayError(Exception):
    """Base class for every relay exception."""


class StoreAlreadyCreatedError(RelayError, RuntimeError):
    """Raised when creating or attaching a store while one is attached."""


class NoStoreAttachedError(RelayError, RuntimeError):
    """Raised when dispatching or reading state with no store attached."""


class NoSuchHandlerError(RelayError, LookupError):
    """Raised when triggering an event name that was never registered."""


class InvalidNamespaceError(RelayError, ValueError):
    """Raised when a namespace segment is empty or contains a separator."""
