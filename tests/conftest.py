"""Shared fixtures. Provides a minimal synchronous redux-style store."""

from typing import Any

import pytest


class Store(object):
    """Keeps one state tree and recomputes it with the reducer on dispatch."""

    INIT = {"type": "@@INIT"}

    def __init__(self, reducer, preloaded_state: Any = None) -> None:
        self.reducer = reducer
        self.dispatched: list[dict] = []
        self.state = reducer(preloaded_state, self.INIT)

    def dispatch(self, action: dict) -> dict:
        self.state = self.reducer(self.state, action)
        self.dispatched.append(action)
        return action

    def get_state(self) -> Any:
        return self.state

    def replace_reducer(self, reducer) -> None:
        self.reducer = reducer
        self.state = reducer(self.state, {"type": "@@REPLACE"})


@pytest.fixture
def create_store():
    """The store factory relay(create_store) expects."""
    return Store
