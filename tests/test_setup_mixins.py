"""
Unit tests for init(), setup() and use().

Tests verify that initial states are recorded, that setup functions run
immediately and are kept for replay, and that mixins are plain registration
functions called with the handle and their arguments.
"""

import pytest

import relay


def test_init_records_initial_state() -> None:
    """Test that init() stores the initial state under the dotted key."""
    relay.clear()

    handle = relay("app")("settings").init({"theme": "dark"})

    assert handle.initial_state == {"theme": "dark"}
    assert relay.get_initial_states() == {"app.settings": {"theme": "dark"}}


def test_init_can_be_called_again() -> None:
    """Test that a later init() replaces the initial state."""
    relay.clear()

    relay("app").init(1).init(2)

    assert relay("app").initial_state == 2


def test_init_forwards_setup_function() -> None:
    """Test that init(state, fn) runs fn as a setup function."""
    relay.clear()
    calls: list = []

    def setup(target) -> None:
        calls.append(target)
        target.on("ready", lambda h: "ready")

    handle = relay("app").init({}, setup)

    assert calls == [handle]
    assert handle.setups == [setup]
    assert handle.trigger("ready") == "ready"


def test_setup_runs_immediately_and_returns_handle() -> None:
    """Test that setup() invokes the function once and chains."""
    relay.clear()
    calls: list[str] = []
    handle = relay("app")

    result = handle.setup(lambda target: calls.append(target.namespace))

    assert result is handle
    assert calls == ["app"]


def test_setups_are_kept_in_order() -> None:
    """Test that setup functions are recorded in registration order."""
    relay.clear()

    def first(target) -> None:
        pass

    def second(target) -> None:
        pass

    handle = relay("app").setup(first).setup(second)

    assert handle.setups == [first, second]


def test_mixin_registers_handler(create_store) -> None:
    """Test that a mixin's handler produces the state it specifies."""
    relay.clear()

    def mixin(target, value: str) -> None:
        target.on("mixinEvent", lambda h: h.reduce(lambda state: {"from": value}))

    handle = relay("mixed").init({}).use(mixin, "foo")
    relay(create_store)

    handle.trigger("mixinEvent")

    assert relay.get_state() == {"mixed": {"from": "foo"}}


def test_use_is_not_memoized() -> None:
    """Test that applying a mixin twice calls it twice."""
    relay.clear()
    calls: list = []

    def mixin(target, *args, **kwargs) -> str:
        calls.append((args, kwargs))
        return "ignored"

    handle = relay("app")
    assert handle.use(mixin, 1, key="a").use(mixin) is handle

    assert calls == [((1,), {"key": "a"}), ((), {})]


def test_mixins_can_compose_other_mixins() -> None:
    """Test that a mixin may call use() and setup() itself."""
    relay.clear()

    def counting(target) -> None:
        target.on("count", lambda h: 1)

    def bundle(target) -> None:
        target.use(counting)
        target.setup(lambda t: t.on("named", lambda h: h.namespace))

    handle = relay("bundle").use(bundle)

    assert handle.events == ["count", "named"]
    assert handle.trigger("named") == "bundle"


def test_use_forwards_mixin_keyword() -> None:
    """Test that a mixin keyword called 'mixin' reaches the mixin."""
    relay.clear()
    received: list = []

    def register(target, mixin=None) -> None:
        received.append(mixin)

    relay("app").use(register, mixin="inner")

    assert received == ["inner"]


def test_failed_setup_is_not_recorded() -> None:
    """Test that a setup function that raises is neither kept nor replayed."""
    relay.clear()

    def bad(target) -> None:
        raise ValueError("setup failed")

    handle = relay("fragile").setup(lambda t: t.on("ok", lambda h: "ok"))

    with pytest.raises(ValueError, match="setup failed"):
        handle.setup(bad)

    assert len(handle.setups) == 1
    assert bad not in handle.setups

    instance = handle.bind({"k": 1})
    assert instance.trigger("ok") == "ok"
