"""
Unit tests for the per-window state store
"""
from webcalc.core.accumulator import AccumulatorState, Operator
from webcalc.services.window_store import WindowStateStore, get_window_store


def test_load_creates_default_state():
    store = WindowStateStore(key_prefix="calc_")
    assert not store.exists("w1")

    state = store.load("w1")

    assert state == AccumulatorState()
    assert store.exists("w1")
    assert store.window_ids() == ["w1"]


def test_save_and_load_round_trip():
    store = WindowStateStore(key_prefix="calc_")
    state = AccumulatorState(current=8.0, stored=5.0, pending_operator=Operator.ADD,
                             is_fresh_entry=False, expression="5 + 8")
    store.save("w1", state)

    assert store.load("w1") == state


def test_windows_are_isolated():
    store = WindowStateStore(key_prefix="calc_")
    store.save("a", AccumulatorState(current=1.0))
    store.save("b", AccumulatorState(current=2.0))

    assert store.load("a").current == 1.0
    assert store.load("b").current == 2.0


def test_snapshots_are_serialized():
    """Stored values are JSON snapshots, not live objects"""
    store = WindowStateStore(key_prefix="calc_")
    store.save("w1", AccumulatorState(current=3.0))
    assert store._snapshots["calc_w1"].startswith("{")


def test_discard():
    store = WindowStateStore(key_prefix="calc_")
    store.load("w1")

    assert store.discard("w1") is True
    assert store.discard("w1") is False
    assert not store.exists("w1")


def test_global_store_uses_configured_prefix(window_store):
    assert get_window_store() is window_store
    assert window_store.key_prefix == "calc_"
