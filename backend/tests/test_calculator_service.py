"""
Unit tests for CalculatorService
"""
import pytest

from webcalc.core.accumulator import AccumulatorState, Operator
from webcalc.services.calculator_service import CalculatorService


@pytest.fixture
def calculator_service(db, window_store):
    """Fixture for CalculatorService"""
    return CalculatorService(db, store=window_store)


def test_open_window_generates_id(calculator_service, window_store):
    snapshot = calculator_service.open_window()

    assert snapshot.window_id
    assert window_store.exists(snapshot.window_id)
    assert snapshot.state == AccumulatorState()
    assert snapshot.display == "0"
    assert snapshot.history == []


def test_open_window_with_given_id(calculator_service):
    assert calculator_service.open_window("tab-1").window_id == "tab-1"


def test_press_persists_state_between_events(calculator_service, window_store):
    calculator_service.press("w1", digit=4)
    calculator_service.press("w1", digit=2)

    assert window_store.load("w1").current == 42


def test_equals_records_history(calculator_service, keypad):
    result = keypad(calculator_service, "w1", "7 * 8 =")

    assert result.display == "56"
    assert result.error is None
    assert result.history_entry.expression == "7 * 8"

    history = calculator_service.snapshot("w1").history
    assert len(history) == 1
    assert history[0].expression == "7 * 8"
    assert history[0].result == 56


def test_chained_calculation(calculator_service, keypad):
    result = keypad(calculator_service, "w1", "5 + 3 + 2 =")
    assert result.state.current == 10
    assert [h.expression for h in calculator_service.snapshot("w1").history] == ["5 + 3 + 2"]


def test_single_term_equals_records_nothing(calculator_service, keypad):
    keypad(calculator_service, "w1", "4 2 =")
    assert calculator_service.snapshot("w1").history == []


def test_division_by_zero_is_display_error(calculator_service, window_store, keypad):
    result = keypad(calculator_service, "w1", "5 / 0 =")

    assert result.error == "Cannot divide by zero"
    assert result.error_type == "division_by_zero"
    assert result.display == "Cannot divide by zero"
    assert result.history_entry is None

    # previous state is kept, not replaced by a 0 result
    state = window_store.load("w1")
    assert state.pending_operator is Operator.DIVIDE
    assert state.stored == 5
    assert calculator_service.snapshot("w1").history == []


def test_recover_after_division_by_zero(calculator_service, keypad):
    keypad(calculator_service, "w1", "8 / 0 =")
    result = keypad(calculator_service, "w1", "AC 8 / 2 =")

    assert result.error is None
    assert result.state.current == 4


def test_unknown_action_is_ignored(calculator_service, window_store, keypad):
    keypad(calculator_service, "w1", "1 2")
    result = calculator_service.press("w1", action="sqrt")

    assert result.error is None
    assert result.state.current == 12
    assert window_store.load("w1").current == 12


def test_windows_do_not_share_state(calculator_service, keypad):
    keypad(calculator_service, "a", "2 + 2 =")
    keypad(calculator_service, "b", "9")

    assert calculator_service.snapshot("a").state.current == 4
    assert calculator_service.snapshot("b").state.current == 9
    assert calculator_service.snapshot("b").history == []


def test_clear_history_and_close_window(calculator_service, window_store, keypad):
    keypad(calculator_service, "w1", "1 + 1 = 2 + 2 =")

    assert calculator_service.clear_history("w1") == 2
    assert calculator_service.snapshot("w1").history == []

    assert calculator_service.close_window("w1") is True
    assert not window_store.exists("w1")


def test_long_chain_recorded_in_history(calculator_service, keypad):
    keys = "1 + " * 200 + "1 ="
    result = keypad(calculator_service, "chain", keys)

    assert result.error is None
    assert result.state.current == 201
    assert len(result.history_entry.expression) > 512
    assert calculator_service.snapshot("chain").history[0].result == 201
