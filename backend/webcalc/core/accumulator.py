"""
Calculator accumulator: per-window state and the transitions applied to it

Every transition takes an AccumulatorState and returns a new one; nothing
here mutates its argument or touches session/storage mechanics. The
boundary layer loads a window's state, applies one input event and saves
the result.
"""
import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union


class Operator(str, Enum):
    """Binary operators, valued by their display symbol"""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @classmethod
    def from_symbol(cls, symbol: Optional[str]) -> Optional["Operator"]:
        """Look up an operator by symbol, None if unrecognized"""
        try:
            return cls(symbol)
        except ValueError:
            return None


class CalculatorError(Exception):
    """Recoverable calculation error shown to the user instead of a result"""

    error_type = "calculation_error"
    display_message = "Error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.display_message)
        self.message = message or self.display_message


class DivisionByZeroError(CalculatorError):
    """Right-hand operand of a division was exactly zero"""

    error_type = "division_by_zero"
    display_message = "Cannot divide by zero"


class ResultOverflowError(CalculatorError):
    """Operation produced a value that is not a finite double"""

    error_type = "overflow"
    display_message = "Result out of range"


@dataclass(frozen=True)
class AccumulatorState:
    """State of one calculator window"""
    current: float = 0.0
    stored: float = 0.0
    pending_operator: Optional[Operator] = None
    is_fresh_entry: bool = True
    expression: str = ""

    def to_dict(self) -> dict:
        return {
            "current": self.current,
            "stored": self.stored,
            "pending_operator": self.pending_operator.value if self.pending_operator else None,
            "is_fresh_entry": self.is_fresh_entry,
            "expression": self.expression,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AccumulatorState":
        return cls(
            current=float(data.get("current", 0.0)),
            stored=float(data.get("stored", 0.0)),
            pending_operator=Operator.from_symbol(data.get("pending_operator")),
            is_fresh_entry=bool(data.get("is_fresh_entry", True)),
            expression=data.get("expression") or "",
        )


# ---------------------------------------------------------------------------
# Input events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Digit:
    value: int


@dataclass(frozen=True)
class OperatorPressed:
    symbol: str


@dataclass(frozen=True)
class Equals:
    pass


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class Percent:
    pass


@dataclass(frozen=True)
class ToggleSign:
    pass


InputEvent = Union[Digit, OperatorPressed, Equals, Clear, Percent, ToggleSign]

# Action strings posted by the calculator keypad
ACTION_EQUALS = "="
ACTION_CLEAR = "AC"
ACTION_PERCENT = "%"
ACTION_TOGGLE_SIGN = "+/-"

_ACTION_EVENTS = {
    ACTION_EQUALS: Equals(),
    ACTION_CLEAR: Clear(),
    ACTION_PERCENT: Percent(),
    ACTION_TOGGLE_SIGN: ToggleSign(),
}


def parse_event(action: Optional[str] = None, digit: Optional[int] = None) -> Optional[InputEvent]:
    """
    Map a keypad press to an input event.

    A digit takes precedence over an action. Returns None for an action the
    keypad does not know.
    """
    if digit is not None:
        return Digit(digit)
    if action is None:
        return None
    action = action.strip()
    if action in _ACTION_EVENTS:
        return _ACTION_EVENTS[action]
    if Operator.from_symbol(action) is not None:
        return OperatorPressed(action)
    return None


def event_kind(event: Optional[InputEvent]) -> str:
    """Short label for an event, used in logs and metrics"""
    return {
        Digit: "digit",
        OperatorPressed: "operator",
        Equals: "equals",
        Clear: "clear",
        Percent: "percent",
        ToggleSign: "toggle_sign",
    }.get(type(event), "unknown")


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def input_digit(state: AccumulatorState, digit: int) -> AccumulatorState:
    if not 0 <= digit <= 9:
        raise ValueError(f"digit must be between 0 and 9, got {digit}")

    if state.is_fresh_entry:
        # A new number with nothing pending starts a new chain
        expression = str(digit) if state.pending_operator is None else state.expression + str(digit)
        return replace(state, current=float(digit), is_fresh_entry=False, expression=expression)

    current = state.current * 10 + digit
    if not math.isfinite(current):
        raise ResultOverflowError()
    return replace(state, current=current, expression=state.expression + str(digit))


def _apply(operator: Operator, left: float, right: float) -> float:
    if operator is Operator.ADD:
        result = left + right
    elif operator is Operator.SUBTRACT:
        result = left - right
    elif operator is Operator.MULTIPLY:
        result = left * right
    else:
        if right == 0:
            raise DivisionByZeroError()
        result = left / right

    if not math.isfinite(result):
        raise ResultOverflowError()
    return result


def evaluate(state: AccumulatorState) -> AccumulatorState:
    """
    Apply the pending operator to (stored, current).

    No-op without a pending operator. Raises DivisionByZeroError or
    ResultOverflowError instead of producing a value; the input state is
    left as it was.
    """
    if state.pending_operator is None:
        return state

    result = _apply(state.pending_operator, state.stored, state.current)
    return replace(state, current=result, pending_operator=None, is_fresh_entry=True)


def set_operator(state: AccumulatorState, symbol: str) -> AccumulatorState:
    """
    Capture the left operand and the operator to apply next.

    A second operator after a typed operand evaluates the pending one first,
    so chains run strictly left to right. Unknown symbols leave the state as is.
    """
    operator = Operator.from_symbol(symbol)
    if operator is None:
        return state

    if state.pending_operator is not None and not state.is_fresh_entry:
        state = evaluate(state)

    expression = state.expression
    if state.pending_operator is not None and state.is_fresh_entry:
        # Operator pressed again before a second operand: it replaces the pending one
        pending_suffix = f" {state.pending_operator.value} "
        if expression.endswith(pending_suffix):
            expression = expression[:-len(pending_suffix)]
    # Continuing from a previous result: the trace starts with that result
    expression = expression or format_display(state.current)

    return replace(
        state,
        stored=state.current,
        pending_operator=operator,
        is_fresh_entry=True,
        expression=f"{expression} {operator.value} ",
    )


def clear(state: Optional[AccumulatorState] = None) -> AccumulatorState:
    return AccumulatorState()


def percent(state: AccumulatorState) -> AccumulatorState:
    return replace(state, current=state.current / 100)


def toggle_sign(state: AccumulatorState) -> AccumulatorState:
    return replace(state, current=-state.current)


# ---------------------------------------------------------------------------
# Event dispatch
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HistoryEntry:
    """A completed calculation, ready to be appended to the history store"""
    expression: str
    result: float
    window_id: str
    timestamp: datetime


@dataclass(frozen=True)
class Transition:
    state: AccumulatorState
    history_entry: Optional[HistoryEntry] = None


def _is_multi_term(expression: str) -> bool:
    return bool(expression) and " " in expression


def apply_event(state: AccumulatorState, event: Optional[InputEvent], window_id: str = "") -> Transition:
    """
    Apply one input event to a window's state.

    Equals emits a HistoryEntry when the expression it closes has more than
    one term, then resets the expression. CalculatorError propagates
    unchanged so callers can present it.
    """
    if isinstance(event, Digit):
        return Transition(input_digit(state, event.value))
    if isinstance(event, OperatorPressed):
        return Transition(set_operator(state, event.symbol))
    if isinstance(event, Clear):
        return Transition(clear(state))
    if isinstance(event, Percent):
        return Transition(percent(state))
    if isinstance(event, ToggleSign):
        return Transition(toggle_sign(state))
    if isinstance(event, Equals):
        expression = state.expression
        evaluated = evaluate(state)
        entry = None
        if _is_multi_term(expression):
            entry = HistoryEntry(
                expression=expression.strip(),
                result=evaluated.current,
                window_id=window_id,
                timestamp=datetime.now(timezone.utc),
            )
        return Transition(replace(evaluated, expression=""), entry)
    return Transition(state)


def format_display(value: float) -> str:
    """Render a value the way the display shows it: 56, not 56.0"""
    if value == 0:
        return "0"
    if float(value).is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(float(value))
