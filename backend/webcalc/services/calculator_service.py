"""
Calculator Service: applies keypad presses to a window and records results
"""
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from webcalc.core.accumulator import (AccumulatorState, CalculatorError,
                                      Equals, HistoryEntry, OperatorPressed,
                                      apply_event, event_kind, format_display,
                                      parse_event)
from webcalc.core.logging_config import LoggingConfig
from webcalc.core.metrics import (calculator_errors_total,
                                  calculator_evaluations_total,
                                  calculator_key_presses_total)
from webcalc.models.calculation_history import CalculationHistory
from webcalc.services.history_service import HistoryService
from webcalc.services.window_store import WindowStateStore, get_window_store

logger = LoggingConfig.get_logger(__name__)


@dataclass
class PressResult:
    """Outcome of one key press"""
    window_id: str
    state: AccumulatorState
    error: Optional[str] = None
    error_type: Optional[str] = None
    history_entry: Optional[HistoryEntry] = None

    @property
    def display(self) -> str:
        return self.error or format_display(self.state.current)


@dataclass
class WindowSnapshot:
    """Everything a calculator view needs to render one window"""
    window_id: str
    state: AccumulatorState
    history: List[CalculationHistory] = field(default_factory=list)

    @property
    def display(self) -> str:
        return format_display(self.state.current)


class CalculatorService:
    """
    Boundary between requests and the accumulator:
    - loads a window's state before each press and saves it after
    - appends completed calculations to the history store
    - turns calculation errors into a display-level error
    """

    def __init__(self, db: Session, store: Optional[WindowStateStore] = None):
        self.db = db
        self.store = store or get_window_store()
        self.history = HistoryService(db)

    def open_window(self, window_id: Optional[str] = None) -> WindowSnapshot:
        """Open a window, generating an id when none is given"""
        window_id = window_id or str(uuid.uuid4())
        self.store.load(window_id)
        return self.snapshot(window_id)

    def snapshot(self, window_id: str) -> WindowSnapshot:
        return WindowSnapshot(
            window_id=window_id,
            state=self.store.load(window_id),
            history=self.history.list_recent(window_id),
        )

    def press(self, window_id: str, action: Optional[str] = None, digit: Optional[int] = None) -> PressResult:
        """
        Apply one keypad press to a window

        Args:
            window_id: Calculator window
            action: Keypad action ("AC", "+", "-", "*", "/", "=", "%", "+/-")
            digit: Digit 0-9; takes precedence over action

        Returns:
            PressResult with the new state, or the unchanged state and an error message
        """
        state = self.store.load(window_id)
        event = parse_event(action, digit)
        kind = event_kind(event)
        calculator_key_presses_total.labels(kind=kind).inc()

        if event is None:
            logger.warning(
                "Ignoring unknown calculator action",
                extra={"window_id": window_id, "action": action}
            )
            return PressResult(window_id=window_id, state=state)

        try:
            transition = apply_event(state, event, window_id)
        except CalculatorError as e:
            calculator_errors_total.labels(error_type=e.error_type).inc()
            logger.info(
                f"Calculation error: {e.message}",
                extra={"window_id": window_id, "expression": state.expression, "error_type": e.error_type}
            )
            return PressResult(window_id=window_id, state=state, error=e.message, error_type=e.error_type)

        if self._evaluated(state, event):
            calculator_evaluations_total.labels(operator=state.pending_operator.name.lower()).inc()

        if transition.history_entry is not None:
            self.history.record(transition.history_entry)
            logger.info(
                "Calculation completed",
                extra={
                    "window_id": window_id,
                    "expression": transition.history_entry.expression,
                    "result": transition.history_entry.result,
                }
            )

        self.store.save(window_id, transition.state)
        return PressResult(window_id=window_id, state=transition.state, history_entry=transition.history_entry)

    @staticmethod
    def _evaluated(state: AccumulatorState, event) -> bool:
        """Whether applying event to state ran the pending operation"""
        if state.pending_operator is None:
            return False
        if isinstance(event, Equals):
            return True
        return isinstance(event, OperatorPressed) and not state.is_fresh_entry

    def clear_history(self, window_id: str) -> int:
        return self.history.clear(window_id)

    def close_window(self, window_id: str) -> bool:
        """Discard a window's in-progress state; its history stays"""
        return self.store.discard(window_id)
