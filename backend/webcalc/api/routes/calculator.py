"""
Calculator API routes: windows, key presses and history
"""
from datetime import datetime
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session

from webcalc.core.accumulator import AccumulatorState, HistoryEntry
from webcalc.core.database import get_db
from webcalc.core.logging_config import LoggingConfig
from webcalc.models.calculation_history import WINDOW_ID_MAX_LENGTH, CalculationHistory
from webcalc.services.calculator_service import CalculatorService
from webcalc.services.history_service import HistoryService
from webcalc.services.window_store import get_window_store

router = APIRouter(prefix="/api/calculator", tags=["calculator"])
logger = LoggingConfig.get_logger(__name__)

WindowId = Annotated[str, Path(max_length=WINDOW_ID_MAX_LENGTH, description="Calculator window id")]


class PressRequest(BaseModel):
    """Keypad press: either a digit or an action"""
    action: Optional[str] = Field(
        default=None,
        max_length=8,
        description='Keypad action: "AC", "+", "-", "*", "/", "=", "%", "+/-"'
    )
    digit: Optional[int] = Field(default=None, ge=0, le=9, description="Digit 0-9")

    @model_validator(mode="after")
    def require_input(self):
        if self.digit is None and not self.action:
            raise ValueError("either 'digit' or 'action' is required")
        return self


class StateResponse(BaseModel):
    """Accumulator state of a window"""
    current: float
    stored: float
    pending_operator: Optional[str]
    is_fresh_entry: bool
    expression: str

    @classmethod
    def from_state(cls, state: AccumulatorState) -> "StateResponse":
        return cls(**state.to_dict())


class HistoryRecordResponse(BaseModel):
    """Stored calculation"""
    id: int
    window_id: str
    expression: str
    result: float
    created_at: Optional[str]

    @classmethod
    def from_model(cls, record: CalculationHistory) -> "HistoryRecordResponse":
        return cls(**record.to_dict())


class HistoryEntryResponse(BaseModel):
    """Calculation completed by the last press"""
    expression: str
    result: float
    timestamp: datetime

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryEntryResponse":
        return cls(expression=entry.expression, result=entry.result, timestamp=entry.timestamp)


class WindowResponse(BaseModel):
    """Window state with recent history"""
    window_id: str
    display: str
    state: StateResponse
    history: List[HistoryRecordResponse]


class PressResponse(BaseModel):
    """Result of a key press"""
    window_id: str
    display: str
    state: StateResponse
    error: Optional[str] = None
    history_entry: Optional[HistoryEntryResponse] = None


class ClearHistoryResponse(BaseModel):
    window_id: str
    deleted: int


def _require_window(window_id: str):
    if not get_window_store().exists(window_id):
        logger.warning(f"Unknown calculator window requested: {window_id}")
        raise HTTPException(status_code=404, detail=f"Calculator window {window_id} not found")


def _window_response(service: CalculatorService, window_id: str) -> WindowResponse:
    snapshot = service.snapshot(window_id)
    return WindowResponse(
        window_id=snapshot.window_id,
        display=snapshot.display,
        state=StateResponse.from_state(snapshot.state),
        history=[HistoryRecordResponse.from_model(r) for r in snapshot.history],
    )


@router.post("/windows", response_model=WindowResponse, status_code=201)
def open_window(db: Session = Depends(get_db)):
    """Open a new calculator window"""
    service = CalculatorService(db)
    snapshot = service.open_window()
    return _window_response(service, snapshot.window_id)


@router.get("/windows/{window_id}", response_model=WindowResponse)
def get_window(window_id: WindowId, db: Session = Depends(get_db)):
    """Get current state and recent history of a window"""
    _require_window(window_id)
    return _window_response(CalculatorService(db), window_id)


@router.delete("/windows/{window_id}", status_code=204)
def close_window(window_id: WindowId, db: Session = Depends(get_db)):
    """Discard a window's in-progress state"""
    if not CalculatorService(db).close_window(window_id):
        raise HTTPException(status_code=404, detail=f"Calculator window {window_id} not found")
    return Response(status_code=204)


@router.post("/windows/{window_id}/press", response_model=PressResponse)
def press(window_id: WindowId, payload: PressRequest, db: Session = Depends(get_db)):
    """
    Apply one keypad press to a window

    Calculation errors (division by zero) are returned in `error` with the
    previous state kept, so the client can show them and let the user correct
    the operand.
    """
    _require_window(window_id)
    result = CalculatorService(db).press(window_id, action=payload.action, digit=payload.digit)
    return PressResponse(
        window_id=window_id,
        display=result.display,
        state=StateResponse.from_state(result.state),
        error=result.error,
        history_entry=HistoryEntryResponse.from_entry(result.history_entry) if result.history_entry else None,
    )


@router.get("/windows/{window_id}/history", response_model=List[HistoryRecordResponse])
def get_history(
    window_id: WindowId,
    limit: Optional[int] = Query(default=None, ge=1, le=100, description="Maximum number of records"),
    db: Session = Depends(get_db)
):
    """Recent calculations of a window, newest first"""
    records = HistoryService(db).list_recent(window_id, limit=limit)
    return [HistoryRecordResponse.from_model(r) for r in records]


@router.delete("/windows/{window_id}/history", response_model=ClearHistoryResponse)
def clear_history(window_id: WindowId, db: Session = Depends(get_db)):
    """Delete all calculations of a window"""
    deleted = CalculatorService(db).clear_history(window_id)
    return ClearHistoryResponse(window_id=window_id, deleted=deleted)
