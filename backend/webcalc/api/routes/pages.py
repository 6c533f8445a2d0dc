"""
Page routes for web interface
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from webcalc.core.database import get_db
from webcalc.core.logging_config import LoggingConfig
from webcalc.core.templates import render_template
from webcalc.models.calculation_history import WINDOW_ID_MAX_LENGTH
from webcalc.services.calculator_service import CalculatorService

router = APIRouter(tags=["pages"])
logger = LoggingConfig.get_logger(__name__)


def _window_url(request: Request, window_id: str) -> str:
    return str(request.url_for("calculator_page").include_query_params(window_id=window_id))


def _render_calculator(request: Request, service: CalculatorService, window_id: str,
                       error: Optional[str] = None):
    snapshot = service.snapshot(window_id)
    return render_template(
        "calculator.html",
        {
            "window_id": window_id,
            "display": error or snapshot.display,
            "error": error,
            "state": snapshot.state,
            "history": snapshot.history,
        },
        request,
    )


@router.get("/", include_in_schema=False)
async def index(request: Request):
    """Main page - the calculator"""
    return RedirectResponse(url=str(request.url_for("calculator_page")), status_code=307)


@router.get("/calculator", response_class=HTMLResponse, name="calculator_page")
def calculator_page(
    request: Request,
    window_id: Optional[str] = Query(default=None, max_length=WINDOW_ID_MAX_LENGTH),
    db: Session = Depends(get_db)
):
    """Calculator window; without a window id a new window is opened"""
    if not window_id:
        # Put the id in the URL so refreshing keeps the same window
        return RedirectResponse(url=_window_url(request, str(uuid.uuid4())), status_code=307)

    return _render_calculator(request, CalculatorService(db), window_id)


@router.post("/calculator/press", response_class=HTMLResponse, name="calculator_press")
def press(
    request: Request,
    window_id: str = Form(..., max_length=WINDOW_ID_MAX_LENGTH),
    action: Optional[str] = Form(default=None),
    digit: Optional[int] = Form(default=None, ge=0, le=9),
    db: Session = Depends(get_db)
):
    """Keypad form post"""
    service = CalculatorService(db)
    result = service.press(window_id, action=action, digit=digit)
    if result.error:
        return _render_calculator(request, service, window_id, error=result.error)
    return RedirectResponse(url=_window_url(request, window_id), status_code=303)


@router.get("/calculator/new", include_in_schema=False, name="calculator_new_window")
async def new_window(request: Request):
    """Open another calculator window"""
    return RedirectResponse(url=str(request.url_for("calculator_page")), status_code=307)


@router.post("/calculator/clear-history", name="calculator_clear_history")
def clear_history(
    request: Request,
    window_id: str = Form(..., max_length=WINDOW_ID_MAX_LENGTH),
    db: Session = Depends(get_db)
):
    """Clear the history panel of a window"""
    CalculatorService(db).clear_history(window_id)
    return RedirectResponse(url=_window_url(request, window_id), status_code=303)
