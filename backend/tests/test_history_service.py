"""
Unit tests for HistoryService
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import Text

from webcalc.core.accumulator import HistoryEntry
from webcalc.models.calculation_history import CalculationHistory
from webcalc.services.history_service import HistoryService


@pytest.fixture
def history_service(db):
    """Fixture for HistoryService"""
    return HistoryService(db)


def _entry(window_id: str, expression: str, result: float, minutes_ago: int = 0) -> HistoryEntry:
    return HistoryEntry(
        expression=expression,
        result=result,
        window_id=window_id,
        timestamp=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


def test_record(history_service, db):
    """Test recording a calculation"""
    record = history_service.record(_entry("w1", "7 * 8", 56))

    assert record.id is not None
    assert record.window_id == "w1"
    assert record.expression == "7 * 8"
    assert record.result == 56
    assert db.query(CalculationHistory).count() == 1


def test_list_recent_newest_first(history_service):
    history_service.record(_entry("w1", "1 + 1", 2, minutes_ago=3))
    history_service.record(_entry("w1", "2 + 2", 4, minutes_ago=2))
    history_service.record(_entry("w1", "3 + 3", 6, minutes_ago=1))

    records = history_service.list_recent("w1")

    assert [r.expression for r in records] == ["3 + 3", "2 + 2", "1 + 1"]


def test_list_recent_is_capped(history_service):
    """Only the display window (10 by default) is returned"""
    for i in range(12):
        history_service.record(_entry("w1", f"{i} + 0", i, minutes_ago=12 - i))

    records = history_service.list_recent("w1")
    assert len(records) == 10
    assert records[0].expression == "11 + 0"

    assert len(history_service.list_recent("w1", limit=3)) == 3


def test_list_recent_scoped_to_window(history_service):
    history_service.record(_entry("w1", "1 + 1", 2))
    history_service.record(_entry("w2", "5 - 1", 4))

    assert [r.expression for r in history_service.list_recent("w2")] == ["5 - 1"]
    assert history_service.count() == 2
    assert history_service.count("w1") == 1


def test_clear_only_affects_one_window(history_service):
    history_service.record(_entry("w1", "1 + 1", 2))
    history_service.record(_entry("w1", "2 + 2", 4))
    history_service.record(_entry("w2", "5 - 1", 4))

    assert history_service.clear("w1") == 2
    assert history_service.list_recent("w1") == []
    assert history_service.count("w2") == 1


def test_to_dict(history_service):
    data = history_service.record(_entry("w1", "9 / 3", 3)).to_dict()
    assert data["expression"] == "9 / 3"
    assert data["result"] == 3
    assert data["window_id"] == "w1"
    assert isinstance(data["created_at"], str)


def test_expression_column_is_unbounded():
    """Chained expressions have no length cap, so the column must not have one either"""
    assert isinstance(CalculationHistory.__table__.c.expression.type, Text)


def test_record_long_chain(history_service):
    expression = " + ".join(["1"] * 300)
    record = history_service.record(_entry("w1", expression, 300))

    assert len(record.expression) > 512
    assert history_service.list_recent("w1")[0].expression == expression
