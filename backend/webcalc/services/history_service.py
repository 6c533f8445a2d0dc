"""
History Service for completed calculations
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from webcalc.core.accumulator import HistoryEntry
from webcalc.core.config import get_settings
from webcalc.core.logging_config import LoggingConfig
from webcalc.core.metrics import calculator_history_records_total
from webcalc.models.calculation_history import CalculationHistory

logger = LoggingConfig.get_logger(__name__)


class HistoryService:
    """
    Append-only store of completed calculations, one stream per window.
    Reads are newest first and capped at the display window size.
    """

    def __init__(self, db: Session):
        self.db = db

    def record(self, entry: HistoryEntry) -> CalculationHistory:
        """
        Persist a completed calculation

        Args:
            entry: History entry emitted on Equals

        Returns:
            Created CalculationHistory row
        """
        try:
            record = CalculationHistory(
                window_id=entry.window_id,
                expression=entry.expression,
                result=entry.result,
                created_at=entry.timestamp,
            )
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
            calculator_history_records_total.inc()
            logger.debug(
                "Recorded calculation",
                extra={"window_id": entry.window_id, "expression": entry.expression}
            )
            return record
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error recording calculation for window {entry.window_id}: {e}", exc_info=True)
            raise

    def list_recent(self, window_id: str, limit: Optional[int] = None) -> List[CalculationHistory]:
        """Most recent calculations for a window, newest first"""
        if limit is None:
            limit = get_settings().history_display_limit
        return (
            self.db.query(CalculationHistory)
            .filter(CalculationHistory.window_id == window_id)
            .order_by(CalculationHistory.created_at.desc(), CalculationHistory.id.desc())
            .limit(limit)
            .all()
        )

    def count(self, window_id: Optional[str] = None) -> int:
        query = self.db.query(CalculationHistory)
        if window_id is not None:
            query = query.filter(CalculationHistory.window_id == window_id)
        return query.count()

    def clear(self, window_id: str) -> int:
        """
        Delete all calculations of a window

        Returns:
            Number of deleted rows
        """
        try:
            deleted = (
                self.db.query(CalculationHistory)
                .filter(CalculationHistory.window_id == window_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
            logger.info(f"Cleared {deleted} history records", extra={"window_id": window_id})
            return deleted
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error clearing history for window {window_id}: {e}", exc_info=True)
            raise
