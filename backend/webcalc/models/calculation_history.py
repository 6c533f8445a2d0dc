"""
Calculation history model: one row per completed calculation
"""
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Column, DateTime, Float, Index, Integer, String, Text

from webcalc.core.database import Base

# Longest window id accepted at the HTTP boundary
WINDOW_ID_MAX_LENGTH = 64


class CalculationHistory(Base):
    """Completed calculation stored in database, scoped to a calculator window"""
    __tablename__ = "calculation_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    window_id = Column(String(WINDOW_ID_MAX_LENGTH), nullable=False, index=True)

    expression = Column(Text, nullable=False)  # e.g. "7 * 8"
    result = Column(Float, nullable=False)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False, index=True)

    __table_args__ = (
        Index('idx_calculation_history_window_created', 'window_id', 'created_at'),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert record to dictionary"""
        return {
            "id": self.id,
            "window_id": self.window_id,
            "expression": self.expression,
            "result": self.result,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<CalculationHistory(id={self.id}, window_id={self.window_id}, expression={self.expression!r}, result={self.result})>"
