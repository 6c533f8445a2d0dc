"""
SQLAlchemy models
"""
from webcalc.core.database import Base
# Import all models here so Alembic can detect them
from webcalc.models.calculation_history import CalculationHistory  # noqa: F401
