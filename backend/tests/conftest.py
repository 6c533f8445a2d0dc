"""
Pytest configuration and fixtures
"""
import os
import sys
import tempfile
from pathlib import Path

import pytest

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Test settings must be in place before webcalc reads them
_test_db_dir = tempfile.mkdtemp(prefix="webcalc-tests-")
os.environ["DATABASE_DSN"] = f"sqlite:///{Path(_test_db_dir) / 'webcalc-test.db'}"
os.environ["ENABLE_TRACING"] = "false"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from sqlalchemy.orm import Session

from webcalc.core.database import Base, get_engine, get_session_local
from webcalc.services.window_store import get_window_store


@pytest.fixture(scope="function")
def db() -> Session:
    """Create a database session for testing"""
    import webcalc.models  # noqa: F401 - register models with Base.metadata

    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = get_session_local()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(autouse=True)
def window_store():
    """Every test starts without open calculator windows"""
    store = get_window_store()
    store.reset()
    yield store
    store.reset()


@pytest.fixture(scope="function")
def client(db: Session):
    """Create test client with database dependency override"""
    from fastapi.testclient import TestClient

    from webcalc.core.database import get_db
    from webcalc.main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def keypad():
    """Feed space-separated keys ("7 * 8 =") into a CalculatorService, returning the last result"""
    def press_keys(service, window_id: str, keys: str):
        result = None
        for key in keys.split():
            if key.isdigit():
                for ch in key:
                    result = service.press(window_id, digit=int(ch))
            else:
                result = service.press(window_id, action=key)
        return result
    return press_keys
