import os
import tempfile
from pathlib import Path

# The app engine is built at import time, so point it at SQLite before importing app modules.
TEST_DATABASE = Path(tempfile.gettempdir()) / f"weekgrid-test-{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite+pysqlite:///{TEST_DATABASE}"

import pytest
from fastapi.testclient import TestClient  # calls the FastAPI routes in-process, no real server needed
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.db.base import Base
from app.db.session import engine as app_engine
from app.main import app
from app.services.generation_lease import clear_generation_lease


def _memory_engine():
    return create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture(scope="session", autouse=True)
def _remove_test_database():
    yield
    app_engine.dispose()
    TEST_DATABASE.unlink(missing_ok=True)


@pytest.fixture()
def client():
    clear_generation_lease()
    engine = _memory_engine()
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    clear_generation_lease()
    engine.dispose()


@pytest.fixture()
def db_session():
    clear_generation_lease()
    engine = _memory_engine()
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()
        clear_generation_lease()
