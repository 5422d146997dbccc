import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from app.db import bootstrap


def _engine():
    return create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def test_runtime_schema_creates_missing_tables():
    engine = _engine()

    bootstrap.ensure_runtime_schema(engine)

    assert bootstrap.missing_schema_items(engine) == ([], {})


def test_missing_columns_are_reported():
    engine = _engine()
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE rooms (id VARCHAR(36) PRIMARY KEY, name VARCHAR(100))"))

    missing_tables, missing_columns = bootstrap.missing_schema_items(engine)

    assert "teachers" in missing_tables
    assert missing_columns == {"rooms": ["capacity", "types_allowed"]}


def test_runtime_schema_bootstrap_raises_on_validation_failure(monkeypatch):
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: None)

    with pytest.raises(RuntimeError, match="Runtime schema bootstrap failed"):
        bootstrap.ensure_runtime_schema(_engine())
