from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

import app.models  # noqa: F401
from app.db.base import Base

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "teachers": {"id", "email", "availability", "preferences"},
    "rooms": {"id", "name", "capacity", "types_allowed"},
    "student_groups": {"id", "name", "size"},
    "subjects": {"id", "code", "weekly_hours", "slots_per_session", "teacher_id"},
    "subject_groups": {"subject_id", "group_id"},
    "class_sessions": {"id", "week_ref", "day", "start_slot_index", "slot_count"},
    "class_session_groups": {"session_id", "group_id"},
    "timetables": {"id", "group_id", "week_ref", "session_ids"},
}


def missing_schema_items(engine: Engine) -> tuple[list[str], dict[str, list[str]]]:
    with engine.connect() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        missing_tables = sorted(name for name in REQUIRED_COLUMNS if name not in table_names)
        missing_columns: dict[str, list[str]] = {}
        for table_name, required in REQUIRED_COLUMNS.items():
            if table_name not in table_names:
                continue
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            missing = sorted(required - existing)
            if missing:
                missing_columns[table_name] = missing
    return missing_tables, missing_columns


def ensure_runtime_schema(engine: Engine) -> None:
    try:
        # Create missing tables; column changes are left to Alembic migrations.
        Base.metadata.create_all(bind=engine)
        missing_tables, missing_columns = missing_schema_items(engine)
        if missing_tables:
            raise RuntimeError(f"Missing required tables: {', '.join(missing_tables)}")
        if missing_columns:
            flattened = [f"{table}.{column}" for table, columns in missing_columns.items() for column in columns]
            raise RuntimeError(f"Missing required columns: {', '.join(flattened)}")
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema bootstrap failed")
        raise RuntimeError("Runtime schema bootstrap failed") from exc
