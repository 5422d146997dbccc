"""create scheduling tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    sa.Enum("CM", "TD", "TP", name="activity_type").create(op.get_bind(), checkfirst=True)
    # Shared by subjects and class_sessions, so the type is created once above.
    activity_type = postgresql.ENUM("CM", "TD", "TP", name="activity_type", create_type=False)

    op.create_table(
        "teachers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("availability", sa.JSON(), nullable=False),
        sa.Column("preferences", sa.JSON(), nullable=False),
        sa.Column("max_load_per_week", sa.Integer(), nullable=False, server_default="20"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_teachers_email", "teachers", ["email"], unique=True)

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("types_allowed", sa.JSON(), nullable=False),
        sa.Column("equipment", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_rooms_name", "rooms", ["name"], unique=True)

    op.create_table(
        "student_groups",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("specialty", sa.String(length=200), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_student_groups_name", "student_groups", ["name"], unique=True)

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("weekly_hours", sa.Float(), nullable=False),
        sa.Column("type", activity_type, nullable=False),
        sa.Column("slots_per_session", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("weekly_slots", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("teacher_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_subjects_code", "subjects", ["code"], unique=True)
    op.create_index("ix_subjects_teacher_id", "subjects", ["teacher_id"], unique=False)

    op.create_table(
        "subject_groups",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        sa.Column("group_id", sa.String(length=36), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("subject_id", "group_id", name="uq_subject_groups_subject_group"),
    )
    op.create_index("ix_subject_groups_subject_id", "subject_groups", ["subject_id"], unique=False)
    op.create_index("ix_subject_groups_group_id", "subject_groups", ["group_id"], unique=False)

    op.create_table(
        "class_sessions",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("week_ref", sa.String(length=8), nullable=True),
        sa.Column("subject_id", sa.String(length=36), nullable=False),
        sa.Column("teacher_id", sa.String(length=36), nullable=False),
        sa.Column("room_id", sa.String(length=36), nullable=False),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("start_slot_index", sa.Integer(), nullable=False),
        sa.Column("slot_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("type", activity_type, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_class_sessions_week_ref", "class_sessions", ["week_ref"], unique=False)
    op.create_index("ix_class_sessions_subject_id", "class_sessions", ["subject_id"], unique=False)
    op.create_index("ix_class_sessions_teacher_id", "class_sessions", ["teacher_id"], unique=False)
    op.create_index("ix_class_sessions_room_id", "class_sessions", ["room_id"], unique=False)
    op.create_index("ix_class_sessions_day", "class_sessions", ["day"], unique=False)

    op.create_table(
        "class_session_groups",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("session_id", sa.String(length=36), nullable=False),
        sa.Column("group_id", sa.String(length=36), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("session_id", "group_id", name="uq_class_session_groups_session_group"),
    )
    op.create_index("ix_class_session_groups_session_id", "class_session_groups", ["session_id"], unique=False)
    op.create_index("ix_class_session_groups_group_id", "class_session_groups", ["group_id"], unique=False)

    op.create_table(
        "timetables",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("group_id", sa.String(length=36), nullable=False),
        sa.Column("week_ref", sa.String(length=8), nullable=False),
        sa.Column("session_ids", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.UniqueConstraint("group_id", "week_ref", name="uq_timetables_group_week"),
    )
    op.create_index("ix_timetables_group_id", "timetables", ["group_id"], unique=False)
    op.create_index("ix_timetables_week_ref", "timetables", ["week_ref"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_timetables_week_ref", table_name="timetables")
    op.drop_index("ix_timetables_group_id", table_name="timetables")
    op.drop_table("timetables")
    op.drop_index("ix_class_session_groups_group_id", table_name="class_session_groups")
    op.drop_index("ix_class_session_groups_session_id", table_name="class_session_groups")
    op.drop_table("class_session_groups")
    op.drop_index("ix_class_sessions_day", table_name="class_sessions")
    op.drop_index("ix_class_sessions_room_id", table_name="class_sessions")
    op.drop_index("ix_class_sessions_teacher_id", table_name="class_sessions")
    op.drop_index("ix_class_sessions_subject_id", table_name="class_sessions")
    op.drop_index("ix_class_sessions_week_ref", table_name="class_sessions")
    op.drop_table("class_sessions")
    op.drop_index("ix_subject_groups_group_id", table_name="subject_groups")
    op.drop_index("ix_subject_groups_subject_id", table_name="subject_groups")
    op.drop_table("subject_groups")
    op.drop_index("ix_subjects_teacher_id", table_name="subjects")
    op.drop_index("ix_subjects_code", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("ix_student_groups_name", table_name="student_groups")
    op.drop_table("student_groups")
    op.drop_index("ix_rooms_name", table_name="rooms")
    op.drop_table("rooms")
    op.drop_index("ix_teachers_email", table_name="teachers")
    op.drop_table("teachers")
    sa.Enum(name="activity_type").drop(op.get_bind(), checkfirst=True)
