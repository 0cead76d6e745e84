"""create calendar configs and timetable entries

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "calendar_configs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("num_weekdays", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("num_daily_slots", sa.Integer(), nullable=False, server_default="6"),
        sa.Column("lab_slot_length", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "timetable_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("division_id", sa.Integer(), sa.ForeignKey("divisions.id"), nullable=False),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("slot", sa.Integer(), nullable=False),
        sa.Column("subject_id", sa.Integer(), sa.ForeignKey("subjects.id"), nullable=False),
        sa.Column("faculty_id", sa.Integer(), sa.ForeignKey("faculty.id"), nullable=False),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("rooms.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("division_id", "day", "slot", name="uq_timetable_entries_division_slot"),
        sa.UniqueConstraint("faculty_id", "day", "slot", name="uq_timetable_entries_faculty_slot"),
        sa.UniqueConstraint("room_id", "day", "slot", name="uq_timetable_entries_room_slot"),
    )
    op.create_index("ix_timetable_entries_division_id", "timetable_entries", ["division_id"])
    op.create_index("ix_timetable_entries_faculty_id", "timetable_entries", ["faculty_id"])


def downgrade() -> None:
    op.drop_index("ix_timetable_entries_faculty_id", table_name="timetable_entries")
    op.drop_index("ix_timetable_entries_division_id", table_name="timetable_entries")
    op.drop_table("timetable_entries")
    op.drop_table("calendar_configs")
