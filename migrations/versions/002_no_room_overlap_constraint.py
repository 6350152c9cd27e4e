"""DB-level exclusion constraint against overlapping room reservations.

The application overlap query runs before the insert, but two concurrent
transactions can both pass it. This constraint makes the loser's insert fail
with ExclusionViolation, which the booking service treats as a write conflict
and retries.

Revision ID: 002_no_room_overlap_constraint
Revises: 001_initial_schema
Create Date: 2026-10-19
"""

from __future__ import annotations

from pathlib import Path

from alembic import op

revision = "002_no_room_overlap_constraint"
down_revision = "001_initial_schema"
branch_labels = None
depends_on = None

_SQL_FILE = Path(__file__).resolve().parent.parent / "sql" / "002_no_room_overlap_constraint.sql"


def upgrade() -> None:
    op.execute(_SQL_FILE.read_text(encoding="utf-8"))


def downgrade() -> None:
    op.execute("ALTER TABLE reservations DROP CONSTRAINT IF EXISTS no_room_overlap")
    # btree_gist is kept: other indexes may depend on it.
