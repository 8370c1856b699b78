"""Initial schema for DAO the Game

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op  # type: ignore
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # game_snapshots table
    op.create_table(
        "game_snapshots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("storage_key", sa.String(length=64), nullable=False),
        sa.Column("schema_version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("state_json", sa.JSON(), nullable=True),
    )
    op.create_index("ix_game_snapshots_storage_key", "game_snapshots", ["storage_key"], unique=True)

    # run_records table
    op.create_table(
        "run_records",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("storage_key", sa.String(length=64), nullable=False),
        sa.Column("run_index", sa.Integer(), nullable=False),
        sa.Column("seed", sa.BigInteger(), nullable=False),
        sa.Column("quality_score", sa.Integer(), nullable=False),
        sa.Column("cost", sa.Integer(), nullable=False),
        sa.Column("passed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("cid", sa.String(length=64), nullable=False),
        sa.Column("events", sa.JSON(), nullable=True),
    )
    op.create_index("ix_run_records_storage_key", "run_records", ["storage_key"], unique=False)
    op.create_index("ix_run_records_run_index", "run_records", ["run_index"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_run_records_run_index", table_name="run_records")
    op.drop_index("ix_run_records_storage_key", table_name="run_records")
    op.drop_table("run_records")

    op.drop_index("ix_game_snapshots_storage_key", table_name="game_snapshots")
    op.drop_table("game_snapshots")
