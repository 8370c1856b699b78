"""ORM models for DAO the Game.

Defines GameSnapshot (one persisted play-through per storage key) and
RunRecord (an append-only history of production runs).
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy import JSON, BigInteger, Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


class GameSnapshot(Base):
    __tablename__ = "game_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    storage_key: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    state_json: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)


class RunRecord(Base):
    __tablename__ = "run_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    storage_key: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    run_index: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    seed: Mapped[int] = mapped_column(BigInteger, nullable=False)
    quality_score: Mapped[int] = mapped_column(Integer, nullable=False)
    cost: Mapped[int] = mapped_column(Integer, nullable=False)
    passed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cid: Mapped[str] = mapped_column(String(64), nullable=False)
    events: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
