"""Snapshot storage for play-throughs.

Provides helpers to save, load and migrate a GameState, and to keep the
history of production runs for a storage key. Callers own the Session; see
`daogame.db.session_scope`.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from .game_state import FIRST_CYCLE_ROLE_COUNT, GameState, initial_state
from .levels import clamp_scene_index
from .models import GameSnapshot, RunRecord
from .types import RunResult

logger = logging.getLogger(__name__)

GAME_STATE_STORAGE_KEY = "dao-the-game:state:v2"
SCHEMA_VERSION = 2


def migrate_snapshot(payload: Any) -> GameState:
    """Turn a stored payload into a GameState.

    The payload is merged over a fresh initial state, so fields missing
    from older snapshots take their defaults. Scene index and unlocked
    role count are clamped into range. Anything unreadable starts fresh.
    """
    initial = initial_state()
    if not isinstance(payload, dict):
        return initial

    merged = {**initial.to_dict(), **payload}
    scene_index = payload.get("story_scene_index")
    merged["story_scene_index"] = (
        clamp_scene_index(scene_index) if isinstance(scene_index, int) else initial.story_scene_index
    )
    unlocked = payload.get("unlocked_role_count")
    merged["unlocked_role_count"] = (
        max(FIRST_CYCLE_ROLE_COUNT, min(unlocked, len(initial.roles)))
        if isinstance(unlocked, int)
        else initial.unlocked_role_count
    )
    try:
        return GameState.from_dict(merged)
    except (ValueError, TypeError, AttributeError) as exc:
        logger.warning("discarding unreadable snapshot: %s", exc)
        return initial


class SnapshotStore:
    """Simple helper to manage GameSnapshot and RunRecord rows."""

    def __init__(self, storage_key: str = GAME_STATE_STORAGE_KEY) -> None:
        self.storage_key = storage_key

    def save_state(self, session: Session, state: GameState) -> GameSnapshot:
        row = session.scalars(select(GameSnapshot).where(GameSnapshot.storage_key == self.storage_key)).first()
        if row is None:
            row = GameSnapshot(storage_key=self.storage_key)
            session.add(row)
        row.schema_version = SCHEMA_VERSION
        row.state_json = state.to_dict()
        return row

    def load_state(self, session: Session) -> Optional[GameState]:
        """Return the stored play-through, or None when nothing is stored."""
        row = session.scalars(select(GameSnapshot).where(GameSnapshot.storage_key == self.storage_key)).first()
        if row is None:
            return None
        if row.schema_version != SCHEMA_VERSION:
            logger.info("migrating snapshot %s from schema v%s", self.storage_key, row.schema_version)
        return migrate_snapshot(row.state_json)

    def clear(self, session: Session) -> None:
        for row in session.scalars(select(GameSnapshot).where(GameSnapshot.storage_key == self.storage_key)).all():
            session.delete(row)

    def clear_runs(self, session: Session) -> None:
        for row in session.scalars(select(RunRecord).where(RunRecord.storage_key == self.storage_key)).all():
            session.delete(row)

    def replace_runs(self, session: Session, runs: Iterable[Tuple[int, RunResult]]) -> List[RunRecord]:
        """Swap the stored history for `runs`, given as (run_index, result) pairs."""
        self.clear_runs(session)
        session.flush()
        return [self.record_run(session, run_index, result) for run_index, result in runs]

    def record_run(self, session: Session, run_index: int, result: RunResult) -> RunRecord:
        rec = RunRecord(
            storage_key=self.storage_key,
            run_index=run_index,
            seed=result.diagnostics.seed,
            quality_score=result.quality_score,
            cost=result.cost,
            passed=result.passed,
            cid=result.cid,
            events=list(result.events),
        )
        session.add(rec)
        return rec

    def list_runs(self, session: Session, limit: int = 20) -> List[RunRecord]:
        stmt = (
            select(RunRecord)
            .where(RunRecord.storage_key == self.storage_key)
            .order_by(RunRecord.run_index.asc())
            .limit(limit)
        )
        return list(session.scalars(stmt).all())
