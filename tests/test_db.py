from __future__ import annotations

import pytest
import sqlalchemy as sa

from daogame.db import get_engine, init_db, session_scope
from daogame.models import GameSnapshot


def test_get_engine_reads_database_url_at_call_time(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'late.db'}")
    engine = get_engine()
    assert str(engine.url).endswith("late.db")


def test_session_scope_uses_the_engine_it_is_given(tmp_path):
    engine = init_db(sa.create_engine(f"sqlite:///{tmp_path / 'scope.db'}"))

    with session_scope(engine) as session:
        session.add(GameSnapshot(storage_key="k", schema_version=2, state_json={}))

    with session_scope(engine) as session:
        rows = session.scalars(sa.select(GameSnapshot)).all()
        assert [r.storage_key for r in rows] == ["k"]


def test_session_scope_rolls_back_on_error(tmp_path):
    engine = init_db(sa.create_engine(f"sqlite:///{tmp_path / 'rollback.db'}"))

    with pytest.raises(RuntimeError):
        with session_scope(engine) as session:
            session.add(GameSnapshot(storage_key="k", schema_version=2, state_json={}))
            session.flush()
            raise RuntimeError("boom")

    with session_scope(engine) as session:
        assert session.scalars(sa.select(GameSnapshot)).all() == []
