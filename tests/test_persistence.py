from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.orm import sessionmaker

from daogame.game_state import AssignRole, RunProduction, initial_state, play_through, reduce
from daogame.levels import FINAL_SCENE_INDEX
from daogame.persistence import GAME_STATE_STORAGE_KEY, SCHEMA_VERSION, SnapshotStore, migrate_snapshot


def _make_sessionmaker(tmp_path):
    import daogame.models as models

    engine = sa.create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    models.Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def test_save_and_load_roundtrip(tmp_path):
    Session = _make_sessionmaker(tmp_path)
    store = SnapshotStore()
    state = play_through(initial_state())

    with Session() as s:
        store.save_state(s, state)
        s.commit()

    with Session() as s:
        loaded = store.load_state(s)

    assert loaded == state


def test_save_overwrites_single_snapshot_per_key(tmp_path):
    import daogame.models as m

    Session = _make_sessionmaker(tmp_path)
    store = SnapshotStore()
    first = initial_state()
    second = reduce(first, AssignRole("hat-01", "agent-03"))

    with Session() as s:
        store.save_state(s, first)
        s.commit()
        store.save_state(s, second)
        s.commit()

    with Session() as s:
        rows = s.query(m.GameSnapshot).all()
        assert len(rows) == 1
        assert rows[0].storage_key == GAME_STATE_STORAGE_KEY
        assert rows[0].schema_version == SCHEMA_VERSION
        assert store.load_state(s) == second


def test_load_missing_and_clear(tmp_path):
    Session = _make_sessionmaker(tmp_path)
    store = SnapshotStore(storage_key="other-key")

    with Session() as s:
        assert store.load_state(s) is None
        store.save_state(s, initial_state())
        s.commit()
        store.clear(s)
        s.commit()
        assert store.load_state(s) is None


def test_record_and_list_runs(tmp_path):
    Session = _make_sessionmaker(tmp_path)
    store = SnapshotStore()
    state = reduce(reduce(initial_state(), AssignRole("hat-01", "agent-01")), RunProduction())

    with Session() as s:
        store.record_run(s, 0, state.latest_run)
        s.commit()
        runs = store.list_runs(s)

    assert len(runs) == 1
    assert runs[0].cid == state.latest_run.cid
    assert runs[0].passed is False
    assert runs[0].events == list(state.latest_run.events)


def test_replace_runs_swaps_history_for_key(tmp_path):
    Session = _make_sessionmaker(tmp_path)
    store = SnapshotStore()
    other = SnapshotStore("other-key")
    first = reduce(reduce(initial_state(), AssignRole("hat-01", "agent-01")), RunProduction())
    second = reduce(first, RunProduction())

    with Session() as s:
        store.record_run(s, 1, first.latest_run)
        other.record_run(s, 0, first.latest_run)
        store.replace_runs(s, [(0, first.latest_run), (1, second.latest_run)])
        s.commit()
        runs = store.list_runs(s)
        untouched = other.list_runs(s)

    assert [r.run_index for r in runs] == [0, 1]
    assert [r.passed for r in runs] == [False, True]
    assert len(untouched) == 1


def test_migrate_snapshot_falls_back_for_garbage():
    assert migrate_snapshot(None) == initial_state()
    assert migrate_snapshot("not a dict") == initial_state()
    assert migrate_snapshot({"roles": "broken"}) == initial_state()


def test_migrate_snapshot_clamps_and_fills_defaults():
    migrated = migrate_snapshot({"story_scene_index": 99, "unlocked_role_count": 10, "treasury": 12})
    assert migrated.story_scene_index == FINAL_SCENE_INDEX
    assert migrated.unlocked_role_count == 4
    assert migrated.treasury == 12
    assert migrated.agents == initial_state().agents

    low = migrate_snapshot({"story_scene_index": -4, "unlocked_role_count": 0})
    assert low.story_scene_index == 0
    assert low.unlocked_role_count == 1

    typed_wrong = migrate_snapshot({"story_scene_index": "3", "unlocked_role_count": None})
    assert typed_wrong.story_scene_index == 0
    assert typed_wrong.unlocked_role_count == 1
