from __future__ import annotations

import json

from typer.testing import CliRunner

from scripts.run_game import app as cli_app


def test_agents_command_lists_roster(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    runner = CliRunner()
    res = runner.invoke(cli_app, ["agents", "--seed", "33"])
    assert res.exit_code == 0, res.output
    assert "seed=33" in res.output
    assert "agent-01" in res.output and "agent-08" in res.output


def test_simulate_command_json_is_deterministic(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    runner = CliRunner()
    first = runner.invoke(cli_app, ["simulate", "--seed", "777", "--treasury", "420", "--json"])
    second = runner.invoke(cli_app, ["simulate", "--seed", "777", "--treasury", "420", "--json"])
    assert first.exit_code == 0, first.output
    assert first.output == second.output

    data = json.loads(first.output)
    assert data["cid"].startswith("bafy")
    assert data["diagnostics"]["total_role_count"] == 4
    assert data["diagnostics"]["cost_breakdown"]["total"] == data["cost"]


def test_simulate_command_human_output(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    runner = CliRunner()
    res = runner.invoke(cli_app, ["simulate", "--seed", "5", "--roles", "2", "--treasury", "20"])
    assert res.exit_code == 0, res.output
    assert "FAILED" in res.output
    assert "roles staffed: 2/2" in res.output
    assert "Artifacts:" in res.output


def test_play_then_view_runs(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.delenv("PERSIST_TO_DB", raising=False)
    log_path = tmp_path / "runs.jsonl"
    runner = CliRunner()

    res = runner.invoke(cli_app, ["play", "--run-log", str(log_path)])
    assert res.exit_code == 0, res.output
    assert "FAILED" in res.output and "PASSED" in res.output
    assert "Shipped:" in res.output

    lines = [ln for ln in log_path.read_text(encoding="utf-8").splitlines() if ln.strip()]
    assert len(lines) == 2

    res = runner.invoke(cli_app, ["view-runs", "--run-log", str(log_path)])
    assert res.exit_code == 0, res.output
    assert "Runs: 2" in res.output
    assert "passed: 1" in res.output


def test_view_runs_with_missing_log(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    runner = CliRunner()
    res = runner.invoke(cli_app, ["view-runs", "--run-log", str(tmp_path / "nope.jsonl")])
    assert res.exit_code == 0
    assert "No run entries found" in res.output


def test_play_persist_writes_snapshot_and_every_run(tmp_path, monkeypatch):
    import daogame.db  # noqa: F401  (imported before DATABASE_URL is set)
    import sqlalchemy as sa
    from daogame.db import session_scope
    from daogame.persistence import SnapshotStore

    db_url = f"sqlite:///{tmp_path / 'play.db'}"
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("DATABASE_URL", db_url)
    monkeypatch.delenv("PERSIST_TO_DB", raising=False)
    runner = CliRunner()

    for _ in range(2):
        res = runner.invoke(cli_app, ["play", "--persist", "--run-log", str(tmp_path / "runs.jsonl")])
        assert res.exit_code == 0, res.output
        assert "Snapshot saved" in res.output

    store = SnapshotStore()
    with session_scope(sa.create_engine(db_url)) as session:
        loaded = store.load_state(session)
        records = store.list_runs(session)
        assert loaded is not None and loaded.run_count == 2
        assert [r.run_index for r in records] == [0, 1]
        assert [r.passed for r in records] == [False, True]


def test_play_run_log_records_scene(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.delenv("PERSIST_TO_DB", raising=False)
    log_path = tmp_path / "runs.jsonl"
    res = CliRunner().invoke(cli_app, ["play", "--run-log", str(log_path)])
    assert res.exit_code == 0, res.output

    rows = [json.loads(ln) for ln in log_path.read_text(encoding="utf-8").splitlines() if ln.strip()]
    assert [row["extra"]["scene"] for row in rows] == ["machine-first", "machine-second"]
    assert rows[0]["extra"]["scene_title"].startswith("Autonomous Machine")
