"""CLI entrypoint for DAO the Game.

Usage (uv):
  uv run python -m scripts.run_game play

Or via installed script:
  dao-game simulate --seed 777 --roles 4
"""
from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Tuple

import typer

from daogame.agents import generate_starting_agents
from daogame.artifacts import generate_artifacts
from daogame.config import get_run_log_path, get_settings
from daogame.game_state import GameState, RunProduction, initial_state, play_through
from daogame.levels import TUTORIAL_BRIEF, TUTORIAL_ROLES, get_scene
from daogame.logging_utils import JsonlRunLogger, configure_logging, log_run, read_run_log_entries
from daogame.reporting import summarize_runs
from daogame.simulation import simulate_run
from daogame.types import RunResult, RunState

app = typer.Typer(add_completion=False, help="Run the DAO the Game simulation engine")


@app.callback()
def _root() -> None:
    configure_logging(get_settings().log_level)


@app.command()
def agents(
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Roster seed (defaults to DAO_SEED)"),
) -> None:
    """Print the starting roster for a seed."""
    effective_seed = seed if seed is not None else get_settings().seed
    typer.echo(f"Starting roster (seed={effective_seed})")
    for a in generate_starting_agents(effective_seed):
        typer.echo(
            f"  {a.id}  {a.role_affinity:<20} creativity={a.creativity:>2} reliability={a.reliability:>2} "
            f"speed={a.speed:>2} cost={a.cost}"
        )


@app.command()
def simulate(
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Run seed (defaults to DAO_SEED)"),
    treasury: Optional[int] = typer.Option(None, "--treasury", "-t", help="Treasury before the run"),
    roles: int = typer.Option(len(TUTORIAL_ROLES), "--roles", "-r", min=0, max=len(TUTORIAL_ROLES), help="Roles to staff"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw RunResult as JSON"),
) -> None:
    """Simulate a single run with the first N tutorial roles fully staffed.

    No tutorial overrides are applied: this is the engine's raw outcome.
    """
    settings = get_settings()
    effective_seed = seed if seed is not None else settings.seed
    roster = generate_starting_agents(effective_seed)
    staffed = tuple(
        replace(role, assigned_agent_id=agent.id)
        for role, agent in zip(TUTORIAL_ROLES[:roles], roster)
    )
    state = RunState(
        seed=effective_seed,
        treasury=treasury if treasury is not None else settings.treasury,
        brief=TUTORIAL_BRIEF,
        roles=staffed,
        agents=tuple(roster),
    )
    result = simulate_run(state)
    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return
    _print_run(result)
    artifacts = generate_artifacts(result, TUTORIAL_BRIEF)
    typer.echo(f"Artifacts: {artifacts.site_title} -> {artifacts.public_url} ({artifacts.ens_name})")


@app.command()
def play(
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Play-through seed (defaults to DAO_SEED)"),
    treasury: Optional[int] = typer.Option(None, "--treasury", "-t", help="Starting treasury"),
    run_log_path: Optional[Path] = typer.Option(None, "--run-log", help="Where to append the JSONL run log"),
    persist: bool = typer.Option(False, "--persist", help="Save the final snapshot and run history to the DB (or set PERSIST_TO_DB)"),
) -> None:
    """Play the tutorial story end to end and print every production run."""
    settings = get_settings()
    state = initial_state(
        seed=seed if seed is not None else settings.seed,
        treasury=treasury if treasury is not None else settings.treasury,
    )
    run_logger = JsonlRunLogger(run_log_path or get_run_log_path())
    runs: List[Tuple[int, RunResult]] = []

    def _on_transition(before: GameState, action: object, after: GameState) -> None:
        if isinstance(action, RunProduction) and after.run_count > before.run_count and after.latest_run:
            scene = get_scene(before.story_scene_index)
            typer.echo(f"[{scene.title} · {scene.subtitle}] run {after.run_count}")
            _print_run(after.latest_run)
            typer.echo(f"Treasury: {before.treasury} -> {after.treasury}")
            typer.echo("")
            runs.append((before.run_count, after.latest_run))
            log_run(
                run_logger,
                run_index=before.run_count,
                seed=before.seed,
                treasury_before=before.treasury,
                result=after.latest_run,
                artifacts=after.latest_artifacts,
                extra={"scene": scene.scene.value, "scene_title": f"{scene.title} · {scene.subtitle}"},
            )

    final = play_through(state, on_transition=_on_transition)

    if final.latest_artifacts:
        typer.echo(f"Shipped: {final.latest_artifacts.site_title}")
        typer.echo(f"  {final.latest_artifacts.public_url}  {final.latest_artifacts.ens_name}")
        for note in final.latest_artifacts.notes:
            typer.echo(f"  - {note}")

    if persist or settings.persist_to_db:
        from daogame.db import init_db, session_scope
        from daogame.persistence import SnapshotStore

        engine = init_db()
        store = SnapshotStore()
        with session_scope(engine) as session:
            store.save_state(session, final)
            store.replace_runs(session, runs)
        typer.echo(f"Snapshot saved under {store.storage_key} ({len(runs)} runs)")


@app.command()
def view_runs(
    run_log_path: Path = typer.Option(Path("logs/dao_runs.jsonl"), "--run-log", help="Path to JSONL run log"),
) -> None:
    """Summarize a play-through from its JSONL run log."""
    entries = read_run_log_entries(run_log_path)
    if not entries:
        typer.echo(f"No run entries found at {run_log_path}")
        raise typer.Exit(code=0)

    summary = summarize_runs(entries)
    typer.echo("PLAY-THROUGH SUMMARY")
    typer.echo("=" * 30)
    typer.echo(f"Runs: {summary.num_runs}  passed: {summary.num_passed} ({summary.pass_rate:.0%})")
    typer.echo(f"Total spend: {summary.total_spend}")
    typer.echo(f"Score trend: {summary.score_trend}")
    typer.echo(f"Final treasury: {summary.final_treasury}")
    typer.echo(f"Latest CID: {summary.latest_cid}")
    if summary.final_treasury is not None and summary.final_treasury < 0:
        typer.echo("⚠ Treasury is overdrawn.")


def _print_run(result: RunResult) -> None:
    d = result.diagnostics
    verdict = "PASSED" if result.passed else "FAILED"
    typer.echo(f"{verdict}  score={result.quality_score}/{d.pass_threshold}  cost={result.cost}  cid={result.cid}")
    typer.echo(f"  roles staffed: {d.assigned_role_count}/{d.total_role_count}  runway after run: {d.runway_after_run}")
    for event in result.events:
        typer.echo(f"  * {event}")


if __name__ == "__main__":
    app()
