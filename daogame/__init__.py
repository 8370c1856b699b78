"""DAO the Game package.

This package contains the deterministic run-simulation core (seeded RNG,
agent generation, run scoring, artifacts, tutorial overrides) and the
caller-side play-through state machine and storage helpers.
"""

from .agents import generate_starting_agents
from .artifacts import generate_artifacts
from .rng import EmptyCollectionError, InvalidRangeError, create_rng, hash_seed_parts
from .simulation import simulate_run
from .types import Agent, ArtifactBundle, Brief, HatRole, RunResult, RunState  # re-export core types

__all__ = [
    "config",
    "rng",
    "agents",
    "simulation",
    "artifacts",
    "narrative",
    "levels",
    "game_state",
    "db",
    "models",
    "persistence",
    "logging_utils",
    "reporting",
    # core re-exports
    "create_rng",
    "hash_seed_parts",
    "generate_starting_agents",
    "simulate_run",
    "generate_artifacts",
    "InvalidRangeError",
    "EmptyCollectionError",
    "Agent",
    "ArtifactBundle",
    "Brief",
    "HatRole",
    "RunResult",
    "RunState",
]
