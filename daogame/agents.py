"""Starting roster generation.

Produces the eight hireable agents of a play-through. The roster is a pure
function of the seed: the same seed always yields the same agents, in the
same order, with the same ids.
"""
from __future__ import annotations

from typing import List, Tuple

from .rng import create_rng, round_half_up
from .types import Agent


ROLE_AFFINITIES: Tuple[str, ...] = (
    "Strategy Architect",
    "Frontend Builder",
    "Prompt Engineer",
    "QA Verifier",
    "Content Operator",
    "Deployment Wrangler",
    "Analytics Watcher",
    "Operations Relay",
)

STARTING_AGENT_COUNT = 8
MIN_AGENT_COST = 12


def agent_id_for(index: int) -> str:
    """Return the stable id of the agent generated at 0-based `index`."""
    return f"agent-{index + 1:02d}"


def generate_starting_agents(seed: int) -> List[Agent]:
    rng = create_rng(seed)
    agents: List[Agent] = []

    for i in range(STARTING_AGENT_COUNT):
        # Draw order is part of the contract; reordering changes every roster.
        creativity = rng.int(42, 95)
        reliability = rng.int(35, 96)
        speed = rng.int(40, 95)
        cost = max(
            MIN_AGENT_COST,
            round_half_up(8 + creativity * 0.16 + reliability * 0.14 + speed * 0.11 + rng.int(-3, 4)),
        )
        agents.append(
            Agent(
                id=agent_id_for(i),
                role_affinity=rng.pick(ROLE_AFFINITIES),
                creativity=creativity,
                reliability=reliability,
                speed=speed,
                cost=cost,
            )
        )

    return agents
