"""Run simulation: the scoring and event engine.

`simulate_run` turns a RunState into a RunResult. It is a pure function:
no I/O, no shared state, and a fresh RNG per call derived from the run's
own inputs, so identical states always produce identical results
(including the pseudo CID).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .rng import SeededRng, clamp, create_rng, hash_seed_parts, round_half_up
from .types import (
    Agent,
    CostBreakdown,
    RunDiagnostics,
    RunResult,
    RunState,
    ScoreBreakdown,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventTemplate:
    label: str
    quality_delta: int
    cost_delta: int


@dataclass(frozen=True)
class RolledEvent:
    label: str
    quality_delta: int
    cost_delta: int
    variance: int


EVENT_TABLE: Tuple[EventTemplate, ...] = (
    EventTemplate("Prompt drift in design handoff", quality_delta=-10, cost_delta=10),
    EventTemplate("Scope swell from late client asks", quality_delta=-6, cost_delta=14),
    EventTemplate("Clean execution window", quality_delta=5, cost_delta=0),
    EventTemplate("Reusable component breakthrough", quality_delta=9, cost_delta=-4),
    EventTemplate("Ops relay cache hit", quality_delta=6, cost_delta=-2),
)

BASE_OPERATIONAL_COST = 36
COST_PER_ROLE = 2
FULL_COVERAGE_BONUS = 14
MISSING_ROLE_PENALTY = 10
MAX_BUDGET_PENALTY = 35

CID_PREFIX = "bafy"
CID_ALPHABET = "abcdefghijklmnopqrstuvwxyz234567"
CID_BODY_LENGTH = 24


def _average(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def build_pseudo_cid(seed: int) -> str:
    """Return "bafy" followed by 24 characters drawn from CID_ALPHABET."""
    rng = create_rng(seed)
    chars = [CID_ALPHABET[int(rng.next() * len(CID_ALPHABET))] for _ in range(CID_BODY_LENGTH)]
    return CID_PREFIX + "".join(chars)


def get_assigned_agents(state: RunState) -> List[Agent]:
    """Resolve role assignments to agents, in role order.

    Unassigned roles and references to unknown agent ids are dropped.
    """
    by_id: Dict[str, Agent] = {agent.id: agent for agent in state.agents}
    return [
        by_id[role.assigned_agent_id]
        for role in state.roles
        if role.assigned_agent_id and role.assigned_agent_id in by_id
    ]


def roll_run_event(rng: SeededRng, reliability: float) -> RolledEvent:
    roll = rng.next()
    index = int(roll * len(EVENT_TABLE))
    template = EVENT_TABLE[index] if index < len(EVENT_TABLE) else EVENT_TABLE[0]
    variance = max(2, round_half_up((100 - reliability) / 10))
    jitter = rng.int(-variance, variance)

    quality_delta = template.quality_delta + jitter
    # Jitter can only add cost, and the event never refunds.
    cost_delta = max(0, template.cost_delta + max(0, jitter))

    sign = "+" if quality_delta >= 0 else ""
    return RolledEvent(
        label=f"{template.label} ({sign}{quality_delta} quality)",
        quality_delta=quality_delta,
        cost_delta=cost_delta,
        variance=variance,
    )


def simulate_run(state: RunState) -> RunResult:
    """Simulate one production run and score it.

    Cost is computed before the final score because an overdrawn treasury
    feeds a budget penalty back into the score.
    """
    assigned = get_assigned_agents(state)
    total_roles = len(state.roles)
    assigned_count = len(assigned)
    missing_roles = total_roles - assigned_count

    avg_creativity = _average([a.creativity for a in assigned])
    avg_reliability = _average([a.reliability for a in assigned])
    avg_speed = _average([a.speed for a in assigned])
    rounded_reliability = round_half_up(avg_reliability)

    run_seed = hash_seed_parts(state.seed, assigned_count, rounded_reliability)
    event = roll_run_event(create_rng(run_seed), avg_reliability)

    base_score = state.brief.base_score
    creativity_influence = round_half_up((avg_creativity - 50) * 0.55)
    speed_influence = round_half_up((avg_speed - 50) * 0.35)
    role_coverage_bonus = FULL_COVERAGE_BONUS if assigned_count == total_roles else -missing_roles * MISSING_ROLE_PENALTY
    reliability_penalty = round_half_up(max(0.0, 62 - avg_reliability) * 0.8 + missing_roles * 4)

    base_cost = BASE_OPERATIONAL_COST + total_roles * COST_PER_ROLE
    agent_cost = sum(a.cost for a in assigned)
    event_cost = event.cost_delta
    total_cost = base_cost + agent_cost + event_cost

    runway_after_run = state.treasury - total_cost
    budget_penalty = min(MAX_BUDGET_PENALTY, abs(runway_after_run)) if runway_after_run < 0 else 0

    total_score = round_half_up(
        base_score
        + creativity_influence
        + speed_influence
        + role_coverage_bonus
        + event.quality_delta
        - reliability_penalty
        - budget_penalty
    )
    quality_score = int(clamp(total_score, 0, 100))
    pass_threshold = state.brief.pass_threshold
    passed = quality_score >= pass_threshold and runway_after_run >= 0

    cid = build_pseudo_cid(
        hash_seed_parts(state.seed, quality_score, total_cost, rounded_reliability, event.quality_delta)
    )

    logger.debug(
        "run seed=%s roles=%s/%s score=%s cost=%s runway=%s passed=%s",
        state.seed,
        assigned_count,
        total_roles,
        quality_score,
        total_cost,
        runway_after_run,
        passed,
    )

    return RunResult(
        quality_score=quality_score,
        cost=total_cost,
        events=(event.label,),
        cid=cid,
        passed=passed,
        diagnostics=RunDiagnostics(
            seed=state.seed,
            variance=event.variance,
            pass_threshold=pass_threshold,
            runway_after_run=runway_after_run,
            assigned_role_count=assigned_count,
            total_role_count=total_roles,
            cost_breakdown=CostBreakdown(
                base=base_cost,
                agents=agent_cost,
                events=event_cost,
                total=total_cost,
            ),
            score_breakdown=ScoreBreakdown(
                base=base_score,
                creativity_influence=creativity_influence,
                speed_influence=speed_influence,
                reliability_penalty=reliability_penalty,
                role_coverage_bonus=role_coverage_bonus,
                event_modifier=event.quality_delta,
                budget_penalty=budget_penalty,
                total=quality_score,
            ),
        ),
    )
