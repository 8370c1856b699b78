from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


# --- Agent -------------------------------------------------------------------


@dataclass(frozen=True)
class Agent:
    """An autonomous worker available for hire.

    Created once per seed by the agent generator and never mutated.
    All four attributes are integers; cost is derived from the other three.
    """

    id: str  # "agent-01" .. "agent-08"
    role_affinity: str  # descriptive label, e.g. "QA Verifier"
    creativity: int
    reliability: int
    speed: int
    cost: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role_affinity": self.role_affinity,
            "creativity": int(self.creativity),
            "reliability": int(self.reliability),
            "speed": int(self.speed),
            "cost": int(self.cost),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Agent":
        return cls(
            id=str(data.get("id", "")),
            role_affinity=str(data.get("role_affinity", "")),
            creativity=int(data.get("creativity", 0)),
            reliability=int(data.get("reliability", 0)),
            speed=int(data.get("speed", 0)),
            cost=int(data.get("cost", 0)),
        )


# --- HatRole -----------------------------------------------------------------


@dataclass(frozen=True)
class HatRole:
    """A role ("hat") in the organization tree.

    `assigned_agent_id` is a reference into the agent roster, or None.
    Callers replace roles rather than mutate them; at most one role may
    reference a given agent id at any time.
    """

    id: str
    name: str
    assigned_agent_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "assigned_agent_id": self.assigned_agent_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HatRole":
        assigned = data.get("assigned_agent_id")
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            assigned_agent_id=str(assigned) if assigned else None,
        )


# --- Brief -------------------------------------------------------------------


@dataclass(frozen=True)
class Brief:
    """Static client contract supplied wholesale to each simulation."""

    id: str
    client_name: str
    mission: str
    requirements: Tuple[str, ...] = ()
    base_score: int = 0
    pass_threshold: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "client_name": self.client_name,
            "mission": self.mission,
            "requirements": list(self.requirements),
            "base_score": int(self.base_score),
            "pass_threshold": int(self.pass_threshold),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Brief":
        return cls(
            id=str(data.get("id", "")),
            client_name=str(data.get("client_name", "")),
            mission=str(data.get("mission", "")),
            requirements=tuple(str(r) for r in data.get("requirements", [])),
            base_score=int(data.get("base_score", 0)),
            pass_threshold=int(data.get("pass_threshold", 0)),
        )


# --- Breakdowns + diagnostics ------------------------------------------------


@dataclass(frozen=True)
class CostBreakdown:
    base: int
    agents: int
    events: int
    total: int  # base + agents + events

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base": int(self.base),
            "agents": int(self.agents),
            "events": int(self.events),
            "total": int(self.total),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CostBreakdown":
        return cls(
            base=int(data.get("base", 0)),
            agents=int(data.get("agents", 0)),
            events=int(data.get("events", 0)),
            total=int(data.get("total", 0)),
        )


@dataclass(frozen=True)
class ScoreBreakdown:
    """Named score terms of one run.

    Influences and the event modifier are signed and added; the two
    penalties are non-negative and subtracted. `total` is the clamped
    quality score that was finally reported.
    """

    base: int
    creativity_influence: int
    speed_influence: int
    reliability_penalty: int
    role_coverage_bonus: int
    event_modifier: int
    budget_penalty: int
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base": int(self.base),
            "creativity_influence": int(self.creativity_influence),
            "speed_influence": int(self.speed_influence),
            "reliability_penalty": int(self.reliability_penalty),
            "role_coverage_bonus": int(self.role_coverage_bonus),
            "event_modifier": int(self.event_modifier),
            "budget_penalty": int(self.budget_penalty),
            "total": int(self.total),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreBreakdown":
        return cls(
            base=int(data.get("base", 0)),
            creativity_influence=int(data.get("creativity_influence", 0)),
            speed_influence=int(data.get("speed_influence", 0)),
            reliability_penalty=int(data.get("reliability_penalty", 0)),
            role_coverage_bonus=int(data.get("role_coverage_bonus", 0)),
            event_modifier=int(data.get("event_modifier", 0)),
            budget_penalty=int(data.get("budget_penalty", 0)),
            total=int(data.get("total", 0)),
        )


@dataclass(frozen=True)
class RunDiagnostics:
    seed: int
    variance: int
    pass_threshold: int
    runway_after_run: int
    assigned_role_count: int
    total_role_count: int
    cost_breakdown: CostBreakdown
    score_breakdown: ScoreBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": int(self.seed),
            "variance": int(self.variance),
            "pass_threshold": int(self.pass_threshold),
            "runway_after_run": int(self.runway_after_run),
            "assigned_role_count": int(self.assigned_role_count),
            "total_role_count": int(self.total_role_count),
            "cost_breakdown": self.cost_breakdown.to_dict(),
            "score_breakdown": self.score_breakdown.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunDiagnostics":
        return cls(
            seed=int(data.get("seed", 0)),
            variance=int(data.get("variance", 0)),
            pass_threshold=int(data.get("pass_threshold", 0)),
            runway_after_run=int(data.get("runway_after_run", 0)),
            assigned_role_count=int(data.get("assigned_role_count", 0)),
            total_role_count=int(data.get("total_role_count", 0)),
            cost_breakdown=CostBreakdown.from_dict(dict(data.get("cost_breakdown", {}))),
            score_breakdown=ScoreBreakdown.from_dict(dict(data.get("score_breakdown", {}))),
        )


# --- RunState / RunResult ----------------------------------------------------


@dataclass(frozen=True)
class RunState:
    """Simulation input; built fresh by the caller for every run."""

    seed: int
    treasury: int
    brief: Brief
    roles: Tuple[HatRole, ...] = ()
    agents: Tuple[Agent, ...] = ()


@dataclass(frozen=True)
class RunResult:
    """Simulation output.

    `events` is append-only: the narrative override layer may add lines
    after the simulator's own event label but never removes or rewrites one.
    """

    quality_score: int  # 0-100
    cost: int
    events: Tuple[str, ...]
    cid: str  # "bafy" + 24 chars of [a-z2-7]
    passed: bool
    diagnostics: RunDiagnostics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quality_score": int(self.quality_score),
            "cost": int(self.cost),
            "events": list(self.events),
            "cid": self.cid,
            "passed": bool(self.passed),
            "diagnostics": self.diagnostics.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunResult":
        return cls(
            quality_score=int(data.get("quality_score", 0)),
            cost=int(data.get("cost", 0)),
            events=tuple(str(e) for e in data.get("events", [])),
            cid=str(data.get("cid", "")),
            passed=bool(data.get("passed", False)),
            diagnostics=RunDiagnostics.from_dict(dict(data.get("diagnostics", {}))),
        )


# --- ArtifactBundle ----------------------------------------------------------


@dataclass(frozen=True)
class ArtifactBundle:
    """Cosmetic post-run output; no lifecycle of its own."""

    site_title: str
    public_url: str
    ens_name: str
    cid: str
    notes: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "site_title": self.site_title,
            "public_url": self.public_url,
            "ens_name": self.ens_name,
            "cid": self.cid,
            "notes": list(self.notes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArtifactBundle":
        return cls(
            site_title=str(data.get("site_title", "")),
            public_url=str(data.get("public_url", "")),
            ens_name=str(data.get("ens_name", "")),
            cid=str(data.get("cid", "")),
            notes=tuple(str(n) for n in data.get("notes", [])),
        )


# --- RunLogEntry -------------------------------------------------------------


@dataclass
class RunLogEntry:
    """One line of the JSONL run log: a production run as the player saw it.

    `result` is the post-override result, so replaying the log reproduces
    what the UI showed rather than the raw simulator output.
    """

    run_index: int  # 0-based position within the play-through
    seed: int
    treasury_before: int
    treasury_after: int
    result: RunResult
    artifacts: Optional[ArtifactBundle] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_index": int(self.run_index),
            "seed": int(self.seed),
            "treasury_before": int(self.treasury_before),
            "treasury_after": int(self.treasury_after),
            "result": self.result.to_dict(),
            "artifacts": self.artifacts.to_dict() if self.artifacts else None,
            "extra": dict(self.extra),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunLogEntry":
        artifacts_data = data.get("artifacts")
        return cls(
            run_index=int(data.get("run_index", 0)),
            seed=int(data.get("seed", 0)),
            treasury_before=int(data.get("treasury_before", 0)),
            treasury_after=int(data.get("treasury_after", 0)),
            result=RunResult.from_dict(dict(data.get("result", {}))),
            artifacts=ArtifactBundle.from_dict(artifacts_data) if isinstance(artifacts_data, dict) else None,
            extra=dict(data.get("extra", {})),
        )
