from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .types import RunLogEntry


@dataclass
class PlaythroughSummary:
    num_runs: int
    num_passed: int
    total_spend: int
    score_trend: List[int] = field(default_factory=list)
    final_treasury: Optional[int] = None
    latest_cid: Optional[str] = None

    @property
    def pass_rate(self) -> float:
        return self.num_passed / self.num_runs if self.num_runs else 0.0


def summarize_runs(entries: Iterable[RunLogEntry]) -> PlaythroughSummary:
    """Roll a run log up into a play-through summary.

    Entries are ordered by run_index first, so a log appended out of
    order still produces a chronological score trend.
    """
    ordered = sorted(entries, key=lambda e: e.run_index)
    if not ordered:
        return PlaythroughSummary(num_runs=0, num_passed=0, total_spend=0)
    return PlaythroughSummary(
        num_runs=len(ordered),
        num_passed=sum(1 for e in ordered if e.result.passed),
        total_spend=sum(e.result.cost for e in ordered),
        score_trend=[e.result.quality_score for e in ordered],
        final_treasury=ordered[-1].treasury_after,
        latest_cid=ordered[-1].result.cid,
    )
