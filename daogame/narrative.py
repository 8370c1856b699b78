"""Tutorial pacing overrides applied on top of simulator output.

The first production run of a play-through always fails and the second
always passes. Only the quality score, the pass flag, the score
breakdown total and the (append-only) events list are ever touched.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from .types import RunResult

logger = logging.getLogger(__name__)

FIRST_CYCLE_SCORE_MARGIN = 8
SECOND_CYCLE_SCORE_MARGIN = 6

FIRST_CYCLE_EVENT = "Critical role coverage gap triggered client rejection"
SECOND_CYCLE_EVENT = "Gremlin patch cadence stabilized client confidence"


def apply_score_override(result: RunResult, next_score: int) -> RunResult:
    score_breakdown = replace(result.diagnostics.score_breakdown, total=next_score)
    return replace(
        result,
        quality_score=next_score,
        diagnostics=replace(result.diagnostics, score_breakdown=score_breakdown),
    )


def force_first_cycle_failure(result: RunResult, pass_threshold: int) -> RunResult:
    capped = min(result.quality_score, pass_threshold - FIRST_CYCLE_SCORE_MARGIN)
    with_score = apply_score_override(result, capped)
    return replace(with_score, passed=False, events=with_score.events + (FIRST_CYCLE_EVENT,))


def force_second_cycle_success(result: RunResult, pass_threshold: int) -> RunResult:
    if result.passed:
        return result
    boosted = max(result.quality_score, pass_threshold + SECOND_CYCLE_SCORE_MARGIN)
    with_score = apply_score_override(result, boosted)
    return replace(with_score, passed=True, events=with_score.events + (SECOND_CYCLE_EVENT,))


def apply_narrative_override(result: RunResult, prior_run_count: int, pass_threshold: int) -> RunResult:
    """Shape `result` for the run that follows `prior_run_count` earlier runs."""
    if prior_run_count == 0:
        logger.debug("first cycle: forcing failure (computed score=%s)", result.quality_score)
        return force_first_cycle_failure(result, pass_threshold)
    if prior_run_count == 1:
        logger.debug("second cycle: forcing success (computed passed=%s)", result.passed)
        return force_second_cycle_success(result, pass_threshold)
    return result
