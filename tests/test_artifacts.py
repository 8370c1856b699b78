from __future__ import annotations

from dataclasses import replace

from daogame.artifacts import FAILED_NOTES, PASSED_NOTES, generate_artifacts, slugify, tier_from_score
from daogame.levels import TUTORIAL_BRIEF
from daogame.types import CostBreakdown, RunDiagnostics, RunResult, ScoreBreakdown


def _result(score: int, passed: bool) -> RunResult:
    return RunResult(
        quality_score=score,
        cost=120,
        events=("Clean execution window (+5 quality)",),
        cid="bafyabcdefghijklmnopqrstuvwx",
        passed=passed,
        diagnostics=RunDiagnostics(
            seed=1,
            variance=2,
            pass_threshold=72,
            runway_after_run=10,
            assigned_role_count=4,
            total_role_count=4,
            cost_breakdown=CostBreakdown(base=44, agents=76, events=0, total=120),
            score_breakdown=ScoreBreakdown(
                base=58,
                creativity_influence=0,
                speed_influence=0,
                reliability_penalty=0,
                role_coverage_bonus=14,
                event_modifier=5,
                budget_penalty=0,
                total=score,
            ),
        ),
    )


def test_slugify():
    assert slugify("Regen Frontier Global Conference") == "regen-frontier-global-conference"
    assert slugify("  Meta -- Summit!! 2026 ") == "meta-summit-2026"
    assert slugify("***") == ""


def test_tier_boundaries():
    assert tier_from_score(100) == "flagship"
    assert tier_from_score(85) == "flagship"
    assert tier_from_score(84) == "stable"
    assert tier_from_score(65) == "stable"
    assert tier_from_score(64) == "recovery"
    assert tier_from_score(0) == "recovery"


def test_generate_artifacts_for_passed_run():
    bundle = generate_artifacts(_result(90, passed=True), TUTORIAL_BRIEF)

    assert bundle.site_title == "Regen Frontier Global Conference Autonomous Flagship"
    assert bundle.public_url == "https://regen-frontier-global-conference-autonomous.sim"
    assert bundle.ens_name == "regen-frontier-global-conference.dao.eth"
    assert bundle.cid == "bafyabcdefghijklmnopqrstuvwx"
    assert bundle.notes == PASSED_NOTES
    assert len(bundle.notes) == 3


def test_notes_follow_pass_flag_not_tier():
    # A flagship-tier score that failed (e.g. overdrawn treasury) still gets failure notes
    bundle = generate_artifacts(_result(95, passed=False), TUTORIAL_BRIEF)
    assert bundle.site_title.endswith("Autonomous Flagship")
    assert bundle.notes == FAILED_NOTES

    stable = generate_artifacts(_result(70, passed=True), TUTORIAL_BRIEF)
    assert stable.site_title == "Regen Frontier Global Conference DAO Relaunch"

    recovery = generate_artifacts(_result(40, passed=False), replace(TUTORIAL_BRIEF, client_name="Meta Summit"))
    assert recovery.site_title == "Meta Summit Recovery Console"
    assert recovery.ens_name == "meta-summit.dao.eth"
