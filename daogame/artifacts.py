"""Post-run cosmetic artifacts (site title, URL, ENS-style name, notes)."""
from __future__ import annotations

import re
from typing import Dict, Literal, Tuple

from .types import ArtifactBundle, Brief, RunResult

Tier = Literal["flagship", "stable", "recovery"]

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

PASSED_NOTES: Tuple[str, ...] = (
    "Autonomous execution complete.",
    "Client accepted delivery for the current sprint.",
    "Ready for expansion into the next campaign.",
)

FAILED_NOTES: Tuple[str, ...] = (
    "Client found weak execution in at least one critical role.",
    "Refit the hat tree and retry before treasury depletion.",
    "Investigate reliability-sensitive steps in Engine mode.",
)


def slugify(value: str) -> str:
    return _NON_ALNUM.sub("-", value.lower()).strip("-")


def tier_from_score(score: int) -> Tier:
    if score >= 85:
        return "flagship"
    if score >= 65:
        return "stable"
    return "recovery"


def generate_artifacts(result: RunResult, brief: Brief) -> ArtifactBundle:
    """Build the artifact bundle shown after a run.

    The title depends only on the score tier; the notes depend only on
    whether the run passed, so a high-scoring run that overdrew the
    treasury gets a flagship title with the failure notes.
    """
    slug = slugify(brief.client_name)
    tier = tier_from_score(result.quality_score)

    site_title_by_tier: Dict[Tier, str] = {
        "flagship": f"{brief.client_name} Autonomous Flagship",
        "stable": f"{brief.client_name} DAO Relaunch",
        "recovery": f"{brief.client_name} Recovery Console",
    }

    return ArtifactBundle(
        site_title=site_title_by_tier[tier],
        public_url=f"https://{slug}-autonomous.sim",
        ens_name=f"{slug}.dao.eth",
        cid=result.cid,
        notes=PASSED_NOTES if result.passed else FAILED_NOTES,
    )
