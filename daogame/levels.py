"""
Tutorial level and story registry for DAO the Game.

This module defines the tutorial contract and the story scene sequence:
- TUTORIAL_* constants (seed, treasury, brief, role tree)
- StoryScene: closed enum of scene identifiers, in play order
- STORY_SCENES: per-scene flavor (phone app, title, subtitle)

This file is intentionally:
- PURE DATA (no behavior beyond index clamping)
- SAFE for reporting/visualization
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Tuple

from .types import Brief, HatRole

TUTORIAL_SEED = 424242
TUTORIAL_TREASURY = 540

TUTORIAL_BRIEF = Brief(
    id="brief-rfgc-01",
    client_name="Regen Frontier Global Conference",
    mission="Rescue a failing Web3 conference brand by rebuilding its website with autonomous operations.",
    requirements=(
        "No human labor allowed",
        "All authority flows through a Hats role tree",
        "Ship an IPFS deployment mapped to ENS",
        "Pass client review before treasury depletion",
    ),
    base_score=58,
    pass_threshold=72,
)

TUTORIAL_ROLES: Tuple[HatRole, ...] = (
    HatRole(id="hat-01", name="Builder Agent"),
    HatRole(id="hat-02", name="Designer Agent"),
    HatRole(id="hat-03", name="Reviewer Agent"),
    HatRole(id="hat-04", name="Deployment Agent"),
)

StoryApp = Literal["messages", "mail", "whiteboard", "guild", "machine"]


class StoryScene(str, Enum):
    MESSAGES_WARMUP = "messages-warmup"
    MESSAGES_HOLD = "messages-hold"
    MESSAGES_NOTIFICATION = "messages-notification"
    MAIL_OFFER = "mail-offer"
    MESSAGES_CONVINCE = "messages-convince"
    WHITEBOARD_FIRST = "whiteboard-first"
    MESSAGES_CANT_DO = "messages-cant-do"
    GUILD_FIRST = "guild-first"
    MACHINE_FIRST = "machine-first"
    MAIL_FAIL = "mail-fail"
    MESSAGES_PIVOT = "messages-pivot"
    WHITEBOARD_EXPAND = "whiteboard-expand"
    GUILD_SECOND = "guild-second"
    MACHINE_SECOND = "machine-second"
    MAIL_SUCCESS = "mail-success"


@dataclass(frozen=True)
class SceneSpec:
    scene: StoryScene
    app: StoryApp
    title: str
    subtitle: str


STORY_SCENES: Tuple[SceneSpec, ...] = (
    SceneSpec(StoryScene.MESSAGES_WARMUP, "messages", "Messages", "Anonymous guide thread"),
    SceneSpec(StoryScene.MESSAGES_HOLD, "messages", "Messages", "Hold for a second"),
    SceneSpec(StoryScene.MESSAGES_NOTIFICATION, "messages", "Messages", "New inbox alert"),
    SceneSpec(StoryScene.MAIL_OFFER, "mail", "Mail", "Frantic client request"),
    SceneSpec(StoryScene.MESSAGES_CONVINCE, "messages", "Messages", "Gremlin persuasion protocol"),
    SceneSpec(StoryScene.WHITEBOARD_FIRST, "whiteboard", "Whiteboard", "Rough role blueprint"),
    SceneSpec(StoryScene.MESSAGES_CANT_DO, "messages", "Messages", "Skill gap panic"),
    SceneSpec(StoryScene.GUILD_FIRST, "guild", "RaidGuild Server", "#hiring-board"),
    SceneSpec(StoryScene.MACHINE_FIRST, "machine", "Autonomous Machine", "Cycle one"),
    SceneSpec(StoryScene.MAIL_FAIL, "mail", "Mail", "Client response"),
    SceneSpec(StoryScene.MESSAGES_PIVOT, "messages", "Messages", "Patch strategy"),
    SceneSpec(StoryScene.WHITEBOARD_EXPAND, "whiteboard", "Whiteboard", "Expanded Hats tree"),
    SceneSpec(StoryScene.GUILD_SECOND, "guild", "RaidGuild Server", "#hiring-board"),
    SceneSpec(StoryScene.MACHINE_SECOND, "machine", "Autonomous Machine", "Cycle two"),
    SceneSpec(StoryScene.MAIL_SUCCESS, "mail", "Mail", "Approval notice"),
)

STORY_SCENE_COUNT = len(STORY_SCENES)
FINAL_SCENE_INDEX = STORY_SCENE_COUNT - 1


def clamp_scene_index(index: int) -> int:
    return max(0, min(index, FINAL_SCENE_INDEX))


def get_scene(index: int) -> SceneSpec:
    return STORY_SCENES[clamp_scene_index(index)]
