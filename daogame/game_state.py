"""Play-through state machine for DAO the Game.

The whole play-through is an immutable `GameState`; every player intent is
an action dataclass, and `reduce(state, action)` returns the next state.
Nothing here holds module-level mutable state, so a caller (UI, CLI, tests)
owns exactly one state value and threads it through each transition.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type, Union

from .agents import generate_starting_agents
from .artifacts import generate_artifacts
from .levels import (
    FINAL_SCENE_INDEX,
    TUTORIAL_BRIEF,
    TUTORIAL_ROLES,
    TUTORIAL_SEED,
    TUTORIAL_TREASURY,
    StoryScene,
    clamp_scene_index,
    get_scene,
)
from .narrative import apply_narrative_override
from .simulation import BASE_OPERATIONAL_COST, COST_PER_ROLE, simulate_run
from .types import Agent, ArtifactBundle, Brief, HatRole, RunResult, RunState

logger = logging.getLogger(__name__)

FIRST_CYCLE_ROLE_COUNT = 1
ASSIGNMENT_LOG_LIMIT = 8


@dataclass(frozen=True)
class AssignmentLogEntry:
    id: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "message": self.message}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssignmentLogEntry":
        return cls(id=str(data.get("id", "")), message=str(data.get("message", "")))


@dataclass(frozen=True)
class GameState:
    """Everything a play-through needs to resume.

    `assignment_log` is newest-first and capped at ASSIGNMENT_LOG_LIMIT.
    `log_sequence` numbers log entries so ids stay deterministic.
    """

    story_scene_index: int
    unlocked_role_count: int
    seed: int
    treasury: int
    roles: Tuple[HatRole, ...]
    agents: Tuple[Agent, ...]
    brief: Brief = TUTORIAL_BRIEF
    latest_run: Optional[RunResult] = None
    latest_artifacts: Optional[ArtifactBundle] = None
    run_count: int = 0
    assignment_log: Tuple[AssignmentLogEntry, ...] = ()
    log_sequence: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "story_scene_index": int(self.story_scene_index),
            "unlocked_role_count": int(self.unlocked_role_count),
            "seed": int(self.seed),
            "treasury": int(self.treasury),
            "roles": [r.to_dict() for r in self.roles],
            "agents": [a.to_dict() for a in self.agents],
            "brief": self.brief.to_dict(),
            "latest_run": self.latest_run.to_dict() if self.latest_run else None,
            "latest_artifacts": self.latest_artifacts.to_dict() if self.latest_artifacts else None,
            "run_count": int(self.run_count),
            "assignment_log": [e.to_dict() for e in self.assignment_log],
            "log_sequence": int(self.log_sequence),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        latest_run = data.get("latest_run")
        latest_artifacts = data.get("latest_artifacts")
        brief = data.get("brief")
        return cls(
            story_scene_index=int(data.get("story_scene_index", 0)),
            unlocked_role_count=int(data.get("unlocked_role_count", FIRST_CYCLE_ROLE_COUNT)),
            seed=int(data.get("seed", TUTORIAL_SEED)),
            treasury=int(data.get("treasury", TUTORIAL_TREASURY)),
            roles=tuple(HatRole.from_dict(r) for r in data.get("roles", [])),
            agents=tuple(Agent.from_dict(a) for a in data.get("agents", [])),
            brief=Brief.from_dict(brief) if isinstance(brief, dict) else TUTORIAL_BRIEF,
            latest_run=RunResult.from_dict(latest_run) if isinstance(latest_run, dict) else None,
            latest_artifacts=(
                ArtifactBundle.from_dict(latest_artifacts) if isinstance(latest_artifacts, dict) else None
            ),
            run_count=int(data.get("run_count", 0)),
            assignment_log=tuple(AssignmentLogEntry.from_dict(e) for e in data.get("assignment_log", [])),
            log_sequence=int(data.get("log_sequence", 0)),
        )


def initial_state(seed: int = TUTORIAL_SEED, treasury: int = TUTORIAL_TREASURY) -> GameState:
    return GameState(
        story_scene_index=0,
        unlocked_role_count=FIRST_CYCLE_ROLE_COUNT,
        seed=seed,
        treasury=treasury,
        roles=TUTORIAL_ROLES,
        agents=tuple(generate_starting_agents(seed)),
    )


# --- Selectors / estimates ---------------------------------------------------


def get_active_roles(roles: Sequence[HatRole], unlocked_role_count: int) -> Tuple[HatRole, ...]:
    count = max(FIRST_CYCLE_ROLE_COUNT, min(unlocked_role_count, len(roles)))
    return tuple(roles[:count])


def count_assigned_roles(roles: Sequence[HatRole]) -> int:
    return sum(1 for role in roles if role.assigned_agent_id)


def are_roles_fully_assigned(roles: Sequence[HatRole]) -> bool:
    return all(role.assigned_agent_id for role in roles)


def estimate_run_cost(roles: Sequence[HatRole], agents: Sequence[Agent]) -> int:
    """Pre-run cost estimate: the simulator's cost without the event delta."""
    agent_by_id = {agent.id: agent for agent in agents}
    assigned_cost = sum(
        agent_by_id[role.assigned_agent_id].cost
        for role in roles
        if role.assigned_agent_id and role.assigned_agent_id in agent_by_id
    )
    return BASE_OPERATIONAL_COST + len(roles) * COST_PER_ROLE + assigned_cost


def estimate_runway_after_run(treasury: int, roles: Sequence[HatRole], agents: Sequence[Agent]) -> int:
    return treasury - estimate_run_cost(roles, agents)


# --- Actions -----------------------------------------------------------------


@dataclass(frozen=True)
class SetStoryScene:
    index: int


@dataclass(frozen=True)
class AdvanceStory:
    pass


@dataclass(frozen=True)
class RetreatStory:
    pass


@dataclass(frozen=True)
class UnlockExpandedRoles:
    pass


@dataclass(frozen=True)
class AssignRole:
    role_id: str
    agent_id: str


@dataclass(frozen=True)
class UnassignRole:
    role_id: str


@dataclass(frozen=True)
class RunProduction:
    pass


@dataclass(frozen=True)
class ResetTutorial:
    seed: int = TUTORIAL_SEED
    treasury: int = TUTORIAL_TREASURY


Action = Union[
    SetStoryScene,
    AdvanceStory,
    RetreatStory,
    UnlockExpandedRoles,
    AssignRole,
    UnassignRole,
    RunProduction,
    ResetTutorial,
]


def _with_log(state: GameState, message: str) -> Dict[str, Any]:
    """Return replace() kwargs that prepend one assignment-log entry."""
    sequence = state.log_sequence + 1
    entry = AssignmentLogEntry(id=f"log-{sequence:04d}", message=message)
    return {
        "assignment_log": ((entry,) + state.assignment_log)[:ASSIGNMENT_LOG_LIMIT],
        "log_sequence": sequence,
    }


def _set_story_scene(state: GameState, action: SetStoryScene) -> GameState:
    return replace(state, story_scene_index=clamp_scene_index(action.index))


def _advance_story(state: GameState, action: AdvanceStory) -> GameState:
    return replace(state, story_scene_index=clamp_scene_index(state.story_scene_index + 1))


def _retreat_story(state: GameState, action: RetreatStory) -> GameState:
    return replace(state, story_scene_index=clamp_scene_index(state.story_scene_index - 1))


def _unlock_expanded_roles(state: GameState, action: UnlockExpandedRoles) -> GameState:
    return replace(state, unlocked_role_count=len(state.roles))


def _assign_role(state: GameState, action: AssignRole) -> GameState:
    active = get_active_roles(state.roles, state.unlocked_role_count)
    role = next((r for r in state.roles if r.id == action.role_id), None)
    agent = next((a for a in state.agents if a.id == action.agent_id), None)

    if role is None or agent is None or all(r.id != action.role_id for r in active):
        logger.debug("ignoring assignment role=%s agent=%s", action.role_id, action.agent_id)
        return state

    roles: List[HatRole] = []
    for item in state.roles:
        if item.id == action.role_id:
            roles.append(replace(item, assigned_agent_id=action.agent_id))
        elif item.assigned_agent_id == action.agent_id:
            # An agent wears one hat at a time.
            roles.append(replace(item, assigned_agent_id=None))
        else:
            roles.append(item)

    return replace(
        state,
        roles=tuple(roles),
        **_with_log(state, f"{role.name} assigned to {agent.role_affinity} ({agent.id})"),
    )


def _unassign_role(state: GameState, action: UnassignRole) -> GameState:
    role = next((r for r in state.roles if r.id == action.role_id), None)
    if role is None:
        logger.debug("ignoring unassignment of unknown role=%s", action.role_id)
        return state

    roles = tuple(
        replace(item, assigned_agent_id=None) if item.id == action.role_id else item for item in state.roles
    )
    return replace(state, roles=roles, **_with_log(state, f"{role.name} unassigned"))


def _run_production(state: GameState, action: RunProduction) -> GameState:
    active = get_active_roles(state.roles, state.unlocked_role_count)
    if not are_roles_fully_assigned(active):
        logger.debug("production blocked: %s/%s active roles assigned", count_assigned_roles(active), len(active))
        return state

    run_state = RunState(
        seed=state.seed,
        treasury=state.treasury,
        brief=state.brief,
        roles=active,
        agents=state.agents,
    )
    result = apply_narrative_override(simulate_run(run_state), state.run_count, state.brief.pass_threshold)
    artifacts = generate_artifacts(result, state.brief)

    logger.info(
        "production run %s: score=%s cost=%s passed=%s",
        state.run_count + 1,
        result.quality_score,
        result.cost,
        result.passed,
    )
    message = "Deployment accepted by client." if result.passed else "Deployment rejected. Role graph needs expansion."
    return replace(
        state,
        run_count=state.run_count + 1,
        latest_run=result,
        latest_artifacts=artifacts,
        treasury=state.treasury - result.cost,
        **_with_log(state, message),
    )


def _reset_tutorial(state: GameState, action: ResetTutorial) -> GameState:
    return initial_state(seed=action.seed, treasury=action.treasury)


_HANDLERS: Dict[Type[Any], Callable[[GameState, Any], GameState]] = {
    SetStoryScene: _set_story_scene,
    AdvanceStory: _advance_story,
    RetreatStory: _retreat_story,
    UnlockExpandedRoles: _unlock_expanded_roles,
    AssignRole: _assign_role,
    UnassignRole: _unassign_role,
    RunProduction: _run_production,
    ResetTutorial: _reset_tutorial,
}


def reduce(state: GameState, action: Action) -> GameState:
    """Apply one action and return the next state.

    Raises TypeError for an object that is not one of the known actions.
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action: {action!r}")
    return handler(state, action)


# --- Scene dispatch ----------------------------------------------------------


def _assign_all_active_roles(state: GameState) -> Tuple[Action, ...]:
    """Hire agents in roster order, one per active role."""
    active = get_active_roles(state.roles, state.unlocked_role_count)
    return tuple(AssignRole(role.id, agent.id) for role, agent in zip(active, state.agents))


def _unlock(state: GameState) -> Tuple[Action, ...]:
    return (UnlockExpandedRoles(),)


def _run(state: GameState) -> Tuple[Action, ...]:
    return (RunProduction(),)


def _no_actions(state: GameState) -> Tuple[Action, ...]:
    return ()


SceneHandler = Callable[[GameState], Tuple[Action, ...]]

# Every StoryScene has an entry; scenes without a primary control map to _no_actions.
SCENE_ACTIONS: Dict[StoryScene, SceneHandler] = {
    StoryScene.MESSAGES_WARMUP: _no_actions,
    StoryScene.MESSAGES_HOLD: _no_actions,
    StoryScene.MESSAGES_NOTIFICATION: _no_actions,
    StoryScene.MAIL_OFFER: _no_actions,
    StoryScene.MESSAGES_CONVINCE: _no_actions,
    StoryScene.WHITEBOARD_FIRST: _no_actions,
    StoryScene.MESSAGES_CANT_DO: _no_actions,
    StoryScene.GUILD_FIRST: _assign_all_active_roles,
    StoryScene.MACHINE_FIRST: _run,
    StoryScene.MAIL_FAIL: _no_actions,
    StoryScene.MESSAGES_PIVOT: _unlock,
    StoryScene.WHITEBOARD_EXPAND: _no_actions,
    StoryScene.GUILD_SECOND: _assign_all_active_roles,
    StoryScene.MACHINE_SECOND: _run,
    StoryScene.MAIL_SUCCESS: _no_actions,
}


def scene_actions(state: GameState) -> Tuple[Action, ...]:
    """Return the actions the current scene's primary control dispatches."""
    return SCENE_ACTIONS[get_scene(state.story_scene_index).scene](state)


def play_through(
    state: GameState,
    on_transition: Optional[Callable[[GameState, Action, GameState], None]] = None,
) -> GameState:
    """Drive the story from the current scene to the final scene.

    Each scene's actions are reduced in order, then the story advances.
    `on_transition(before, action, after)` is called for every action,
    including the AdvanceStory steps.
    """
    while True:
        for action in scene_actions(state) + (AdvanceStory(),):
            if isinstance(action, AdvanceStory) and state.story_scene_index >= FINAL_SCENE_INDEX:
                return state
            next_state = reduce(state, action)
            if on_transition is not None:
                on_transition(state, action, next_state)
            state = next_state
