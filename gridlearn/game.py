"""
Turn engine: owns the agent's state and runs one turn at a time.

One turn:

    learner.choose_action → grid.move → scoring → commit new state
        → reward_policy.get_reward → learner.learn

Two sequencing modes are supported:

- IMMEDIATE: the reward for a turn is computed and learned inside the same
  take_turn call, and the returned result carries it.
- DEFERRED: the transition is held back and settled (reward computed and
  learned) at the start of the next take_turn. The first turn learns
  nothing, and the last transition is only learned once flush() is called.

The engine has no timers. Whoever drives it decides when the next turn runs.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from gridlearn.grid import (
    Action, Grid, PlayerState, Position, TurnResult, as_action,
)
from gridlearn.learners.base import Learner
from gridlearn.rewards import RewardPolicy


class LearningMode(Enum):
    """When a transition's reward is computed and learned."""

    IMMEDIATE = "immediate"
    DEFERRED = "deferred"


@dataclass(frozen=True)
class Scoring:
    """
    Points side rule, independent of the reward signal.

    A move rejected at the boundary costs boundary_penalty; a JUMP on the
    grid center earns center_jump_bonus. A turn whose points would not
    change loses idle_penalty instead, so no turn is ever neutral.
    Set either of the first two to 0 to disable that part of the rule.
    """
    boundary_penalty: float = 10.0
    center_jump_bonus: float = 100.0
    idle_penalty: float = 1.0

    def __post_init__(self) -> None:
        if self.idle_penalty <= 0:
            raise ValueError("idle_penalty must be > 0")

    def points_delta(self, grid: Grid, position: Position,
                     action: Action) -> float:
        delta = 0.0
        if grid.is_blocked(position, action):
            delta -= self.boundary_penalty
        if action == Action.JUMP and position == grid.center:
            delta += self.center_jump_bonus
        if delta == 0:
            delta = -self.idle_penalty
        return delta


class Game:
    """
    A single agent on a grid, driven one turn at a time.

    Parameters
    ----------
    grid : Grid
        Board dimensions.
    learner : Learner
        Decision policy consulted every turn.
    reward_policy : RewardPolicy
        Converts each transition into a reward.
    start : Position, optional
        Starting position. Defaults to the grid center.
    scoring : Scoring, optional
        Points side rule. None disables points tracking.
    learning_mode : LearningMode
        IMMEDIATE (default) or DEFERRED.
    """

    def __init__(
        self,
        grid: Grid,
        learner: Learner,
        reward_policy: RewardPolicy,
        start: Optional[Position] = None,
        scoring: Optional[Scoring] = Scoring(),
        learning_mode: LearningMode = LearningMode.IMMEDIATE,
    ):
        start = grid.center if start is None else tuple(start)
        if not grid.in_bounds(start):
            raise ValueError(f"start {start} is outside the grid")
        self.grid = grid
        self.learner = learner
        self.reward_policy = reward_policy
        self.scoring = scoring
        self.learning_mode = learning_mode
        self.start = start
        self.state = PlayerState(x=start[0], z=start[1], points=0)
        self.turn = 0
        self.pending: Optional[TurnResult] = None
        self.last_settled: Optional[TurnResult] = None

    @property
    def position(self) -> Position:
        return self.state.position

    def take_turn(self) -> TurnResult:
        """Run one full turn and return what happened."""
        if self.learning_mode == LearningMode.DEFERRED:
            self.flush()

        old_state = self.state
        action = as_action(self.learner.choose_action(old_state.position))
        new_position = self.grid.move(old_state.position, action)

        points = old_state.points
        if self.scoring is not None:
            points += self.scoring.points_delta(
                self.grid, old_state.position, action
            )

        new_state = PlayerState(x=new_position[0], z=new_position[1],
                                points=points)
        self.state = new_state
        self.turn += 1

        result = TurnResult(action=action, old_state=old_state,
                            new_state=new_state)

        if self.learning_mode == LearningMode.DEFERRED:
            self.pending = result
            return result
        return self._settle(result)

    def flush(self) -> Optional[TurnResult]:
        """Settle the transition held back in DEFERRED mode, if any."""
        if self.pending is None:
            return None
        result = self._settle(self.pending)
        self.pending = None
        return result

    def _settle(self, result: TurnResult) -> TurnResult:
        reward = self.reward_policy.get_reward(result)
        self.learner.learn(result, reward)
        settled = replace(result, reward=reward)
        self.last_settled = settled
        return settled

    def __repr__(self) -> str:
        return (f"Game(turn={self.turn}, position={self.position}, "
                f"points={self.state.points}, mode={self.learning_mode.value})")
