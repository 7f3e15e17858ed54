"""Simulation configuration and the factory that turns it into a Game."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from gridlearn.game import Game, LearningMode, Scoring
from gridlearn.grid import Grid, Position
from gridlearn.learners import Learner, LinearQLearner, QLearner
from gridlearn.rewards import REWARD_POLICIES, make_reward_policy
from gridlearn.schedules import EpsilonSchedule, GeometricDecay, LinearDecay

LEARNERS = ("tabular", "linear")


@dataclass(frozen=True)
class SimulationConfig:
    """
    Everything needed to build a game.

    Exploration decays geometrically from `epsilon` by `epsilon_decay_rate`
    per turn, unless `decay_period` is set, in which case it decays linearly
    from `max_epsilon` to `min_epsilon` over that many turns.
    """
    length_x: int = 7
    length_z: int = 7
    start: Optional[Position] = None          # None = grid center
    learner: str = "tabular"
    learning_rate: float = 0.1
    discount_factor: float = 0.9
    epsilon: float = 1.2
    epsilon_decay_rate: float = 0.999
    max_epsilon: float = 1.0
    min_epsilon: float = 0.0
    decay_period: Optional[int] = None
    reward_policy: str = "goal"
    reward_options: Dict[str, Any] = field(default_factory=dict)
    learning_mode: LearningMode = LearningMode.IMMEDIATE
    scoring: Optional[Scoring] = Scoring()
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.length_x < 1 or self.length_z < 1:
            raise ValueError("grid lengths must be >= 1")
        if self.learner not in LEARNERS:
            raise ValueError(f"learner must be one of {LEARNERS}")
        if not 0.0 <= self.learning_rate <= 1.0:
            raise ValueError("learning_rate must be in [0.0, 1.0]")
        if not 0.0 <= self.discount_factor <= 1.0:
            raise ValueError("discount_factor must be in [0.0, 1.0]")
        if self.epsilon < 0:
            raise ValueError("epsilon must be >= 0")
        if not 0.0 < self.epsilon_decay_rate <= 1.0:
            raise ValueError("epsilon_decay_rate must be in (0.0, 1.0]")
        if self.decay_period is not None:
            if self.decay_period < 1:
                raise ValueError("decay_period must be >= 1")
            if not 0.0 <= self.min_epsilon <= self.max_epsilon:
                raise ValueError("need 0 <= min_epsilon <= max_epsilon")
        if self.reward_policy not in REWARD_POLICIES:
            raise ValueError(f"unknown reward_policy {self.reward_policy!r}")
        if self.start is not None and not self.grid.in_bounds(self.start):
            raise ValueError(f"start {self.start} is outside the grid")

    @property
    def grid(self) -> Grid:
        return Grid(self.length_x, self.length_z)

    def make_schedule(self) -> EpsilonSchedule:
        if self.decay_period is not None:
            return LinearDecay(self.max_epsilon, self.min_epsilon,
                               self.decay_period)
        return GeometricDecay(self.epsilon, self.epsilon_decay_rate)

    def make_learner(self) -> Learner:
        if self.learner == "linear":
            return LinearQLearner(
                center=self.grid.center,
                alpha=self.learning_rate,
                gamma=self.discount_factor,
                schedule=self.make_schedule(),
                seed=self.seed,
            )
        return QLearner(
            alpha=self.learning_rate,
            gamma=self.discount_factor,
            schedule=self.make_schedule(),
            seed=self.seed,
        )


def build_game(config: Optional[SimulationConfig] = None) -> Game:
    """Assemble grid, learner, reward policy and game from a config."""
    config = config or SimulationConfig()
    grid = config.grid
    options = dict(config.reward_options)
    if config.reward_policy == "goal":
        options.setdefault("target", grid.center)
    elif config.reward_policy == "sequence" and "sequence" not in options:
        options.setdefault("center", grid.center)
    return Game(
        grid=grid,
        learner=config.make_learner(),
        reward_policy=make_reward_policy(config.reward_policy, **options),
        start=config.start,
        scoring=config.scoring,
        learning_mode=config.learning_mode,
    )
