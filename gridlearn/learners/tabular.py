"""
Tabular Q-learning.

The value table maps each visited position to a fixed array of five
Q-values indexed by Action, so every stored row holds every action by
construction. Rows are created, all zero, the first time choose_action or
learn touches a position; action_spread only reads.

Update rule (one-step Q-learning):

    Q(s, a) <- (1 - α) · Q(s, a) + α · (r + γ · max_a' Q(s', a'))

Repeated updates on the same (s, a, s') with a fixed reward contract Q(s, a)
toward the Bellman target; they are not idempotent.
"""

from __future__ import annotations

import random
from typing import Dict, Optional

import numpy as np

from gridlearn.grid import NUM_ACTIONS, Action, Position, TurnResult
from gridlearn.learners.base import Learner
from gridlearn.schedules import EpsilonSchedule, GeometricDecay


class QLearner(Learner):
    """
    Epsilon-greedy tabular Q-learner.

    Parameters
    ----------
    alpha : float
        Learning rate in [0, 1]. Default 0.1.
    gamma : float
        Discount factor in [0, 1]. Default 0.9.
    schedule : EpsilonSchedule, optional
        Exploration schedule. Default GeometricDecay(1.2, 0.999).
    seed : Optional[int]
        Random seed for reproducibility.
    """

    def __init__(
        self,
        alpha: float = 0.1,
        gamma: float = 0.9,
        schedule: Optional[EpsilonSchedule] = None,
        seed: Optional[int] = None,
    ):
        if not 0.0 <= alpha <= 1.0:
            raise ValueError("alpha must be in [0, 1]")
        if not 0.0 <= gamma <= 1.0:
            raise ValueError("gamma must be in [0, 1]")
        self.alpha = alpha
        self.gamma = gamma
        self.schedule = schedule or GeometricDecay()
        self.rng = random.Random(seed)
        self.q_table: Dict[Position, np.ndarray] = {}
        self.explore_count = 0
        self.exploit_count = 0

    @property
    def epsilon(self) -> float:
        return self.schedule.value

    @property
    def num_states(self) -> int:
        return len(self.q_table)

    def _row(self, position: Position) -> np.ndarray:
        key = (int(position[0]), int(position[1]))
        row = self.q_table.get(key)
        if row is None:
            row = np.zeros(NUM_ACTIONS, dtype=float)
            self.q_table[key] = row
        return row

    def _random_action(self) -> Action:
        return Action(self.rng.randrange(NUM_ACTIONS))

    def choose_action(self, position: Position) -> Action:
        epsilon = self.schedule.step()
        if self.rng.random() < epsilon:
            self.explore_count += 1
            return self._random_action()

        self.exploit_count += 1
        row = self._row(position)
        if row.size == 0:
            return self._random_action()
        best = np.flatnonzero(row == row.max())
        return Action(int(self.rng.choice(best)))

    def learn(self, result: TurnResult, reward: float) -> None:
        a = int(result.action)
        row = self._row(result.old_state.position)
        next_row = self._row(result.new_state.position)
        target = reward + self.gamma * float(next_row.max())
        row[a] = (1 - self.alpha) * row[a] + self.alpha * target

    def q_value(self, position: Position, action: Action) -> float:
        """Stored value, 0 for anything never touched. Does not insert."""
        row = self.q_table.get(tuple(position))
        return 0.0 if row is None else float(row[int(action)])

    def action_spread(self, x: int, z: int) -> Dict[Action, float]:
        row = self.q_table.get((x, z))
        if row is None:
            return {a: 0.0 for a in Action}
        return {a: float(row[int(a)]) for a in Action}

    def __repr__(self) -> str:
        return (f"QLearner(alpha={self.alpha}, gamma={self.gamma}, "
                f"epsilon={self.epsilon:.4f}, states={self.num_states})")
