"""
Linear function-approximation Q-learner.

Instead of a table, Q(s, a) = w_a · φ(s) with hand-built features of the
position relative to the board center:

    φ(x, z) = [dx, dz, dx · dz, 1],   dx = x - cx,  dz = z - cz

Learning is a semi-gradient Q-learning step on the chosen action's weights.
Rewards and TD errors are clipped so a single large signal cannot blow up
the weights. Exploration decays linearly over a fixed number of turns.
"""

from __future__ import annotations

import random
from typing import Dict, Optional

import numpy as np

from gridlearn.grid import NUM_ACTIONS, Action, Position, TurnResult
from gridlearn.learners.base import Learner
from gridlearn.schedules import EpsilonSchedule, LinearDecay

NUM_FEATURES = 4


class LinearQLearner(Learner):
    """
    Epsilon-greedy Q-learner over a linear value function.

    Parameters
    ----------
    center : Position
        Board center used to centre the features. Default (3, 3).
    alpha : float
        Step size. Default 0.1.
    gamma : float
        Discount factor. Default 0.9.
    schedule : EpsilonSchedule, optional
        Default LinearDecay(1.0, 0.3, 500).
    reward_clip : float
        Rewards are clipped to [-reward_clip, reward_clip]. Default 1.0.
    td_clip : float
        TD errors are clipped to [-td_clip, td_clip]. Default 1.0.
    seed : Optional[int]
        Random seed for reproducibility.
    """

    def __init__(
        self,
        center: Position = (3, 3),
        alpha: float = 0.1,
        gamma: float = 0.9,
        schedule: Optional[EpsilonSchedule] = None,
        reward_clip: float = 1.0,
        td_clip: float = 1.0,
        seed: Optional[int] = None,
    ):
        if not 0.0 <= alpha <= 1.0:
            raise ValueError("alpha must be in [0, 1]")
        if not 0.0 <= gamma <= 1.0:
            raise ValueError("gamma must be in [0, 1]")
        self.center = center
        self.alpha = alpha
        self.gamma = gamma
        self.schedule = schedule or LinearDecay(1.0, 0.3, 500)
        self.reward_clip = reward_clip
        self.td_clip = td_clip
        self.rng = random.Random(seed)
        self.weights = np.zeros((NUM_ACTIONS, NUM_FEATURES), dtype=float)

    @property
    def epsilon(self) -> float:
        return self.schedule.value

    def features(self, position: Position) -> np.ndarray:
        dx = position[0] - self.center[0]
        dz = position[1] - self.center[1]
        phi = np.array([dx, dz, dx * dz, 1.0], dtype=float)
        assert phi.shape == (NUM_FEATURES,)
        return phi

    def q_values(self, position: Position) -> np.ndarray:
        return self.weights @ self.features(position)

    def choose_action(self, position: Position) -> Action:
        epsilon = self.schedule.step()
        if self.rng.random() < epsilon:
            return Action(self.rng.randrange(NUM_ACTIONS))
        q = self.q_values(position)
        best = np.flatnonzero(q == q.max())
        return Action(int(self.rng.choice(best)))

    def learn(self, result: TurnResult, reward: float) -> None:
        a = int(result.action)
        reward = float(np.clip(reward, -self.reward_clip, self.reward_clip))
        phi = self.features(result.old_state.position)
        target = reward + self.gamma * float(
            self.q_values(result.new_state.position).max()
        )
        td_error = float(np.clip(target - self.weights[a] @ phi,
                                 -self.td_clip, self.td_clip))
        self.weights[a] += self.alpha * td_error * phi

    def action_spread(self, x: int, z: int) -> Dict[Action, float]:
        q = self.q_values((x, z))
        return {a: float(q[int(a)]) for a in Action}

    def __repr__(self) -> str:
        return (f"LinearQLearner(alpha={self.alpha}, gamma={self.gamma}, "
                f"epsilon={self.epsilon:.4f})")
