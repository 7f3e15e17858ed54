"""
Learner interface: the decision policy the game consults every turn.

Any implementation can be handed to the game without the game knowing
which one it holds.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict

from gridlearn.grid import Action, Position, TurnResult


class Learner(ABC):
    """Chooses actions and learns from rewarded transitions."""

    @abstractmethod
    def choose_action(self, position: Position) -> Action:
        """Pick the next action. Advances the exploration schedule one step."""

    @abstractmethod
    def learn(self, result: TurnResult, reward: float) -> None:
        """Update value estimates from one transition and its reward."""

    @abstractmethod
    def action_spread(self, x: int, z: int) -> Dict[Action, float]:
        """Read-only snapshot of the value of each action at (x, z)."""

    @property
    @abstractmethod
    def epsilon(self) -> float:
        """Current exploration rate. Reading it has no side effects."""

    def best_action(self, x: int, z: int):
        """Greedy action at (x, z), or None when every value is equal."""
        spread = self.action_spread(x, z)
        values = list(spread.values())
        if max(values) == min(values):
            return None
        return max(spread, key=spread.get)
