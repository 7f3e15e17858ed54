"""
Reward policies: turn a completed transition into a scalar learning signal.

Each policy implements one capability, get_reward(result). The game holds a
single policy instance, chosen at construction, and never asks which variant
it is talking to.

Variants:
- GoalRewardPolicy: reward for jumping on a target cell
- SequenceRewardPolicy: escalating reward for walking a fixed ring of cells in order
- ManualRewardPolicy: whatever an operator last set
- PointsRewardPolicy: the points delta produced by the game's scoring rule
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Type, Union

from gridlearn.grid import Action, Position, TurnResult


class RewardPolicy(ABC):
    """Interface for every reward rule."""

    name: str = "base"

    @abstractmethod
    def get_reward(self, result: TurnResult) -> float:
        ...

    def reset(self) -> None:
        """Forget any internal progress. Stateless policies do nothing."""


class GoalRewardPolicy(RewardPolicy):
    """
    Reward a JUMP performed while standing on the target cell.

    JUMP never moves the agent, so being on the target is all that counts;
    the agent does not have to arrive there this turn.
    """

    name = "goal"

    def __init__(self, target: Position = (3, 3), reward: float = 1.0):
        self.target = tuple(target)
        self.reward = reward

    def get_reward(self, result: TurnResult) -> float:
        if (result.action == Action.JUMP
                and result.new_state.position == self.target):
            return self.reward
        return 0.0


def ring_sequence(center: Union[int, Position] = 3) -> List[Position]:
    """The eight cells around the center, walked in order starting from +x."""
    cx, cz = (center, center) if isinstance(center, int) else center
    return [
        (cx + 1, cz),
        (cx + 1, cz + 1),
        (cx, cz + 1),
        (cx - 1, cz + 1),
        (cx - 1, cz),
        (cx - 1, cz - 1),
        (cx, cz - 1),
        (cx + 1, cz - 1),
    ]


class SequenceRewardPolicy(RewardPolicy):
    """
    Reward walking a cyclic sequence of cells in order.

    Progress p starts at 0. Entering the sequence anywhere sets p = 1
    (reward 1). Each step to the next cell (wrapping) increments p and pays
    p; reaching the full length pays the completion bonus and resets p.
    Stepping back one cell pays the backtrack penalty and resets p. Any
    other move resets p with reward 0. JUMP pays 0 and leaves p alone.
    """

    name = "sequence"

    def __init__(self, sequence: Optional[Sequence[Position]] = None,
                 center: Union[int, Position] = 3,
                 completion_bonus: float = 10.0,
                 backtrack_penalty: float = -1.0):
        if sequence is None:
            sequence = ring_sequence(center)
        self.sequence: List[Position] = [tuple(p) for p in sequence]
        if len(self.sequence) < 2:
            raise ValueError("sequence must contain at least 2 cells")
        self.completion_bonus = completion_bonus
        self.backtrack_penalty = backtrack_penalty
        self.progress = 0

    def reset(self) -> None:
        self.progress = 0

    def index_of(self, position: Position) -> int:
        """Index of a position in the sequence, or -1 when off it."""
        try:
            return self.sequence.index(tuple(position))
        except ValueError:
            return -1

    def get_reward(self, result: TurnResult) -> float:
        if result.action == Action.JUMP:
            return 0.0

        n = len(self.sequence)
        new_index = self.index_of(result.new_state.position)

        if self.progress == 0:
            if new_index != -1:
                self.progress = 1
                return 1.0
            return 0.0

        old_index = self.index_of(result.old_state.position)
        if old_index == -1 or new_index == -1:
            self.progress = 0
            return 0.0

        if new_index == (old_index + 1) % n:
            self.progress += 1
            if self.progress >= n:
                self.progress = 0
                return self.completion_bonus
            return float(self.progress)

        if new_index == (old_index - 1) % n:
            self.progress = 0
            return self.backtrack_penalty

        self.progress = 0
        return 0.0


class ManualRewardPolicy(RewardPolicy):
    """Return the value most recently set by an operator (0 until then)."""

    name = "manual"

    def __init__(self, reward: float = 0.0):
        self.reward = reward

    def set_reward(self, value: float) -> None:
        self.reward = float(value)

    def reset(self) -> None:
        self.reward = 0.0

    def get_reward(self, result: TurnResult) -> float:
        return self.reward


class PointsRewardPolicy(RewardPolicy):
    """Reward equals the change in points the game's scoring rule produced."""

    name = "points"

    def get_reward(self, result: TurnResult) -> float:
        return float(result.points_delta)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

REWARD_POLICIES: Dict[str, Type[RewardPolicy]] = {
    cls.name: cls
    for cls in (GoalRewardPolicy, SequenceRewardPolicy,
                ManualRewardPolicy, PointsRewardPolicy)
}


def make_reward_policy(name: str, **kwargs) -> RewardPolicy:
    """Build a reward policy by registry name."""
    try:
        cls = REWARD_POLICIES[name]
    except KeyError:
        known = ", ".join(sorted(REWARD_POLICIES))
        raise ValueError(
            f"Unknown reward policy {name!r} (known: {known})"
        ) from None
    return cls(**kwargs)
