"""
Grid environment: the bounded board the agent moves on.

The grid holds no state beyond its dimensions. Movement is a pure function
of (position, action): a directional move that would leave the board is
rejected on that axis and the agent stays put; JUMP never changes position.

Coordinates are (x, z), matching the floor plane of the board:

    x → 0 .. length_x - 1
    z → 0 .. length_z - 1
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterator, List, Optional, Tuple

Position = Tuple[int, int]


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

class Action(IntEnum):
    """The five moves available to the agent each turn."""
    MOVE_X_POSITIVE = 0
    MOVE_X_NEGATIVE = 1
    MOVE_Z_POSITIVE = 2
    MOVE_Z_NEGATIVE = 3
    JUMP = 4

    def delta(self) -> Tuple[int, int]:
        """x, z displacement for this action."""
        return {
            Action.MOVE_X_POSITIVE: (1, 0),
            Action.MOVE_X_NEGATIVE: (-1, 0),
            Action.MOVE_Z_POSITIVE: (0, 1),
            Action.MOVE_Z_NEGATIVE: (0, -1),
            Action.JUMP: (0, 0),
        }[self]

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def arrow(self) -> str:
        return _ARROWS[self]

    @staticmethod
    def all() -> List["Action"]:
        return list(Action)


_LABELS = {
    Action.MOVE_X_POSITIVE: "Move positive x",
    Action.MOVE_X_NEGATIVE: "Move negative x",
    Action.MOVE_Z_POSITIVE: "Move positive z",
    Action.MOVE_Z_NEGATIVE: "Move negative z",
    Action.JUMP: "Jump",
}

_ARROWS = {
    Action.MOVE_X_POSITIVE: ">",
    Action.MOVE_X_NEGATIVE: "<",
    Action.MOVE_Z_POSITIVE: "v",
    Action.MOVE_Z_NEGATIVE: "^",
    Action.JUMP: "J",
}

NUM_ACTIONS = len(Action)


def as_action(value) -> Action:
    """Coerce to an Action, failing fast on anything outside the enum."""
    try:
        return Action(value)
    except ValueError:
        raise ValueError(f"Unknown action: {value!r}") from None


def move(position: Position, action: Action,
         length_x: int, length_z: int) -> Position:
    """
    Apply one action to a position on a length_x × length_z board.

    A move off the board is rejected, not clamped: the coordinate on that
    axis keeps its old value.
    """
    action = as_action(action)
    x, z = position
    dx, dz = action.delta()
    new_x, new_z = x + dx, z + dz
    if not 0 <= new_x < length_x:
        new_x = x
    if not 0 <= new_z < length_z:
        new_z = z
    return (new_x, new_z)


# ---------------------------------------------------------------------------
# Agent state and transitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlayerState:
    """Snapshot of the agent. Replaced every turn, never mutated."""
    x: int
    z: int
    points: float = 0

    @property
    def position(self) -> Position:
        return (self.x, self.z)


@dataclass(frozen=True)
class TurnResult:
    """What happened in one turn: the action and the states either side of it."""
    action: Action
    old_state: PlayerState
    new_state: PlayerState
    reward: Optional[float] = None  # None until the reward has been computed

    @property
    def points_delta(self) -> float:
        return self.new_state.points - self.old_state.points

    def __repr__(self) -> str:
        reward = "pending" if self.reward is None else f"{self.reward:.2f}"
        return (f"Turn({self.action.name}, {self.old_state.position} -> "
                f"{self.new_state.position}, reward={reward})")


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Grid:
    """Dimensions of the board plus the boundary rule."""
    length_x: int = 7
    length_z: int = 7

    def __post_init__(self) -> None:
        if self.length_x < 1 or self.length_z < 1:
            raise ValueError("grid lengths must be >= 1")

    @property
    def center(self) -> Position:
        return (self.length_x // 2, self.length_z // 2)

    @property
    def num_cells(self) -> int:
        return self.length_x * self.length_z

    def in_bounds(self, position: Position) -> bool:
        x, z = position
        return 0 <= x < self.length_x and 0 <= z < self.length_z

    def move(self, position: Position, action: Action) -> Position:
        return move(position, action, self.length_x, self.length_z)

    def is_blocked(self, position: Position, action: Action) -> bool:
        """True when a directional move is rejected at the boundary."""
        action = as_action(action)
        return action != Action.JUMP and self.move(position, action) == position

    def positions(self) -> Iterator[Position]:
        for x in range(self.length_x):
            for z in range(self.length_z):
                yield (x, z)

    def render(self, agent: Optional[Position] = None,
               best_actions: Optional[Dict[Position, Action]] = None) -> str:
        """
        ASCII rendering of the board for debugging.

        Rows are z, columns are x. "A" marks the agent; a cell with a known
        best action shows its arrow, otherwise ".".
        """
        best_actions = best_actions or {}
        lines = []
        for z in range(self.length_z):
            row_str = ""
            for x in range(self.length_x):
                if (x, z) == agent:
                    row_str += "A"
                elif (x, z) in best_actions:
                    row_str += best_actions[(x, z)].arrow
                else:
                    row_str += "."
            lines.append(row_str)
        return "\n".join(lines)
