"""
Trainer: drives a game for a fixed number of turns and records what happened.

The game itself has no loop and no timers; the trainer is the simplest
possible driver, running turns back to back and keeping a history that can
be summarised or plotted afterwards.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import numpy as np

from gridlearn.game import Game
from gridlearn.grid import Action, Position, TurnResult


@dataclass
class TrainingHistory:
    """Per-turn record of a training run."""
    turns: List[int] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)
    positions: List[Position] = field(default_factory=list)
    rewards: List[float] = field(default_factory=list)
    epsilons: List[float] = field(default_factory=list)
    points: List[float] = field(default_factory=list)

    def record(self, turn: int, result: TurnResult, epsilon: float) -> None:
        self.turns.append(turn)
        self.actions.append(result.action)
        self.positions.append(result.new_state.position)
        self.epsilons.append(epsilon)
        self.points.append(result.new_state.points)

    def __len__(self) -> int:
        return len(self.turns)


@dataclass
class TrainingResult:
    """Result of a training run."""
    game: Game
    history: TrainingHistory
    turns_run: int

    @property
    def total_reward(self) -> float:
        return float(np.sum(self.history.rewards))

    def mean_reward(self, last: Optional[int] = None) -> float:
        """Mean reward per settled turn, optionally over the last N only."""
        rewards = self.history.rewards
        if last is not None:
            rewards = rewards[-last:]
        return float(np.mean(rewards)) if rewards else 0.0

    def action_counts(self) -> Dict[Action, int]:
        counts = Counter(self.history.actions)
        return {a: counts.get(a, 0) for a in Action}

    def policy_map(self) -> str:
        """ASCII map of the greedy action in every cell the learner has an opinion on."""
        grid = self.game.grid
        best: Dict[Position, Action] = {}
        for x, z in grid.positions():
            action = self.game.learner.best_action(x, z)
            if action is not None:
                best[(x, z)] = action
        return grid.render(agent=self.game.position, best_actions=best)

    def summary(self) -> str:
        learner = self.game.learner
        lines = [
            "═" * 55,
            "  gridlearn: Training Result",
            "═" * 55,
            f"  Turns run:         {self.turns_run}",
            f"  Rewards settled:   {len(self.history.rewards)}",
            f"  Total reward:      {self.total_reward:.2f}",
            f"  Mean reward:       {self.mean_reward():.3f}",
            f"  Final epsilon:     {learner.epsilon:.4f}",
            f"  Final position:    {self.game.position}",
            f"  Points:            {self.game.state.points}",
            "",
            "  Actions taken:",
        ]
        for action, count in self.action_counts().items():
            lines.append(f"    {action.label:16s} {count}")
        lines.append("")
        lines.append("  Greedy policy:")
        for row in self.policy_map().splitlines():
            lines.append(f"    {row}")
        lines.append("═" * 55)
        return "\n".join(lines)


class Trainer:
    """
    Runs turns of a game back to back.

    Parameters
    ----------
    game : Game
        The game to drive.
    """

    def __init__(self, game: Game):
        self.game = game

    def run(
        self,
        turns: int,
        verbose: bool = False,
        report_every: int = 100,
        flush: bool = True,
        callback: Optional[Callable[[int, TurnResult, object], None]] = None,
    ) -> TrainingResult:
        """
        Run `turns` turns.

        Parameters
        ----------
        turns : int
            Number of turns to run.
        verbose : bool
            Print progress every `report_every` turns. Default False.
        report_every : int
            Reporting interval in turns. Default 100.
        flush : bool
            In deferred mode, settle the last pending transition at the end
            so it is learned from. Default True.
        callback : Callable, optional
            Called each turn with (turn, result, learner).

        Returns
        -------
        TrainingResult
        """
        if turns < 0:
            raise ValueError("turns must be >= 0")
        if report_every < 1:
            raise ValueError("report_every must be >= 1")
        game = self.game
        history = TrainingHistory()

        for _ in range(turns):
            settled_before = game.last_settled
            result = game.take_turn()
            history.record(game.turn, result, game.learner.epsilon)
            if game.last_settled is not settled_before:
                history.rewards.append(game.last_settled.reward)

            if verbose and game.turn % report_every == 0:
                reward = "   -" if result.reward is None else f"{result.reward:4.1f}"
                print(
                    f"  [turn {game.turn:6d}] "
                    f"pos={result.new_state.position}  "
                    f"action={result.action.name:16s}  "
                    f"reward={reward}  "
                    f"epsilon={game.learner.epsilon:.3f}  "
                    f"points={result.new_state.points:8.0f}  "
                    f"states={len(set(history.positions))}"
                )

            if callback:
                callback(game.turn, result, game.learner)

        if flush:
            settled = game.flush()
            if settled is not None:
                history.rewards.append(settled.reward)

        return TrainingResult(game=game, history=history, turns_run=turns)
