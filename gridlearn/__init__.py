"""
gridlearn: an agent on a bounded grid learning, turn by turn, which action pays.

A turn engine asks a pluggable learner for an action, applies the grid's
boundary rule, scores the move, asks a pluggable reward policy for a reward
and feeds the transition back to the learner. Tabular Q-learning is the
default learner; reward policies range from "jump on the goal" to "walk a
ring of cells in order" to "whatever the operator says".
"""

from gridlearn.grid import Action, Grid, PlayerState, TurnResult, move
from gridlearn.schedules import EpsilonSchedule, GeometricDecay, LinearDecay
from gridlearn.rewards import (
    RewardPolicy,
    GoalRewardPolicy,
    SequenceRewardPolicy,
    ManualRewardPolicy,
    PointsRewardPolicy,
    REWARD_POLICIES,
    make_reward_policy,
)
from gridlearn.learners import Learner, QLearner, LinearQLearner
from gridlearn.game import Game, LearningMode, Scoring
from gridlearn.config import SimulationConfig, build_game
from gridlearn.trainer import Trainer, TrainingHistory, TrainingResult

__version__ = "0.1.0"
__all__ = [
    "Action",
    "Grid",
    "PlayerState",
    "TurnResult",
    "move",
    "EpsilonSchedule",
    "GeometricDecay",
    "LinearDecay",
    "RewardPolicy",
    "GoalRewardPolicy",
    "SequenceRewardPolicy",
    "ManualRewardPolicy",
    "PointsRewardPolicy",
    "REWARD_POLICIES",
    "make_reward_policy",
    "Learner",
    "QLearner",
    "LinearQLearner",
    "Game",
    "LearningMode",
    "Scoring",
    "SimulationConfig",
    "build_game",
    "Trainer",
    "TrainingHistory",
    "TrainingResult",
]
