"""
Decision policies: everything the game can ask for an action.

- QLearner: tabular Q-learning over visited positions
- LinearQLearner: Q-learning with a linear value function over position features
"""

from gridlearn.learners.base import Learner
from gridlearn.learners.tabular import QLearner
from gridlearn.learners.linear import LinearQLearner

__all__ = [
    "Learner",
    "QLearner",
    "LinearQLearner",
]
