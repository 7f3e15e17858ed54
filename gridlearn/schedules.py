"""
Exploration schedules: how epsilon shrinks as training proceeds.

A learner advances its schedule exactly once per action request. Reading
`value` never advances it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class EpsilonSchedule(ABC):
    """A non-increasing exploration rate."""

    @property
    @abstractmethod
    def value(self) -> float:
        ...

    @abstractmethod
    def step(self) -> float:
        """Advance one tick and return the new value."""


class GeometricDecay(EpsilonSchedule):
    """
    Multiply epsilon by a fixed factor every step.

    The starting value may exceed 1, in which case the agent explores
    unconditionally until it has decayed below 1.

    Parameters
    ----------
    epsilon : float
        Starting exploration rate. Default 1.2.
    decay_rate : float
        Multiplicative factor per step, in (0, 1]. Default 0.999.
    min_epsilon : float
        Floor (never decay below this). Default 0.0.
    """

    def __init__(self, epsilon: float = 1.2, decay_rate: float = 0.999,
                 min_epsilon: float = 0.0):
        if epsilon < 0:
            raise ValueError("epsilon must be >= 0")
        if not 0.0 < decay_rate <= 1.0:
            raise ValueError("decay_rate must be in (0, 1]")
        if min_epsilon < 0:
            raise ValueError("min_epsilon must be >= 0")
        self._epsilon = epsilon
        self.decay_rate = decay_rate
        self.min_epsilon = min_epsilon

    @property
    def value(self) -> float:
        return self._epsilon

    def step(self) -> float:
        self._epsilon = max(self.min_epsilon, self._epsilon * self.decay_rate)
        return self._epsilon

    def __repr__(self) -> str:
        return f"GeometricDecay(epsilon={self._epsilon:.4f}, rate={self.decay_rate})"


class LinearDecay(EpsilonSchedule):
    """
    Interpolate from max_epsilon to min_epsilon over decay_period steps,
    then hold at min_epsilon.
    """

    def __init__(self, max_epsilon: float = 1.0, min_epsilon: float = 0.3,
                 decay_period: int = 500):
        if min_epsilon < 0:
            raise ValueError("min_epsilon must be >= 0")
        if max_epsilon < min_epsilon:
            raise ValueError("max_epsilon must be >= min_epsilon")
        if decay_period < 1:
            raise ValueError("decay_period must be >= 1")
        self.max_epsilon = max_epsilon
        self.min_epsilon = min_epsilon
        self.decay_period = decay_period
        self.steps = 0

    @property
    def value(self) -> float:
        if self.steps >= self.decay_period:
            return self.min_epsilon
        span = self.max_epsilon - self.min_epsilon
        return self.max_epsilon - span * self.steps / self.decay_period

    def step(self) -> float:
        self.steps += 1
        return self.value

    def __repr__(self) -> str:
        return (f"LinearDecay({self.max_epsilon} -> {self.min_epsilon} "
                f"over {self.decay_period}, step={self.steps})")
