"""Tests for the turn engine."""

import unittest

from gridlearn.game import Game, LearningMode, Scoring
from gridlearn.grid import Action, Grid
from gridlearn.learners import Learner, QLearner
from gridlearn.rewards import (
    GoalRewardPolicy,
    ManualRewardPolicy,
    PointsRewardPolicy,
    SequenceRewardPolicy,
)


class ScriptedLearner(Learner):
    """Plays a fixed list of actions and records everything it is taught."""

    def __init__(self, actions):
        self.actions = list(actions)
        self.seen_positions = []
        self.learned = []

    @property
    def epsilon(self):
        return 0.0

    def choose_action(self, position):
        self.seen_positions.append(position)
        return self.actions.pop(0)

    def learn(self, result, reward):
        self.learned.append((result, reward))

    def action_spread(self, x, z):
        return {a: 0.0 for a in Action}


def make_game(actions, start=(3, 3), policy=None, **kwargs):
    learner = ScriptedLearner(actions)
    game = Game(Grid(7, 7), learner,
                policy or GoalRewardPolicy(target=(3, 3)),
                start=start, **kwargs)
    return game, learner


class TestImmediateLearning(unittest.TestCase):
    """End-to-end: 7x7 grid, start on the center, goal policy on the center."""

    def test_jump_on_goal_is_rewarded(self):
        game, learner = make_game([Action.JUMP])
        result = game.take_turn()
        self.assertEqual(result.reward, 1.0)
        self.assertEqual(result.new_state.position, (3, 3))
        self.assertEqual(len(learner.learned), 1)
        self.assertEqual(learner.learned[0][1], 1.0)

    def test_move_is_not_rewarded(self):
        game, learner = make_game([Action.MOVE_X_POSITIVE])
        result = game.take_turn()
        self.assertEqual(result.reward, 0.0)
        self.assertEqual(result.old_state.position, (3, 3))
        self.assertEqual(result.new_state.position, (4, 3))
        self.assertEqual(game.position, (4, 3))

    def test_move_at_boundary_stays(self):
        game, _ = make_game([Action.MOVE_X_POSITIVE], start=(6, 3))
        result = game.take_turn()
        self.assertEqual(result.reward, 0.0)
        self.assertEqual(result.new_state.position, (6, 3))

    def test_plain_int_action_is_coerced(self):
        game, _ = make_game([4])
        result = game.take_turn()
        self.assertIs(result.action, Action.JUMP)
        self.assertIn("JUMP", repr(result))
        self.assertEqual(result.reward, 1.0)

    def test_unknown_action_fails_fast(self):
        game, _ = make_game([9])
        with self.assertRaises(ValueError):
            game.take_turn()
        self.assertEqual(game.turn, 0)

    def test_learner_sees_current_position(self):
        game, learner = make_game(
            [Action.MOVE_Z_POSITIVE, Action.MOVE_Z_POSITIVE, Action.JUMP])
        for _ in range(3):
            game.take_turn()
        self.assertEqual(learner.seen_positions, [(3, 3), (3, 4), (3, 5)])
        self.assertEqual(game.turn, 3)

    def test_old_state_is_a_snapshot(self):
        game, _ = make_game([Action.MOVE_X_NEGATIVE, Action.MOVE_X_NEGATIVE])
        first = game.take_turn()
        game.take_turn()
        self.assertEqual(first.old_state.position, (3, 3))
        self.assertEqual(first.new_state.position, (2, 3))

    def test_manual_reward_is_delivered(self):
        policy = ManualRewardPolicy()
        game, learner = make_game([Action.MOVE_X_POSITIVE, Action.JUMP],
                                  policy=policy)
        self.assertEqual(game.take_turn().reward, 0.0)
        policy.set_reward(10)
        result = game.take_turn()
        self.assertEqual(result.reward, 10)
        self.assertEqual(learner.learned[-1][1], 10)

    def test_sequence_policy_through_game(self):
        ring_moves = [
            Action.MOVE_X_POSITIVE,   # (4,3) enter
            Action.MOVE_Z_POSITIVE,   # (4,4)
            Action.MOVE_X_NEGATIVE,   # (3,4)
            Action.MOVE_X_NEGATIVE,   # (2,4)
            Action.MOVE_Z_NEGATIVE,   # (2,3)
            Action.MOVE_Z_NEGATIVE,   # (2,2)
            Action.MOVE_X_POSITIVE,   # (3,2)
            Action.MOVE_X_POSITIVE,   # (4,2)
            Action.MOVE_Z_POSITIVE,   # (4,3) lap complete
        ]
        game, _ = make_game(ring_moves, policy=SequenceRewardPolicy(center=3))
        rewards = [game.take_turn().reward for _ in ring_moves]
        self.assertEqual(rewards[:8], [1, 2, 3, 4, 5, 6, 7, 10])
        self.assertEqual(rewards[8], 1)

    def test_invalid_start(self):
        with self.assertRaises(ValueError):
            make_game([], start=(7, 0))

    def test_default_start_is_center(self):
        game = Game(Grid(5, 9), ScriptedLearner([]), GoalRewardPolicy())
        self.assertEqual(game.position, (2, 4))


class TestScoring(unittest.TestCase):

    def test_boundary_penalty(self):
        game, _ = make_game([Action.MOVE_X_POSITIVE], start=(6, 0))
        result = game.take_turn()
        self.assertEqual(result.new_state.points, -10)

    def test_center_jump_bonus(self):
        game, _ = make_game([Action.JUMP])
        self.assertEqual(game.take_turn().new_state.points, 100)

    def test_neutral_turn_is_forced_down(self):
        game, _ = make_game([Action.MOVE_X_POSITIVE, Action.JUMP])
        self.assertEqual(game.take_turn().points_delta, -1)
        # jumping off the center earns nothing either
        self.assertEqual(game.take_turn().points_delta, -1)

    def test_never_neutral(self):
        actions = [Action(i % 5) for i in range(60)]
        game, _ = make_game(actions, start=(0, 0))
        for _ in actions:
            self.assertNotEqual(game.take_turn().points_delta, 0)

    def test_boundary_only_variant(self):
        scoring = Scoring(boundary_penalty=10, center_jump_bonus=0)
        game, _ = make_game([Action.JUMP], scoring=scoring)
        self.assertEqual(game.take_turn().points_delta, -1)

    def test_custom_tie_break(self):
        scoring = Scoring(idle_penalty=2.5)
        game, _ = make_game([Action.MOVE_Z_NEGATIVE], scoring=scoring)
        self.assertEqual(game.take_turn().points_delta, -2.5)

    def test_scoring_disabled(self):
        game, _ = make_game([Action.MOVE_X_POSITIVE], scoring=None)
        self.assertEqual(game.take_turn().points_delta, 0)

    def test_points_reward_policy(self):
        game, learner = make_game([Action.JUMP, Action.MOVE_X_POSITIVE],
                                  policy=PointsRewardPolicy())
        self.assertEqual(game.take_turn().reward, 100)
        self.assertEqual(game.take_turn().reward, -1)

    def test_invalid_tie_break(self):
        with self.assertRaises(ValueError):
            Scoring(idle_penalty=0)


class TestDeferredLearning(unittest.TestCase):

    def test_first_turn_learns_nothing(self):
        game, learner = make_game([Action.JUMP],
                                  learning_mode=LearningMode.DEFERRED)
        result = game.take_turn()
        self.assertIsNone(result.reward)
        self.assertEqual(learner.learned, [])
        self.assertIsNone(game.last_settled)

    def test_reward_arrives_next_turn(self):
        game, learner = make_game([Action.JUMP, Action.MOVE_X_POSITIVE],
                                  learning_mode=LearningMode.DEFERRED)
        first = game.take_turn()
        game.take_turn()
        self.assertEqual(len(learner.learned), 1)
        learned_result, reward = learner.learned[0]
        self.assertEqual(learned_result.action, first.action)
        self.assertEqual(learned_result.old_state, first.old_state)
        self.assertEqual(reward, 1.0)
        self.assertEqual(game.last_settled.reward, 1.0)

    def test_flush_settles_last_transition(self):
        game, learner = make_game([Action.JUMP, Action.MOVE_X_POSITIVE],
                                  learning_mode=LearningMode.DEFERRED)
        game.take_turn()
        game.take_turn()
        settled = game.flush()
        self.assertEqual(settled.action, Action.MOVE_X_POSITIVE)
        self.assertEqual(settled.reward, 0.0)
        self.assertEqual(len(learner.learned), 2)
        self.assertIsNone(game.flush())

    def test_manual_reward_applies_to_previous_turn(self):
        policy = ManualRewardPolicy()
        game, learner = make_game([Action.MOVE_X_POSITIVE, Action.JUMP],
                                  policy=policy,
                                  learning_mode=LearningMode.DEFERRED)
        game.take_turn()
        policy.set_reward(10)
        game.take_turn()
        learned_result, reward = learner.learned[0]
        self.assertEqual(learned_result.action, Action.MOVE_X_POSITIVE)
        self.assertEqual(reward, 10)

    def test_immediate_flush_is_noop(self):
        game, learner = make_game([Action.JUMP])
        game.take_turn()
        self.assertIsNone(game.flush())
        self.assertEqual(len(learner.learned), 1)


class TestGameWithQLearner(unittest.TestCase):

    def test_learns_to_jump_on_goal(self):
        """With the goal under its feet, a Q-learner comes to prefer JUMP."""
        learner = QLearner(alpha=0.5, gamma=0.9, seed=42)
        game = Game(Grid(3, 3), learner, GoalRewardPolicy(target=(1, 1)),
                    start=(1, 1))
        for _ in range(3000):
            game.take_turn()
        self.assertEqual(learner.best_action(1, 1), Action.JUMP)

    def test_positions_stay_in_bounds(self):
        learner = QLearner(seed=0)
        grid = Grid(4, 3)
        game = Game(grid, learner, SequenceRewardPolicy(center=(1, 1)))
        for _ in range(500):
            result = game.take_turn()
            self.assertTrue(grid.in_bounds(result.new_state.position))
        self.assertLessEqual(learner.num_states, grid.num_cells)


if __name__ == "__main__":
    unittest.main()
