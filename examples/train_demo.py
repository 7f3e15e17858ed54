"""
Training demo: an agent on a 7x7 board learning three different reward rules.

1. Goal: jump on the center cell
2. Sequence: walk the ring of cells around the center in order
3. Deferred learning with the linear learner on the goal rule
"""

from gridlearn import LearningMode, SimulationConfig, Trainer, build_game


def run(title, config, turns):
    print(f"\n--- {title} ---\n")
    game = build_game(config)
    result = Trainer(game).run(turns, verbose=True, report_every=turns // 5)
    print()
    print(result.summary())


def main():
    print("=" * 60)
    print("  gridlearn: Grid Q-Learning Demo")
    print("=" * 60)

    run("Goal: jump on the center",
        SimulationConfig(reward_policy="goal", seed=42),
        turns=5000)

    run("Sequence: walk the ring",
        SimulationConfig(reward_policy="sequence", epsilon=1.0,
                         epsilon_decay_rate=0.9995, seed=42),
        turns=20000)

    run("Linear learner, deferred rewards",
        SimulationConfig(learner="linear", reward_policy="goal",
                         decay_period=500, max_epsilon=1.0, min_epsilon=0.3,
                         learning_mode=LearningMode.DEFERRED, seed=42),
        turns=3000)


if __name__ == "__main__":
    main()
