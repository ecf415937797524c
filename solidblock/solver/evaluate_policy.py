#!/usr/bin/env python3
"""Play a trained approximator on the grid without learning and report scores."""

from __future__ import annotations

import argparse
from pathlib import Path

import torch

from solidblock.env.constants import OBSTACLE_PATTERNS
from solidblock.solver.checkpoint import snapshot_model_path
from solidblock.solver.policies import TorchApproximator
from solidblock.solver.trainers import EvaluationConfig, evaluate_policy


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate a trained SolidBlock DQN")
    parser.add_argument("--model-path", type=Path, required=True, help="Snapshot directory or model.pt file")
    parser.add_argument("--episodes", type=int, default=5)
    parser.add_argument("--max-steps", type=int, default=500)
    parser.add_argument(
        "--epsilon",
        type=float,
        default=0.05,
        help="Chance of a random move other than the greedy one (0 = fully greedy)",
    )
    parser.add_argument("--obstacle", choices=OBSTACLE_PATTERNS, default="normal")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--device", type=str, default=None)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    device = args.device if args.device is not None else ("cuda" if torch.cuda.is_available() else "cpu")

    approximator = TorchApproximator(device=device)
    approximator.load(snapshot_model_path(args.model_path))

    config = EvaluationConfig(
        eval_episodes=args.episodes,
        max_steps=args.max_steps,
        eval_epsilon=args.epsilon,
        obstacle_pattern=args.obstacle,
        seed=args.seed,
    )
    result = evaluate_policy(approximator, config)
    for episode in result.episodes:
        print(
            f"[eval] episode={episode['episode']} score={episode['score']:.2f} "
            f"food={episode['food']} green={episode['green']} red={episode['red']} "
            f"cycle_penalties={episode['cycle_penalties']} wall_penalties={episode['wall_penalties']}"
        )
    averages = " ".join(f"{k}={v:.2f}" for k, v in result.item_averages().items())
    print(f"[eval] avg_score={result.avg_score:.2f} {averages}")


if __name__ == "__main__":
    main()
