from __future__ import annotations

import argparse
import sys
import threading
from pathlib import Path
from typing import TextIO

import torch

from solidblock.env.constants import OBSTACLE_PATTERNS
from solidblock.solver.core import NullRunLogger, RunLogger, RunPaths
from solidblock.solver.trainers import (
    DQNTrainer,
    ExplorationConfig,
    TrainingConfig,
    TrainingSignals,
    parse_command,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Double DQN training for the SolidBlock grid forager")
    parser.add_argument("--episodes", type=int, default=None, help="Stop after N episodes (default: run until ENTER)")
    parser.add_argument("--max-steps", type=int, default=500, help="Step budget per episode")
    parser.add_argument("--batch-size", type=int, default=32)
    parser.add_argument("--buffer-size", type=int, default=10_000)
    parser.add_argument("--gamma", type=float, default=0.99)
    parser.add_argument("--tau", type=float, default=0.005, help="Soft target update rate")
    parser.add_argument("--lr", type=float, default=1e-3, help="Base learning rate")
    parser.add_argument("--lr-decay", type=float, default=0.98)
    parser.add_argument("--lr-decay-every", type=int, default=200)
    parser.add_argument("--grad-clip", type=float, default=5.0, help="Element-wise gradient clip value")
    parser.add_argument("--step-penalty", type=float, default=0.05)
    parser.add_argument(
        "--uniform-replay",
        action="store_true",
        help="Sample replay batches uniformly instead of the hybrid recency-weighted sampler",
    )
    parser.add_argument("--recency-alpha", type=float, default=2.0)
    parser.add_argument("--snapshot-every", type=int, default=200)
    parser.add_argument("--summary-every", type=int, default=20)
    parser.add_argument("--epsilon-decay", type=float, default=0.999)
    parser.add_argument("--epsilon-min", type=float, default=0.1)
    parser.add_argument("--epsilon-boost", type=float, default=0.2)
    parser.add_argument("--exploration-cycle", type=int, default=1200)
    parser.add_argument(
        "--obstacle",
        choices=OBSTACLE_PATTERNS,
        default="normal",
        help="Obstacle layout for the training board",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--device", type=str, default=None, help="Training device (default: auto-detect)")
    parser.add_argument("--resume", type=Path, default=None, help="Snapshot directory to resume from")
    parser.add_argument("--output", type=Path, default=Path("models"), help="Directory for snapshot folders")
    parser.add_argument("--log-root", type=Path, default=Path("logs/dqn"))
    parser.add_argument("--no-tensorboard", action="store_true")
    parser.add_argument("--mlflow", action="store_true", help="Track the run with MLflow")
    parser.add_argument("--no-input", action="store_true", help="Do not listen for ENTER/'s' on stdin")
    return parser


def parse_args(argv: list[str] | None = None) -> tuple[TrainingConfig, ExplorationConfig, RunPaths, argparse.Namespace]:
    args = build_parser().parse_args(argv)
    device = args.device if args.device is not None else ("cuda" if torch.cuda.is_available() else "cpu")

    training = TrainingConfig(
        episodes=args.episodes,
        max_steps=args.max_steps,
        batch_size=args.batch_size,
        buffer_size=args.buffer_size,
        gamma=args.gamma,
        tau=args.tau,
        lr=args.lr,
        lr_decay=args.lr_decay,
        lr_decay_every=args.lr_decay_every,
        grad_clip=args.grad_clip,
        step_penalty=args.step_penalty,
        use_prioritized=not args.uniform_replay,
        recency_alpha=args.recency_alpha,
        snapshot_every=args.snapshot_every,
        summary_every=args.summary_every,
        use_tensorboard=not args.no_tensorboard,
        obstacle_pattern=args.obstacle,
        seed=args.seed,
        device=device,
    )
    exploration = ExplorationConfig(
        epsilon_decay=args.epsilon_decay,
        epsilon_min=args.epsilon_min,
        epsilon_boost=args.epsilon_boost,
        cycle_length=args.exploration_cycle,
    )
    paths = RunPaths(log_root=args.log_root, output=args.output, resume_from=args.resume)
    return training, exploration, paths, args


def start_input_listener(signals: TrainingSignals, stream: TextIO | None = None) -> threading.Thread:
    """Read console lines on a daemon thread and forward them as stop/save signals."""
    source = stream if stream is not None else sys.stdin

    def _listen() -> None:
        for line in source:
            command = parse_command(line)
            if command is None:
                continue
            signals.post(command)
            if command == "stop":
                return

    thread = threading.Thread(target=_listen, name="solidblock-input", daemon=True)
    thread.start()
    return thread


def main(argv: list[str] | None = None) -> None:
    training, exploration, paths, args = parse_args(argv)

    logger: RunLogger = NullRunLogger()
    if args.mlflow:
        from solidblock.solver.core.logging import MLflowRunLogger

        logger = MLflowRunLogger(
            experiment_name="solidblock_dqn",
            tracking_uri=f"file://{args.log_root.absolute()}/mlruns",
        )

    signals = TrainingSignals()
    trainer = DQNTrainer(
        training,
        exploration,
        paths=paths,
        signals=signals,
        run_logger=logger,
    )
    if not args.no_input:
        start_input_listener(signals)

    final_dir = trainer.run()
    if final_dir is not None:
        print(f"Training complete. Final snapshot in {final_dir}")


__all__ = ["build_parser", "parse_args", "start_input_listener", "main"]


if __name__ == "__main__":
    main()
