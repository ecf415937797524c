"""DQN Trainer orchestrator class."""

from __future__ import annotations

import asyncio
import json
import pickle
from dataclasses import asdict
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Set

import numpy as np
import torch

from solidblock.env import Action, EnvConfig, GridEnv
from solidblock.solver.checkpoint import (
    Snapshot,
    TrainingState,
    final_snapshot_name,
    load_training_state,
    periodic_snapshot_name,
    signal_snapshot_name,
    snapshot_model_path,
    write_snapshot,
)
from solidblock.solver.core import NullRunLogger, RunLogger, RunPaths
from solidblock.solver.data import ReplayBuffer, Transition
from solidblock.solver.trainers.exploration import ExplorationScheduler
from solidblock.solver.observation import EncodedObservation, encode_observation
from solidblock.solver.policies import Approximator, TorchApproximator
from solidblock.solver.trainers.components import DQNLogger, EpisodeStats, MetricsTracker
from solidblock.solver.trainers.config import ExplorationConfig, TrainingConfig
from solidblock.solver.trainers.dqn import clip_reward, learn_from_batch, soft_update
from solidblock.solver.trainers.signals import TrainingSignals

ApproximatorFactory = Callable[[float], Approximator]

SNAPSHOT_REWARD_WINDOW = 200


class TrainerPhase(Enum):
    INIT = "init"
    EPISODE_LOOP = "episode_loop"
    SHUTDOWN = "shutdown"
    FINISHED = "finished"


def ensure_log_dir(log_root: Path) -> Path:
    """Create timestamped log directory.

    Args:
        log_root: Root directory for logs

    Returns:
        Created log directory path
    """
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    log_dir = log_root / f"dqn_{timestamp}"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def write_hyperparams(log_dir: Path, params: dict) -> None:
    path = log_dir / "hyperparams.json"
    path.write_text(json.dumps(params, indent=2, default=str))


class DQNTrainer:
    """Main DQN training orchestrator.

    Drives a single GridEnv through episodes of at most `max_steps` steps with
    Double DQN updates from a hybrid replay buffer, a soft-updated target
    network, a sawtooth epsilon, periodic snapshots and interactive stop/save
    signals. `train` is a coroutine; it yields to the event loop every
    `yield_every` steps and at every episode boundary.
    """

    def __init__(
        self,
        training_config: TrainingConfig | None = None,
        exploration_config: ExplorationConfig | None = None,
        *,
        env_config: EnvConfig | None = None,
        paths: RunPaths | None = None,
        approximator_factory: ApproximatorFactory | None = None,
        signals: TrainingSignals | None = None,
        log_dir: Path | None = None,
        run_logger: RunLogger | None = None,
    ):
        """Initialize DQN trainer.

        Args:
            training_config: Training hyperparameters
            exploration_config: Sawtooth epsilon settings
            env_config: Environment settings (defaults follow training_config)
            paths: Snapshot output, log root and optional resume directory
            approximator_factory: Builds a fresh approximator for a learning rate
            signals: Stop/save flags shared with the input listener
            log_dir: Override log directory (if None, creates timestamped)
            run_logger: MLflow logger (if None, uses NullRunLogger)
        """
        self.training_config = training_config or TrainingConfig()
        self.exploration_config = exploration_config or ExplorationConfig()
        self.paths = paths or RunPaths()
        self.output = self.paths.output
        self.phase = TrainerPhase.INIT

        self._setup_random_seeds()
        self.device = torch.device(self.training_config.device)

        self.env = GridEnv(
            env_config
            or EnvConfig(
                obstacle_pattern=self.training_config.obstacle_pattern,
                seed=self.training_config.seed,
            )
        )
        self.scheduler = ExplorationScheduler(self.exploration_config, rng=self._rng)
        self.signals = signals or TrainingSignals()

        self.log_dir = log_dir if log_dir is not None else ensure_log_dir(self.paths.log_root)
        self.metrics_tracker = MetricsTracker(self.log_dir, window=self.training_config.rolling_window)
        self.logger = DQNLogger(
            run_logger or NullRunLogger(),
            self.log_dir,
            use_tensorboard=self.training_config.use_tensorboard,
        )

        self._approximator_factory = approximator_factory or self._default_approximator
        self.state = self._load_state(self.paths.resume_from)
        self.main = self._build_approximator(self.paths.resume_from)
        self.main.set_learning_rate(self.current_learning_rate())
        self.target = self.main.clone()
        self.state.epsilon = self.scheduler.resume_epsilon(self.state.epsilon)

        self._pending: Set[asyncio.Task] = set()
        self.episodes_run = 0
        self.final_snapshot: Path | None = None

        self._write_hyperparams()
        self._log_params()

    @property
    def buffer(self) -> ReplayBuffer:
        return self.state.replay_buffer

    # ------------------------------------------------------------------ #
    # INIT
    # ------------------------------------------------------------------ #
    def _setup_random_seeds(self) -> None:
        seed = self.training_config.seed
        self._rng = np.random.default_rng(seed)
        if seed is not None:
            torch.manual_seed(seed)

    def _default_approximator(self, lr: float) -> Approximator:
        return TorchApproximator(lr=lr, device=self.device)

    def _load_state(self, resume_from: Path | None) -> TrainingState:
        cfg = self.training_config
        state = None
        if resume_from is not None:
            state = load_training_state(resume_from, capacity=cfg.buffer_size, rng=self._rng)
            if state is None:
                print(f"[train] No usable checkpoint in {resume_from}; starting fresh")
            else:
                print(
                    f"[train] Resumed at episode {state.episode}, epsilon={state.epsilon:.5f}, "
                    f"buffer={len(state.replay_buffer)}"
                )
        if state is None:
            state = TrainingState(
                replay_buffer=ReplayBuffer(cfg.buffer_size, rng=self._rng),
                base_learning_rate=cfg.lr,
            )
        return state

    def _build_approximator(self, resume_from: Path | None) -> Approximator:
        approximator = self._approximator_factory(self.state.base_learning_rate)
        if resume_from is None:
            return approximator

        model_path = snapshot_model_path(resume_from)
        if not model_path.exists():
            self.logger.log_warning(f"No model weights at {model_path}; using a fresh approximator")
            return approximator
        try:
            approximator.load(model_path)
        except (OSError, RuntimeError, ValueError, EOFError, pickle.UnpicklingError) as exc:
            self.logger.log_warning(f"Failed to load model from {model_path} ({exc}); using a fresh approximator")
            return self._approximator_factory(self.state.base_learning_rate)
        print(f"[train] Loaded model weights from {model_path}")
        return approximator

    def current_learning_rate(self) -> float:
        return self.training_config.learning_rate_for(self.state.base_learning_rate, self.state.episode)

    # ------------------------------------------------------------------ #
    # EPISODE_LOOP
    # ------------------------------------------------------------------ #
    async def train(self) -> Path | None:
        """Run until the episode cap or a stop signal, then write the final snapshot.

        Returns:
            The final snapshot directory, or None if writing it failed
        """
        self.signals.bind(asyncio.get_running_loop())
        self.phase = TrainerPhase.EPISODE_LOOP
        print("[train] Training started. Press ENTER to stop and save, 's' + ENTER to save a snapshot.")
        try:
            while not self._should_stop():
                await self._run_episode()
                if self.signals.consume_save():
                    print("[train] Save signal received")
                    self._schedule_snapshot(signal_snapshot_name())
                await asyncio.sleep(0)

            if self.signals.stop_requested:
                print("[train] Stop signal received; finishing up")
            self.phase = TrainerPhase.SHUTDOWN
            self.final_snapshot = await self._shutdown()
        finally:
            self.logger.close()
            self.phase = TrainerPhase.FINISHED
        return self.final_snapshot

    def run(self) -> Path | None:
        """Blocking entry point that owns its own event loop."""
        return asyncio.run(self.train())

    def _should_stop(self) -> bool:
        if self.signals.stop_requested:
            return True
        episodes = self.training_config.episodes
        return episodes is not None and self.episodes_run >= episodes

    def _q_values(self, observation: EncodedObservation) -> np.ndarray:
        return self.main.predict(observation.grid[None], observation.offset[None])[0]

    async def _run_episode(self) -> EpisodeStats:
        cfg = self.training_config
        state = self.state

        observation = encode_observation(self.env.reset())
        total_reward = 0.0
        losses: list[float] = []
        max_qs: list[float] = []
        breakdown: Dict[str, float] = {}
        steps = 0

        for step in range(cfg.max_steps):
            action = self.scheduler.select_action(self._q_values, observation, state.epsilon)
            result = self.env.step(Action(action))
            reward = clip_reward(
                result.reward,
                step_penalty=cfg.step_penalty,
                low=cfg.reward_min,
                high=cfg.reward_max,
            )
            total_reward += reward
            steps += 1
            for component, value in result.info.get("reward_breakdown", {}).items():
                breakdown[component] = breakdown.get(component, 0.0) + value

            if result.done:
                break

            next_observation = encode_observation(result.state)
            self.buffer.push(
                Transition(
                    state=observation,
                    action=action,
                    reward=reward,
                    next_state=next_observation,
                    done=result.done,
                    priority=abs(reward),
                )
            )

            if len(self.buffer) >= cfg.batch_size:
                batch = (
                    self.buffer.sample_hybrid(cfg.batch_size, alpha=cfg.recency_alpha)
                    if cfg.use_prioritized
                    else self.buffer.sample_uniform(cfg.batch_size)
                )
                learned = learn_from_batch(
                    self.main,
                    self.target,
                    batch,
                    gamma=cfg.gamma,
                    clip_value=cfg.grad_clip,
                )
                self.buffer.update_priorities(batch, learned.td_errors)
                losses.append(learned.loss)
                max_qs.append(learned.max_q)

            observation = next_observation
            if step % cfg.yield_every == 0:
                await asyncio.sleep(0)

        stats = EpisodeStats.from_history(state.episode, total_reward, losses, max_qs, steps)
        self._finish_episode(stats, breakdown)
        return stats

    def _finish_episode(self, stats: EpisodeStats, breakdown: Dict[str, float]) -> None:
        cfg = self.training_config
        state = self.state

        state.episode_rewards.append(stats.total_reward)
        state.episode_losses.append(stats.mean_loss)
        state.episode_max_qs.append(stats.avg_max_q)

        rolling = self.metrics_tracker.record_episode(
            stats,
            epsilon=state.epsilon,
            items=self.env.item_counts(),
            penalties=self.env.penalty_stats(),
            reward_breakdown=breakdown,
        )
        self.logger.log_episode(stats, state.epsilon, len(self.buffer), breakdown)
        if stats.episode % cfg.summary_every == 0:
            self._print_summary(stats.episode, rolling)

        state.episode += 1
        self.episodes_run += 1
        episode = state.episode

        if episode % cfg.lr_decay_every == 0:
            lr = self.current_learning_rate()
            self.main.set_learning_rate(lr)
            self.logger.log_learning_rate(lr, episode)
            print(f"[train] Updating optimizer: new learning rate = {lr:.6f}")

        state.epsilon = self.scheduler.next_epsilon(state.epsilon, episode)

        if episode % cfg.purge_every == 0 and len(self.buffer) > 0:
            removed = self.buffer.purge(cfg.purge_fraction)
            print(f"[train] Purged {removed} oldest transitions from the replay buffer")

        soft_update(self.target, self.main, cfg.tau)
        if episode % cfg.summary_every == 0:
            print(f"[train] Performed soft update for target network at episode {episode}")

        if episode % cfg.snapshot_every == 0:
            recent = state.episode_rewards[-SNAPSHOT_REWARD_WINDOW:]
            avg_reward = sum(recent) / len(recent) if recent else 0.0
            self._schedule_snapshot(periodic_snapshot_name(episode, avg_reward))

    def _print_summary(self, episode: int, rolling: Dict[str, float]) -> None:
        window = self.training_config.rolling_window
        print(f"[train] Episodes {max(1, episode - window + 1)}-{episode} summary:")
        print(f"  Avg Reward      = {rolling['rolling_reward']:.2f}")
        print(f"  Avg Mean Loss   = {rolling['rolling_mean_loss']:.5f}")
        print(f"  Avg Median Loss = {rolling['rolling_median_loss']:.5f}")
        print(f"  Avg Max Q Value = {rolling['rolling_max_q']:.5f}")
        print(f"  Epsilon         = {self.state.epsilon:.5f}")
        self.env.log_penalty_stats()

    # ------------------------------------------------------------------ #
    # Snapshots
    # ------------------------------------------------------------------ #
    def _capture_snapshot(self) -> Snapshot:
        return Snapshot(weights=self.main.get_weights(), state=self.state.frozen_copy())

    def _schedule_snapshot(self, name: str) -> asyncio.Task:
        """Fire-and-forget write of the current weights and state."""
        task = asyncio.create_task(self._write_snapshot(self._capture_snapshot(), self.output / name))
        self._pending.add(task)
        task.add_done_callback(self._snapshot_done)
        return task

    def _snapshot_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.logger.log_warning(f"Snapshot task failed: {exc!r}")

    async def _write_snapshot(self, snapshot: Snapshot, directory: Path) -> Path | None:
        try:
            await asyncio.to_thread(write_snapshot, snapshot, directory)
        except (OSError, RuntimeError, TypeError, ValueError) as exc:
            self.logger.log_warning(f"Snapshot write to {directory} failed: {exc}")
            return None
        print(f"[snapshot] Saved model and training state to {directory}")
        return directory

    # ------------------------------------------------------------------ #
    # SHUTDOWN
    # ------------------------------------------------------------------ #
    async def _shutdown(self) -> Path | None:
        if self._pending:
            # Failures are reported by _snapshot_done; the final save still runs.
            await asyncio.gather(*list(self._pending), return_exceptions=True)

        print("[train] Saving final model and training state...")
        final_dir = await self._write_snapshot(self._capture_snapshot(), self.output / final_snapshot_name())

        self.logger.log_final(
            episodes=self.state.episode,
            buffer_size=len(self.buffer),
            epsilon=self.state.epsilon,
        )
        self.logger.log_artifact(self.metrics_tracker.metrics_path)
        self.logger.log_artifact(self.metrics_tracker.summary_path)
        if final_dir is not None:
            self.logger.log_artifact(final_dir)
            print("[train] Final model and training state saved. Training complete.")
        return final_dir

    # ------------------------------------------------------------------ #
    # Parameters
    # ------------------------------------------------------------------ #
    def _params(self) -> dict:
        params = {
            **asdict(self.training_config),
            **{f"exploration_{k}": v for k, v in asdict(self.exploration_config).items()},
            "obstacle_pattern": self.env.config.obstacle_pattern,
            "board": f"{self.env.width}x{self.env.height}",
            "output": self.output,
            "resume_from": self.paths.resume_from,
        }
        return {k: (str(v) if isinstance(v, Path) else v) for k, v in params.items()}

    def _write_hyperparams(self) -> None:
        write_hyperparams(self.log_dir, self._params())

    def _log_params(self) -> None:
        self.logger.run_logger.log_params(self._params())
        self.logger.run_logger.set_tags({"phase": "dqn_train"})


__all__ = ["DQNTrainer", "TrainerPhase", "ensure_log_dir"]
