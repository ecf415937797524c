"""Unified logger for MLflow, TensorBoard, and console output."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from solidblock.solver.core import RunLogger
    from solidblock.solver.trainers.components.metrics_tracker import EpisodeStats


class DQNLogger:
    """Unified logger for MLflow, TensorBoard, and console.

    Every metric goes to the run logger and, when enabled, to TensorBoard
    under the same tag.
    """

    def __init__(
        self,
        run_logger: RunLogger,
        log_dir: Path,
        use_tensorboard: bool = True,
    ):
        """Initialize unified logger.

        Args:
            run_logger: MLflow run logger (or NullRunLogger)
            log_dir: Directory for TensorBoard logs
            use_tensorboard: Whether to enable TensorBoard logging
        """
        self.run_logger = run_logger
        self.log_dir = log_dir

        self.tb_writer = None
        if use_tensorboard:
            try:
                from torch.utils.tensorboard import SummaryWriter

                self.tb_writer = SummaryWriter(log_dir=str(log_dir / "tensorboard"))
                print(f"[train] TensorBoard logging enabled: {log_dir / 'tensorboard'}")
            except ImportError:
                print("[warn] TensorBoard not available (torch.utils.tensorboard not found)")

    def _scalar(self, tag: str, value: float, step: int) -> None:
        self.run_logger.log_metric(tag, value, step)
        if self.tb_writer is not None:
            self.tb_writer.add_scalar(tag, value, step)

    def log_episode(
        self,
        stats: EpisodeStats,
        epsilon: float,
        buffer_size: int,
        reward_breakdown: dict[str, float],
    ) -> None:
        """Log one finished episode.

        Args:
            stats: Per-episode statistics
            epsilon: Epsilon used during the episode
            buffer_size: Replay buffer size at episode end
            reward_breakdown: Summed environment reward components
        """
        episode = stats.episode
        self._scalar("train/total_reward", stats.total_reward, episode)
        self._scalar("train/mean_loss", stats.mean_loss, episode)
        self._scalar("train/median_loss", stats.median_loss, episode)
        self._scalar("train/avg_max_q", stats.avg_max_q, episode)
        self._scalar("train/epsilon", epsilon, episode)
        self._scalar("train/buffer_size", float(buffer_size), episode)
        self._scalar("train/steps", float(stats.steps), episode)

        for component, value in reward_breakdown.items():
            self._scalar(f"reward_components/{component}", value, episode)

    def log_learning_rate(self, lr: float, episode: int) -> None:
        self._scalar("train/learning_rate", lr, episode)

    def log_warning(self, message: str) -> None:
        """Print a recoverable failure and forward it to the run logger."""
        print(f"[warn] {message}")
        self.run_logger.log_warning(message)

    def log_final(self, episodes: int, buffer_size: int, epsilon: float) -> None:
        self.run_logger.log_metric("final/episodes", float(episodes), episodes)
        self.run_logger.log_metric("final/buffer_size", float(buffer_size), episodes)
        self.run_logger.log_metric("final/epsilon", epsilon, episodes)

    def log_artifact(self, path: Path) -> None:
        self.run_logger.log_artifact(path)

    def close(self) -> None:
        """Close all logging backends."""
        if self.tb_writer is not None:
            self.tb_writer.close()
        self.run_logger.close()
