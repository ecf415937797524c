"""Metrics tracking with rolling windows and CSV logging."""

from __future__ import annotations

import json
import statistics
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence


@dataclass(frozen=True)
class EpisodeStats:
    episode: int
    total_reward: float
    mean_loss: float
    median_loss: float
    avg_max_q: float
    steps: int

    @classmethod
    def from_history(
        cls,
        episode: int,
        total_reward: float,
        losses: Sequence[float],
        max_qs: Sequence[float],
        steps: int,
    ) -> "EpisodeStats":
        return cls(
            episode=episode,
            total_reward=total_reward,
            mean_loss=statistics.fmean(losses) if losses else 0.0,
            median_loss=statistics.median(losses) if losses else 0.0,
            avg_max_q=statistics.fmean(max_qs) if max_qs else 0.0,
            steps=steps,
        )


class MetricsTracker:
    """Tracks training metrics with rolling windows and CSV logging.

    Handles:
    - Rolling window statistics (20-episode averages by default)
    - CSV logging for per-episode and summary metrics
    - Best rolling reward seen so far
    """

    def __init__(self, log_dir: Path, window: int = 20):
        """Initialize metrics tracker.

        Args:
            log_dir: Directory for writing CSV files
            window: Number of episodes in each rolling average
        """
        self.log_dir = log_dir
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.metrics_path = log_dir / "metrics.csv"
        self.summary_path = log_dir / "metrics_summary.csv"

        self.reward_window: deque[float] = deque(maxlen=window)
        self.mean_loss_window: deque[float] = deque(maxlen=window)
        self.median_loss_window: deque[float] = deque(maxlen=window)
        self.max_q_window: deque[float] = deque(maxlen=window)

        self.best_rolling_reward: float | None = None

        self._init_csv_files()

    def _init_csv_files(self) -> None:
        """Initialize CSV files with headers."""
        if not self.metrics_path.exists():
            with self.metrics_path.open("w", encoding="utf-8", newline="") as handle:
                handle.write(
                    "episode,total_reward,steps,epsilon,mean_loss,median_loss,avg_max_q,"
                    "food,green,red,cycle_penalties,wall_penalties,reward_breakdown\n"
                )

        if not self.summary_path.exists():
            with self.summary_path.open("w", encoding="utf-8", newline="") as handle:
                handle.write(
                    "episode,rolling_reward,rolling_mean_loss,rolling_median_loss,rolling_max_q\n"
                )

    def record_episode(
        self,
        stats: EpisodeStats,
        epsilon: float,
        items: dict[str, int],
        penalties: dict[str, int],
        reward_breakdown: dict[str, float],
    ) -> dict[str, float]:
        """Record episode metrics to CSV files.

        Returns:
            Dictionary with rolling averages
        """
        self.reward_window.append(stats.total_reward)
        self.mean_loss_window.append(stats.mean_loss)
        self.median_loss_window.append(stats.median_loss)
        self.max_q_window.append(stats.avg_max_q)

        rolling = self.rolling()
        if self.best_rolling_reward is None or rolling["rolling_reward"] > self.best_rolling_reward:
            self.best_rolling_reward = rolling["rolling_reward"]

        with self.summary_path.open("a", encoding="utf-8", newline="") as handle:
            handle.write(
                f"{stats.episode},{rolling['rolling_reward']:.4f},{rolling['rolling_mean_loss']:.6f},"
                f"{rolling['rolling_median_loss']:.6f},{rolling['rolling_max_q']:.4f}\n"
            )

        reward_json = json.dumps(reward_breakdown, sort_keys=True).replace('"', '""')
        with self.metrics_path.open("a", encoding="utf-8", newline="") as handle:
            handle.write(
                f"{stats.episode},{stats.total_reward:.4f},{stats.steps},{epsilon:.4f},"
                f"{stats.mean_loss:.6f},{stats.median_loss:.6f},{stats.avg_max_q:.4f},"
                f"{items.get('food', 0)},{items.get('green', 0)},{items.get('red', 0)},"
                f"{penalties.get('cycle_penalties', 0)},{penalties.get('wall_penalties', 0)},"
                f'"{reward_json}"\n'
            )

        return rolling

    def rolling(self) -> dict[str, float]:
        def _mean(window: deque[float]) -> float:
            return sum(window) / len(window) if window else 0.0

        return {
            "rolling_reward": _mean(self.reward_window),
            "rolling_mean_loss": _mean(self.mean_loss_window),
            "rolling_median_loss": _mean(self.median_loss_window),
            "rolling_max_q": _mean(self.max_q_window),
        }
