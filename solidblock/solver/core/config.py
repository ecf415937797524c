from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True)
class RunPaths:
    """Filesystem layout for a training run: logs, snapshot output and an optional resume source."""

    log_root: Path = Path("logs/dqn_training")
    output: Path = Path("models")
    resume_from: Path | None = None


__all__ = ["RunPaths"]
