from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Iterable, List, Sequence

import numpy as np

from solidblock.solver.observation import EncodedObservation


@dataclass
class Transition:
    state: EncodedObservation
    action: int
    reward: float
    next_state: EncodedObservation
    done: bool
    priority: float

    def to_record(self) -> Dict[str, Any]:
        return {
            "state": _observation_record(self.state),
            "action": int(self.action),
            "reward": float(self.reward),
            "nextState": _observation_record(self.next_state),
            "done": bool(self.done),
            "priority": float(self.priority),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Transition":
        return cls(
            state=_observation_from_record(record["state"]),
            action=int(record["action"]),
            reward=float(record["reward"]),
            next_state=_observation_from_record(record["nextState"]),
            done=bool(record["done"]),
            priority=float(record.get("priority", abs(float(record["reward"])))),
        )


def _observation_record(obs: EncodedObservation) -> Dict[str, Any]:
    return {"grid": obs.grid.tolist(), "offset": obs.offset.tolist()}


def _observation_from_record(record: Dict[str, Any]) -> EncodedObservation:
    return EncodedObservation(
        grid=np.asarray(record["grid"], dtype=np.float32),
        offset=np.asarray(record["offset"], dtype=np.float32),
    )


class ReplayBuffer:
    """
    Bounded FIFO of transitions with uniform and hybrid sampling.

    Hybrid sampling mixes uniform draws with roulette-wheel draws whose weight
    is the stored priority scaled by `((i + 1) / len) ** alpha`, so newer
    entries (higher index) are favoured.
    """

    def __init__(self, capacity: int, *, rng: np.random.Generator | None = None):
        if capacity <= 0:
            raise ValueError("ReplayBuffer capacity must be positive.")
        self.capacity = capacity
        self._buffer: Deque[Transition] = deque(maxlen=capacity)
        self._rng = rng or np.random.default_rng()

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self):
        return iter(self._buffer)

    def __getitem__(self, index: int) -> Transition:
        return self._buffer[index]

    def push(self, transition: Transition) -> Transition:
        self._buffer.append(transition)
        return transition

    def extend(self, transitions: Iterable[Transition]) -> None:
        for transition in transitions:
            self.push(transition)

    def purge(self, fraction: float = 0.2) -> int:
        """Drop the oldest `floor(len * fraction)` entries and return how many went."""
        if not 0.0 <= fraction <= 1.0:
            raise ValueError(f"fraction must be in [0, 1], got {fraction}")
        removed = math.floor(len(self._buffer) * fraction)
        for _ in range(removed):
            self._buffer.popleft()
        return removed

    def sample_uniform(self, batch_size: int) -> List[Transition]:
        if not self._buffer:
            raise ValueError("Cannot sample from an empty buffer.")
        indices = self._rng.integers(len(self._buffer), size=batch_size)
        return [self._buffer[int(idx)] for idx in indices]

    def sample_hybrid(self, batch_size: int, alpha: float = 2.0) -> List[Transition]:
        if len(self._buffer) < batch_size:
            return list(self._buffer)

        prioritized_count = batch_size // 2
        batch = self.sample_uniform(batch_size - prioritized_count)
        if prioritized_count == 0:
            return batch

        length = len(self._buffer)
        priorities = np.fromiter((t.priority for t in self._buffer), dtype=np.float64, count=length)
        recency = (np.arange(1, length + 1, dtype=np.float64) / length) ** alpha
        weights = priorities * recency
        total = weights.sum()
        if not np.isfinite(total) or total <= 0.0:
            return batch + self.sample_uniform(prioritized_count)

        indices = self._rng.choice(length, size=prioritized_count, replace=True, p=weights / total)
        batch.extend(self._buffer[int(idx)] for idx in indices)
        return batch

    def update_priorities(self, batch: Sequence[Transition], td_errors: Iterable[float]) -> None:
        for transition, td_error in zip(batch, td_errors):
            transition.priority = abs(float(td_error))

    def snapshot(self) -> List[Transition]:
        return list(self._buffer)

    def to_records(self) -> List[Dict[str, Any]]:
        return [transition.to_record() for transition in self._buffer]

    @classmethod
    def from_records(
        cls,
        records: Iterable[Dict[str, Any]],
        capacity: int,
        *,
        rng: np.random.Generator | None = None,
    ) -> "ReplayBuffer":
        buffer = cls(capacity, rng=rng)
        buffer.extend(Transition.from_record(record) for record in records)
        return buffer


__all__ = ["ReplayBuffer", "Transition"]
