from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Sequence

from solidblock.env.constants import Action
from solidblock.env.rewards.base import RewardContext, RewardEngine, RewardResult

CYCLE_WINDOW = 8
REPEAT_WINDOW = 10


@dataclass
class PatternPenalty(RewardEngine):
    """
    Penalties for degenerate trailing move patterns.

    The 4-move cycle check is independent of the 10-move checks; of the latter
    at most one fires: constant, then strict two-way alternation, then a single
    dominant action.
    """

    cycle_penalty: float
    constant_penalty: float
    alternating_penalty: float
    dominant_penalty: float
    dominant_ratio: float = 0.8

    def compute(self, ctx: RewardContext) -> RewardResult:
        breakdown: Dict[str, float] = {}
        reward = 0.0
        history = ctx.history

        if self.cycle_penalty and has_repeated_cycle(history):
            reward -= self.cycle_penalty
            breakdown["cycle"] = -self.cycle_penalty

        if len(history) >= REPEAT_WINDOW:
            window = history[-REPEAT_WINDOW:]
            if is_constant(window):
                if self.constant_penalty:
                    reward -= self.constant_penalty
                    breakdown["constant"] = -self.constant_penalty
            elif is_alternating(window):
                if self.alternating_penalty:
                    reward -= self.alternating_penalty
                    breakdown["alternating"] = -self.alternating_penalty
            elif self.dominant_penalty and dominant_count(window) >= self.dominant_ratio * len(window):
                reward -= self.dominant_penalty
                breakdown["dominant"] = -self.dominant_penalty

        return RewardResult(value=reward, breakdown=breakdown)


def has_repeated_cycle(history: Sequence[Action]) -> bool:
    """True when the last 8 moves are the same 4-move sequence twice."""
    if len(history) < CYCLE_WINDOW:
        return False
    window = list(history[-CYCLE_WINDOW:])
    half = CYCLE_WINDOW // 2
    return window[:half] == window[half:]


def is_constant(window: Sequence[Action]) -> bool:
    return len(set(window)) == 1


def is_alternating(window: Sequence[Action]) -> bool:
    """Exactly two distinct moves with no move repeated back to back."""
    if len(set(window)) != 2:
        return False
    return all(a != b for a, b in zip(window, window[1:]))


def dominant_count(window: Sequence[Action]) -> int:
    if not window:
        return 0
    return Counter(window).most_common(1)[0][1]


__all__ = [
    "PatternPenalty",
    "has_repeated_cycle",
    "is_constant",
    "is_alternating",
    "dominant_count",
]
