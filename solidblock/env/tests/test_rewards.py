"""Unit tests for the per-step reward engines."""

import pytest

from solidblock.env.config import ShapingConfig
from solidblock.env.constants import Action
from solidblock.env.rewards import build_reward_system
from solidblock.env.rewards.base import RewardContext
from solidblock.env.rewards.exploration import ExplorationBonus
from solidblock.env.rewards.patterns import (
    PatternPenalty,
    dominant_count,
    has_repeated_cycle,
    is_alternating,
    is_constant,
)
from solidblock.env.rewards.potential import PotentialReward
from solidblock.env.state import Position

U, D, L, R = Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT


def _ctx(previous=(5, 5), current=(5, 5), food=(8, 5), history=(), first_visit=False):
    return RewardContext(
        previous=Position(*previous),
        current=Position(*current),
        food=Position(*food) if food is not None else None,
        history=tuple(history),
        first_visit=first_visit,
    )


@pytest.fixture
def patterns():
    shaping = ShapingConfig()
    return PatternPenalty(
        cycle_penalty=shaping.cycle_penalty,
        constant_penalty=shaping.constant_penalty,
        alternating_penalty=shaping.alternating_penalty,
        dominant_penalty=shaping.dominant_penalty,
        dominant_ratio=shaping.dominant_ratio,
    )


class TestPatternHelpers:
    """Tests for the history predicates."""

    def test_repeated_cycle(self):
        assert has_repeated_cycle([R, D, L, U, R, D, L, U])
        assert not has_repeated_cycle([R, D, L, U, R, D, L, D])
        assert not has_repeated_cycle([R, D, L, U])

    def test_constant(self):
        assert is_constant([U] * 10)
        assert not is_constant([U] * 9 + [D])

    def test_alternating(self):
        assert is_alternating([U, D] * 5)
        assert not is_alternating([U, U, D, D, U, D, U, D, U, D])
        assert not is_alternating([U, D, L, U, D, L, U, D, L, U])

    def test_dominant_count(self):
        assert dominant_count([U, U, U, D, U, U, U, L, U, U]) == 8
        assert dominant_count([]) == 0


class TestPatternPenalty:
    """Tests for the combined pattern penalty."""

    def test_constant_run(self, patterns):
        """Ten identical moves trip both the cycle and constant checks."""
        result = patterns.compute(_ctx(history=[U] * 10))
        assert result.value == pytest.approx(-3.5)
        assert set(result.breakdown) == {"cycle", "constant"}

    def test_alternating_run(self, patterns):
        """Strict two-way alternation is penalised like a constant run."""
        result = patterns.compute(_ctx(history=[U, D] * 5))
        assert result.value == pytest.approx(-3.5)
        assert set(result.breakdown) == {"cycle", "alternating"}

    def test_dominant_action(self, patterns):
        """Eight of ten moves in one direction costs 0.5."""
        result = patterns.compute(_ctx(history=[U, U, U, D, U, U, U, L, U, U]))
        assert result.value == pytest.approx(-0.5)
        assert set(result.breakdown) == {"dominant"}

    def test_mixed_history_is_free(self, patterns):
        """Seven of ten is below the dominance threshold."""
        result = patterns.compute(_ctx(history=[U, U, D, U, L, U, U, R, U, U]))
        assert result.value == 0.0
        assert result.breakdown == {}

    def test_short_history_is_free(self, patterns):
        assert patterns.compute(_ctx(history=[U] * 7)).value == 0.0


class TestPotentialReward:
    """Tests for distance shaping and the no-progress penalty."""

    @pytest.fixture
    def engine(self):
        return PotentialReward(distance_scale=1.0, progress_threshold=0.5, progress_penalty=0.5)

    def test_closer(self, engine):
        assert engine.compute(_ctx(current=(6, 5))).value == pytest.approx(1.0)

    def test_sideways(self, engine):
        result = engine.compute(_ctx(current=(5, 6)))
        assert result.value == pytest.approx(-1.0 - 0.5)

    def test_stalled(self, engine):
        result = engine.compute(_ctx())
        assert result.value == pytest.approx(-0.5)
        assert result.breakdown == {"no_progress": -0.5}

    def test_no_food(self, engine):
        assert engine.compute(_ctx(food=None)).value == 0.0


def test_exploration_bonus_only_on_first_visit():
    engine = ExplorationBonus(bonus=0.6)
    assert engine.compute(_ctx(first_visit=True)).value == pytest.approx(0.6)
    assert engine.compute(_ctx(first_visit=False)).value == 0.0


def test_reward_system_combines_engines():
    """A blocked move with no progress pays -0.5 - 3."""
    system = build_reward_system(ShapingConfig())
    result = system.engine.compute(_ctx(history=[U]))
    assert result.value == pytest.approx(-3.5)
    assert set(result.breakdown) == {"no_progress", "wall"}
    assert system.food_score == 40.0
