"""Unit tests for policy evaluation and its CLI."""

import pytest
import torch

from solidblock.solver.evaluate_policy import main as evaluate_main
from solidblock.solver.policies import TorchApproximator
from solidblock.solver.trainers import EvaluationConfig, evaluate_policy


@pytest.fixture
def approximator():
    torch.manual_seed(0)
    return TorchApproximator(device="cpu")


class TestEvaluatePolicy:
    """Tests for evaluate_policy."""

    def test_episode_details(self, approximator):
        config = EvaluationConfig(eval_episodes=2, max_steps=5, seed=0)
        result = evaluate_policy(approximator, config)

        assert len(result.episodes) == 2
        assert [ep["episode"] for ep in result.episodes] == [1, 2]
        for episode in result.episodes:
            assert {"score", "food", "green", "red", "cycle_penalties", "wall_penalties"} <= set(episode)
        assert result.avg_score == pytest.approx(sum(ep["score"] for ep in result.episodes) / 2)
        assert set(result.item_averages()) == {"food", "green", "red", "cycle_penalties", "wall_penalties"}

    def test_greedy_is_reproducible(self, approximator):
        config = EvaluationConfig(eval_episodes=1, max_steps=20, eval_epsilon=0.0, seed=3)
        first = evaluate_policy(approximator, config)
        second = evaluate_policy(approximator, config)
        assert first.avg_score == second.avg_score

    def test_cli(self, approximator, tmp_path, capsys):
        approximator.save(tmp_path / "model.pt")
        evaluate_main(["--model-path", str(tmp_path), "--episodes", "1", "--max-steps", "5", "--device", "cpu"])
        out = capsys.readouterr().out
        assert "[eval] episode=1" in out
        assert "avg_score=" in out
