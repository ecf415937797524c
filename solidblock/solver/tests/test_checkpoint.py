"""Unit tests for training-state checkpoints and snapshot directories."""

import json

import numpy as np
import pytest
import torch

from solidblock.solver.checkpoint import (
    CHECKPOINT_FILENAME,
    MODEL_FILENAME,
    Snapshot,
    TrainingState,
    final_snapshot_name,
    load_training_state,
    periodic_snapshot_name,
    save_training_state,
    signal_snapshot_name,
    snapshot_model_path,
    write_snapshot,
)
from solidblock.solver.data import ReplayBuffer, Transition
from solidblock.solver.observation import EncodedObservation


def _obs(value: float) -> EncodedObservation:
    return EncodedObservation(
        grid=np.full((9, 9, 6), value, dtype=np.float32),
        offset=np.array([value, 0.5], dtype=np.float32),
    )


@pytest.fixture
def state():
    buffer = ReplayBuffer(10)
    for i in range(3):
        buffer.push(Transition(_obs(i), i, float(i) - 1.0, _obs(i + 1), i == 2, abs(float(i) - 1.0)))
    return TrainingState(
        replay_buffer=buffer,
        episode=42,
        epsilon=0.37,
        episode_losses=[0.5, 0.25],
        episode_max_qs=[1.5, 2.0],
        base_learning_rate=5e-4,
        episode_rewards=[3.0],
    )


class TestTrainingState:
    """Tests for checkpoint.json round trips."""

    def test_round_trip(self, state, tmp_path):
        path = save_training_state(state, tmp_path / CHECKPOINT_FILENAME)
        restored = load_training_state(tmp_path, capacity=10)

        assert path.exists()
        assert restored.episode == 42
        assert restored.epsilon == pytest.approx(0.37)
        assert restored.episode_losses == [0.5, 0.25]
        assert restored.episode_max_qs == [1.5, 2.0]
        assert restored.base_learning_rate == pytest.approx(5e-4)
        assert len(restored.replay_buffer) == 3
        assert restored.replay_buffer[2].done is True
        np.testing.assert_allclose(restored.replay_buffer[1].state.grid, 1.0)

    def test_file_keys(self, state, tmp_path):
        path = save_training_state(state, tmp_path / "ckpt.json")
        payload = json.loads(path.read_text())
        assert set(payload) == {
            "episode",
            "epsilon",
            "replayBuffer",
            "episodeLosses",
            "episodeMaxQs",
            "baseLearningRate",
        }

    def test_capacity_applies_on_load(self, state, tmp_path):
        save_training_state(state, tmp_path / CHECKPOINT_FILENAME)
        restored = load_training_state(tmp_path / CHECKPOINT_FILENAME, capacity=2)
        assert len(restored.replay_buffer) == 2
        assert restored.replay_buffer[0].action == 1

    def test_missing_checkpoint(self, tmp_path):
        assert load_training_state(tmp_path / "nowhere", capacity=10) is None

    def test_malformed_checkpoint(self, tmp_path, capsys):
        (tmp_path / CHECKPOINT_FILENAME).write_text("{not json")
        assert load_training_state(tmp_path, capacity=10) is None
        assert "[warn]" in capsys.readouterr().out

    def test_non_object_checkpoint(self, tmp_path):
        (tmp_path / CHECKPOINT_FILENAME).write_text("[1, 2, 3]")
        assert load_training_state(tmp_path, capacity=10) is None

    def test_frozen_copy_is_detached(self, state):
        frozen = state.frozen_copy()
        state.replay_buffer[0].priority = 99.0
        state.replay_buffer.push(Transition(_obs(5), 0, 0.0, _obs(6), False, 0.0))
        state.episode_losses.append(7.0)

        assert frozen.replay_buffer[0].priority == pytest.approx(1.0)
        assert len(frozen.replay_buffer) == 3
        assert frozen.episode_losses == [0.5, 0.25]


class TestSnapshots:
    """Tests for snapshot directories and their names."""

    def test_write_snapshot(self, state, tmp_path):
        weights = {"layer.weight": torch.ones(2, 2)}
        directory = write_snapshot(Snapshot(weights, state), tmp_path / "snap")

        assert (directory / MODEL_FILENAME).exists()
        assert (directory / CHECKPOINT_FILENAME).exists()
        loaded = torch.load(directory / MODEL_FILENAME, weights_only=True)
        assert torch.equal(loaded["layer.weight"], torch.ones(2, 2))

    def test_names(self):
        assert periodic_snapshot_name(200, 12.345).startswith("snapshot_200_12.35_")
        assert signal_snapshot_name().startswith("model_snapshot_")
        assert final_snapshot_name().startswith("saved-model_")

    def test_model_path(self, tmp_path):
        assert snapshot_model_path(tmp_path) == tmp_path / MODEL_FILENAME
        assert snapshot_model_path(tmp_path / "weights.pt") == tmp_path / "weights.pt"
