"""Unit tests for GridEnv movement, pickups and spawning."""

import pytest

from solidblock.env import Action, BoardFullError, EnvConfig, GridEnv, Position


def _bare_env(**overrides) -> GridEnv:
    """Empty board with the player parked in the top-left corner."""
    config = EnvConfig(obstacle_pattern="none", seed=3, **overrides)
    env = GridEnv(config)
    env._player = Position(0, 0)
    env._visited = {Position(0, 0)}
    env._food = Position(10, 10)
    return env


class TestReset:
    """Tests for placement invariants after reset."""

    @pytest.mark.parametrize("seed", range(25))
    def test_player_and_food_on_free_distinct_cells(self, seed):
        """Player and food are in bounds, distinct and never on an obstacle."""
        env = GridEnv(EnvConfig(seed=seed))
        state = env.reset()

        for pos in (state.player, state.food):
            assert state.in_bounds(pos)
            assert not state.is_obstacle(pos)
        assert state.player != state.food

    def test_reset_clears_episode_bookkeeping(self):
        """Score, tick, blocks, history and counters start from zero."""
        env = _bare_env()
        for _ in range(35):
            env.step(Action.RIGHT)
        state = env.reset()

        assert state.tick_count == 0
        assert state.score == 0.0
        assert state.red_blocks == ()
        assert state.green_blocks == ()
        assert state.move_history == ()
        assert state.visited == frozenset({state.player})
        assert env.penalty_stats() == {"cycle_penalties": 0, "wall_penalties": 0}

    def test_board_full_raises(self):
        """A board with room for only the player cannot place food."""
        with pytest.raises(BoardFullError):
            GridEnv(EnvConfig(width=1, height=1, obstacle_pattern="none", max_placement_attempts=10))

    def test_same_seed_same_layout(self):
        """Placements are reproducible for a fixed seed."""
        first = GridEnv(EnvConfig(seed=11)).get_state()
        second = GridEnv(EnvConfig(seed=11)).get_state()
        assert (first.player, first.food) == (second.player, second.food)


class TestStep:
    """Tests for movement, shaping and pickups."""

    @pytest.mark.parametrize("seed", range(5))
    def test_moves_stay_legal(self, seed):
        """After every step the player is unchanged or one cell along the action."""
        env = GridEnv(EnvConfig(seed=seed))
        actions = list(Action)
        for i in range(200):
            action = actions[(i * 7 + seed) % 4]
            before = env.get_state().player
            state, _, done, _ = env.step(action)
            after = state.player

            assert done is False
            assert after in (before, before.shifted(action))
            assert state.in_bounds(after)
            assert not state.is_obstacle(after)

    def test_food_pickup(self):
        """Eating food pays the pickup plus shaping and relocates the food."""
        env = _bare_env()
        env._food = Position(1, 0)

        result = env.step(Action.RIGHT)

        # exploration 0.6 + distance 1.0 + food 40
        assert result.reward == pytest.approx(41.6)
        assert result.info["pickups"]["food"] == 1
        assert env.food_eaten == 1
        assert result.state.food is not None
        assert result.state.food != result.state.player

    def test_green_pickup_removes_a_red_block(self):
        """A green block pays +25 and takes one red block with it."""
        env = _bare_env()
        env._green_blocks = [Position(1, 0)]
        env._red_blocks = [Position(5, 5)]

        result = env.step(Action.RIGHT)

        # exploration 0.6 + distance 1.0 + green 25
        assert result.reward == pytest.approx(26.6)
        assert result.state.green_blocks == ()
        assert result.state.red_blocks == ()
        assert env.green_blocks_eaten == 1

    def test_red_pickup(self):
        """A red block costs 20."""
        env = _bare_env()
        env._red_blocks = [Position(1, 0)]

        result = env.step(Action.RIGHT)

        assert result.reward == pytest.approx(0.6 + 1.0 - 20.0)
        assert env.red_blocks_eaten == 1
        assert result.state.red_blocks == ()

    def test_wall_bump(self):
        """A rejected move pays the wall and no-progress penalties."""
        env = _bare_env()

        result = env.step(Action.UP)

        assert result.state.player == Position(0, 0)
        assert result.reward == pytest.approx(-3.5)
        assert env.wall_penalty_count == 1
        assert result.info["moved"] is False

    def test_obstacle_blocks_movement(self):
        """Stepping onto an obstacle leaves the player in place."""
        env = GridEnv(EnvConfig(seed=0))
        env._red_blocks = []
        env._green_blocks = []
        env._food = Position(0, 0)
        env._player = Position(4, 7)  # just left of the horizontal bar

        result = env.step(Action.RIGHT)

        assert result.state.player == Position(4, 7)
        assert "wall" in result.info["reward_breakdown"]

    def test_unknown_action_is_ignored(self):
        """An unrecognised action string changes nothing."""
        env = _bare_env()
        before = env.get_state()

        result = env.step("jump")

        assert result.reward == 0.0
        assert result.info["ignored"] is True
        assert result.state == before
        assert result.state.tick_count == 0
        assert result.state.move_history == ()

    def test_uninitialised_env_raises(self):
        """Stepping or snapshotting without a placed player is an error."""
        env = _bare_env()
        env._player = None

        with pytest.raises(RuntimeError, match="Call reset\\(\\) before step"):
            env.step(Action.RIGHT)
        with pytest.raises(RuntimeError, match="Call reset\\(\\) before get_state"):
            env.get_state()

    def test_action_names_are_accepted(self):
        """Lower-case direction names map onto actions."""
        env = _bare_env()
        result = env.step("right")
        assert result.state.player == Position(1, 0)

    def test_history_is_capped(self):
        """Only the last 20 actions are kept."""
        env = _bare_env()
        for _ in range(30):
            env.step(Action.DOWN)
        assert len(env.get_state().move_history) == 20

    def test_cycle_penalty_counter(self):
        """Repeating a 4-move loop twice trips the cycle penalty."""
        env = _bare_env()
        env._player = Position(5, 5)
        loop = [Action.RIGHT, Action.DOWN, Action.LEFT, Action.UP]
        for action in loop * 2:
            result = env.step(action)
        assert "cycle" in result.info["reward_breakdown"]
        assert env.cycle_penalty_count == 1


class TestSpawning:
    """Tests for periodic red/green spawning."""

    def test_pair_spawns_on_interval(self):
        """One red and one green block appear every spawn interval."""
        env = _bare_env()
        env._player = Position(0, 5)
        moves = [Action.DOWN, Action.UP]
        for i in range(29):
            env.step(moves[i % 2])
        state = env.get_state()
        assert state.red_blocks == () and state.green_blocks == ()

        state = env.step(Action.DOWN).state
        assert state.tick_count == 30
        assert len(state.red_blocks) == 1
        assert len(state.green_blocks) == 1
        assert state.red_blocks[0] != state.green_blocks[0]


class TestSnapshots:
    """Tests for get_state isolation and pattern switching."""

    def test_snapshot_does_not_alias(self):
        """Later steps do not change an earlier snapshot."""
        env = _bare_env()
        snapshot = env.get_state()
        env.step(Action.RIGHT)
        assert snapshot.player == Position(0, 0)
        assert snapshot.move_history == ()
        assert snapshot.visited == frozenset({Position(0, 0)})

    def test_set_obstacle_pattern_keeps_score(self):
        """Changing the layout keeps score and uncovered positions."""
        env = _bare_env()
        env.step(Action.RIGHT)
        score = env.score
        player = env.get_state().player

        env.set_obstacle_pattern("diamond")

        state = env.get_state()
        assert len(state.obstacles) == 25
        assert state.score == score
        assert state.player == player

    def test_set_obstacle_pattern_moves_covered_entities(self):
        """Entities under the new layout are moved to free cells."""
        env = _bare_env()
        env._player = Position(9, 7)

        env.set_obstacle_pattern("normal")

        state = env.get_state()
        assert not state.is_obstacle(state.player)
        assert not state.is_obstacle(state.food)

    def test_unknown_pattern_falls_back(self):
        """Unknown layout names use the default cross."""
        env = _bare_env()
        env.set_obstacle_pattern("spiral")
        assert len(env.obstacles) == 45
