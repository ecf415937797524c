from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List, NamedTuple, Set, Tuple

import numpy as np

from solidblock.env.config import EnvConfig
from solidblock.env.constants import Action
from solidblock.env.obstacles import build_obstacles
from solidblock.env.rewards import RewardSystem, build_reward_system
from solidblock.env.rewards.base import RewardContext
from solidblock.env.state import EnvironmentState, Position


class BoardFullError(RuntimeError):
    """No free cell was found within the placement budget."""


class StepResult(NamedTuple):
    state: EnvironmentState
    reward: float
    done: bool
    info: Dict[str, Any]


class GridEnv:
    """
    Grid world with a player, one food item, a fixed obstacle layout and
    periodically spawned red (penalty) and green (bonus) blocks.

    The environment never terminates an episode on its own: `step` always
    reports `done=False` and episode length is left to the caller.
    """

    def __init__(self, config: EnvConfig | None = None):
        self.config = config or EnvConfig()
        self.width = self.config.width
        self.height = self.config.height
        self._reward_system: RewardSystem = build_reward_system(self.config.shaping)
        self._rng = np.random.default_rng(self.config.seed)

        self._obstacles: Tuple[Position, ...] = build_obstacles(
            self.config.obstacle_pattern, self.width, self.height
        )
        self._obstacle_set: Set[Position] = set(self._obstacles)
        self._red_blocks: List[Position] = []
        self._green_blocks: List[Position] = []
        self._player: Position | None = None
        self._food: Position | None = None
        self._history: Deque[Action] = deque(maxlen=self.config.history_length)
        self._visited: Set[Position] = set()
        self.tick_count = 0
        self.score = 0.0

        self.food_eaten = 0
        self.red_blocks_eaten = 0
        self.green_blocks_eaten = 0
        self.cycle_penalty_count = 0
        self.wall_penalty_count = 0

        self.reset()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def reset(self, *, seed: int | None = None) -> EnvironmentState:
        if seed is not None:
            self._rng = np.random.default_rng(seed)

        self.tick_count = 0
        self.score = 0.0
        self._red_blocks = []
        self._green_blocks = []
        self._player = None
        self._food = None
        self._player = self._random_free_position()
        self._food = self._random_free_position()
        self._history.clear()
        self._visited = {self._player}

        self.food_eaten = 0
        self.red_blocks_eaten = 0
        self.green_blocks_eaten = 0
        self.cycle_penalty_count = 0
        self.wall_penalty_count = 0
        return self.get_state()

    def set_obstacle_pattern(self, name: str) -> None:
        """Swap the obstacle layout in place; score and free-standing entities are kept.

        Entities that the new layout would cover are moved to a free cell.
        """
        self._obstacles = build_obstacles(name, self.width, self.height)
        self._obstacle_set = set(self._obstacles)

        if self._player is not None and self._player in self._obstacle_set:
            self._player = None
            self._player = self._random_free_position()
            self._visited.add(self._player)
        if self._food is not None and self._food in self._obstacle_set:
            self._food = None
            self._food = self._random_free_position()
        self._red_blocks = self._displace_blocks(self._red_blocks)
        self._green_blocks = self._displace_blocks(self._green_blocks)

    def step(self, action: Action | int | str) -> StepResult:
        """Move the player one cell, apply shaping and pickups, then advance the spawn clock.

        An action that does not parse to a direction is dropped entirely: no
        history entry, no shaping penalties and no tick. The result carries
        `info["ignored"] = True` and a zero reward.
        """
        if self._player is None:
            raise RuntimeError("Environment not initialised. Call reset() before step().")
        parsed = Action.parse(action)
        if parsed is None:
            return StepResult(self.get_state(), 0.0, False, {"ignored": True, "reward_breakdown": {}})

        previous = self._player
        previous_score = self.score

        target = previous.shifted(parsed)
        if self.in_bounds(target) and target not in self._obstacle_set:
            self._player = target
        self._history.append(parsed)

        first_visit = self._player not in self._visited
        if first_visit:
            self._visited.add(self._player)

        ctx = RewardContext(
            previous=previous,
            current=self._player,
            food=self._food,
            history=tuple(self._history),
            first_visit=first_visit,
        )
        result = self._reward_system.engine.compute(ctx)
        self.score += result.value
        breakdown = dict(result.breakdown)

        if "cycle" in breakdown:
            self.cycle_penalty_count += 1
        if "wall" in breakdown:
            self.wall_penalty_count += 1
        if self.config.debug_patterns:
            fired = [key for key in ("cycle", "constant", "alternating", "dominant") if key in breakdown]
            if fired:
                print(f"[debug] pattern penalty: {', '.join(fired)}")
            print(f"[debug] move history ({len(self._history)}): {','.join(a.name.lower() for a in self._history)}")

        pickups = self._resolve_pickups(breakdown)
        self._tick()

        reward = self.score - previous_score
        info: Dict[str, Any] = {
            "moved": self._player != previous,
            "reward_breakdown": breakdown,
            "pickups": pickups,
        }
        return StepResult(self.get_state(), reward, False, info)

    def get_state(self) -> EnvironmentState:
        if self._player is None:
            raise RuntimeError("Environment not initialised. Call reset() before get_state().")
        return EnvironmentState(
            width=self.width,
            height=self.height,
            player=self._player,
            food=self._food,
            obstacles=self._obstacles,
            red_blocks=tuple(self._red_blocks),
            green_blocks=tuple(self._green_blocks),
            tick_count=self.tick_count,
            score=self.score,
            move_history=tuple(self._history),
            visited=frozenset(self._visited),
        )

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def is_obstacle(self, pos: Position) -> bool:
        return pos in self._obstacle_set

    @property
    def obstacles(self) -> Tuple[Position, ...]:
        return self._obstacles

    def penalty_stats(self) -> Dict[str, int]:
        return {
            "cycle_penalties": self.cycle_penalty_count,
            "wall_penalties": self.wall_penalty_count,
        }

    def item_counts(self) -> Dict[str, int]:
        return {
            "food": self.food_eaten,
            "red": self.red_blocks_eaten,
            "green": self.green_blocks_eaten,
        }

    def log_penalty_stats(self) -> None:
        print(
            f"Cycle penalty triggered: {self.cycle_penalty_count} times, "
            f"Wall penalty triggered: {self.wall_penalty_count} times"
        )

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _is_occupied(self, pos: Position) -> bool:
        return (
            pos == self._player
            or pos == self._food
            or pos in self._obstacle_set
            or pos in self._red_blocks
            or pos in self._green_blocks
        )

    def _random_free_position(self) -> Position:
        for _ in range(self.config.max_placement_attempts):
            pos = Position(int(self._rng.integers(self.width)), int(self._rng.integers(self.height)))
            if not self._is_occupied(pos):
                return pos
        raise BoardFullError(
            f"Unable to find a free position on a {self.width}x{self.height} board "
            f"after {self.config.max_placement_attempts} attempts"
        )

    def _displace_blocks(self, blocks: List[Position]) -> List[Position]:
        kept = [pos for pos in blocks if pos not in self._obstacle_set]
        displaced = len(blocks) - len(kept)
        blocks[:] = kept
        for _ in range(displaced):
            blocks.append(self._random_free_position())
        return blocks

    def _resolve_pickups(self, breakdown: Dict[str, float]) -> Dict[str, int]:
        rewards = self._reward_system
        pickups = {"food": 0, "green": 0, "red": 0}
        player = self._player

        if self._food is not None and player == self._food:
            self.score += rewards.food_score
            self.food_eaten += 1
            pickups["food"] += 1
            breakdown["food"] = breakdown.get("food", 0.0) + rewards.food_score
            self._food = None
            self._food = self._random_free_position()

        for block in [pos for pos in self._green_blocks if pos == player]:
            self._green_blocks.remove(block)
            self.score += rewards.green_score
            self.green_blocks_eaten += 1
            pickups["green"] += 1
            breakdown["green"] = breakdown.get("green", 0.0) + rewards.green_score
            if self._red_blocks:
                self._red_blocks.pop(int(self._rng.integers(len(self._red_blocks))))

        for block in [pos for pos in self._red_blocks if pos == player]:
            self._red_blocks.remove(block)
            self.score += rewards.red_score
            self.red_blocks_eaten += 1
            pickups["red"] += 1
            breakdown["red"] = breakdown.get("red", 0.0) + rewards.red_score

        return pickups

    def _tick(self) -> None:
        self.tick_count += 1
        if self.tick_count % self.config.spawn_interval == 0:
            self._spawn_bonus_pair()

    def _spawn_bonus_pair(self) -> None:
        self._red_blocks.append(self._random_free_position())
        self._green_blocks.append(self._random_free_position())


__all__ = ["GridEnv", "StepResult", "BoardFullError"]
