"""Deterministic obstacle layouts centred on the board."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Tuple

from solidblock.env.constants import DEFAULT_PATTERN
from solidblock.env.state import Position


def _center(width: int, height: int) -> Tuple[int, int]:
    return (width - 1) // 2, (height - 1) // 2


def _dedupe(cells: Iterable[Position]) -> Tuple[Position, ...]:
    return tuple(dict.fromkeys(cells))


def normal_pattern(width: int, height: int) -> Tuple[Position, ...]:
    """Cross: 3-wide x 9-tall vertical bar over a 9-wide x 3-tall horizontal bar."""
    cx, cy = _center(width, height)
    cells = [Position(x, y) for y in range(cy - 4, cy + 5) for x in range(cx - 1, cx + 2)]
    cells += [Position(x, y) for x in range(cx - 4, cx + 5) for y in range(cy - 1, cy + 2)]
    return _dedupe(cells)


def diamond_pattern(width: int, height: int) -> Tuple[Position, ...]:
    """Seven rows of widths 1, 3, 5, 7, 5, 3, 1."""
    cx, cy = _center(width, height)
    cells = []
    for dy in range(-3, 4):
        half = 3 - abs(dy)
        cells += [Position(x, cy + dy) for x in range(cx - half, cx + half + 1)]
    return _dedupe(cells)


def empty_pattern(width: int, height: int) -> Tuple[Position, ...]:
    return ()


PATTERNS: Dict[str, Callable[[int, int], Tuple[Position, ...]]] = {
    "normal": normal_pattern,
    "diamond": diamond_pattern,
    "none": empty_pattern,
}


def build_obstacles(name: str, width: int, height: int) -> Tuple[Position, ...]:
    """Build a named layout; unknown names fall back to the default cross."""
    builder = PATTERNS.get(name, PATTERNS[DEFAULT_PATTERN])
    return tuple(
        cell for cell in builder(width, height) if 0 <= cell.x < width and 0 <= cell.y < height
    )


__all__ = ["PATTERNS", "build_obstacles", "normal_pattern", "diamond_pattern", "empty_pattern"]
