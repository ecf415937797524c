"""Unit tests for obstacle layouts."""

from solidblock.env.obstacles import build_obstacles, diamond_pattern, normal_pattern
from solidblock.env.state import Position


def test_normal_pattern_cell_count():
    """The default cross covers 27 + 27 - 9 distinct cells on a 20x15 board."""
    cells = normal_pattern(20, 15)
    assert len(cells) == 45
    assert len(set(cells)) == 45


def test_normal_pattern_is_centred():
    """The cross is centred on ((w-1)//2, (h-1)//2)."""
    cells = set(normal_pattern(20, 15))
    assert Position(9, 7) in cells
    assert Position(9, 3) in cells and Position(9, 11) in cells
    assert Position(5, 7) in cells and Position(13, 7) in cells
    assert Position(9, 2) not in cells
    assert Position(4, 7) not in cells


def test_diamond_rows():
    """Diamond rows have widths 1, 3, 5, 7, 5, 3, 1."""
    cells = diamond_pattern(20, 15)
    widths = [sum(1 for c in cells if c.y == y) for y in range(4, 11)]
    assert widths == [1, 3, 5, 7, 5, 3, 1]


def test_none_pattern_is_empty():
    assert build_obstacles("none", 20, 15) == ()


def test_unknown_name_falls_back_to_normal():
    assert build_obstacles("zigzag", 20, 15) == build_obstacles("normal", 20, 15)


def test_small_board_is_clipped():
    """Cells falling off a small board are dropped."""
    cells = build_obstacles("normal", 5, 5)
    assert cells
    assert all(0 <= c.x < 5 and 0 <= c.y < 5 for c in cells)
