import math
from typing import Iterator, NamedTuple, Tuple


class CellRect(NamedTuple):
    """Pixel rectangle covering one board cell, origin at the top-left of the surface."""
    row: int
    col: int
    x: int
    y: int
    width: int
    height: int


def _round_half_up(value: float) -> int:
    # Pitches are always positive, so this rounds halves away from zero.
    return int(math.floor(value + 0.5))


def cell_pitch(board_width: int, board_height: int, screen_width: int, screen_height: int) -> Tuple[float, float]:
    """Returns the unrounded (horizontal, vertical) size of a cell in pixels."""
    for name, value in (
        ("board_width", board_width),
        ("board_height", board_height),
        ("screen_width", screen_width),
        ("screen_height", screen_height),
    ):
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value!r}")
    return screen_width / board_width, screen_height / board_height


def cell_rectangles(
    board_width: int,
    board_height: int,
    screen_width: int,
    screen_height: int,
) -> Iterator[CellRect]:
    """Divides a screen_width x screen_height surface into one rectangle per cell.

    Rectangles are yielded row-major, left to right then top to bottom.
    Every rectangle has the pitch rounded to whole pixels as its size, while
    origins advance by the unrounded pitch and are truncated, so rounding
    error does not accumulate across a row.

    Args:
        board_width: Number of board columns.
        board_height: Number of board rows.
        screen_width: Surface width in pixels.
        screen_height: Surface height in pixels.
    """
    cell_width, cell_height = cell_pitch(board_width, board_height, screen_width, screen_height)
    rect_width = _round_half_up(cell_width)
    rect_height = _round_half_up(cell_height)

    for row in range(board_height):
        y = int(row * cell_height)
        for col in range(board_width):
            yield CellRect(row, col, int(col * cell_width), y, rect_width, rect_height)


def to_bottom_left(rect: CellRect, screen_height: int) -> Tuple[int, int]:
    """Converts a rectangle's top-left origin to pyglet's bottom-left coordinates."""
    return rect.x, screen_height - rect.y - rect.height
