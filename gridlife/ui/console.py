import sys
from typing import Optional, TextIO

from gridlife.world.board import Board
from gridlife.world.cells import CellState


def _cell_field(cell: CellState) -> str:
    return f"{cell.metadata.char} "


def console_draw(board: Board, stream: Optional[TextIO] = None) -> None:
    """Writes the board to `stream`, one line per row and two characters per cell.

    Live cells are drawn as '# ' and dead cells as two spaces. The stream is
    flushed after every cell so partial output shows up immediately.
    Defaults to sys.stdout.
    """
    if stream is None:
        stream = sys.stdout
    for row in board.rows():
        for cell in row:
            stream.write(_cell_field(cell))
            stream.flush()
        stream.write("\n")


def format_board(board: Board) -> str:
    """Returns the same text console_draw would write, as a single string."""
    return "".join(
        "".join(_cell_field(cell) for cell in row) + "\n"
        for row in board.rows()
    )
