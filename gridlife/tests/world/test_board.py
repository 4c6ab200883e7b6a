import pytest
import numpy as np

from gridlife.world.board import Board, NEIGHBOR_OFFSETS
from gridlife.world.cells import CellState

BLINKER_HORIZONTAL = [
    ".....",
    ".....",
    ".###.",
    ".....",
    ".....",
]
BLINKER_VERTICAL = [
    ".....",
    "..#..",
    "..#..",
    "..#..",
    ".....",
]


def _center_board(center_alive: bool, alive_neighbors: int) -> Board:
    """3x3 board whose center has exactly `alive_neighbors` live neighbours."""
    cells = [["."] * 3 for _ in range(3)]
    if center_alive:
        cells[1][1] = "#"
    for r_off, c_off in NEIGHBOR_OFFSETS[:alive_neighbors]:
        cells[1 + r_off][1 + c_off] = "#"
    return Board.from_strings("".join(row) for row in cells)


def _brute_force_neighbors(mask: np.ndarray, row: int, col: int) -> int:
    rows, cols = mask.shape
    total = 0
    for r in range(max(0, row - 1), min(rows, row + 2)):
        for c in range(max(0, col - 1), min(cols, col + 2)):
            if (r, c) != (row, col) and mask[r, c]:
                total += 1
    return total


@pytest.mark.board
def test_new_board_is_all_dead_with_requested_shape() -> None:
    """A new board has `height` rows of `width` cells, every one dead."""
    board = Board(width=7, height=4)
    rows = list(board.rows())

    assert board.shape == (4, 7)
    assert len(rows) == 4, "Board should have one row per unit of height."
    assert all(len(row) == 7 for row in rows), "Every row should have `width` cells."
    assert all(cell is CellState.DEAD for row in rows for cell in row)
    assert board.population == 0


@pytest.mark.board
@pytest.mark.parametrize("width, height", [(0, 5), (5, 0), (-1, 3), (2.5, 3), (True, 3), ("4", 4)])
def test_invalid_dimensions_are_rejected(width, height) -> None:
    with pytest.raises(ValueError):
        Board(width, height)


@pytest.mark.board
def test_from_strings_rejects_bad_patterns() -> None:
    with pytest.raises(ValueError):
        Board.from_strings([])
    with pytest.raises(ValueError):
        Board.from_strings(["###", "##"])
    with pytest.raises(ValueError):
        Board.from_strings(["#x#"])


@pytest.mark.board
def test_cell_access_rejects_out_of_range_coordinates() -> None:
    board = Board(3, 2)
    assert board.cell(1, 2) is CellState.DEAD
    for row, col in [(-1, 0), (0, -1), (2, 0), (0, 3)]:
        with pytest.raises(IndexError):
            board.cell(row, col)
        with pytest.raises(IndexError):
            board.count_alive_neighbors(row, col)


@pytest.mark.board
def test_neighbor_counts_clip_at_corners_and_edges() -> None:
    """On a fully alive board corners see 3, edges 5 and interior cells 8."""
    board = Board(5, 4)
    board.randomize(100)

    for row in range(board.height):
        for col in range(board.width):
            on_row_edge = row in (0, board.height - 1)
            on_col_edge = col in (0, board.width - 1)
            expected = 3 if on_row_edge and on_col_edge else 5 if on_row_edge or on_col_edge else 8
            assert board.count_alive_neighbors(row, col) == expected, f"Wrong count at ({row}, {col})"


@pytest.mark.board
def test_neighbor_counts_match_brute_force() -> None:
    board = Board(12, 9, seed=7)
    board.randomize(45)
    mask = board.alive_mask()

    for row in range(board.height):
        for col in range(board.width):
            count = board.count_alive_neighbors(row, col)
            assert 0 <= count <= 8
            assert count == _brute_force_neighbors(mask, row, col)


@pytest.mark.board
def test_single_row_board_counts_without_wrapping() -> None:
    board = Board.from_strings(["#..#"])
    assert board.count_alive_neighbors(0, 0) == 0, "Left edge must not see the right edge."
    assert board.count_alive_neighbors(0, 1) == 1
    assert board.count_alive_neighbors(0, 2) == 1


@pytest.mark.board
@pytest.mark.parametrize("alive_neighbors", range(9))
def test_live_cell_survives_only_with_two_or_three_neighbors(alive_neighbors: int) -> None:
    board = _center_board(center_alive=True, alive_neighbors=alive_neighbors)
    assert board.count_alive_neighbors(1, 1) == alive_neighbors

    board.advance()

    expected = CellState.ALIVE if alive_neighbors in (2, 3) else CellState.DEAD
    assert board.cell(1, 1) is expected


@pytest.mark.board
@pytest.mark.parametrize("alive_neighbors", range(9))
def test_dead_cell_is_born_only_with_exactly_three_neighbors(alive_neighbors: int) -> None:
    board = _center_board(center_alive=False, alive_neighbors=alive_neighbors)
    assert board.count_alive_neighbors(1, 1) == alive_neighbors

    board.advance()

    expected = CellState.ALIVE if alive_neighbors == 3 else CellState.DEAD
    assert board.cell(1, 1) is expected


@pytest.mark.board
def test_advance_matches_per_cell_rule() -> None:
    """The whole-grid update agrees with applying B3/S23 cell by cell to the old generation."""
    board = Board(20, 15, seed=3)
    board.randomize(35)
    before = board.alive_mask()
    counts = [
        [board.count_alive_neighbors(r, c) for c in range(board.width)]
        for r in range(board.height)
    ]

    board.advance()

    after = board.alive_mask()
    for r in range(board.height):
        for c in range(board.width):
            n = counts[r][c]
            expected = n in (2, 3) if before[r, c] else n == 3
            assert after[r, c] == expected, f"Cell ({r}, {c}) with {n} neighbours updated wrongly"


@pytest.mark.board
def test_advance_is_deterministic() -> None:
    board = Board(30, 30, seed=11)
    board.randomize(40)
    saved = board.copy()

    board.advance()
    saved.advance()

    assert board == saved, "Advancing identical grids must give identical results."


@pytest.mark.board
def test_empty_board_stays_empty() -> None:
    board = Board(10, 8)
    for _ in range(5):
        board.advance()
    assert board.population == 0


@pytest.mark.board
def test_blinker_oscillates_with_period_two() -> None:
    board = Board.from_strings(BLINKER_HORIZONTAL)

    board.advance()
    assert board == Board.from_strings(BLINKER_VERTICAL)

    board.advance()
    assert board == Board.from_strings(BLINKER_HORIZONTAL)


@pytest.mark.board
def test_block_is_a_still_life_in_a_corner() -> None:
    pattern = ["##..", "##..", "....", "...."]
    board = Board.from_strings(pattern)
    board.advance()
    assert board == Board.from_strings(pattern)


@pytest.mark.board
def test_grid_snapshot_is_read_only_and_keeps_its_generation() -> None:
    board = Board.from_strings(BLINKER_HORIZONTAL)
    snapshot = board.grid

    with pytest.raises(ValueError):
        snapshot[0, 0] = CellState.ALIVE
    with pytest.raises(ValueError):
        snapshot.flags.writeable = True

    board.advance()

    assert snapshot[2, 1] is CellState.ALIVE, "Snapshot should still show the old generation."
    assert board.cell(2, 1) is CellState.DEAD


@pytest.mark.board
def test_randomize_boundaries() -> None:
    board = Board(25, 20, seed=1)

    board.randomize(100)
    assert board.population == 25 * 20

    board.randomize(0)
    assert board.population == 0


@pytest.mark.board
def test_randomize_half_chance_is_roughly_half_alive() -> None:
    board = Board(200, 200, seed=1234)
    board.randomize(50)
    fraction = board.population / (200 * 200)
    assert 0.47 < fraction < 0.53, f"Alive fraction {fraction:.3f} too far from 0.5"


@pytest.mark.board
def test_randomize_is_reproducible_with_a_seed() -> None:
    first = Board(40, 30, seed=99)
    second = Board(40, 30, seed=99)
    first.randomize(40)
    second.randomize(40)
    assert first == second


@pytest.mark.board
def test_copy_continues_the_random_stream() -> None:
    """A copy holds the same generation and draws the same next randomization."""
    original = Board(30, 30, seed=21)
    original.randomize(50)
    clone = original.copy()
    assert clone == original

    original.randomize(50)
    clone.randomize(50)

    assert clone == original, "Copy should continue from the same point in the random stream."


@pytest.mark.board
@pytest.mark.parametrize("make_board", [
    lambda: Board(4, 4),
    lambda: Board.from_strings(BLINKER_HORIZONTAL),
    lambda: Board.from_strings(BLINKER_HORIZONTAL).copy(),
])
def test_no_installed_generation_can_be_made_writeable(make_board) -> None:
    """Cells only change through advance() and randomize(), whichever way the grid was installed."""
    board = make_board()
    for step in ("initial", "advance", "randomize"):
        if step == "advance":
            board.advance()
        elif step == "randomize":
            board.randomize(50)
        snapshot = board.grid
        with pytest.raises(ValueError):
            snapshot.flags.writeable = True
        with pytest.raises(ValueError):
            snapshot[0, 0] = CellState.ALIVE


@pytest.mark.board
@pytest.mark.parametrize("chance", [-1, 101, 50.0, None])
def test_randomize_rejects_invalid_chance(chance) -> None:
    board = Board(3, 3)
    with pytest.raises(ValueError):
        board.randomize(chance)
    assert board.population == 0, "A rejected randomize must not touch the grid."
