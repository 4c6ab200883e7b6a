import copy
import logging
from typing import Iterable, Iterator, Optional, Tuple
import numpy as np

from gridlife.world.cells import CellState

LOG = logging.getLogger(__name__)

# The 8 surrounding offsets (row, col); (0, 0) is the cell itself.
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (r_off, c_off)
    for r_off in (-1, 0, 1)
    for c_off in (-1, 0, 1)
    if (r_off, c_off) != (0, 0)
)

SURVIVE_COUNTS = (2, 3)
BIRTH_COUNT = 3


def _is_int(value: object) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


class Board:
    """A fixed-size, non-wrapping grid of cells evolving under Conway's B3/S23 rule.

    The grid is held as a numpy object array of CellState, indexed [row, col].
    It is only ever replaced as a whole (by advance() and randomize()), so a
    snapshot taken through `grid` never shows a mix of two generations.
    """

    def __init__(self, width: int, height: int, seed: Optional[int] = None) -> None:
        """Creates an all-dead board.

        Args:
            width: Number of columns. Must be a positive integer.
            height: Number of rows. Must be a positive integer.
            seed: Seed for the random generator used by randomize().
                  If None, fresh OS entropy is used.

        Raises:
            ValueError: If width or height is not a positive integer.
        """
        for name, value in (("width", width), ("height", height)):
            if not _is_int(value) or value <= 0:
                raise ValueError(f"Board {name} must be a positive integer, got {value!r}")

        self._width = int(width)
        self._height = int(height)
        self.seed = seed
        self._rng = np.random.default_rng(seed)
        self._grid: np.ndarray = self._freeze(self._empty_grid())

    @classmethod
    def from_strings(cls, rows: Iterable[str], seed: Optional[int] = None) -> 'Board':
        """Builds a board from a text pattern, one string per row.

        '#' marks a live cell, ' ' or '.' a dead one. All rows must have the
        same, non-zero length.
        """
        rows = list(rows)
        if not rows or not rows[0]:
            raise ValueError("Pattern must have at least one non-empty row")
        width = len(rows[0])
        for r_idx, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Pattern row {r_idx} has length {len(row)}, expected {width}")

        board = cls(width, len(rows), seed=seed)
        board._grid = board._freeze(np.array(
            [[CellState.from_char(char) for char in row] for row in rows],
            dtype=object,
        ))
        return board

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._height, self._width)

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the current generation."""
        snapshot = self._grid.view()
        snapshot.flags.writeable = False
        return snapshot

    @property
    def population(self) -> int:
        """Number of live cells in the current generation."""
        return int(np.count_nonzero(self.alive_mask()))

    @staticmethod
    def _freeze(grid: np.ndarray) -> np.ndarray:
        # Generations are replaced, never edited, so the installed array is read-only
        # and no view of it can be made writeable again.
        grid.flags.writeable = False
        return grid

    def _empty_grid(self) -> np.ndarray:
        return np.full((self._height, self._width), CellState.DEAD, dtype=object)

    def _check_coordinates(self, row: int, col: int) -> None:
        if not _is_int(row) or not _is_int(col):
            raise TypeError(f"Cell coordinates must be integers, got ({row!r}, {col!r})")
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexError(
                f"Cell ({row}, {col}) is outside the {self._width}x{self._height} board"
            )

    def cell(self, row: int, col: int) -> CellState:
        """Returns the state of the cell at (row, col).

        Raises:
            IndexError: If the coordinate is outside the board. Negative
                indices are rejected rather than wrapped.
        """
        self._check_coordinates(row, col)
        return self._grid[row, col]

    def rows(self) -> Iterator[Tuple[CellState, ...]]:
        """Iterates the current generation row by row, top row first."""
        grid = self._grid
        for row in grid:
            yield tuple(row)

    def alive_mask(self) -> np.ndarray:
        """Returns a new boolean array, True where the cell is alive."""
        return np.asarray(self._grid == CellState.ALIVE, dtype=bool)

    def count_alive_neighbors(self, row: int, col: int) -> int:
        """Counts live cells among the up to 8 in-bounds neighbours of (row, col).

        Neighbours falling outside the board are skipped; the grid does not wrap.
        """
        self._check_coordinates(row, col)
        num_alive_neighbors = 0
        for r_off, c_off in NEIGHBOR_OFFSETS:
            r = row + r_off
            c = col + c_off
            if r < 0 or c < 0 or r >= self._height or c >= self._width:
                continue
            if self._grid[r, c] is CellState.ALIVE:
                num_alive_neighbors += 1
        return num_alive_neighbors

    def _neighbor_counts(self, alive: np.ndarray) -> np.ndarray:
        # Zero padding makes out-of-bounds neighbours count as dead.
        padded = np.pad(alive.astype(np.uint8), 1, mode="constant", constant_values=0)
        counts = np.zeros(alive.shape, dtype=np.uint8)
        for r_off, c_off in NEIGHBOR_OFFSETS:
            counts += padded[
                1 + r_off:1 + r_off + self._height,
                1 + c_off:1 + c_off + self._width,
            ]
        return counts

    def advance(self) -> None:
        """Replaces the grid with the next generation.

        Every cell is updated from the current generation's neighbour counts
        only. The next generation is built in a separate all-dead buffer and
        swapped in with a single assignment.
        """
        alive = self.alive_mask()
        counts = self._neighbor_counts(alive)

        survives = alive & np.isin(counts, SURVIVE_COUNTS)
        born = ~alive & (counts == BIRTH_COUNT)

        next_grid = self._empty_grid()
        next_grid[survives | born] = CellState.ALIVE
        self._grid = self._freeze(next_grid)

    def randomize(self, chance_percent: int) -> None:
        """Sets every cell alive with a `chance_percent` percent chance.

        Each cell independently draws a uniform integer in [1, 100] and is
        alive if the draw is <= chance_percent, so 0 leaves the board empty
        and 100 fills it.

        Raises:
            ValueError: If chance_percent is not an integer in [0, 100].
        """
        if not _is_int(chance_percent) or not 0 <= chance_percent <= 100:
            raise ValueError(f"Randomize chance must be an integer in [0, 100], got {chance_percent!r}")

        draws = self._rng.integers(1, 101, size=self.shape)
        next_grid = self._empty_grid()
        next_grid[draws <= chance_percent] = CellState.ALIVE
        self._grid = self._freeze(next_grid)
        LOG.debug(
            "Randomized %dx%d board at %d%%: %d cells alive",
            self._width, self._height, chance_percent, self.population,
        )

    def copy(self) -> 'Board':
        """Returns an independent board holding the same generation.

        The clone also continues from the same point in the random stream, so
        both boards give the same result for the next randomize().
        """
        clone = Board(self._width, self._height, seed=self.seed)
        clone._grid = clone._freeze(self._grid.copy())
        clone._rng = copy.deepcopy(self._rng)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self.alive_mask(), other.alive_mask()))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board(width={self._width}, height={self._height}, population={self.population})"
