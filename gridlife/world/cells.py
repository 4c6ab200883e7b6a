from enum import Enum
from dataclasses import dataclass
from typing import Tuple

@dataclass(frozen=True)
class CellMetadata:
    """Metadata associated with each cell state.

    Args:
        name: User-friendly name of the state.
        char: Character used by the console renderer.
        color: RGB tuple (0-255) used by the window renderer.
    """
    name: str
    char: str
    color: Tuple[int, int, int]

class CellState(Enum):
    """The two states a cell on the board can be in.

    Each enum member holds CellMetadata.
    """
    ALIVE = CellMetadata(name="Alive", char="#", color=(0, 0, 0))
    DEAD = CellMetadata(name="Dead", char=" ", color=(255, 255, 255))

    @property
    def metadata(self) -> CellMetadata:
        return self.value

    @property
    def is_alive(self) -> bool:
        return self is CellState.ALIVE

    @classmethod
    def from_char(cls, char: str) -> 'CellState':
        """Parses a single pattern character into a cell state.

        '#' is alive; ' ' and '.' are dead.
        """
        if char == cls.ALIVE.metadata.char:
            return cls.ALIVE
        if char in (cls.DEAD.metadata.char, "."):
            return cls.DEAD
        raise ValueError(f"Unknown cell character {char!r}")
