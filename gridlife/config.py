from dataclasses import dataclass
from typing import Optional

from gridlife.errors import ConfigError

@dataclass
class GameConfig:
    """Configuration settings for the Game of Life engine."""
    screen_width: int = 1080
    screen_height: int = 1080
    board_width: int = 500
    board_height: int = 500

    randomize_chance: int = 40 # Percent chance of each cell starting alive
    seed: Optional[int] = None # None seeds from OS entropy

    target_fps: float = 60.0
    max_generations: Optional[int] = None # None runs until the window is closed

    headless_mode: bool = False
    console_mode: bool = False # Print each generation to stdout; implies headless
    pyglet_debug_gl: bool = False # Set to True for Pyglet OpenGL debugging

    def __post_init__(self) -> None:
        if self.console_mode:
            self.headless_mode = True

    def validate(self) -> None:
        """Checks the settings, raising ConfigError on the first bad value."""
        for name in ("screen_width", "screen_height", "board_width", "board_height"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        chance = self.randomize_chance
        if not isinstance(chance, int) or isinstance(chance, bool) or not 0 <= chance <= 100:
            raise ConfigError(f"randomize_chance must be in [0, 100], got {chance!r}")
        if not self.headless_mode and self.target_fps <= 0:
            raise ConfigError(f"target_fps must be positive with a window, got {self.target_fps!r}")
        if self.max_generations is not None and self.max_generations < 0:
            raise ConfigError(f"max_generations must be >= 0, got {self.max_generations!r}")
