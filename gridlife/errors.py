class GridLifeError(Exception):
    """Base class for errors raised by gridlife."""

class ConfigError(GridLifeError, ValueError):
    """Raised when a GameConfig holds values the engine cannot run with."""

class EngineError(GridLifeError, RuntimeError):
    """Raised when the engine cannot set up its window or main loop."""
