"""Defaults for the interpreter and the terminal visualizer, and the validated per-run Options built from them."""

from dataclasses import dataclass, fields, replace

from bflearn.lang.error import ConfigError


MEMORY_SIZE = 30000        # cells
MAX_ITERATIONS = 1000000   # executed instructions before a run is considered stuck
SNAPSHOT_CELLS = 100       # cells kept in a debug run's final memory snapshot

CELL_WIDTH = 5
VISIBLE_CELLS = 20
ANIMATION_SPEED = 100      # ms between visualizer frames

COLORS = {
    "success": "green",
    "error": "red",
    "warning": "yellow",
    "info": "cyan",
    "debug": "dark_grey",
}


@dataclass(frozen=True)
class Options:
    """Per-run interpreter configuration. Invalid values raise ConfigError on construction."""
    memory_size: int = MEMORY_SIZE
    max_iterations: int = MAX_ITERATIONS
    debug: bool = False
    input_data: object = ""

    def __post_init__(self):
        for name in ("memory_size", "max_iterations"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError("{} must be a positive integer, got '{}'", (name, value), diagnosis=False)

        if not isinstance(self.input_data, (str, bytes, bytearray)):
            msg = "input must be text or bytes, got '{}'"
            raise ConfigError(msg, type(self.input_data).__name__, diagnosis=False)

    def override(self, **overrides):
        """Returns a copy of self with every override that is not None applied."""
        known = {field.name for field in fields(self)}
        for name in overrides:
            if name not in known:
                raise ConfigError("unknown option '{}'", name, diagnosis=False)

        return replace(self, **{name: value for name, value in overrides.items() if value is not None})
