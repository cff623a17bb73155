from .colors import COLORS, PALETTE_SIZE, RESET
from .multiplexer import OutputMultiplexer
from .writer import LineWriter, Stream

__all__ = ["COLORS", "PALETTE_SIZE", "RESET", "LineWriter", "OutputMultiplexer", "Stream"]
