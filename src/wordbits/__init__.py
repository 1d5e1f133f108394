"""Bit-addressable readers and writers over padded fixed-width words."""

__version__ = "0.1.0"

from loguru import logger

from .errors import BitstreamError, EndOfStreamError, InvalidPositionError
from .geometry import BLOCK_TYPES, WordGeometry
from .reader import BitReader
from .writer import AnyData, BitWriter

logger.disable("wordbits")

__all__ = [
    "AnyData",
    "BLOCK_TYPES",
    "BitReader",
    "BitWriter",
    "BitstreamError",
    "EndOfStreamError",
    "InvalidPositionError",
    "WordGeometry",
    "__version__",
]
