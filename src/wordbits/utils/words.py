import sys

import numpy as np
from loguru import logger
from numpy.typing import DTypeLike, NDArray

from ..geometry import resolve_word_type


def _ordered(dtype: DTypeLike, endian: str) -> np.dtype:
    word_type = resolve_word_type(dtype)
    match endian:
        case "big":
            return word_type.newbyteorder(">")
        case "little":
            return word_type.newbyteorder("<")
        case _:
            logger.error(f'Invalid endian type {endian!r}. Specify "big" or "little".')
            sys.exit(1)


def from_bytes(data: bytes, dtype: DTypeLike = np.uint8, endian: str = "big") -> NDArray[np.unsignedinteger]:
    """Interprets raw bytes as words of `dtype` stored in the given byte order.

    Trailing bytes that do not fill a whole word are dropped.
    """
    word_type = _ordered(dtype, endian)
    usable = len(data) - len(data) % word_type.itemsize
    if usable != len(data):
        logger.warning(f"Ignoring {len(data) - usable} trailing byte(s) that do not fill a {word_type.itemsize * 8}-bit word")
    return np.frombuffer(data, dtype=word_type, count=usable // word_type.itemsize)


def to_bytes(words: NDArray[np.unsignedinteger], endian: str = "big") -> bytes:
    return words.astype(_ordered(words.dtype, endian)).tobytes()
