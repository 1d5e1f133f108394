import sys
from dataclasses import dataclass, field
from typing import Self
from types import MappingProxyType

import numpy as np
from loguru import logger
from numpy.typing import DTypeLike

# Destination (read) and source (write) widths of block operations
BLOCK_TYPES: MappingProxyType = MappingProxyType(
    {8: np.uint8, 16: np.uint16, 32: np.uint32, 64: np.uint64}
)


def resolve_word_type(dtype: DTypeLike) -> np.dtype:
    """Returns the numpy dtype of a word, exiting if it is not an unsigned integer"""
    try:
        word_type = np.dtype(dtype)
    except TypeError:
        logger.error(f"{dtype!r} is not a word type")
        sys.exit(1)
    if word_type.kind != "u":
        logger.error(f"Word type must be an unsigned integer, but got {word_type}")
        sys.exit(1)
    return word_type


def block_type(width: int) -> type[np.unsignedinteger]:
    if width not in BLOCK_TYPES:
        logger.error(f"Block width must be one of {tuple(BLOCK_TYPES)}, but got {width}")
        sys.exit(1)
    return BLOCK_TYPES[width]


@dataclass(frozen=True)
class WordGeometry:
    """Bit addressing inside words of `width` bits.

    The top `left_pad` bits and the bottom `right_pad` bits of every word are
    skipped. The remaining `span` bits are addressed MSB-first, so logical bit i
    lives in word i // span at bit (width - left_pad - 1 - i % span) from the LSB.
    """

    width: int
    left_pad: int
    right_pad: int
    span: int = field(init=False)
    msb: int = field(init=False)

    def __post_init__(self) -> None:
        if self.left_pad < 0 or self.right_pad < 0:
            logger.error(
                f"Padding must not be negative (left: {self.left_pad}, right: {self.right_pad})"
            )
            sys.exit(1)
        if self.left_pad + self.right_pad >= self.width:
            logger.error(
                f"Padding sum must be less than the word size {self.width} "
                f"(left: {self.left_pad}, right: {self.right_pad})"
            )
            sys.exit(1)
        object.__setattr__(self, "span", self.width - self.left_pad - self.right_pad)
        object.__setattr__(self, "msb", 1 << (self.width - self.left_pad - 1))

    @classmethod
    def for_dtype(cls, dtype: np.dtype, left_pad: int, right_pad: int) -> Self:
        return cls(dtype.itemsize * 8, left_pad, right_pad)

    @property
    def full(self) -> int:
        return (1 << self.width) - 1

    def locate(self, i: int) -> tuple[int, int]:
        """Returns (word_index, mask) of the logical bit i"""
        return i // self.span, self.msb >> (i % self.span)

    def capacity(self, words: int) -> int:
        return words * self.span

    def words_for(self, bits: int) -> int:
        # ceil(bits / span)
        return -(-bits // self.span)
