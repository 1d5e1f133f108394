import operator
import sys

import numpy as np
from loguru import logger
from numpy.typing import DTypeLike, NDArray

from .errors import EndOfStreamError, InvalidPositionError
from .geometry import WordGeometry, block_type, resolve_word_type


class BitReader:
    """Read-only bit view over a sequence of words.

    The reader never copies or mutates the words it is given when they are
    already a numpy array of the word type (or raw bytes read as uint8 words).
    It is not safe for concurrent use; use one reader per thread instead.
    """

    def __init__(
        self,
        buffer: NDArray[np.unsignedinteger] | bytes | bytearray | memoryview | list[int],
        left_pad: int = 0,
        right_pad: int = 0,
        dtype: DTypeLike | None = None,
    ) -> None:
        self._buffer = self._as_words(buffer, dtype)
        self._geometry = WordGeometry.for_dtype(self._buffer.dtype, left_pad, right_pad)
        self._bits = self._geometry.capacity(len(self._buffer))
        self._pos = 0

        logger.info(
            f"BitReader: {len(self._buffer)} x {self._geometry.width}-bit words, "
            f"padding ({left_pad}, {right_pad}), {self._bits} bits"
        )

    @staticmethod
    def _as_words(buffer, dtype: DTypeLike | None) -> NDArray[np.unsignedinteger]:
        if isinstance(buffer, (bytes, bytearray, memoryview)):
            word_type = resolve_word_type(np.uint8 if dtype is None else dtype)
            if word_type.itemsize != 1:
                logger.error(f"Raw bytes can only be read as 8-bit words, but got {word_type}")
                sys.exit(1)
            return np.frombuffer(buffer, dtype=word_type)
        if dtype is None:
            if not isinstance(buffer, np.ndarray):
                logger.error("A word type is required when the buffer is not a numpy array")
                sys.exit(1)
            dtype = buffer.dtype
        words = np.asarray(buffer, dtype=resolve_word_type(dtype))
        if words.ndim != 1:
            logger.error(f"The buffer must be one-dimensional, but got shape {words.shape}")
            sys.exit(1)
        return words

    def __len__(self) -> int:
        return self._bits

    @property
    def buffer(self) -> NDArray[np.unsignedinteger]:
        return self._buffer

    @property
    def geometry(self) -> WordGeometry:
        return self._geometry

    def length(self) -> int:
        """Returns the number of readable bits"""
        return self._bits

    def limit_bits(self, bits: int) -> None:
        """Limits the readable range to the first `bits` bits.

        Bits beyond the limit read as zero in block reads and as end of stream in
        bit reads. The limit never exceeds what the buffer can hold.
        """
        bits = operator.index(bits)
        if bits < 0:
            raise InvalidPositionError(bits)
        self._bits = min(bits, self._geometry.capacity(len(self._buffer)))
        logger.debug(f"BitReader: limited to {self._bits} bits")

    def read_u8(self, bits: int, n: int) -> np.uint8:
        return self.read_block(8, bits, n)

    def read_u16(self, bits: int, n: int) -> np.uint16:
        return self.read_block(16, bits, n)

    def read_u32(self, bits: int, n: int) -> np.uint32:
        return self.read_block(32, bits, n)

    def read_u64(self, bits: int, n: int) -> np.uint64:
        return self.read_block(64, bits, n)

    def read_block(self, width: int, bits: int, n: int) -> np.unsignedinteger:
        """Reads the n-th block of `bits` bits, right-aligned in an unsigned `width`-bit value.

        Bits past the readable range are filled with zeros,
        e.g. 0b101 followed by end of stream -> 0b1010 (bits=4)
        """
        # numpy integers would wrap in n * bits
        bits, n = operator.index(bits), operator.index(n)
        result_type = block_type(width)
        if bits > width:
            logger.error(f"Cannot read more than {width} bits into uint{width}, but got {bits}")
            sys.exit(1)
        if bits < 0 or n < 0:
            logger.error(f"Bit count and block index must not be negative (bits: {bits}, n: {n})")
            sys.exit(1)

        start = min(n * bits, self._bits)
        end = min(start + bits, self._bits)
        value = 0
        for i in range(start, end):
            value = (value << 1) | self._get(i)
        value <<= bits - (end - start)
        return result_type(value)

    def read_bit(self) -> bool:
        """Reads the bit at the cursor and advances the cursor by one"""
        bit = self.read_bit_at(self._pos)
        self._pos += 1
        return bit

    def read_bit_at(self, pos: int) -> bool:
        pos = operator.index(pos)
        if pos < 0:
            raise InvalidPositionError(pos)
        if pos >= self._bits:
            raise EndOfStreamError(pos, self._bits)
        return bool(self._get(pos))

    def seek(self, pos: int) -> None:
        # Seeking past the end is allowed; the next read reports end of stream.
        pos = operator.index(pos)
        if pos < 0:
            raise InvalidPositionError(pos)
        self._pos = pos

    def position(self) -> int:
        return self._pos

    def _get(self, i: int) -> int:
        word_index, mask = self._geometry.locate(i)
        return 1 if int(self._buffer[word_index]) & mask else 0
