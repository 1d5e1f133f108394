import operator
import sys
import threading
from dataclasses import dataclass

import numpy as np
from loguru import logger
from numpy.typing import DTypeLike, NDArray

from .errors import EndOfStreamError, InvalidPositionError
from .geometry import WordGeometry, block_type, resolve_word_type
from .reader import BitReader


@dataclass(frozen=True)
class AnyData:
    """Words exported without committing the caller to a word width.

    `bits` and the padding travel with the words, so a reader built from them
    sees exactly the bits that were written.
    """

    width: int
    words: NDArray[np.unsignedinteger]
    bits: int
    left_pad: int
    right_pad: int

    def reader(self) -> BitReader:
        reader = BitReader(self.words, self.left_pad, self.right_pad)
        reader.limit_bits(self.bits)
        return reader


class BitWriter:
    """Growable word buffer written bit by bit.

    Every public method holds the writer's lock for its whole duration, so a
    single writer can be shared between threads.
    """

    INITIAL_CAPACITY = 8

    def __init__(
        self,
        left_pad: int = 0,
        right_pad: int = 0,
        dtype: DTypeLike = np.uint8,
    ) -> None:
        self._word_type = resolve_word_type(dtype)
        self._geometry = WordGeometry.for_dtype(self._word_type, left_pad, right_pad)
        self._lock = threading.Lock()

        # Only the first _words entries are part of the stream; the rest is spare capacity.
        self._buffer = np.zeros(self.INITIAL_CAPACITY, dtype=self._word_type)
        self._words = 0
        self._bits = 0
        self._pos = 0

        logger.info(
            f"BitWriter: {self._geometry.width}-bit words, padding ({left_pad}, {right_pad}), "
            f"{self._geometry.span} bits per word"
        )

    def __len__(self) -> int:
        return self.length()

    @property
    def geometry(self) -> WordGeometry:
        return self._geometry

    def length(self) -> int:
        """Returns the number of bits written"""
        with self._lock:
            return self._bits

    def data(self) -> NDArray[np.unsignedinteger]:
        """Returns a copy of the words written so far"""
        with self._lock:
            return self._buffer[: self._words].copy()

    def any_data(self) -> AnyData:
        with self._lock:
            return AnyData(
                self._geometry.width,
                self._buffer[: self._words].copy(),
                self._bits,
                self._geometry.left_pad,
                self._geometry.right_pad,
            )

    def reader(self) -> BitReader:
        """Returns a reader over a snapshot of the stream with the same padding"""
        with self._lock:
            words = self._buffer[: self._words].copy()
            bits = self._bits
        reader = BitReader(words, self._geometry.left_pad, self._geometry.right_pad)
        reader.limit_bits(bits)
        return reader

    def write_u8(self, src_left_pad: int, bits: int, value: int) -> None:
        self.write_block(8, src_left_pad, bits, value)

    def write_u16(self, src_left_pad: int, bits: int, value: int) -> None:
        self.write_block(16, src_left_pad, bits, value)

    def write_u32(self, src_left_pad: int, bits: int, value: int) -> None:
        self.write_block(32, src_left_pad, bits, value)

    def write_u64(self, src_left_pad: int, bits: int, value: int) -> None:
        self.write_block(64, src_left_pad, bits, value)

    def write_block(self, width: int, src_left_pad: int, bits: int, value: int) -> None:
        """Appends `bits` bits of the `width`-bit `value`, starting below its top `src_left_pad` bits.

        e.g. write_block(8, 2, 3, 0b00101000) appends 1, 0, 1
        """
        src_left_pad, bits = operator.index(src_left_pad), operator.index(bits)
        with self._lock:
            block_type(width)
            if src_left_pad < 0 or bits < 0:
                logger.error(
                    f"Source padding and bit count must not be negative (padding: {src_left_pad}, bits: {bits})"
                )
                sys.exit(1)
            if src_left_pad + bits > width:
                logger.error(
                    f"Cannot write {bits} bits after {src_left_pad} padding bits from uint{width}"
                )
                sys.exit(1)

            value = int(value)
            for i in range(src_left_pad, src_left_pad + bits):
                self._append((value >> (width - 1 - i)) & 1)

    def write_bool(self, bit: bool) -> None:
        """Appends one bit at the end of the stream"""
        with self._lock:
            self._append(bit)

    def write_bit(self, bit: bool) -> None:
        """Writes one bit at the cursor and advances the cursor by one"""
        with self._lock:
            self._set(self._pos, bit)
            self._pos += 1

    def write_bit_at(self, pos: int, bit: bool) -> None:
        pos = operator.index(pos)
        with self._lock:
            if pos < 0:
                raise InvalidPositionError(pos)
            self._set(pos, bit)

    def read_bit(self) -> bool:
        with self._lock:
            bit = self._get(self._pos)
            self._pos += 1
            return bit

    def read_bit_at(self, pos: int) -> bool:
        pos = operator.index(pos)
        with self._lock:
            if pos < 0:
                raise InvalidPositionError(pos)
            return self._get(pos)

    def seek(self, pos: int) -> None:
        pos = operator.index(pos)
        with self._lock:
            if pos < 0:
                raise InvalidPositionError(pos)
            self._pos = pos

    def position(self) -> int:
        with self._lock:
            return self._pos

    # The methods below expect the lock to be held.

    def _append(self, bit: bool) -> None:
        self._set(self._bits, bit)

    def _get(self, pos: int) -> bool:
        if pos >= self._bits:
            raise EndOfStreamError(pos, self._bits)
        word_index, mask = self._geometry.locate(pos)
        return bool(int(self._buffer[word_index]) & mask)

    def _set(self, pos: int, bit: bool) -> None:
        if pos >= self._bits:
            self._grow(pos + 1)
        word_index, mask = self._geometry.locate(pos)
        word = int(self._buffer[word_index])
        if bit:
            word |= mask
        else:
            word &= self._geometry.full ^ mask
        self._buffer[word_index] = word

    def _grow(self, bits: int) -> None:
        words = self._geometry.words_for(bits)
        if words > len(self._buffer):
            capacity = len(self._buffer)
            while capacity < words:
                capacity *= 2
            grown = np.zeros(capacity, dtype=self._word_type)
            grown[: self._words] = self._buffer[: self._words]
            self._buffer = grown
            logger.debug(f"BitWriter: capacity grown to {capacity} words")
        self._words = max(self._words, words)
        self._bits = bits
