"""Recoverable stream-boundary conditions.

Contract violations (bad padding, asking for more bits than a block can hold)
are not represented here: they are logged and terminate the process.
"""


class BitstreamError(Exception):
    pass


class EndOfStreamError(BitstreamError, EOFError):
    def __init__(self, position: int, length: int) -> None:
        super().__init__(f"No bit at position {position} (stream length: {length})")
        self.position = position
        self.length = length


class InvalidPositionError(BitstreamError, ValueError):
    def __init__(self, position: int) -> None:
        super().__init__(f"Invalid position {position}")
        self.position = position
