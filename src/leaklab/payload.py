# src/leaklab/payload.py
"""
Throwaway byte buffers that stand in for real application state.
"""


class Payload:
    """A large byte buffer whose retention is easy to observe.

    ``bytearray`` itself cannot be weakly referenced, so the buffer is wrapped
    in an object that can.
    """

    __slots__ = ("data", "__weakref__")

    def __init__(self, size: int):
        if size < 0:
            raise ValueError(f"payload size must be non-negative, got {size}")
        self.data = bytearray(size)

    @property
    def nbytes(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Payload({self.nbytes} bytes)"
