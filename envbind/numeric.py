"""
Fixed-width numeric annotations.

Plain ``int`` is unbounded. Use these aliases when a field must fit a width:

    port: UInt16
    offset: Int32
"""

from typing import Annotated


class Bits:
    """Width marker for int and float annotations."""

    def __init__(self, size: int, signed: bool = True):
        self.size = size
        self.signed = signed

    def __repr__(self) -> str:
        return f"Bits({self.size}, signed={self.signed})"


Int8 = Annotated[int, Bits(8)]
Int16 = Annotated[int, Bits(16)]
Int32 = Annotated[int, Bits(32)]
Int64 = Annotated[int, Bits(64)]

UInt8 = Annotated[int, Bits(8, signed=False)]
UInt16 = Annotated[int, Bits(16, signed=False)]
UInt32 = Annotated[int, Bits(32, signed=False)]
UInt64 = Annotated[int, Bits(64, signed=False)]
UInt = UInt64

Float32 = Annotated[float, Bits(32)]
Float64 = Annotated[float, Bits(64)]
