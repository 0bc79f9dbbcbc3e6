from __future__ import annotations
import struct
from typing import Optional

from bundlemanifest.errors import MalformedString, TruncatedInput

_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


class ByteCursor:
    """Forward-only reader over the manifest window of a container.

    Every read is checked against the real length of the wrapped buffer,
    never against a value taken from the buffer itself.
    """
    __slots__ = ("buf", "pos")

    def __init__(self, data: bytes | bytearray | memoryview):
        self.buf = memoryview(data).toreadonly()
        self.pos = 0

    def remaining(self) -> int: return len(self.buf) - self.pos
    def tell(self) -> int: return self.pos

    def read_fixed(self, n: int) -> memoryview:
        if n < 0: raise ValueError(f"negative read size {n}")
        end = self.pos + n
        if end > len(self.buf):
            raise TruncatedInput(f"need {n} bytes, {self.remaining()} left", offset=self.pos)
        out = self.buf[self.pos:end]
        self.pos = end
        return out

    # little-endian reads
    def unpack(self, fmt: struct.Struct) -> tuple:
        return fmt.unpack(self.read_fixed(fmt.size))
    def u8(self) -> int:  return self.read_fixed(1)[0]
    def u32(self) -> int: return _U32.unpack(self.read_fixed(4))[0]
    def u64(self) -> int: return _U64.unpack(self.read_fixed(8))[0]

    def read_length_prefixed_string(self, max_length: Optional[int] = None) -> str:
        """
        u32 byte count followed by that many bytes of UTF-8.
        The prefix is bounds-checked before any cap so a short buffer always
        reports truncation.
        """
        start = self.pos
        n = self.u32()
        if n > self.remaining():
            raise TruncatedInput(f"string of {n} bytes, {self.remaining()} left", offset=start)
        if max_length is not None and n > max_length:
            raise MalformedString(f"string of {n} bytes exceeds limit {max_length}", offset=start)
        raw = self.read_fixed(n)
        try:
            return bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedString(f"string is not valid UTF-8: {e.reason}", offset=start) from e
