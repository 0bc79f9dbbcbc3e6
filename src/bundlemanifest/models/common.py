from __future__ import annotations
from enum import IntEnum, IntFlag
from typing import NamedTuple


class FileType(IntEnum):
    UNKNOWN = 0
    ASSEMBLY = 1
    NATIVE_BINARY = 2
    DEPS_JSON = 3
    RUNTIME_CONFIG_JSON = 4
    SYMBOLS = 5


class HeaderFlags(IntFlag):
    NONE = 0
    NETCOREAPP3_COMPAT_MODE = 1


class FormatVersion(NamedTuple):
    major: int
    minor: int

    def readable_by(self, reader: "FormatVersion") -> bool:
        """Backward compatible only: same major needs minor <= reader's."""
        return self.major < reader.major or (self.major == reader.major and self.minor <= reader.minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


# Newest manifest format this package understands.
READER_VERSION = FormatVersion(2, 0)
