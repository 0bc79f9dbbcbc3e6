from __future__ import annotations
from typing import Optional


class ManifestError(ValueError):
    """Base class for every failure while reading a bundle manifest."""

    def __init__(self, message: str, *, offset: Optional[int] = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)


class TruncatedInput(ManifestError):
    """Fewer bytes remain than a field or record requires."""


class IncompatibleVersion(ManifestError):
    """Well-formed header written by a newer, unsupported format version."""

    def __init__(self, message: str, *, writer_version=None, reader_version=None, offset: Optional[int] = None):
        self.writer_version = writer_version
        self.reader_version = reader_version
        super().__init__(message, offset=offset)


class MalformedString(ManifestError):
    """Length-prefixed string is not valid UTF-8 or is unreasonably long."""


class OutOfRange(ManifestError):
    """Offset/size pair points outside the container."""


class InvalidHeader(ManifestError):
    """Fixed header or bundle id fails a sanity check independent of version."""


class InvalidFileEntry(ManifestError):
    pass


class NotABundle(ManifestError):
    """Host image carries no bundle marker, or the marker is unset."""
