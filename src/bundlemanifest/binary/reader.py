from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import Optional, Tuple, Union

from .codecs.bytecursor import ByteCursor
from .codecs.header_codec import decode_header
from .codecs.file_entry_codec import decode_file_entries
from bundlemanifest.config import ReaderSettings, get_settings
from bundlemanifest.errors import NotABundle, OutOfRange, TruncatedInput
from bundlemanifest.models.common import READER_VERSION, FormatVersion
from bundlemanifest.models.manifest import Manifest

log = logging.getLogger(__name__)

BytesLike = Union[str, Path, bytes, bytearray, memoryview]

# SHA-256 of ".NET Core bundle"; the host image carries it right after the
# little-endian int64 header offset.
BUNDLE_SIGNATURE = (
    b"\x8b\x12\x02\xb9\x6a\x61\x20\x38"
    b"\x72\x7b\x93\x02\x14\xd7\xa0\x32"
    b"\x13\xf5\xb9\xe6\xef\xae\x33\x18"
    b"\xee\x3b\x2d\xce\x24\xb3\x6a\xae"
)
_HEADER_OFFSET = struct.Struct("<q")


# -----------------------------
# Helpers
# -----------------------------

def _load_bytes(inp: BytesLike) -> bytes:
    if isinstance(inp, (bytes, bytearray, memoryview)):
        return bytes(inp)
    return Path(str(inp)).read_bytes()


def find_header_offset(data: BytesLike) -> int:
    """
    Locate the bundle marker in the host image and return the manifest's
    offset within the container.
    """
    raw = _load_bytes(data)
    pos = raw.find(BUNDLE_SIGNATURE)
    if pos < _HEADER_OFFSET.size:
        raise NotABundle("bundle signature not found")
    (offset,) = _HEADER_OFFSET.unpack_from(raw, pos - _HEADER_OFFSET.size)
    if offset == 0:
        raise NotABundle("host is not a bundle: header offset is unset", offset=pos - _HEADER_OFFSET.size)
    if offset < 0:
        raise OutOfRange(f"negative header offset {offset}", offset=pos - _HEADER_OFFSET.size)
    log.debug("bundle marker at %d, header offset %d", pos, offset)
    return offset


def _manifest_cursor(raw: bytes, header_offset: Optional[int]) -> Tuple[ByteCursor, int]:
    if header_offset is None:
        header_offset = find_header_offset(raw)
    if header_offset < 0:
        raise OutOfRange(f"negative header offset {header_offset}")
    if header_offset >= len(raw):
        raise TruncatedInput(
            f"manifest starts at {header_offset}, container is {len(raw)} bytes",
            offset=header_offset,
        )
    return ByteCursor(memoryview(raw)[header_offset:]), header_offset


# -----------------------------
# Manifest read
# -----------------------------

def read_manifest(
    cur: ByteCursor,
    *,
    container_length: int,
    reader_version: FormatVersion = READER_VERSION,
    settings: Optional[ReaderSettings] = None,
    header_offset: int = 0,
) -> Manifest:
    """Header then exactly num_embedded_files entries, from one cursor, in one pass."""
    settings = settings or get_settings()
    header = decode_header(
        cur,
        reader_version=reader_version,
        container_length=container_length,
        settings=settings,
    )
    files = decode_file_entries(
        cur,
        header.num_embedded_files,
        container_length=container_length,
        max_path_length=settings.max_string_length,
    )
    if cur.remaining():
        log.debug("%d trailing bytes after manifest", cur.remaining())
    return Manifest(header=header, files=files, header_offset=header_offset)


def parse_bundle(
    data: BytesLike,
    *,
    header_offset: Optional[int] = None,
    reader_version: FormatVersion = READER_VERSION,
    settings: Optional[ReaderSettings] = None,
) -> Manifest:
    """
    Full manifest read of a single-file bundle. Without an explicit
    header_offset the bundle marker in the host image is used.
    """
    raw = _load_bytes(data)
    cur, header_offset = _manifest_cursor(raw, header_offset)
    return read_manifest(
        cur,
        container_length=len(raw),
        reader_version=reader_version,
        settings=settings,
        header_offset=header_offset,
    )


def summarize_bundle(
    data: BytesLike,
    *,
    header_offset: Optional[int] = None,
    reader_version: FormatVersion = READER_VERSION,
    settings: Optional[ReaderSettings] = None,
) -> Tuple[str, int]:
    """Header-only read: returns (bundle_id, num_embedded_files)."""
    raw = _load_bytes(data)
    cur, _ = _manifest_cursor(raw, header_offset)
    header = decode_header(cur, reader_version=reader_version, container_length=len(raw), settings=settings)
    return header.bundle_id, header.num_embedded_files
