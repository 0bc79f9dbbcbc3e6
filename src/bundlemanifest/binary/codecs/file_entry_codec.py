from __future__ import annotations
import logging
import struct
from typing import List, Optional

from .bytecursor import ByteCursor
from bundlemanifest.errors import InvalidFileEntry, OutOfRange, TruncatedInput
from bundlemanifest.models.common import FileType
from bundlemanifest.models.file_entry import FileEntry

log = logging.getLogger(__name__)

ENTRY_FIXED = struct.Struct("<QQQB")   # offset, size, compressed_size, type
# fixed part + u32 path length
MIN_ENTRY_BYTES = ENTRY_FIXED.size + 4


def _normalize_path(raw: str, offset: int) -> str:
    path = raw.replace("\\", "/")
    if not path:
        raise InvalidFileEntry("empty relative path", offset=offset)
    if "\x00" in path:
        raise InvalidFileEntry(f"relative path {path!r} contains NUL", offset=offset)
    if path.startswith("/") or (len(path) > 1 and path[1] == ":"):
        raise InvalidFileEntry(f"relative path {path!r} is absolute", offset=offset)
    parts = path.split("/")
    if ".." in parts:
        raise InvalidFileEntry(f"relative path {path!r} escapes the extraction root", offset=offset)
    # one spelling per file: no empty or "." components, no trailing slash
    if any(p in ("", ".") for p in parts):
        raise InvalidFileEntry(f"relative path {path!r} is not in canonical form", offset=offset)
    return path


def decode_file_entry(
    cur: ByteCursor,
    *,
    container_length: int,
    max_path_length: Optional[int] = None,
) -> FileEntry:
    """
    One manifest record. offset/size refer to the container, not to the
    manifest buffer the cursor walks.
    """
    start = cur.tell()
    offset, size, compressed_size, type_byte = cur.unpack(ENTRY_FIXED)
    path = cur.read_length_prefixed_string(max_path_length)

    try:
        ftype = FileType(type_byte)
    except ValueError:
        raise InvalidFileEntry(f"unknown file type {type_byte}", offset=start) from None
    path = _normalize_path(path, start)

    stored = compressed_size if compressed_size else size
    if offset >= container_length or offset + stored > container_length:
        raise OutOfRange(
            f"entry {path!r} spans {offset}..{offset + stored}, container is {container_length} bytes",
            offset=start,
        )

    return FileEntry(
        offset=offset,
        size=size,
        compressed_size=compressed_size,
        type=ftype,
        relative_path=path,
    )


def decode_file_entries(
    cur: ByteCursor,
    count: int,
    *,
    container_length: int,
    max_path_length: Optional[int] = None,
) -> List[FileEntry]:
    # Fail before allocating anything for a count the buffer cannot hold.
    if cur.remaining() < count * MIN_ENTRY_BYTES:
        raise TruncatedInput(
            f"{count} file entries need at least {count * MIN_ENTRY_BYTES} bytes, {cur.remaining()} left",
            offset=cur.tell(),
        )

    entries: List[FileEntry] = []
    seen = set()
    for i in range(count):
        rec_off = cur.tell()
        entry = decode_file_entry(cur, container_length=container_length, max_path_length=max_path_length)
        if entry.relative_path in seen:
            raise InvalidFileEntry(f"entry[{i}] duplicates path {entry.relative_path!r}", offset=rec_off)
        seen.add(entry.relative_path)
        entries.append(entry)
        log.debug("entry[%d] %s type=%s offset=%d size=%d", i, entry.relative_path, entry.type.name, entry.offset, entry.size)
    return entries
