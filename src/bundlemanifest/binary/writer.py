from __future__ import annotations
import struct
from typing import Iterable

from .codecs.header_codec import FIXED_HEADER, HEADER_TAIL_V2
from .codecs.file_entry_codec import ENTRY_FIXED
from .reader import BUNDLE_SIGNATURE
from ..models.header import Header
from ..models.file_entry import FileEntry

# Reference encoder for manifests whose offsets are already known.
# Used to build fixtures; it does not lay out payloads.


def encode_string(s: str | bytes) -> bytes:
    raw = s.encode("utf-8") if isinstance(s, str) else s
    return struct.pack("<I", len(raw)) + raw


def encode_fixed_header(major: int, minor: int, num_embedded_files: int) -> bytes:
    return FIXED_HEADER.pack(major, minor, num_embedded_files)


def encode_header(header: Header) -> bytes:
    out = bytearray()
    out += encode_fixed_header(header.major_version, header.minor_version, header.num_embedded_files)
    out += encode_string(header.bundle_id)
    if header.has_tail:
        out += HEADER_TAIL_V2.pack(
            header.deps_json.offset,
            header.deps_json.size,
            header.runtime_config_json.offset,
            header.runtime_config_json.size,
            header.flags,
        )
    return bytes(out)


def encode_entry_fields(offset: int, size: int, compressed_size: int, file_type: int, path: str | bytes) -> bytes:
    return ENTRY_FIXED.pack(offset, size, compressed_size, int(file_type)) + encode_string(path)


def encode_file_entry(entry: FileEntry) -> bytes:
    return encode_entry_fields(entry.offset, entry.size, entry.compressed_size, entry.type, entry.relative_path)


def encode_manifest(header: Header, files: Iterable[FileEntry]) -> bytes:
    out = bytearray(encode_header(header))
    for entry in files:
        out += encode_file_entry(entry)
    return bytes(out)


def encode_marker(header_offset: int) -> bytes:
    """int64 header offset followed by the bundle signature, as patched into the host."""
    return struct.pack("<q", header_offset) + BUNDLE_SIGNATURE
