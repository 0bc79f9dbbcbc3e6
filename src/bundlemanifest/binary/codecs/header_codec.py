from __future__ import annotations
import logging
import struct
from typing import Optional

from .bytecursor import ByteCursor
from bundlemanifest.config import ReaderSettings, get_settings
from bundlemanifest.errors import IncompatibleVersion, InvalidHeader, OutOfRange
from bundlemanifest.models.common import READER_VERSION, FormatVersion
from bundlemanifest.models.header import FileLocation, FixedHeader, Header

log = logging.getLogger(__name__)

FIXED_HEADER = struct.Struct("<III")       # major, minor, num_embedded_files
HEADER_TAIL_V2 = struct.Struct("<QQQQQ")   # deps.json loc, runtimeconfig.json loc, flags


def decode_fixed_header(cur: ByteCursor) -> FixedHeader:
    """Consume the 12-byte fixed block. No validation beyond the length check."""
    major, minor, count = cur.unpack(FIXED_HEADER)
    return FixedHeader(major_version=major, minor_version=minor, num_embedded_files=count)


def _reject(exc_type, reason: str, **kw):
    log.error("Failure processing application bundle.")
    log.error(reason)
    return exc_type(reason, **kw)


def check_fixed_header(
    fixed: FixedHeader,
    *,
    reader_version: FormatVersion = READER_VERSION,
    max_embedded_files: Optional[int] = None,
    offset: Optional[int] = None,
) -> None:
    # File count is checked first: a zero count is corruption whatever the version says.
    if fixed.num_embedded_files == 0:
        raise _reject(InvalidHeader, "Bundle header declares no embedded files.", offset=offset)
    if not fixed.is_valid(reader_version):
        raise _reject(
            IncompatibleVersion,
            f"Bundle header version compatibility check failed: bundle format {fixed.version}, "
            f"this reader supports up to {reader_version}.",
            writer_version=fixed.version,
            reader_version=reader_version,
            offset=offset,
        )
    # The cap only means something for a layout this reader understands.
    if max_embedded_files is not None and fixed.num_embedded_files > max_embedded_files:
        raise _reject(
            InvalidHeader,
            f"Bundle header declares {fixed.num_embedded_files} embedded files, limit is {max_embedded_files}.",
            offset=offset,
        )


def _check_bundle_id(bundle_id: str, offset: int) -> None:
    # bundle_id becomes a directory name under the extraction root
    if not bundle_id:
        raise _reject(InvalidHeader, "Bundle id is empty.", offset=offset)
    if bundle_id in (".", "..") or any(c in bundle_id for c in "/\\\x00"):
        raise _reject(InvalidHeader, f"Bundle id {bundle_id!r} is not a valid path component.", offset=offset)


def _check_location(name: str, loc: FileLocation, container_length: Optional[int], offset: int) -> None:
    if container_length is None or not loc.present:
        return
    if loc.offset >= container_length or loc.offset + loc.size > container_length:
        raise OutOfRange(
            f"{name} location {loc.offset}+{loc.size} outside container of {container_length} bytes",
            offset=offset,
        )


def decode_header(
    cur: ByteCursor,
    *,
    reader_version: FormatVersion = READER_VERSION,
    container_length: Optional[int] = None,
    settings: Optional[ReaderSettings] = None,
) -> Header:
    """
    Read the bundle header: fixed block, validity check, bundle id, and for
    format 2+ the well-known file locations and flags.
    An invalid fixed block is rejected before any length-prefixed data is read.
    """
    settings = settings or get_settings()
    start = cur.tell()
    fixed = decode_fixed_header(cur)
    check_fixed_header(
        fixed,
        reader_version=reader_version,
        max_embedded_files=settings.max_embedded_files,
        offset=start,
    )

    id_off = cur.tell()
    bundle_id = cur.read_length_prefixed_string(settings.max_string_length)
    _check_bundle_id(bundle_id, id_off)

    extra = {}
    if fixed.major_version >= 2:
        tail_off = cur.tell()
        deps_off, deps_size, rc_off, rc_size, flags = cur.unpack(HEADER_TAIL_V2)
        deps = FileLocation(offset=deps_off, size=deps_size)
        rc = FileLocation(offset=rc_off, size=rc_size)
        _check_location("deps.json", deps, container_length, tail_off)
        _check_location("runtimeconfig.json", rc, container_length, tail_off)
        extra = {"deps_json": deps, "runtime_config_json": rc, "flags": flags}

    header = Header(
        major_version=fixed.major_version,
        minor_version=fixed.minor_version,
        num_embedded_files=fixed.num_embedded_files,
        bundle_id=bundle_id,
        **extra,
    )
    log.debug("bundle header %s: id=%s files=%d", header.version, bundle_id, header.num_embedded_files)
    return header
