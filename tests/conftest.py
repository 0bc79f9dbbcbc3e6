import pytest

from bundlemanifest.binary.writer import encode_manifest, encode_marker
from bundlemanifest.models.common import FileType
from bundlemanifest.models.file_entry import FileEntry
from bundlemanifest.models.header import Header

HOST_SIZE = 128
MARKER_AT = 16


def build_container(header: Header, files, payload_end: int) -> tuple[bytes, bytes, int]:
    """Host stub with marker, zero payload up to payload_end, then the manifest."""
    manifest = encode_manifest(header, files)
    host = bytearray(b"\x7fELF" + b"\x00" * (HOST_SIZE - 4))
    host[MARKER_AT:MARKER_AT + 40] = encode_marker(payload_end)
    payload = bytes(range(256)) * ((payload_end - HOST_SIZE) // 256 + 1)
    container = bytes(host) + payload[:payload_end - HOST_SIZE] + manifest
    return container, manifest, payload_end


@pytest.fixture
def example_header():
    return Header(major_version=1, minor_version=2, num_embedded_files=2, bundle_id="abcd1234")


@pytest.fixture
def example_files():
    return [
        FileEntry(offset=128, size=64, compressed_size=64, type=FileType.ASSEMBLY, relative_path="app.dll"),
        FileEntry(offset=192, size=32, compressed_size=20, type=FileType.RUNTIME_CONFIG_JSON, relative_path="app.config"),
    ]


@pytest.fixture
def example_bundle(example_header, example_files):
    # payloads end at 192 + 20
    return build_container(example_header, example_files, 212)


@pytest.fixture
def make_bundle():
    return build_container
