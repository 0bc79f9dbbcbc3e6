import pytest

from bundlemanifest.binary.codecs.bytecursor import ByteCursor
from bundlemanifest.binary.reader import find_header_offset, parse_bundle, read_manifest, summarize_bundle
from bundlemanifest.binary.writer import encode_manifest
from bundlemanifest.errors import IncompatibleVersion, NotABundle, OutOfRange, TruncatedInput
from bundlemanifest.models.common import FileType
from bundlemanifest.models.file_entry import FileEntry
from bundlemanifest.models.header import Header
from bundlemanifest.models.manifest import Manifest


def test_end_to_end_example(example_bundle):
    container, manifest_bytes, header_offset = example_bundle
    assert find_header_offset(container) == 212
    m = parse_bundle(container)
    assert m.header_offset == 212
    assert m.header.version == (1, 2)
    assert m.header.num_embedded_files == 2
    assert m.header.bundle_id == "abcd1234"
    assert [(e.offset, e.size, e.compressed_size, e.type, e.relative_path) for e in m.files] == [
        (128, 64, 64, FileType.ASSEMBLY, "app.dll"),
        (192, 32, 20, FileType.RUNTIME_CONFIG_JSON, "app.config"),
    ]
    assert m.find("app.config").compressed_size == 20
    assert m.index_of("app.dll") == 0
    assert m.find("missing.dll") is None


def test_container_cut_at_127_is_truncation(example_bundle):
    container, _, header_offset = example_bundle
    with pytest.raises(TruncatedInput):
        parse_bundle(container[:127])
    with pytest.raises(TruncatedInput):
        parse_bundle(container[:127], header_offset=header_offset)


def test_every_manifest_prefix_is_truncation(example_bundle):
    container, manifest_bytes, _ = example_bundle
    for k in range(len(manifest_bytes)):
        with pytest.raises(TruncatedInput):
            read_manifest(ByteCursor(manifest_bytes[:k]), container_length=len(container))


def test_every_container_prefix_is_truncation(example_bundle):
    container, _, header_offset = example_bundle
    for k in range(len(container)):
        with pytest.raises(TruncatedInput):
            parse_bundle(container[:k], header_offset=header_offset)


def test_parsing_is_idempotent(example_bundle):
    container, _, _ = example_bundle
    assert parse_bundle(container) == parse_bundle(container)


def test_round_trip_non_ascii(make_bundle):
    header = Header(major_version=2, minor_version=0, num_embedded_files=3, bundle_id="bündel-試験")
    files = [
        FileEntry(offset=128, size=10, compressed_size=10, type=FileType.ASSEMBLY, relative_path="ä/app.dll"),
        FileEntry(offset=138, size=400, compressed_size=0, type=FileType.NATIVE_BINARY, relative_path="libnative.so"),
        FileEntry(offset=538, size=3, compressed_size=3, type=FileType.SYMBOLS, relative_path="app.pdb"),
    ]
    container, manifest_bytes, _ = make_bundle(header, files, 541)
    m = parse_bundle(container)
    assert m.header == header
    assert m.files == files
    assert m.to_binary() == manifest_bytes


def test_out_of_range_with_well_formed_manifest(make_bundle):
    header = Header(major_version=1, minor_version=0, num_embedded_files=1, bundle_id="oor")
    files = [FileEntry(offset=200, size=10_000, compressed_size=10_000, type=FileType.ASSEMBLY, relative_path="big.dll")]
    container, _, _ = make_bundle(header, files, 256)
    with pytest.raises(OutOfRange):
        parse_bundle(container)


def test_incompatible_bundle(make_bundle):
    header = Header(major_version=9, minor_version=0, num_embedded_files=1, bundle_id="future")
    files = [FileEntry(offset=128, size=1, compressed_size=1, relative_path="a")]
    container, _, _ = make_bundle(header, files, 200)
    with pytest.raises(IncompatibleVersion):
        parse_bundle(container)


def test_summary_reads_header_only(example_bundle):
    container, _, _ = example_bundle
    # entries cut off: the header alone is still readable
    assert summarize_bundle(container[:212 + 24]) == ("abcd1234", 2)


def test_host_without_marker():
    with pytest.raises(NotABundle):
        find_header_offset(b"\x7fELF" + b"\x00" * 200)


def test_unset_marker(example_bundle):
    container, _, _ = example_bundle
    patched = container[:16] + b"\x00" * 8 + container[24:]
    with pytest.raises(NotABundle):
        parse_bundle(patched)


def test_manifest_from_path(tmp_path, example_bundle):
    container, _, _ = example_bundle
    p = tmp_path / "app"
    p.write_bytes(container)
    assert Manifest.from_binary(p) == parse_bundle(container)
    assert Manifest.from_binary(str(p), header_offset=212).header.bundle_id == "abcd1234"


def test_manifest_encoding_matches_writer(example_header, example_files):
    m = Manifest(header=example_header, files=example_files)
    assert m.to_binary() == encode_manifest(example_header, example_files)
