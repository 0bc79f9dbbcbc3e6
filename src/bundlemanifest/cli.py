from __future__ import annotations
import argparse, json, logging, sys

from .config import get_settings
from .errors import IncompatibleVersion, ManifestError, NotABundle

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

EXIT_IO = 1
EXIT_CORRUPT = 2
EXIT_INCOMPATIBLE = 3


def cmd_info(args):
    if args.summary:
        from .binary.reader import summarize_bundle
        bundle_id, count = summarize_bundle(args.input, header_offset=args.header_offset)
        print(f"bundle_id={bundle_id}, files={count}")
        return 0

    from .binary.reader import parse_bundle
    m = parse_bundle(args.input, header_offset=args.header_offset)
    print(json.dumps(m.model_dump(mode="json"), indent=2))
    return 0


def cmd_entries(args):
    from .binary.reader import parse_bundle
    m = parse_bundle(args.input, header_offset=args.header_offset)
    for i, e in enumerate(m.files):
        flag = "z" if e.is_compressed else "-"
        print(f"{i:4d} {flag} {e.type.name:<20} {e.offset:>12d} {e.size:>12d} {e.compressed_size:>12d} {e.relative_path}")
    return 0


def cmd_locate(args):
    from .binary.reader import find_header_offset
    print(find_header_offset(args.input))
    return 0


def build_parser():
    p = argparse.ArgumentParser(prog="bundle-manifest", description="Single-file bundle manifest utilities")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("info", help="print the parsed manifest as JSON or a header summary")
    sp.add_argument("input", help="Path to the bundle")
    sp.add_argument("--header-offset", type=int, default=None, help="Manifest offset; located via the bundle marker when omitted")
    sp.add_argument("--summary", action="store_true", help="Read the header only")
    sp.set_defaults(func=cmd_info)

    sp = sub.add_parser("entries", help="list embedded files, one per line")
    sp.add_argument("input", help="Path to the bundle")
    sp.add_argument("--header-offset", type=int, default=None)
    sp.set_defaults(func=cmd_entries)

    sp = sub.add_parser("locate", help="print the manifest offset recorded in the bundle marker")
    sp.add_argument("input", help="Path to the bundle")
    sp.set_defaults(func=cmd_locate)

    return p


def main(argv=None):
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.WARNING), format=LOG_FORMAT)

    ns = build_parser().parse_args(argv)
    try:
        return ns.func(ns)
    except IncompatibleVersion as e:
        print(f"error: this runtime cannot open a bundle built by a newer tool ({e})", file=sys.stderr)
        return EXIT_INCOMPATIBLE
    except NotABundle as e:
        print(f"error: not a single-file bundle: {e}", file=sys.stderr)
        return EXIT_CORRUPT
    except ManifestError as e:
        print(f"error: bundle is corrupt: {e}", file=sys.stderr)
        return EXIT_CORRUPT
    except OSError as e:
        print(f"error: cannot read {ns.input}: {e.strerror or e}", file=sys.stderr)
        return EXIT_IO


if __name__ == "__main__":
    raise SystemExit(main())
