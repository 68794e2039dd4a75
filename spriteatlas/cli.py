from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from .core import AtlasOptions, SpriteAtlasPacker, extract_atlases
from .errors import AtlasConfigError, AtlasError
from .logger import setup_logging


def _setup_logging(args: argparse.Namespace | None = None) -> None:
    """Setup logging from the common command-line flags."""
    log_file = getattr(args, "log_file", None)
    verbose = getattr(args, "verbose", False)
    setup_logging(Path(log_file) if log_file else None, verbose)


def _non_negative_int(text: str) -> int:
    try:
        value = int(text, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return value


def cli_pack(args: argparse.Namespace) -> int:
    """Pack sprites into one auto-sized atlas or a series of fixed-size pages."""
    logging.debug(f"Args: {vars(args)}")
    options = AtlasOptions(
        trim=args.trim,
        padding=args.padding,
        size=args.size,
        xml_path=args.xml,
        json_path=args.json,
    )
    packer = SpriteAtlasPacker(options)
    pages = packer.build(args.inputs, args.output)
    logging.info(f"Packed {sum(len(p.sprites) for p in pages)} sprite(s) into {len(pages)} page(s)")
    return 0


def cli_extract(args: argparse.Namespace) -> int:
    """Write every sprite embedded in the given atlases as its own PNG."""
    logging.debug(f"Args: {vars(args)}")
    output_dir = Path(args.output_dir)
    written = extract_atlases(args.atlases, output_dir)
    logging.info(f"Extracted {len(written)} sprite(s) to {output_dir}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pngatlas", description="PNG texture atlas packer")
    sub = p.add_subparsers(dest="cmd")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Show debug messages on the console")
    common.add_argument("--log-file", help="Write a detailed debug log to this file")

    c = sub.add_parser("pack", parents=[common], help="Pack PNG sprites into an atlas with embedded atLS metadata")
    c.add_argument("-t", "--trim", action="store_true", help="Trim fully transparent borders from every sprite")
    c.add_argument("-p", "--padding", type=_non_negative_int, default=0, help="Empty pixels right of and below each sprite (default: 0)")
    c.add_argument("-m", "--size", type=_non_negative_int, help="Fixed page size; writes numbered pages instead of one auto-sized atlas")
    c.add_argument("-x", "--xml", help="Optional Starling XML sidecar path")
    c.add_argument("-j", "--json", help="Optional JSON sidecar path")
    c.add_argument("output", help="Output atlas PNG path")
    c.add_argument("inputs", nargs="+", help="Input PNG sprites or atlases")
    c.set_defaults(func=cli_pack)

    e = sub.add_parser("extract", parents=[common], help="Extract sprites from atlases written by pack")
    e.add_argument("-o", "--output-dir", default=".", help="Directory for extracted sprites (default: current directory)")
    e.add_argument("atlases", nargs="+", help="Atlas PNG files")
    e.set_defaults(func=cli_extract)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging first
    _setup_logging(args)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        result = args.func(args)
        logging.debug(f"Operation completed with exit code: {result}")
        return result
    except AtlasConfigError as e:
        logging.error(str(e))
        parser.print_usage()
        return 1
    except AtlasError as e:
        logging.error(str(e))
        return 1
    except OSError as e:
        logging.error(f"I/O error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
