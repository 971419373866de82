"""qrcodeine CLI: render QR codes to PNG or dump their module matrix."""

import argparse
import sys
from pathlib import Path

from qrcodeine import config
from qrcodeine.api import encode, encode_png
from qrcodeine.errors import QRCodeineError, ValidationError
from qrcodeine.logging import audit, get_logger, setup_logging
from qrcodeine.options import ECLevel, Mode
from qrcodeine.serializer import SERIALIZERS, get_serializer
from qrcodeine.symbol import GENERATORS, get_generator

log = get_logger("cli")

MODE_NAMES = {
    "numeric": Mode.NUMERIC,
    "alphanumeric": Mode.ALPHANUMERIC,
    "byte": Mode.BYTE,
    "kanji": Mode.KANJI,
}


def _parse_hex_color(s: str) -> int:
    """Parse a hex colour string (with or without '#') to a 0xRRGGBB integer."""
    s = s.lstrip("#")
    if len(s) != 6:
        raise argparse.ArgumentTypeError(f"expected 6 hex digits, got {s!r}")
    try:
        return int(s, 16)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hex colour: {s!r}") from None


def _options(args) -> dict:
    """Collect the symbol options given on the command line."""
    return {
        "version": args.version,
        "ec_level": ECLevel[args.ec_level],
        "mode": MODE_NAMES[args.mode],
        "dot_size": getattr(args, "dot_size", None),
        "margin": getattr(args, "margin", None),
        "foreground_color": getattr(args, "fg", None),
        "background_color": getattr(args, "bg", None),
    }


def cmd_png(args):
    """Render a QR code to a PNG file."""
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)

    result = encode_png(
        args.text,
        _options(args),
        generator=get_generator(args.generator),
        serializer=get_serializer(args.serializer),
    )
    output.write_bytes(result.data)
    print(f"Generated: {output} (version {result.version}, {result.width}x{result.width} modules, "
          f"{len(result.data)} bytes)")


def cmd_matrix(args):
    """Print the module matrix of a QR code."""
    result = encode(args.text, _options(args), generator=get_generator(args.generator))
    print(f"QR Version {result.version} ({result.width}x{result.width} modules)")
    for y in range(result.width):
        row = result.data[y * result.width:(y + 1) * result.width]
        print("".join("#" if cell & 1 else "." for cell in row))


def _add_symbol_args(p: argparse.ArgumentParser):
    p.add_argument("text", help="Text to encode")
    p.add_argument("-v", "--version", type=int, default=None, help="Minimum QR version 1-40 (auto if omitted)")
    p.add_argument("-e", "--ec-level", default="L", choices=[level.name for level in ECLevel],
                   help="Error correction level")
    p.add_argument("-m", "--mode", default="byte", choices=list(MODE_NAMES), help="Input character-set mode")
    p.add_argument("--generator", default=config.GENERATOR, choices=list(GENERATORS),
                   help="Symbol generation backend")


def main(argv=None):
    parser = argparse.ArgumentParser(prog="qrcodeine", description="QR code matrices and 2-color PNGs")

    # Global logging flags
    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=config.LOG_FILE, help="Write JSON logs to file")
    parser.add_argument("--json-logs", action=argparse.BooleanOptionalAction, default=config.LOG_JSON,
                        help="Log JSON lines on the console")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- png ---
    p_png = subparsers.add_parser("png", help="Render a QR code to PNG")
    _add_symbol_args(p_png)
    p_png.add_argument("-o", "--output", default="output/qr.png", help="Output file path")
    p_png.add_argument("--dot-size", type=int, default=None, help="Pixels per module (1-50, default 3)")
    p_png.add_argument("--margin", type=int, default=None, help="Quiet zone in modules (0-10, default 4)")
    p_png.add_argument("--fg", type=_parse_hex_color, default=None, help="Foreground colour (hex e.g. '000000')")
    p_png.add_argument("--bg", type=_parse_hex_color, default=None, help="Background colour (hex)")
    p_png.add_argument("--serializer", default=config.SERIALIZER, choices=list(SERIALIZERS),
                       help="PNG encoder backend")

    # --- matrix ---
    p_matrix = subparsers.add_parser("matrix", help="Print the module matrix")
    _add_symbol_args(p_matrix)

    args = parser.parse_args(argv)

    # Setup logging before any command runs
    level = "DEBUG" if args.verbose else config.LOG_LEVEL
    setup_logging(level=level, log_file=args.log_file, json_format=args.json_logs)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    commands = {
        "png": cmd_png,
        "matrix": cmd_matrix,
    }
    try:
        commands[args.command](args)
    except ValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(2)
    except QRCodeineError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)
    audit("cli.done", logger=log, command=args.command)


if __name__ == "__main__":
    main()
