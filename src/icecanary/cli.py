"""Command line interface for IceCanary."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .api import (
    BuildOptions,
    DEFAULT_BUILD_FILE,
    DEFAULT_OUTPUT_DIR,
    build_pack,
)
from .errors import IceCanaryError
from .logging import configure_logging, get_logger
from .reporting import (
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)


def _build_cmd(args: argparse.Namespace) -> int:
    opts = BuildOptions(
        build_file=args.file,
        output_dir=args.output,
        archive=not args.nozip,
        mc_version=args.mcversion,
        fetch_timeout=args.timeout if args.timeout > 0 else None,
        cache_dir=args.cache_dir,
    )
    result = build_pack(opts)
    get_logger().debug(
        "wrote %d file(s) to %s", result.files_written, result.output_path
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="icecanary",
        description="Build a Minecraft resource pack from a build file",
    )
    p.add_argument(
        "--version", action="version", version=f"IceCanary {__version__}"
    )
    p.add_argument(
        "-f",
        "--file",
        type=Path,
        default=Path(".") / DEFAULT_BUILD_FILE,
        help='Build configuration file, defaults to "./icecanary.yml"',
    )
    p.add_argument(
        "-o",
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help='Output folder, defaults to "outputs"',
    )
    p.add_argument(
        "-z",
        "--nozip",
        action="store_true",
        help="Write a directory tree instead of a ZIP archive",
    )
    p.add_argument(
        "--mcversion",
        "-mcv",
        dest="mcversion",
        help="Minecraft version used to fetch upstream assets "
        "(overrides mcver from the build file)",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=60.0,
        help="Seconds to wait for upstream merges, 0 waits forever",
    )
    p.add_argument(
        "--cache-dir",
        dest="cache_dir",
        type=Path,
        help="Directory caching downloaded Minecraft assets",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, silent",
    )
    p.set_defaults(func=_build_cmd)
    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    requested = args.reporter
    if requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # rich falls back to plain without a TTY
        set_reporter(PlainReporter())
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except IceCanaryError as e:
        rep = get_reporter()
        rep.flush()
        rep.error(e.message)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
