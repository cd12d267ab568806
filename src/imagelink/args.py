"""
Argument parsing logic for ImageLink.
"""

import argparse
import dataclasses
from pathlib import Path
from typing import Any

from imagelink.models import AppConfig, colorize, colors


def get_default_value(field_name: str) -> Any:
    """Extract default value from AppConfig dataclass field."""
    f = AppConfig.__dataclass_fields__[field_name]
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    return f.default


def get_default_info(default_val: Any) -> str:
    """Generate a string with default settings for help message."""
    return f"(default: '{colorize(str(default_val), colors.yellow)}')"


def get_config(argv: list[str] | None = None) -> AppConfig:
    """Parse command line arguments and return the AppConfig object."""

    parser = argparse.ArgumentParser(
        prog="imagelink",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Link images into a date-based hierarchy (YYYY/MM/DD) using the EXIF date.\n"
        f"Requires {colorize('ExifTool', colors.green)} command-line tool and {colorize('PyExifTool', colors.green)} Python library.",
        epilog=f"Example: {colorize('imagelink', colors.green)} -b photos -l photos.txt",
    )

    parser.add_argument(
        "-b",
        "--base",
        dest="base",
        type=str,
        default=get_default_value("base"),
        metavar="DIR",
        help="Base directory for output links (default: '.')",
    )
    parser.add_argument(
        "-E",
        "--show-errors",
        dest="show_errors",
        action="store_true",
        help="Show files that could not be linked",
    )
    parser.add_argument(
        "-l",
        "--list",
        dest="lists",
        type=Path,
        nargs="+",
        action="extend",
        default=[],
        metavar="FILE",
        help="Name of file containing files to link, one per line",
    )

    def_min_size = get_default_value("min_size")
    parser.add_argument(
        "-m",
        "--min-size",
        dest="min_size",
        type=int,
        default=def_min_size,
        metavar="BYTES",
        help=f"Skip smaller files as thumbnails {get_default_info(def_min_size)}",
    )
    parser.add_argument(
        "-n",
        "--no-execute",
        dest="no_execute",
        action="store_true",
        help="Don't really make links",
    )
    parser.add_argument(
        "-O",
        "--overwrite",
        dest="overwrite",
        action="store_true",
        help="Replace existing entries at the link location",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="store_true",
        help="Quiet mode (suppress non-error messages)",
    )
    parser.add_argument(
        "-S",
        "--settings",
        dest="show_settings",
        action="store_true",
        help="Show raw settings (variable values)",
    )
    parser.add_argument(
        "-v", "--version", dest="show_version", action="store_true", help="Print version and exit"
    )
    parser.add_argument(
        "-V",
        "--verbose",
        dest="verbose",
        action="store_true",
        help="Print detailed information during processing",
    )
    parser.add_argument(
        "files",
        type=Path,
        nargs="*",
        metavar="file",
        help="Name of file to link",
    )

    args = parser.parse_args(argv)

    # Construct and return the immutable AppConfig
    return AppConfig(
        files=tuple(args.files),
        lists=tuple(args.lists),
        base=args.base,
        min_size=args.min_size,
        no_execute=args.no_execute,
        overwrite=args.overwrite,
        quiet=args.quiet,
        show_errors=args.show_errors,
        show_settings=args.show_settings,
        show_version=args.show_version,
        verbose=args.verbose,
    )
