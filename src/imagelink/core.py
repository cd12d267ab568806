#!/usr/bin/env python3
"""
Link image files into a date-based hierarchy by reading their EXIF date.
Requires: ExifTool command-line tool and PyExifTool Python library.
"""

import io
import os
import subprocess
import sys
from pathlib import Path
from typing import Any

import exiftool
from exiftool.exceptions import ExifToolException

from imagelink.args import get_config
from imagelink.exceptions import ParseError
from imagelink.models import AppConfig, LinkItem, colorize, colors
from imagelink.print import (
    print_file_errors,
    print_footer,
    print_header,
    print_input_info,
    print_link,
    print_link_error,
    print_mkdir,
    print_working,
    printe,
)


def skip_item_with_error(item: LinkItem, error: str, skipped_files: list[str]) -> None:
    """
    Mark item as skipped with error message.

    Args:
        item: LinkItem to mark as skipped
        error: Error message to set
        skipped_files: List to append filename to
    """
    item.fail(error)
    skipped_files.append(item.name)


def check_exiftool_availability() -> None:
    """Check if ExifTool command-line tool is available."""
    try:
        subprocess.run(["exiftool", "-ver"], capture_output=True, check=True)
    except (subprocess.SubprocessError, FileNotFoundError):
        print("\033[0;31mExifTool command-line tool is not installed or not in PATH.\033[0m")
        print("Please download and install it from: \033[0;36mhttps://exiftool.org/\033[0m")
        sys.exit(1)


def check_conditions(cfg: AppConfig) -> None:
    """Check if all conditions are met to run the script."""
    # Show version and exit when requested with --version
    if cfg.show_version:
        date_str = f" ({cfg.script_date})" if cfg.script_date else ""
        msg = (
            f"{colorize(cfg.script_name, colors.green)} "
            f"version {colorize(cfg.script_version, colors.cyan)}{date_str} "
            f"by {colorize(cfg.script_author, colors.cyan)}"
        )
        printe(msg, 0)

    check_exiftool_availability()

    if cfg.quiet and cfg.verbose:
        printe("Cannot use both quiet mode and verbose mode.", 1)

    if cfg.min_size < 0:
        printe(f"Minimum size must not be negative: {cfg.min_size}", 1)


def read_list_file(list_file: Path) -> list[Path]:
    """
    Read a list file holding one path per line; blank lines are skipped.

    Undecodable bytes are kept as surrogates, the way command line paths are.
    """
    try:
        with open(list_file, encoding="utf-8", errors="surrogateescape") as f:
            lines = f.read().splitlines()
    except OSError as e:
        printe(
            f"Could not read list file '{colorize(str(list_file), colors.cyan)}': {e.strerror or e}",
            1,
        )
    return [Path(line.strip()) for line in lines if line.strip()]


def get_file_list(cfg: AppConfig) -> list[Path]:
    """Get the files named on the command line followed by those in list files."""
    files = list(cfg.files)
    for list_file in cfg.lists:
        files.extend(read_list_file(list_file))
    return files


def get_run_info(file_list: list[Path], cfg: AppConfig) -> dict[str, Any]:
    """Gather information about the run."""
    return {
        "base": cfg.base or ".",
        "file_count": len(file_list),
        "listed_count": len(file_list) - len(cfg.files),
        "linked_files": [],
        "skipped_files": [],
        "created_dirs": [],
    }


def read_metadata(et: exiftool.ExifToolHelper, file: Path) -> dict[str, Any]:
    """Read the metadata of a single file through a running ExifTool."""
    data = et.get_metadata(str(file))
    if not data:
        raise ExifToolException(f"no metadata returned for {file}")
    return data[0]


def get_link_objects(file_list: list[Path], cfg: AppConfig) -> list[LinkItem]:
    """Convert list of Paths to list of LinkItem objects."""
    items = [LinkItem(file, cfg) for file in file_list]

    pending = [item for item in items if item.is_valid]
    if not pending:
        return items

    # Run ExifTool once for all files to improve performance
    with exiftool.ExifToolHelper() as et:
        for item in pending:
            try:
                metadata = read_metadata(et, item.path)
            except (ExifToolException, UnicodeError) as e:
                item.fail(ParseError(item.path, e))
                continue
            item.process(metadata)

    return items


def make_link(item: LinkItem, created_dirs: list[str], cfg: AppConfig) -> None:
    """
    Create the link for a single item, making its parent directories first.

    Raises:
        OSError: Directory or link creation failed
    """
    parent = item.target.parent
    if parent.parts and not parent.exists():
        print_mkdir(parent, cfg)
        if not cfg.no_execute:
            parent.mkdir(parents=True, exist_ok=True)
            created_dirs.append(str(parent))

    print_link(item, cfg)
    if cfg.no_execute:
        return

    if cfg.overwrite and (item.target.is_symlink() or item.target.is_file()):
        item.target.unlink()
    os.symlink(item.source, item.target)


def make_links(items: list[LinkItem], info: dict[str, Any], cfg: AppConfig) -> None:
    """Create a symlink for every item that has a target."""
    linked_files: list[str] = []
    skipped_files: list[str] = []
    created_dirs: list[str] = []

    for item in items:
        print_working(item, cfg)

        if not item.is_ready:
            print_link_error(item, cfg)
            skipped_files.append(item.name)
            continue

        try:
            make_link(item, created_dirs, cfg)
        except FileExistsError:
            skip_item_with_error(item, f"Link already exists: '{item.target}'", skipped_files)
            print_link_error(item, cfg)
            continue
        except PermissionError:
            skip_item_with_error(
                item, f"Permission denied: cannot create link '{item.target}'", skipped_files
            )
            print_link_error(item, cfg)
            continue
        except OSError as e:
            skip_item_with_error(item, f"File system error: {str(e)}", skipped_files)
            print_link_error(item, cfg)
            continue

        linked_files.append(item.name)

    if (cfg.verbose or cfg.show_errors) and skipped_files:
        print_file_errors(items, cfg)
    info["linked_files"] = linked_files
    info["skipped_files"] = skipped_files
    info["created_dirs"] = created_dirs


def main() -> None:
    """Main function to run the linking process."""
    # File names that are not valid UTF-8 must not break the output
    if isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(errors="backslashreplace")
    # Get configuration (from args module)
    cfg = get_config()
    # Condition checks
    check_conditions(cfg)
    # Print header
    print_header(cfg)
    # Main processing
    file_list = get_file_list(cfg)
    info = get_run_info(file_list, cfg)
    print_input_info(info, cfg)

    if not file_list:
        print("No files to link. Exiting.")
        sys.exit(0)

    items = get_link_objects(file_list, cfg)
    make_links(items, info, cfg)

    # Print footer
    if not cfg.quiet:
        print_footer(info, cfg)


if __name__ == "__main__":
    main()
