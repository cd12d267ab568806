"""
Output logic for ImageLink.
"""

import sys
import time
from pathlib import Path
from typing import Any

from imagelink.models import AppConfig, LinkItem, colorize, colors


def get_schema(cfg: AppConfig) -> str:
    """Get schema string based on current configuration."""
    arrow = colorize("→", colors.yellow)
    link = colorize("YYYY/MM/DD/HH-MM-SS-", colors.cyan)
    base = f"{colorize(cfg.base, colors.cyan)}/" if cfg.base else ""
    return f"{link}File-Name.jpg {arrow} ../../../{base}File Name.jpg"


def get_status(value: bool) -> str:
    """Get colored ON/OFF status."""
    return colorize("ON", colors.green) if value else colorize("OFF", colors.red)


def get_elapsed_time(start_time: float) -> tuple[str, str]:
    """Get elapsed time since script start."""
    elapsed_time = (time.time() - start_time) * 1000
    time_factor = "ms" if elapsed_time < 1000 else "s"
    elapsed_time = elapsed_time / 1000 if elapsed_time >= 1000 else elapsed_time
    return f"{elapsed_time:.2f}", time_factor


def printe(message: str, exit_code: int = 1) -> None:
    """Print error message and exit with given exit code."""
    msg = message if exit_code == 0 else f"{colorize('Error', colors.red)}: {message}"
    print(msg)
    sys.exit(exit_code)


def print_settings(cfg: AppConfig) -> None:
    """Print settings using AppConfig internal method."""
    cfg.print_config(show_all=False)


def print_header(cfg: AppConfig) -> None:
    """Print the header information based on current configuration."""
    print(
        f"{colorize('Image Link Script', colors.green)} ({colorize(cfg.script_name, colors.green)}) v{cfg.script_version}"
    )
    if cfg.show_settings and not cfg.quiet:
        print_settings(cfg)
    if cfg.quiet:
        return
    print(f"{colorize('Schema:', colors.yellow)}")
    print(f"{cfg.indent}{get_schema(cfg)}")
    print(f"{colorize('Settings:', colors.yellow)}")
    if cfg.verbose or cfg.no_execute:
        print(f"{cfg.indent}No-execute mode: {get_status(cfg.no_execute)}")
    if cfg.verbose:
        print(f"{cfg.indent}Verbose mode: {get_status(cfg.verbose)}")
        tags = ", ".join(tag.split(":")[-1] for tag in cfg.exif_date_tags)
        print(f"{cfg.indent}Date fields: {colorize(tags, colors.cyan)}")
    if cfg.verbose or cfg.overwrite:
        print(f"{cfg.indent}Overwrite existing links: {get_status(cfg.overwrite)}")
    if cfg.verbose or cfg.min_size != 100 * 1024:
        print(f"{cfg.indent}Minimum file size: {colorize(f'{cfg.min_size} bytes', colors.cyan)}")


def print_input_info(info: dict[str, Any], cfg: AppConfig) -> None:
    """Print where the input files came from."""
    if cfg.quiet:
        return
    print(f"{colorize('Input:', colors.yellow)}")
    print(f"{cfg.indent}Base directory: {colorize(info['base'], colors.cyan)}")
    print(f"{cfg.indent}Files from command line: {colorize(str(len(cfg.files)), colors.cyan)}")
    if cfg.lists:
        print(f"{cfg.indent}Files from lists: {colorize(str(info['listed_count']), colors.cyan)}")
        if cfg.verbose:
            for list_file in cfg.lists:
                print(f"{cfg.indent}{cfg.indent}list: {colorize(str(list_file), colors.cyan)}")
    print(f"{cfg.indent}Total files: {colorize(str(info['file_count']), colors.cyan)}")


def print_working(item: LinkItem, cfg: AppConfig) -> None:
    """Print the metadata trace of a single file in verbose mode."""
    if not cfg.verbose:
        return
    print(f"{colorize('working:', colors.yellow)} {colorize(item.name, colors.cyan)}")
    for tag, value in item.get_exif_fields().items():
        print(f"{cfg.indent}'{tag}' :: '{value}'")
    if item.date:
        print(f"{cfg.indent}datetime '{colorize(item.date, colors.cyan)}'")
    if item.target:
        print(f"{cfg.indent}target '{colorize(str(item.target), colors.cyan)}'")


def print_mkdir(directory: Path, cfg: AppConfig) -> None:
    """Print the directory creation step."""
    if cfg.verbose or cfg.no_execute:
        print(f"{cfg.indent}mkdir -p {colorize(str(directory), colors.cyan)}")


def print_link(item: LinkItem, cfg: AppConfig) -> None:
    """Print the link creation step."""
    if cfg.verbose or cfg.no_execute:
        print(
            f"{cfg.indent}ln -s {colorize(str(item.source), colors.cyan)} "
            f"{colorize(str(item.target), colors.cyan)}"
        )


def print_link_error(item: LinkItem, cfg: AppConfig) -> None:
    """Print an error for a file as soon as it happens, also in quiet mode."""
    print(f"{cfg.indent}{colorize('error:', colors.red)} {item.error}")


def print_file_errors(items: list[LinkItem], cfg: AppConfig) -> None:
    """Print errors for files that could not be linked."""
    failed = [i for i in items if not i.is_valid]
    if failed:
        print(f"{colorize('Files not linked:', colors.yellow)}")
        for item in failed:
            print(
                f"{cfg.indent}{colorize(item.name, colors.cyan)}: {colorize(item.error, colors.red)}"
            )


def print_footer(info: dict[str, Any], cfg: AppConfig) -> None:
    """Print the footer summary based on run information and configuration."""
    time_elapsed, time_factor = get_elapsed_time(cfg.start_time)
    print(f"{colorize('Summary:', colors.yellow)}")
    if cfg.no_execute:
        print(f"{cfg.indent}No-execute mode (no changes made).")
        print(f"{cfg.indent}Links to make: {len(info['linked_files'])}")
    else:
        print(f"{cfg.indent}Linked files: {len(info['linked_files'])}")
        print(f"{cfg.indent}Directories created: {len(info['created_dirs'])}")
    print(f"{cfg.indent}Skipped files: {len(info['skipped_files'])}")
    print(f"{cfg.indent}Completed in: {colorize(time_elapsed, colors.cyan)} {time_factor}.")
