import os
import re
import time
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from imagelink.exceptions import (
    InvalidDateError,
    LinkError,
    MissingFieldError,
    SourceFileError,
    TooSmallError,
)


@lru_cache(maxsize=1)
def _get_pyproject_data() -> dict[str, Any]:
    """
    Load data from pyproject.toml located in the project root.
    Cached to prevent multiple file reads.
    Assumes structure: project_root/src/imagelink/models.py
    """
    try:
        pyproject_path = Path(__file__).parents[2] / "pyproject.toml"

        if not pyproject_path.is_file():
            return {}

        with open(pyproject_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _get_script_version() -> str:
    """Get version directly from pyproject.toml [project] section."""
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("version", "0.0.0"))


def _get_script_date() -> str:
    """Get date directly from pyproject.toml [tool.imagelink] section."""
    data = _get_pyproject_data()
    return str(data.get("tool", {}).get("imagelink", {}).get("date", ""))


def _get_script_name() -> str:
    """Get project name from [project]."""
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("name", "imagelink"))


def _get_script_author() -> str:
    """Get first author name from [project.authors]."""
    data = _get_pyproject_data()
    authors = data.get("project", {}).get("authors", [])
    if isinstance(authors, list) and len(authors) > 0:
        return str(authors[0].get("name", ""))
    return ""


def _get_script_license() -> str:
    """Get license identifier from [project]."""
    data = _get_pyproject_data()
    lic = data.get("project", {}).get("license", "")
    if isinstance(lic, dict):
        return str(lic.get("text", ""))
    return str(lic)


# Matches ExifTool's "YYYY:MM:DD HH:MM:SS" as well as "YYYY-MM-DD HH:MM:SS"
DATE_PATTERN = re.compile(
    r"(?P<y>\d{4})[:-](?P<m>\d{2})[:-](?P<d>\d{2}) (?P<H>\d{2}):(?P<M>\d{2}):(?P<S>\d{2})"
)
DATE_REPLACEMENT = r"\g<y>/\g<m>/\g<d>/\g<H>-\g<M>-\g<S>-"


@dataclass
class Colors:
    """Terminal color codes."""

    reset: str = "\033[0m"
    red: str = "\033[31m"
    green: str = "\033[32m"
    yellow: str = "\033[33m"
    cyan: str = "\033[36m"
    magenta: str = "\033[35m"


# global Colors instance
colors = Colors()


def colorize(text: str, color: str) -> str:
    """Wrap text in color codes."""
    return f"{color}{text}{colors.reset}"


@dataclass(frozen=True)
class AppConfig:
    """Application configuration with default values."""

    # Inputs
    files: tuple[Path, ...] = ()
    lists: tuple[Path, ...] = ()
    base: str | None = None

    # Settings
    min_size: int = 100 * 1024
    exif_date_tags: tuple[str, ...] = (
        "EXIF:CreateDate",
        "EXIF:DateTimeOriginal",
        "EXIF:ModifyDate",
    )
    indent: str = "    "

    # Flags
    no_execute: bool = False
    overwrite: bool = False
    quiet: bool = False
    show_errors: bool = False
    show_settings: bool = False
    show_version: bool = False
    verbose: bool = False

    # Runtime metadata
    script_name: str = field(default_factory=_get_script_name)
    script_version: str = field(default_factory=_get_script_version)
    script_date: str = field(default_factory=_get_script_date)
    script_author: str = field(default_factory=_get_script_author)
    script_license: str = field(default_factory=_get_script_license)

    # Runtime state
    start_time: float = field(default_factory=time.time)

    def print_config(self, show_all: bool = False) -> None:
        """
        Print all configuration properties alphabetically.
        """
        print(f"{colorize('RAW Settings:', colors.yellow)}")

        for key in sorted(self.__dict__.keys()):
            if not show_all and key.startswith("_"):
                continue

            value = getattr(self, key)
            print(f"{self.indent}{key}: {colorize(str(value), colors.cyan)}")


def check_source(path: Path, min_size: int) -> int:
    """
    Make sure the input file can be opened and is large enough.

    Args:
        path: Input file
        min_size: Minimum size in bytes, smaller files are thumbnails

    Returns:
        Size of the file in bytes

    Raises:
        SourceFileError: The file cannot be opened
        TooSmallError: The file is smaller than min_size
    """
    try:
        with open(path, "rb") as f:
            size = os.fstat(f.fileno()).st_size
    except OSError as e:
        raise SourceFileError(path, e) from e

    if size < min_size:
        raise TooSmallError(path, size)
    return size


def first_of(path: Path, metadata: dict[str, Any], tags: tuple[str, ...]) -> str:
    """
    Look through the metadata for a set of tags, returning the first one present.

    Raises:
        MissingFieldError: None of the tags were found; the first tag is reported.
    """
    for tag in tags:
        if tag in metadata:
            return str(metadata[tag])

    field_name = tags[0].split(":")[-1] if tags else "[unknown]"
    raise MissingFieldError(path, field_name)


def date_to_dirs(path: Path, value: str) -> str:
    """
    Turn a metadata date into a directory prefix.

    "2021:06:05 14:03:09" becomes "2021/06/05/14-03-09-". Text around the
    date is left in place.
    """
    result, count = DATE_PATTERN.subn(DATE_REPLACEMENT, value, count=1)
    if count == 0:
        raise InvalidDateError(path, value)
    return result


def link_name(path: Path, metadata: dict[str, Any], cfg: AppConfig) -> Path:
    """Build the link path (relative to the working directory) for an input file."""
    date_value = first_of(path, metadata, cfg.exif_date_tags)
    prefix = date_to_dirs(path, date_value)
    name = path.name if path.name else str(path)
    return Path(prefix + name.replace(" ", "-"))


def link_source(path: Path, target: Path, base: str | None = None) -> Path:
    """
    Build the link contents pointing back at the input file.

    The link lives len(target.parent.parts) directories below the working
    directory, so climb back up that many levels before descending into
    base and path. An absolute path replaces everything before it.
    """
    source = Path(*([".."] * len(target.parent.parts)))
    if base:
        source = source / base
    return source / path


class LinkItem:
    """Class representing an input file and the link to be made for it."""

    def __init__(
        self, path: Path, config: AppConfig, metadata: dict[str, Any] | None = None
    ):
        self.cfg = config
        self.path = path
        self.name = str(path)
        self.error = ""
        self.is_valid = True
        self.size = 0
        self.metadata: dict[str, Any] | None = None
        self.date: str | None = None
        self.target: Path | None = None
        self.source: Path | None = None

        if not self._validate_file():
            return

        if metadata is not None:
            self.process(metadata)

    def _validate_file(self) -> bool:
        try:
            self.size = check_source(self.path, self.cfg.min_size)
        except LinkError as e:
            self.fail(e)
            return False
        return True

    def fail(self, error: LinkError | str) -> None:
        """Mark the item as not linkable."""
        self.error = str(error)
        self.is_valid = False

    def process(self, metadata: dict[str, Any]) -> None:
        """Resolve date, link target and link source from metadata."""
        self.metadata = metadata
        try:
            self.date = first_of(self.path, metadata, self.cfg.exif_date_tags)
            self.target = link_name(self.path, metadata, self.cfg)
        except LinkError as e:
            self.fail(e)
            return

        self.source = link_source(self.path, self.target, self.cfg.base)

    @property
    def is_ready(self) -> bool:
        """True when the item has a link target and no error."""
        return self.is_valid and self.target is not None

    def get_exif_fields(self) -> dict[str, Any]:
        """Return the EXIF fields of the metadata, for diagnostics."""
        if not self.metadata:
            return {}
        return {k: v for k, v in self.metadata.items() if k.startswith("EXIF:")}
