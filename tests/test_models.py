"""
Tests for the naming functionality of ImageLink.
"""
import dataclasses
from pathlib import Path

import pytest

from imagelink.exceptions import (
    InvalidDateError,
    LinkError,
    MissingFieldError,
    SourceFileError,
    TooSmallError,
)
from imagelink.models import (
    AppConfig,
    LinkItem,
    check_source,
    date_to_dirs,
    first_of,
    link_name,
    link_source,
)


# --- Fixtures ---

@pytest.fixture
def base_config() -> AppConfig:
    """
    Returns an AppConfig instance with default settings
    and the thumbnail check disabled.
    """
    return AppConfig(min_size=0, quiet=True)


@pytest.fixture
def photo(tmp_path: Path) -> Path:
    """A file large enough to pass the default thumbnail check."""
    path = tmp_path / "IMG 0042.jpg"
    path.write_bytes(b"\xff" * (100 * 1024))
    return path


# --- Tests ---

def test_config_initialization():
    """Ensure configuration initializes with expected default values."""
    cfg = AppConfig()
    assert cfg.script_name == "imagelink"
    assert cfg.min_size == 102400
    assert cfg.base is None
    assert cfg.no_execute is False
    assert cfg.exif_date_tags[0] == "EXIF:CreateDate"


def test_first_of_priority():
    """The first tag of the list wins even when later ones are present."""
    metadata = {
        "EXIF:ModifyDate": "2022:01:01 00:00:00",
        "EXIF:DateTimeOriginal": "2021:06:05 14:03:09",
        "EXIF:CreateDate": "2020:02:03 04:05:06",
    }
    tags = AppConfig().exif_date_tags

    assert first_of(Path("a.jpg"), metadata, tags) == "2020:02:03 04:05:06"
    del metadata["EXIF:CreateDate"]
    assert first_of(Path("a.jpg"), metadata, tags) == "2021:06:05 14:03:09"
    del metadata["EXIF:DateTimeOriginal"]
    assert first_of(Path("a.jpg"), metadata, tags) == "2022:01:01 00:00:00"


def test_first_of_missing_reports_first_tag():
    """When nothing matches, the error names the first tag of the list."""
    with pytest.raises(MissingFieldError) as exc_info:
        first_of(Path("a.jpg"), {"File:MIMEType": "image/jpeg"}, AppConfig().exif_date_tags)

    assert exc_info.value.field == "CreateDate"
    assert "a.jpg" in str(exc_info.value)
    assert isinstance(exc_info.value, LinkError)


def test_first_of_ignores_other_groups():
    """Only exact group:tag keys are matched."""
    metadata = {"XMP:CreateDate": "2020:02:03 04:05:06"}
    with pytest.raises(MissingFieldError):
        first_of(Path("a.jpg"), metadata, ("EXIF:CreateDate",))


@pytest.mark.parametrize("value, expected", [
    ("2021:06:05 14:03:09", "2021/06/05/14-03-09-"),
    ("2021-06-05 14:03:09", "2021/06/05/14-03-09-"),
    ("1999:12:31 23:59:59", "1999/12/31/23-59-59-"),
])
def test_date_to_dirs(value, expected):
    """Dates are rewritten into a Y/M/D/H-M-S- prefix."""
    assert date_to_dirs(Path("a.jpg"), value) == expected


def test_date_to_dirs_keeps_surrounding_text():
    """Text outside the matched date is left in place."""
    assert date_to_dirs(Path("a.jpg"), "2021:06:05 14:03:09+02:00") == "2021/06/05/14-03-09-+02:00"


@pytest.mark.parametrize("value", ["", "    :  :     :  :  ", "2021:06:05", "yesterday"])
def test_date_to_dirs_invalid(value):
    """Values without a date raise InvalidDateError."""
    with pytest.raises(InvalidDateError) as exc_info:
        date_to_dirs(Path("a.jpg"), value)
    assert exc_info.value.value == value


def test_link_name_replaces_spaces(base_config):
    """Spaces in the file name become dashes; directories are dropped."""
    metadata = {"EXIF:DateTimeOriginal": "2021:06:05 14:03:09"}
    target = link_name(Path("some dir/IMG 0042 copy.jpg"), metadata, base_config)
    assert target == Path("2021/06/05/14-03-09-IMG-0042-copy.jpg")


def test_link_name_without_file_name(base_config):
    """A path with no file name falls back to the whole path string."""
    metadata = {"EXIF:CreateDate": "2021:06:05 14:03:09"}
    target = link_name(Path("."), metadata, base_config)
    assert str(target) == "2021/06/05/14-03-09-."


@pytest.mark.parametrize("path, base, expected", [
    ("IMG_1.jpg", None, "../../../IMG_1.jpg"),
    ("raw/IMG_1.jpg", None, "../../../raw/IMG_1.jpg"),
    ("IMG_1.jpg", "photos", "../../../photos/IMG_1.jpg"),
    ("/abs/IMG_1.jpg", "photos", "/abs/IMG_1.jpg"),
    ("IMG_1.jpg", "/mnt/photos", "/mnt/photos/IMG_1.jpg"),
])
def test_link_source(path, base, expected):
    """The source climbs out of the date directories, then descends into base."""
    target = Path("2021/06/05/14-03-09-IMG_1.jpg")
    assert link_source(Path(path), target, base) == Path(expected)


def test_check_source_missing(tmp_path):
    """A file that cannot be opened raises SourceFileError."""
    with pytest.raises(SourceFileError) as exc_info:
        check_source(tmp_path / "ghost.jpg", 0)
    assert "Could not open input file" in str(exc_info.value)


def test_check_source_too_small(tmp_path):
    """Files below the minimum size are treated as thumbnails."""
    small = tmp_path / "thumb.jpg"
    small.write_bytes(b"x" * 1000)

    with pytest.raises(TooSmallError) as exc_info:
        check_source(small, 100 * 1024)
    assert exc_info.value.size == 1000


def test_check_source_exact_minimum(photo):
    """A file exactly at the minimum size is accepted."""
    assert check_source(photo, 100 * 1024) == 100 * 1024


def test_link_item_valid(photo):
    """LinkItem resolves date, target and source from injected metadata."""
    cfg = AppConfig(base="photos")
    metadata = {"EXIF:DateTimeOriginal": "2021:06:05 14:03:09", "File:MIMEType": "image/jpeg"}

    item = LinkItem(photo, cfg, metadata=metadata)

    assert item.is_valid, f"Item should be valid. Error: {item.error}"
    assert item.is_ready
    assert item.date == "2021:06:05 14:03:09"
    assert item.target == Path("2021/06/05/14-03-09-IMG-0042.jpg")
    assert item.source == photo  # absolute input paths are kept as is
    assert item.size == 100 * 1024


def test_link_item_without_metadata_is_pending(photo, base_config):
    """A valid file without metadata yet has no target."""
    item = LinkItem(photo, base_config)
    assert item.is_valid
    assert not item.is_ready
    assert item.target is None


def test_link_item_non_existent(base_config, tmp_path):
    """LinkItem should be invalid if the file does not exist."""
    item = LinkItem(tmp_path / "ghost.jpg", base_config, metadata={})
    assert not item.is_valid
    assert "Could not open" in item.error


def test_link_item_too_small(tmp_path):
    """LinkItem rejects thumbnails before looking at metadata."""
    small = tmp_path / "thumb.jpg"
    small.write_bytes(b"x" * 10)

    item = LinkItem(small, AppConfig(), metadata={"EXIF:CreateDate": "2021:06:05 14:03:09"})

    assert not item.is_valid
    assert "too small" in item.error
    assert item.date is None


def test_link_item_missing_date(photo, base_config):
    """LinkItem is invalid when no date field is present."""
    item = LinkItem(photo, base_config, metadata={"File:MIMEType": "image/jpeg"})
    assert not item.is_valid
    assert "Missing field" in item.error
    assert "CreateDate" in item.error


def test_link_item_invalid_date(photo, base_config):
    """LinkItem is invalid when the date field holds garbage."""
    item = LinkItem(photo, base_config, metadata={"EXIF:CreateDate": "    :  :     :  :  "})
    assert not item.is_valid
    assert "Invalid date" in item.error


def test_link_item_custom_tags(photo, base_config):
    """The date tag priority list comes from the configuration."""
    cfg = dataclasses.replace(base_config, exif_date_tags=("XMP:CreateDate",))
    item = LinkItem(photo, cfg, metadata={"XMP:CreateDate": "2019:01:02 03:04:05"})
    assert item.target == Path("2019/01/02/03-04-05-IMG-0042.jpg")


def test_link_item_exif_fields(photo, base_config):
    """Only EXIF group fields are reported for diagnostics."""
    metadata = {
        "SourceFile": str(photo),
        "EXIF:CreateDate": "2021:06:05 14:03:09",
        "EXIF:Make": "Canon",
        "File:FileSize": 102400,
    }
    item = LinkItem(photo, base_config, metadata=metadata)
    assert item.get_exif_fields() == {
        "EXIF:CreateDate": "2021:06:05 14:03:09",
        "EXIF:Make": "Canon",
    }


def test_link_item_fail(photo, base_config):
    """fail() records the message and invalidates the item."""
    item = LinkItem(photo, base_config, metadata={"EXIF:CreateDate": "2021:06:05 14:03:09"})
    item.fail("Link already exists")
    assert not item.is_valid
    assert not item.is_ready
    assert item.error == "Link already exists"
