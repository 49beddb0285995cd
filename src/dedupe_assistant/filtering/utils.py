"""Size, date, path and group helpers used by the filter engine."""

import math
import re
import time
from collections.abc import Iterable, Sequence, Set
from datetime import datetime, timedelta
from typing import assert_never

from ..core.models import Entry
from ..selection.matchers import match_text
from ..selection.models import TextCondition
from .models import AspectRatio, DatePreset, GroupMarkStatus, PathMatchMode, SizeUnit

SIZE_MULTIPLIERS: dict[SizeUnit, int] = {
    SizeUnit.B: 1,
    SizeUnit.KB: 1024,
    SizeUnit.MB: 1024**2,
    SizeUnit.GB: 1024**3,
    SizeUnit.TB: 1024**4,
}

DAY_MS = 24 * 60 * 60 * 1000
ASPECT_RATIO_TOLERANCE = 0.1

EXTENSION_PRESETS: dict[str, tuple[str, ...]] = {
    "images": ("jpg", "jpeg", "png", "gif", "bmp", "webp", "svg", "ico", "tiff"),
    "videos": ("mp4", "avi", "mkv", "mov", "wmv", "flv", "webm", "m4v"),
    "audio": ("mp3", "wav", "flac", "aac", "ogg", "wma", "m4a"),
    "documents": ("pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "txt"),
    "archives": ("zip", "rar", "7z", "tar", "gz", "bz2"),
}

_SIZE_PATTERN = re.compile(r"^([\d.]+)\s*([KMGTPE]?B?)$", re.IGNORECASE)
_DIGITS_PATTERN = re.compile(r"(\d+)")
_DIMENSIONS_PATTERN = re.compile(r"(\d+)\s*[x×]\s*(\d+)", re.IGNORECASE)
_DATE_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y/%m/%d %H:%M:%S", "%Y/%m/%d %H:%M", "%Y/%m/%d")


def now_ms() -> int:
    """Current time as epoch millis."""
    return int(time.time() * 1000)


def parse_size_to_bytes(size_str: str | None) -> int:
    """
    Parse a display size such as "1.5 MB" or "100KB".

    Args:
        size_str: Size text

    Returns:
        Byte count, or 0 when the text cannot be parsed
    """
    if not size_str or not isinstance(size_str, str):
        return 0

    match = _SIZE_PATTERN.match(size_str.strip())
    if not match:
        return 0

    number, unit = match.groups()
    try:
        value = float(number)
    except ValueError:
        return 0

    multiplier = SIZE_MULTIPLIERS.get(unit.upper(), 1)
    return round(value * multiplier)


def format_bytes(value: float, target_unit: SizeUnit | None = None) -> str:
    """
    Format a byte count for display.

    Args:
        value: Byte count
        target_unit: Unit to use; the largest unit keeping the value >= 1 when omitted

    Returns:
        Text such as "1.50 MB"
    """
    if value == 0:
        return "0 B"
    if target_unit is not None:
        return f"{value / SIZE_MULTIPLIERS[target_unit]:.2f} {target_unit}"

    units = list(SizeUnit)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{value:.2f} {units[index]}"


def convert_size(value: float, from_unit: SizeUnit, to_unit: SizeUnit) -> float:
    """Convert a size between units."""
    return value * SIZE_MULTIPLIERS[from_unit] / SIZE_MULTIPLIERS[to_unit]


def get_file_extension(path: str) -> str:
    """Lower-cased extension without the dot; '' for no extension or dot files."""
    if not path:
        return ""
    file_name = re.split(r"[/\\]", path)[-1]
    dot = file_name.rfind(".")
    if dot <= 0:
        return ""
    return file_name[dot + 1 :].lower()


def match_path(path: str, pattern: str, mode: PathMatchMode, case_sensitive: bool = False) -> bool:
    """Compare a path with a pattern; empty paths and patterns never match."""
    if not path or not pattern:
        return False
    return match_text(path, pattern, TextCondition(mode), case_sensitive=case_sensitive)


def _group_members(data: Iterable[Entry], group_id: int) -> list[Entry]:
    return [entry for entry in data if entry.group_id == group_id]


def get_group_file_count(data: Sequence[Entry], group_id: int) -> int:
    return len(_group_members(data, group_id))


def get_group_total_size(data: Sequence[Entry], group_id: int) -> int:
    """Summed size of a group in bytes."""
    return sum(get_item_size(entry) for entry in _group_members(data, group_id))


def get_group_mark_status(
    data: Sequence[Entry], group_id: int, selection: Set[str]
) -> GroupMarkStatus:
    """How much of a group is selected."""
    members = _group_members(data, group_id)
    return mark_status_for(members, selection)


def mark_status_for(members: Sequence[Entry], selection: Set[str]) -> GroupMarkStatus:
    marked = sum(1 for entry in members if entry.path in selection)
    if marked == 0:
        return GroupMarkStatus.ALL_UNMARKED
    if marked == len(members):
        return GroupMarkStatus.ALL_MARKED
    return GroupMarkStatus.SOME_NOT_ALL


def get_unique_group_ids(data: Iterable[Entry]) -> set[int]:
    return {entry.group_id for entry in data if entry.group_id is not None}


def get_item_size(entry: Entry) -> int:
    """Size in bytes from raw metadata, else the display string, else 0."""
    if entry.raw is not None and entry.raw.size is not None:
        return entry.raw.size
    if entry.size:
        return parse_size_to_bytes(entry.size)
    return 0


def parse_date_to_ms(text: str) -> float:
    """Parse a display date into epoch millis; NaN when unparsable."""
    text = text.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for date_format in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, date_format)
                break
            except ValueError:
                continue
        else:
            return math.nan
    return parsed.timestamp() * 1000


def get_item_modified_date(entry: Entry) -> float:
    """Modification time in epoch millis; NaN for an unparsable display date."""
    if entry.raw is not None and entry.raw.modified_date is not None:
        return entry.raw.modified_date
    if entry.modified_date:
        return parse_date_to_ms(entry.modified_date)
    return 0


def get_item_similarity(entry: Entry) -> int:
    """Similarity percentage; entries without one count as 100."""
    if not entry.similarity:
        return 100
    match = _DIGITS_PATTERN.search(entry.similarity)
    return int(match.group(1)) if match else 100


def get_item_resolution(entry: Entry) -> tuple[int, int] | None:
    """(width, height) from raw metadata or the dimensions string."""
    raw = entry.raw
    if raw is not None and raw.width is not None and raw.height is not None:
        return raw.width, raw.height
    if entry.dimensions:
        match = _DIMENSIONS_PATTERN.search(entry.dimensions)
        if match:
            return int(match.group(1)), int(match.group(2))
    return None


def match_aspect_ratio(width: int, height: int, aspect_ratio: AspectRatio) -> bool:
    if aspect_ratio == AspectRatio.ANY:
        return True
    if height == 0:
        return False

    ratio = width / height
    match aspect_ratio:
        case AspectRatio.WIDESCREEN:
            target = 16 / 9
        case AspectRatio.STANDARD:
            target = 4 / 3
        case AspectRatio.SQUARE:
            target = 1.0
        case AspectRatio.ANY:
            return True
        case _:
            assert_never(aspect_ratio)
    return abs(ratio - target) < ASPECT_RATIO_TOLERANCE


def get_date_range(
    preset: DatePreset,
    custom_start: int | None = None,
    custom_end: int | None = None,
    now: int | None = None,
) -> tuple[int, int]:
    """
    Resolve a date preset to an inclusive window.

    Args:
        preset: Date preset
        custom_start: Start for the custom preset, epoch millis (defaults to 0)
        custom_end: End for the custom preset, epoch millis (defaults to now)
        now: Current time in epoch millis; the system clock when omitted

    Returns:
        (start, end) in epoch millis
    """
    current = now_ms() if now is None else now
    match preset:
        case DatePreset.TODAY:
            midnight = datetime.fromtimestamp(current / 1000).replace(
                hour=0, minute=0, second=0, microsecond=0
            )
            return int(midnight.timestamp() * 1000), current
        case DatePreset.LAST_7_DAYS:
            return current - 7 * DAY_MS, current
        case DatePreset.LAST_30_DAYS:
            return current - 30 * DAY_MS, current
        case DatePreset.LAST_YEAR:
            return current - 365 * DAY_MS, current
        case DatePreset.CUSTOM:
            start = custom_start if custom_start is not None else 0
            end = custom_end if custom_end is not None else current
            return start, end
        case _:
            assert_never(preset)


def days_ago(days: int, now: int | None = None) -> int:
    """Epoch millis ``days`` days before ``now``."""
    current = now_ms() if now is None else now
    return current - int(timedelta(days=days).total_seconds() * 1000)
