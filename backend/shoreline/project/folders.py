"""
backend/shoreline/project/folders.py

Project Folder & Date Helpers

Each project keeps its images in a Cloudinary folder named after the
project date: `projects/YYYYMMDD-HHmmss`, optionally followed by `-N` when
two folders were created in the same second. Projects sharing a calendar day
get consecutive seconds after midnight, so the folder name also encodes the
project's position within that day.

All calendar logic uses the UTC day. Nothing here performs I/O.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

PROJECTS_FOLDER = "projects"
MIN_YEAR = 1970

FOLDER_PATTERN = re.compile(r"^projects/(\d{4})(\d{2})(\d{2})-(\d{2})(\d{2})(\d{2})$")
REUSABLE_FOLDER_PATTERN = re.compile(r"^projects/\d{8}-\d{6}(-\d+)?$")
SUFFIX_PATTERN = re.compile(r"^\d{6}$")


@dataclass(frozen=True)
class DateFolder:
    prefix: str
    folder_base: str
    created_at: datetime


@dataclass(frozen=True)
class ProjectDate:
    year: int
    month: int
    day: int | None = None

    @property
    def is_month_only(self) -> bool:
        return self.day is None

    def to_folder(self) -> DateFolder:
        return date_to_folder(self.year, self.month, self.day)


# ---------------------------------------------------
# Folder names
# ---------------------------------------------------


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_folder(moment: datetime) -> str:
    """`projects/YYYYMMDD-HHmmss` for a moment, in UTC."""
    return f"{PROJECTS_FOLDER}/{_as_utc(moment):%Y%m%d-%H%M%S}"


def generate_project_folder(now: datetime | None = None) -> str:
    """Fresh folder for a new project, stamped with the current UTC time."""
    return format_folder(now or datetime.now(timezone.utc))


def date_to_folder(year: int, month: int, day: int | None = None) -> DateFolder:
    """
    Folder prefix, base folder and midnight UTC for a project date.
    The day defaults to 1 and is clamped to the last day of the month.
    """
    last_day = calendar.monthrange(year, month)[1]
    chosen_day = min(max(day or 1, 1), last_day)
    created_at = datetime(year, month, chosen_day, tzinfo=timezone.utc)
    prefix = f"{PROJECTS_FOLDER}/{created_at:%Y%m%d}-"
    return DateFolder(prefix=prefix, folder_base=f"{prefix}000000", created_at=created_at)


def parse_folder(folder: str | None) -> datetime | None:
    """Moment encoded by a strict `projects/YYYYMMDD-HHmmss` path, or None."""
    if not folder or not isinstance(folder, str):
        return None
    match = FOLDER_PATTERN.match(folder.strip())
    if not match:
        return None
    try:
        return datetime(*(int(part) for part in match.groups()), tzinfo=timezone.utc)
    except ValueError:
        return None


def is_reusable_folder(path: str | None) -> bool:
    """True for folder paths a client may ask to upload into again."""
    return bool(path) and REUSABLE_FOLDER_PATTERN.match(path.strip()) is not None


def folder_for_project(folder: str | None, created_at: datetime) -> str:
    """Stored folder, or one derived from the project date for legacy rows."""
    if folder:
        return folder
    return format_folder(created_at)


# ---------------------------------------------------
# Same-day sequencing
# ---------------------------------------------------


def suffix_to_seconds(suffix: str) -> int:
    """Seconds since midnight for an `HHmmss` suffix; 0 when not six digits."""
    if not SUFFIX_PATTERN.match(suffix or ""):
        return 0
    return int(suffix[0:2]) * 3600 + int(suffix[2:4]) * 60 + int(suffix[4:6])


def seconds_to_suffix(seconds: int) -> str:
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}{minutes:02d}{secs:02d}"


def next_seconds_for_prefix(existing: list[str]) -> int:
    """One past the largest `HHmmss` tail among existing folder paths."""
    highest = 0
    for path in existing:
        if path:
            highest = max(highest, suffix_to_seconds(path[-6:]))
    return highest + 1


def next_folder_for_prefix(prefix: str, existing: list[str]) -> str:
    """Next unused folder for a day prefix such as `projects/20250201-`."""
    return f"{prefix}{seconds_to_suffix(next_seconds_for_prefix(existing))}"


def next_slot_for_date(date_folder: DateFolder, existing: list[str]) -> tuple[str, datetime]:
    """Next unused folder for a day together with the matching project timestamp."""
    seconds = next_seconds_for_prefix(existing)
    folder = f"{date_folder.prefix}{seconds_to_suffix(seconds)}"
    return folder, date_folder.created_at + timedelta(seconds=seconds)


# ---------------------------------------------------
# Date parsing & day arithmetic
# ---------------------------------------------------


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and value.strip():
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def has_date_parts(year: Any, month: Any) -> bool:
    """True when both year and month were supplied (possibly invalid)."""
    return all(
        part is not None and not (isinstance(part, str) and not part.strip())
        for part in (year, month)
    )


def parse_project_date(year: Any, month: Any, day: Any = None) -> ProjectDate | None:
    """
    Validate a project date: year >= 1970, month 1-12, optional day 1-31.
    Returns None when any supplied part is invalid.
    """
    year_num = _to_int(year)
    month_num = _to_int(month)
    if year_num is None or year_num < MIN_YEAR:
        return None
    if month_num is None or not 1 <= month_num <= 12:
        return None

    day_missing = day is None or (isinstance(day, str) and not day.strip())
    if day_missing:
        return ProjectDate(year=year_num, month=month_num)
    day_num = _to_int(day)
    if day_num is None or not 1 <= day_num <= 31:
        return None
    return ProjectDate(year=year_num, month=month_num, day=day_num)


def day_bounds(moment: datetime) -> tuple[datetime, datetime]:
    """Start (inclusive) and end (exclusive) of the UTC day containing `moment`."""
    start = _as_utc(moment).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def is_future_day(moment: datetime, today: datetime | None = None) -> bool:
    """True when `moment` falls on a UTC day after today."""
    reference = _as_utc(today or datetime.now(timezone.utc))
    return _as_utc(moment).date() > reference.date()


def year_bounds(year: int) -> tuple[datetime, datetime]:
    return (
        datetime(year, 1, 1, tzinfo=timezone.utc),
        datetime(year + 1, 1, 1, tzinfo=timezone.utc),
    )


# ---------------------------------------------------
# Ordering
# ---------------------------------------------------


def display_order_insert_index(created_at: datetime, same_day: list[datetime]) -> int:
    """Position within its day of a project dated `created_at` (newest first)."""
    target = _as_utc(created_at)
    return sum(1 for other in same_day if _as_utc(other) > target)


def reorder_timestamps(ordered: list[tuple[Any, datetime]]) -> list[tuple[Any, datetime]]:
    """
    New timestamps for projects listed in their desired order.

    Projects are grouped by UTC day. Within a day of n listed projects the i-th
    gets `day start + (n - 1 - i)` seconds, so the first listed sorts newest.
    """
    by_day: dict[Any, list[tuple[Any, datetime]]] = {}
    for project_id, created_at in ordered:
        by_day.setdefault(_as_utc(created_at).date(), []).append((project_id, created_at))

    updates: list[tuple[Any, datetime]] = []
    for group in by_day.values():
        start, _ = day_bounds(group[0][1])
        count = len(group)
        for index, (project_id, _) in enumerate(group):
            updates.append((project_id, start + timedelta(seconds=count - 1 - index)))
    return updates
