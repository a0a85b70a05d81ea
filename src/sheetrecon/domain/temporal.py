"""Safe date and time-of-day normalization for spreadsheet cells.

Column roles are decided once from header text. Cell values in date or time
columns are then run through a fixed, ordered list of strict parsers; the first
one that produces a fully validated value wins. Anything else is reported as
:class:`Unparseable` and the caller keeps the raw cell untouched. No catch-all
date parser follows the list: a value such as ``03/04/2023`` is only ever read
as day/month/year, and ``31/02/2023`` is rejected instead of rolling over into
March.
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING, Final, Generic, TypeAlias, TypeVar

from .types import Table, is_blank

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .types import CellValue

log = logging.getLogger(__name__)

# Day 0 of the serial numbering: serial 1 is 1900-01-01.
SERIAL_EPOCH: Final[datetime] = datetime(1899, 12, 31)
SERIAL_MIN: Final[int] = 1000
SERIAL_MAX: Final[int] = 50000
SECONDS_PER_DAY: Final[int] = 24 * 60 * 60

DATE_FORMAT: Final[str] = "dd/mm/yyyy"
TIME_FORMAT: Final[str] = "hh:mm:ss"

_DATE_HEADER = re.compile(r"fecha", re.IGNORECASE)
_DATE_HEADER_EXCLUDE = re.compile(r"hora", re.IGNORECASE)
# Headers such as tArribo, tContacto or tTermino.
_TIME_HEADER = re.compile(r"^t[act]", re.IGNORECASE)

_NUMERIC = re.compile(r"^[+-]?\d+(?:\.\d+)?$")
_WHITESPACE_RUN = re.compile(r"\s+")
_DMY_PATTERN = r"(\d{1,2})[/-](\d{1,2})[/-](\d{4})"
_DMY = re.compile(rf"^{_DMY_PATTERN}$")
_DMY_ANYWHERE = re.compile(_DMY_PATTERN)
_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_DMY_HMS = re.compile(rf"^{_DMY_PATTERN}\s+(\d{{1,2}}):(\d{{1,2}})(?::(\d{{1,2}}))?$")
_HMS = re.compile(r"^(\d{1,2}):(\d{1,2})(?::(\d{1,2}))?$")
_HHMMSS = re.compile(r"^(\d{2})(\d{2})(\d{2})$")
_HMS_12H = re.compile(r"^(\d{1,2}):(\d{1,2})(?::(\d{1,2}))?\s*(AM|PM)$", re.IGNORECASE)


class ColumnRole(StrEnum):
    """Temporal capability of a column, derived from its header."""

    DATE = "date"
    TIME = "time"
    PLAIN = "plain"

    @property
    def number_format(self) -> str | None:
        if self is ColumnRole.DATE:
            return DATE_FORMAT
        if self is ColumnRole.TIME:
            return TIME_FORMAT
        return None


def classify_column(header: str | None) -> ColumnRole:
    if not header:
        return ColumnRole.PLAIN
    if _DATE_HEADER.search(header) and not _DATE_HEADER_EXCLUDE.search(header):
        return ColumnRole.DATE
    if _TIME_HEADER.match(header):
        return ColumnRole.TIME
    return ColumnRole.PLAIN


def column_roles(headers: Sequence[str]) -> tuple[ColumnRole, ...]:
    return tuple(classify_column(header) for header in headers)


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Parsed(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Unparseable:
    raw: object


ParseOutcome: TypeAlias = "Parsed[T] | Unparseable"


def _clean_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    return _WHITESPACE_RUN.sub(" ", value.strip())


def _as_number(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = _clean_text(value)
    if text and _NUMERIC.match(text):
        return float(text)
    return None


def _build_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> datetime | None:
    # datetime() refuses out-of-range components, so 31/02 never rolls over.
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None


def _build_time(hour: int, minute: int, second: int) -> time | None:
    if 0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60:
        return time(hour, minute, second)
    return None


def _date_from_serial(value: object) -> datetime | None:
    number = _as_number(value)
    if number is None or not SERIAL_MIN <= number <= SERIAL_MAX:
        return None
    days = math.floor(number)
    seconds = round((number - days) * SECONDS_PER_DAY)
    return SERIAL_EPOCH + timedelta(days=days, seconds=seconds)


def _date_from_dmy(value: object) -> datetime | None:
    text = _clean_text(value)
    match = _DMY.match(text) if text else None
    if match is None:
        return None
    day, month, year = (int(group) for group in match.groups())
    return _build_datetime(year, month, day)


def _date_from_iso(value: object) -> datetime | None:
    text = _clean_text(value)
    match = _ISO_DATE.match(text) if text else None
    if match is None:
        return None
    year, month, day = (int(group) for group in match.groups())
    return _build_datetime(year, month, day)


def _date_from_dmy_time(value: object) -> datetime | None:
    text = _clean_text(value)
    match = _DMY_HMS.match(text) if text else None
    if match is None:
        return None
    day, month, year, hour, minute = (int(group) for group in match.groups()[:5])
    second = int(match.group(6)) if match.group(6) else 0
    if _build_time(hour, minute, second) is None:
        return None
    return _build_datetime(year, month, day, hour, minute, second)


_DATE_PARSERS: Final[tuple[Callable[[object], datetime | None], ...]] = (
    _date_from_serial,
    _date_from_dmy,
    _date_from_iso,
    _date_from_dmy_time,
)


def guard_day(raw: object, candidate: datetime) -> datetime | None:
    """Reject a conversion whose day disagrees with explicit D/M/YYYY digits in ``raw``."""

    text = _clean_text(raw)
    match = _DMY_ANYWHERE.search(text) if text else None
    if match is None:
        return candidate
    day, month, year = (int(group) for group in match.groups())
    if candidate.day == day:
        return candidate
    log.debug("Discarding converted date %s for %r: day differs from digits", candidate, raw)
    return _build_datetime(year, month, day)


def parse_date(value: object) -> ParseOutcome[datetime | date]:
    """Parse a date-column cell, never guessing at ambiguous input."""

    if isinstance(value, (datetime, date)):
        return Parsed(value)
    if is_blank(value) or isinstance(value, (bool, time)):
        return Unparseable(value)

    for parser in _DATE_PARSERS:
        candidate = parser(value)
        if candidate is None:
            continue
        guarded = guard_day(value, candidate)
        if guarded is not None:
            return Parsed(guarded)
        return Unparseable(value)
    return Unparseable(value)


def _time_from_fraction(value: object) -> time | None:
    number = _as_number(value)
    if number is None or not 0 <= number < 1:
        return None
    seconds = round(number * SECONDS_PER_DAY)
    if seconds >= SECONDS_PER_DAY:
        return None
    return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)


def _time_from_clock(value: object) -> time | None:
    text = _clean_text(value)
    match = _HMS.match(text) if text else None
    if match is None:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3)) if match.group(3) else 0
    return _build_time(hour, minute, second)


def _time_from_compact(value: object) -> time | None:
    text = _clean_text(value)
    match = _HHMMSS.match(text) if text else None
    if match is None:
        return None
    hour, minute, second = (int(group) for group in match.groups())
    return _build_time(hour, minute, second)


def _time_from_meridiem(value: object) -> time | None:
    text = _clean_text(value)
    match = _HMS_12H.match(text) if text else None
    if match is None:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3)) if match.group(3) else 0
    if not 1 <= hour <= 12:
        return None
    is_pm = match.group(4).lower() == "pm"
    if hour == 12:
        hour = 12 if is_pm else 0
    elif is_pm:
        hour += 12
    return _build_time(hour, minute, second)


_TIME_PARSERS: Final[tuple[Callable[[object], time | None], ...]] = (
    _time_from_fraction,
    _time_from_clock,
    _time_from_compact,
    _time_from_meridiem,
)


def parse_time(value: object) -> ParseOutcome[time | datetime]:
    """Parse a time-column cell into a time of day."""

    if isinstance(value, (time, datetime)):
        return Parsed(value)
    if is_blank(value) or isinstance(value, bool):
        return Unparseable(value)

    for parser in _TIME_PARSERS:
        candidate = parser(value)
        if candidate is not None:
            return Parsed(candidate)
    return Unparseable(value)


def normalize_cell(role: ColumnRole, value: CellValue) -> CellValue:
    """Return the normalized cell value, or ``value`` itself when it cannot be parsed."""

    if role is ColumnRole.PLAIN or is_blank(value):
        return value
    outcome = parse_date(value) if role is ColumnRole.DATE else parse_time(value)
    if isinstance(outcome, Parsed):
        return outcome.value
    return value


def normalize_table(table: Table) -> Table:
    """Normalize every date and time column of ``table``."""

    roles = column_roles(table.headers)
    if all(role is ColumnRole.PLAIN for role in roles):
        return table

    unparsed: Counter[str] = Counter()
    rows = []
    for row in table.rows:
        cells = list(row)
        for index, role in enumerate(roles):
            if role is ColumnRole.PLAIN or index >= len(cells):
                continue
            original = cells[index]
            cells[index] = normalize_cell(role, original)
            if cells[index] is original and not is_blank(original):
                if not isinstance(original, (datetime, date, time)):
                    unparsed[table.headers[index]] += 1
        rows.append(tuple(cells))

    for header, count in unparsed.items():
        log.debug("Left %s unparseable value(s) untouched in column %r", count, header)
    return table.with_rows(rows)


__all__ = [
    "DATE_FORMAT",
    "SERIAL_EPOCH",
    "TIME_FORMAT",
    "ColumnRole",
    "ParseOutcome",
    "Parsed",
    "Unparseable",
    "classify_column",
    "column_roles",
    "guard_day",
    "normalize_cell",
    "normalize_table",
    "parse_date",
    "parse_time",
]
