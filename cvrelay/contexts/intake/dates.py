"""
Date range parsing for CV durations.

Turns the raw duration string of an entry ("09/2024 – today",
"Jan 2020 - Mar 2021", "2015 – 2019") into start/end dates the sync driver can
put into month/year controls. A duration that does not match the two-part
pattern yields None so that date fields are left unset rather than guessed.
"""

from dataclasses import dataclass
from typing import Optional

from cvrelay.contexts.intake.patterns import MONTH_NUMBERS, OPEN_END_TOKENS, DatePatterns


@dataclass(frozen=True)
class ParsedDate:
    """
    One side of a date range.

    Attributes:
        month: 1-12, or None when the source only gave a year
        year: Four-digit year exactly as written in the source
    """

    month: Optional[int]
    year: str


@dataclass(frozen=True)
class DateRange:
    """
    Start/end of an entry's duration.

    Attributes:
        start: Start date
        end: End date, None when the range is open-ended
        open_ended: True for "today"/"Present"/"Current" style ends
    """

    start: ParsedDate
    end: Optional[ParsedDate] = None
    open_ended: bool = False


def parse_date_token(token: str) -> Optional[ParsedDate]:
    """
    Parse a single date token.

    Args:
        token: "09/2024", "Sep 2024", "September 2024" or "2024"

    Returns:
        ParsedDate, or None if the token is not a complete date (bare month
        names, out-of-range months)
    """
    token = token.strip()

    match = DatePatterns.NUMERIC_MONTH_YEAR.match(token)
    if match:
        month = int(match.group("month"))
        if not 1 <= month <= 12:
            return None
        return ParsedDate(month=month, year=match.group("year"))

    match = DatePatterns.MONTH_YEAR.match(token)
    if match:
        month_name = match.group("month").lower().rstrip(".")
        month = MONTH_NUMBERS.get(month_name)
        if month is None:
            return None
        return ParsedDate(month=month, year=match.group("year"))

    match = DatePatterns.YEAR.match(token)
    if match:
        return ParsedDate(month=None, year=match.group("year"))

    return None


def parse_date_range(duration: str) -> Optional[DateRange]:
    """
    Parse a raw duration string into a DateRange.

    Examples:
        >>> parse_date_range("09/2024 – today")
        DateRange(start=ParsedDate(month=9, year='2024'), end=None, open_ended=True)
        >>> parse_date_range("06/2024 – 12/2024").end
        ParsedDate(month=12, year='2024')
        >>> parse_date_range("a while ago") is None
        True

    Args:
        duration: Raw duration text from an entry

    Returns:
        DateRange, or None when the duration does not contain a complete range
    """
    if not duration:
        return None

    match = DatePatterns.DATE_RANGE.search(duration)
    if not match:
        return None

    start = parse_date_token(match.group("start"))
    if start is None:
        return None

    end_token = match.group("end").strip()
    if end_token.lower() in OPEN_END_TOKENS:
        return DateRange(start=start, end=None, open_ended=True)

    end = parse_date_token(end_token)
    if end is None:
        return None

    return DateRange(start=start, end=end, open_ended=False)


def is_open_ended(duration: str) -> bool:
    """True when the duration parses to a range without an end date."""
    parsed = parse_date_range(duration)
    return bool(parsed and parsed.open_ended)

