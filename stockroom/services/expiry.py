"""Expiry ranges from calendar periods.

Every range is a half-open ``[from, to)`` interval in UTC epoch milliseconds
running from the first instant of the period to the first instant of the next.
"""
import calendar
from datetime import datetime, timezone

from stockroom.schemas.expiry import ExpiryRange, SimpleExpiry

NEVER_LABEL = "Never"


def _epoch_millis(year: int, month: int) -> int:
    """First instant of ``month`` (1-12) of ``year``; month 13 rolls into the next year."""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return int(datetime(year, month, 1, tzinfo=timezone.utc).timestamp() * 1000)


def never() -> ExpiryRange:
    return ExpiryRange(from_=None, to=None, label=NEVER_LABEL)


def year_range(year: int) -> ExpiryRange:
    return ExpiryRange(
        from_=_epoch_millis(year, 1),
        to=_epoch_millis(year + 1, 1),
        label=str(year),
    )


def quarter_range(year: int, quarter: int) -> ExpiryRange:
    """Quarter 1-4 of ``year``; Q4 ends at the start of the next year."""
    if not 1 <= quarter <= 4:
        raise ValueError(f"Quarter must be 1-4, got {quarter}")
    first_month = (quarter - 1) * 3 + 1
    return ExpiryRange(
        from_=_epoch_millis(year, first_month),
        to=_epoch_millis(year, first_month + 3),
        label=f"Q{quarter} {year}",
    )


def month_range(year: int, month: int) -> ExpiryRange:
    """Month 1-12 of ``year``; December ends at the start of the next year."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be 1-12, got {month}")
    return ExpiryRange(
        from_=_epoch_millis(year, month),
        to=_epoch_millis(year, month + 1),
        label=f"{calendar.month_abbr[month]} {year}",
    )


def to_expiry_range(simple: SimpleExpiry) -> ExpiryRange:
    if simple.month is not None:
        return month_range(simple.year, simple.month)
    if simple.quarter is not None:
        return quarter_range(simple.year, simple.quarter)
    return year_range(simple.year)


def contains(expiry: ExpiryRange, timestamp: int) -> bool:
    """Whether ``timestamp`` falls inside ``expiry``; indefinite ranges contain nothing."""
    if expiry.is_indefinite:
        return False
    return expiry.from_ <= timestamp < expiry.to
