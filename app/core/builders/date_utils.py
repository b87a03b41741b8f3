"""
Date parsing utilities for report comparison.

Report dates are only used for ordering. Parsing is total: anything that
cannot be read sorts first as the epoch.
"""
import logging
import re
from datetime import date, datetime
from typing import Optional, Union

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1)

_DDMMYYYY = re.compile(r"(\d{2})\.(\d{2})\.(\d{4})")
_YYYYMMDD = re.compile(r"(\d{4})-(\d{2})-(\d{2})")

# Tried in order after the two primary patterns
_FALLBACK_FORMATS = (
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%m/%d/%Y",
    "%d.%m.%y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
)

_RU_MONTHS = {
    "янв": "01", "фев": "02", "мар": "03", "апр": "04", "май": "05", "мая": "05",
    "июн": "06", "июл": "07", "авг": "08", "сен": "09", "окт": "10", "ноя": "11",
    "дек": "12",
    "января": "01", "февраля": "02", "марта": "03", "апреля": "04",
    "июня": "06", "июля": "07", "августа": "08", "сентября": "09",
    "октября": "10", "ноября": "11", "декабря": "12",
}

_LABELLED_DATE = re.compile(r"(?:Дата[\s:]*|Date[\s:]*)(\d{2})[.-](\d{2})[.-](\d{2,4})", re.IGNORECASE)
_BARE_DATE = re.compile(r"(\d{2})\.(\d{2})\.(\d{4})")
_RU_WORD_DATE = re.compile(r"(\d{1,2})\s+([а-яё]+)\s+(\d{4})", re.IGNORECASE)


def _safe_datetime(year: int, month: int, day: int) -> Optional[datetime]:
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def _generic_parse(text: str) -> Optional[datetime]:
    """Best-effort parse of formats other than the two primary patterns."""
    try:
        parsed = datetime.fromisoformat(text)
        return parsed.replace(tzinfo=None)
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_report_date(value: Union[str, date, None]) -> datetime:
    """Parse a report date string for ordering.

    Supports:
    - DD.MM.YYYY (anywhere in the string)
    - YYYY-MM-DD (anywhere in the string)
    - ISO timestamps and a handful of common day/month formats

    Args:
        value: Date string, date/datetime, or None

    Returns:
        Parsed datetime; the epoch if the value is absent or unreadable
    """
    if value is None:
        return EPOCH

    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())

    text = str(value).strip()
    if not text:
        return EPOCH

    match = _DDMMYYYY.search(text)
    if match:
        day, month, year = (int(g) for g in match.groups())
        return _safe_datetime(year, month, day) or EPOCH

    match = _YYYYMMDD.search(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _safe_datetime(year, month, day) or EPOCH

    parsed = _generic_parse(text)
    if parsed is None:
        logger.warning(f"Could not parse report date: {text!r}")
        return EPOCH
    return parsed


def calendar_key(value: Optional[str]) -> Optional[date]:
    """Calendar day of a date string, or None if it does not parse."""
    if not value or not str(value).strip():
        return None
    parsed = parse_report_date(value)
    if parsed == EPOCH:
        return None
    return parsed.date()


def extract_date_from_text(text: Optional[str]) -> Optional[str]:
    """Find a report date in free OCR text.

    Looks for a labelled date ("Дата:", "Date:"), then any DD.MM.YYYY,
    then a Russian month-name date such as "6 февраля 2026".

    Returns:
        Date formatted as DD.MM.YYYY, or None if nothing is found
    """
    if not text:
        return None

    match = _LABELLED_DATE.search(text)
    if match:
        day, month, year = match.groups()
        if len(year) == 2:
            year = f"20{year}"
        return f"{day}.{month}.{year}"

    match = _BARE_DATE.search(text)
    if match:
        return ".".join(match.groups())

    match = _RU_WORD_DATE.search(text)
    if match:
        month = _RU_MONTHS.get(match.group(2).lower())
        if month:
            return f"{match.group(1).zfill(2)}.{month}.{match.group(3)}"

    return None
