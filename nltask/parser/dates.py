"""Deterministic resolution of date phrases to calendar dates.

Covers exactly the phrases the local date vocabulary recognizes. Same phrase
and same `today` always give the same answer; anything unrecognized is None.
"""

from __future__ import annotations

import calendar
import logging
import re
from datetime import date, timedelta
from typing import Optional

from nltask.parser.vocabulary import MONTHS, WEEKDAYS

logger = logging.getLogger(__name__)

_MONTH_INDEX = {name[:3]: i + 1 for i, name in enumerate(MONTHS)}

_LEAD_RE = re.compile(r"^(?:due\s+)?(?:on\s+|by\s+)?")
_IN_N_RE = re.compile(r"^in (\d+) (day|days|week|weeks)$")
_LAST_WEEKDAY_RE = re.compile(r"^last (\w+) of (?:the |this |current )?month$")
_RELATIVE_WEEKDAY_RE = re.compile(r"^(?:(next|this) )?(\w+)$")
_MONTH_DAY_RE = re.compile(r"^([a-z]+)\.? (\d{1,2})(?:st|nd|rd|th)?(?:,? (\d{4}))?$")
_GO_LIVE_RE = re.compile(r"^go[ -]live (?:on )?(.+)$")
_NUMERIC_RE = re.compile(r"^(\d{1,2})[/-](\d{1,2})(?:[/-](\d{2,4}))?$")


def _add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def _last_weekday_of_month(today: date, weekday: int) -> date:
    last = date(today.year, today.month, calendar.monthrange(today.year, today.month)[1])
    return last - timedelta(days=(last.weekday() - weekday) % 7)


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _upcoming(year: Optional[int], month: int, day: int, today: date) -> Optional[date]:
    """Explicit year wins; otherwise this year, or next year if already passed."""
    if year is not None:
        return _safe_date(year, month, day)
    candidate = _safe_date(today.year, month, day)
    if candidate is not None and candidate < today:
        candidate = _safe_date(today.year + 1, month, day)
    return candidate


def resolve_date_phrase(phrase: Optional[str], today: Optional[date] = None) -> Optional[date]:
    """Resolve a date phrase such as 'due next friday' relative to `today`.

    Weekdays resolve to their next occurrence: a bare or 'next' weekday is at
    least one day ahead, 'this <weekday>' may be today.

    Returns:
        The resolved date, or None if the phrase is not recognized.
    """
    if not phrase or not phrase.strip():
        return None
    today = today or date.today()
    text = _LEAD_RE.sub("", " ".join(phrase.lower().split()))

    if text == "today":
        return today
    if text == "tomorrow":
        return today + timedelta(days=1)
    if text == "next week":
        return today + timedelta(days=7)
    if text == "next month":
        return _add_months(today, 1)

    m = _IN_N_RE.match(text)
    if m:
        amount = int(m.group(1))
        days = amount * 7 if m.group(2).startswith("week") else amount
        return today + timedelta(days=days)

    m = _LAST_WEEKDAY_RE.match(text)
    if m and m.group(1) in WEEKDAYS:
        return _last_weekday_of_month(today, WEEKDAYS.index(m.group(1)))

    m = _RELATIVE_WEEKDAY_RE.match(text)
    if m and m.group(2) in WEEKDAYS:
        ahead = (WEEKDAYS.index(m.group(2)) - today.weekday()) % 7
        if ahead == 0 and m.group(1) != "this":
            ahead = 7
        return today + timedelta(days=ahead)

    m = _MONTH_DAY_RE.match(text)
    if m and m.group(1)[:3] in _MONTH_INDEX:
        year = int(m.group(3)) if m.group(3) else None
        return _upcoming(year, _MONTH_INDEX[m.group(1)[:3]], int(m.group(2)), today)

    m = _NUMERIC_RE.match(text)
    if m:
        year = None
        if m.group(3):
            year = int(m.group(3))
            if len(m.group(3)) == 2:
                year += 2000 if year < 50 else 1900
        return _upcoming(year, int(m.group(1)), int(m.group(2)), today)

    logger.debug(f"Unrecognized date phrase: {phrase!r}")
    return None


def resolve_go_live_phrase(phrase: Optional[str], today: Optional[date] = None) -> Optional[date]:
    """Resolve a go-live phrase such as 'go live on friday'.

    A go-live weekday is the coming occurrence and may be today.
    """
    if not phrase:
        return None
    m = _GO_LIVE_RE.match(" ".join(phrase.lower().split()))
    if not m:
        return None
    rest = m.group(1)
    if rest in WEEKDAYS:
        rest = f"this {rest}"
    return resolve_date_phrase(rest, today)
