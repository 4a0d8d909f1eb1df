"""Effort phrase to effort-level mapping.

Effort phrases ("30 minutes", "couple hours", "long term") are converted to
work minutes on an 8-hour day / 5-day week / 20-day month calendar and then
bucketed into the effort levels used by task records.
"""

import re
from typing import Optional

from nltask.models.constants import (
    EFFORT_LEVEL_BUCKETS,
    MAX_EFFORT_LEVEL,
    WORK_DAY_HOURS,
    WORK_DAYS_PER_MONTH,
    WORK_DAYS_PER_WEEK,
)

_DAY = WORK_DAY_HOURS * 60
_UNIT_MINUTES = {
    "mo": WORK_DAYS_PER_MONTH * _DAY,
    "m": 1,
    "h": 60,
    "d": _DAY,
    "w": WORK_DAYS_PER_WEEK * _DAY,
}
_QUANTIFIERS = {"couple": 2, "few": 3, "several": 5}
_FIXED_PHRASES = {
    "quick": 15,
    "short": 15,
    "half hour": 30,
    "half day": _DAY // 2,
    "this afternoon": 3 * 60,
    "all day": _DAY,
    "full day": _DAY,
    "this week": WORK_DAYS_PER_WEEK * _DAY,
    "long term": WORK_DAYS_PER_MONTH * _DAY,
    "big project": WORK_DAYS_PER_MONTH * _DAY,
}

_COUNT_RE = re.compile(r"\b(\d+)\s*(minutes?|mins?|m|hours?|hrs?|h|days?|d|weeks?|w|months?|mo)\b")
_SINGLE_RE = re.compile(r"\b(?:an?|one)\s+(minute|min|hour|hr|day|week|month)\b")
_QUANTIFIED_RE = re.compile(r"\b(couple|few|several)\s+(?:of\s+)?(hours?|hrs?|days?|weeks?)\b")


def _unit_minutes(unit: str) -> Optional[int]:
    # "mo" must be checked before "m"
    for prefix, minutes in _UNIT_MINUTES.items():
        if unit.startswith(prefix):
            return minutes
    return None


def effort_minutes(phrase: Optional[str]) -> Optional[int]:
    """Convert an effort phrase to work minutes, or None if unrecognized."""
    if not phrase:
        return None
    text = " ".join(phrase.lower().split())

    m = _COUNT_RE.search(text)
    if m:
        unit = _unit_minutes(m.group(2))
        return int(m.group(1)) * unit if unit is not None else None

    m = _SINGLE_RE.search(text)
    if m:
        return _unit_minutes(m.group(1))

    m = _QUANTIFIED_RE.search(text)
    if m:
        unit = _unit_minutes(m.group(2))
        return _QUANTIFIERS[m.group(1)] * unit if unit is not None else None

    for fixed, minutes in _FIXED_PHRASES.items():
        if re.search(rf"\b{fixed}\b", text):
            return minutes
    return None


def map_effort_level(phrase: Optional[str]) -> Optional[int]:
    """Map an effort phrase to its effort bucket (1, 2, 4, 8, 16, 32 or 64)."""
    minutes = effort_minutes(phrase)
    if minutes is None or minutes <= 0:
        return None
    for limit, level in EFFORT_LEVEL_BUCKETS:
        if minutes <= limit:
            return level
    return MAX_EFFORT_LEVEL
