"""Keyword vocabularies for local extraction.

These tables are data: extraction code compiles whatever is listed here, so
phrases can be added without touching the matching logic. Patterns are regex
fragments matched case-insensitively on word boundaries. Within a list, more
specific phrases come first (leftmost match wins, then list order).
"""

from nltask.models.draft import Priority

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

MONTHS = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

_WEEKDAY = "(?:" + "|".join(WEEKDAYS) + ")"
_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
MONTH_DAY = _MONTH + r" \d{1,2}(?:st|nd|rd|th)?(?:,? \d{4})?"
NUMERIC_DATE = r"\d{1,2}[/-]\d{1,2}(?:[/-]\d{2,4})?"

DATE_PATTERNS = [
    r"due (?:on |by )?(?:today|tomorrow|next week|next month|(?:this |next )?" + _WEEKDAY
    + "|" + MONTH_DAY + "|" + NUMERIC_DATE + ")",
    r"last " + _WEEKDAY + r" of (?:the |this |current )?month",
    r"next (?:week|month)",
    r"(?:next|on|this) " + _WEEKDAY,
    r"in \d+ (?:days?|weeks?)",
    MONTH_DAY,
    NUMERIC_DATE,
    r"today",
    r"tomorrow",
    _WEEKDAY,
]

# Launch dates are tracked apart from the deadline and never read as one.
GO_LIVE_PATTERNS = [
    r"go[ -]live (?:today|tomorrow|next week|(?:on )?" + _WEEKDAY + ")",
]

# Checked in this order; the first category with any match wins.
PRIORITY_PATTERNS = {
    Priority.HIGH: [r"high priority", r"(?<!not )urgent", r"important"],
    Priority.NORMAL: [r"normal priority", r"medium priority"],
    Priority.LOW: [r"low priority", r"not urgent", r"when you have time"],
    Priority.LOWEST: [r"lowest priority", r"whenever"],
}

EFFORT_PATTERNS = [
    r"(?<!in )\d+\s*(?:minutes?|mins?|m|hours?|hrs?|h|days?|d|weeks?|w|months?|mo)",
    r"(?:an?|one)\s+(?:minute|min|hour|hr|day|week|month)",
    r"(?:a\s+)?half\s+(?:hour|day)",
    r"(?:a\s+)?(?:couple|few|several)\s+(?:of\s+)?(?:hours?|hrs?|days?|weeks?)",
    r"all\s+day",
    r"full\s+day",
    r"this\s+afternoon",
    r"this\s+week",
    r"long\s+term",
    r"big\s+project",
    r"quick",
    r"short",
]

# Capitalized words that end a multi-word #tag or @name instead of extending it.
NAME_BOUNDARY_WORDS = WEEKDAYS + MONTHS + (
    "today", "tonight", "tomorrow", "due", "next", "by",
    "urgent", "important", "high", "normal", "medium", "low", "lowest",
)
