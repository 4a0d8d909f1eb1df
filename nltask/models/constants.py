"""Constants for nltask.

This module centralizes magic numbers and default values used throughout the package.
"""

# Remote extraction
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_PARSE_TIMEOUT_SECONDS = 5.0
PARSE_FUNCTION_PATH = "/parse-natural-language"

# Live typing
LIVE_DEBOUNCE_SECONDS = 0.5
LIVE_MIN_TEXT_LENGTH = 3
LIVE_TRIGGER_CHARS = ("@", "#")

# Effort estimation (work calendar)
WORK_DAY_HOURS = 8
WORK_DAYS_PER_WEEK = 5
WORK_DAYS_PER_MONTH = 20

# Effort buckets: (max minutes, level). Anything larger maps to MAX_EFFORT_LEVEL.
EFFORT_LEVEL_BUCKETS = (
    (15, 1),
    (30, 2),
    (3 * 60, 4),
    (WORK_DAY_HOURS * 60, 8),
    (WORK_DAYS_PER_WEEK * WORK_DAY_HOURS * 60, 16),
    (2 * WORK_DAYS_PER_WEEK * WORK_DAY_HOURS * 60, 32),
)
MAX_EFFORT_LEVEL = 64

# Drafts
DESCRIPTION_LENGTH_THRESHOLD = 10  # keep original input when title is this much shorter
PARSE_FAILURE_NOTICE = "Could not parse task input. Please try rephrasing."
