"""Quiz-related constants shared across UI, API and core layers."""

DEFAULT_TIME_LIMIT_SECONDS: int = 30
MIN_TIME_LIMIT_SECONDS: int = 5
MAX_TIME_LIMIT_SECONDS: int = 120
REVEAL_DURATION_SECONDS: int = 3
MIN_OPTIONS_PER_QUESTION: int = 2

SHARE_CODE_LENGTH: int = 6
# Uppercase letters and digits without the look-alikes I, O, 0 and 1.
SHARE_CODE_ALPHABET: str = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
MAX_SHARE_CODE_ATTEMPTS: int = 10

MAX_DISPLAY_NAME_LENGTH: int = 20
