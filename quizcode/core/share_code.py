"""Share code generation for published quizzes.

Codes are display-facing tokens, not credentials, so `random.Random` is
enough. The generator does not avoid collisions; the Catalog Store owns the
uniqueness constraint and callers retry on conflict.
"""

from __future__ import annotations

import random
import re

from quizcode.constants.quiz_constants import SHARE_CODE_ALPHABET, SHARE_CODE_LENGTH

_NON_ALPHANUMERIC = re.compile(r"[^A-Z0-9]")
_default_rng = random.Random()


def generate_share_code(rng: random.Random | None = None, length: int = SHARE_CODE_LENGTH) -> str:
    """Return a random code drawn uniformly from the share code alphabet."""
    source = rng or _default_rng
    return "".join(source.choice(SHARE_CODE_ALPHABET) for _ in range(length))


def normalize_share_code(raw_code: str | None) -> str:
    """Uppercase user input and strip anything that cannot be part of a code."""
    if not raw_code:
        return ""
    return _NON_ALPHANUMERIC.sub("", raw_code.upper())[:SHARE_CODE_LENGTH]


def is_valid_share_code(code: str) -> bool:
    return len(code) == SHARE_CODE_LENGTH and all(char in SHARE_CODE_ALPHABET for char in code)


def build_share_url(base_url: str, share_code: str) -> str:
    return f"{base_url.rstrip('/')}/join/{share_code}"
