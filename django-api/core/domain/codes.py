"""Short public identifiers: redemption codes, solicitation tokens, slugs.

A code is ``slugify(seed) + "-" + suffix``. Uniqueness is not checked here;
callers insert against a unique constraint and ask for a fresh code when the
insert is ignored.
"""

import secrets
import time

from django.utils.text import slugify

# No 0/o, 1/l/i: codes get read aloud and typed from paper tickets.
SUFFIX_ALPHABET = "abcdefghjkmnpqrstuvwxyz23456789"
MAX_BASE_LENGTH = 32
DEFAULT_SUFFIX_LENGTH = 6


def slug_base(seed: str, fallback: str = "item") -> str:
    base = slugify(seed or "")[:MAX_BASE_LENGTH].strip("-")
    return base or fallback


def random_suffix(length: int = DEFAULT_SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def generate_code(seed: str, suffix_length: int = DEFAULT_SUFFIX_LENGTH) -> str:
    return f"{slug_base(seed)}-{random_suffix(suffix_length)}"


def slug_candidates(name: str, attempts: int, suffix_length: int = DEFAULT_SUFFIX_LENGTH):
    """Yield campaign slug candidates, most readable first.

    The plain slug is tried first, then the slug with a unix timestamp, then
    random suffixes for whatever attempts remain.
    """
    base = slug_base(name, fallback="campaign")
    for attempt in range(attempts):
        if attempt == 0:
            yield base
        elif attempt == 1:
            yield f"{base}-{int(time.time())}"
        else:
            yield f"{base}-{random_suffix(suffix_length)}"
