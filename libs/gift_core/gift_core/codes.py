import logging
import random
import string
from typing import Callable

from .errors import CodeCollisionExhaustedError

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits  # A-Z, 0-9
CODE_LENGTH = 6
CODE_SEPARATOR = "-"
DEFAULT_MAX_ATTEMPTS = 5


def generate_code(length: int = CODE_LENGTH) -> str:
    """Generate a random alphanumeric group code, e.g. ``K7Q2ZD``."""
    return "".join(random.choice(CODE_ALPHABET) for _ in range(length))


def format_code(code: str) -> str:
    """
    Format a group code for display by splitting it at the midpoint.

    ``ABC123`` becomes ``ABC-123``. Codes of any other length are returned
    unchanged.
    """
    if len(code) != CODE_LENGTH:
        return code
    half = CODE_LENGTH // 2
    return f"{code[:half]}{CODE_SEPARATOR}{code[half:]}"


def normalize_code(value: str) -> str:
    """Strip separators and whitespace from user input and upper-case it."""
    return value.replace(CODE_SEPARATOR, "").strip().upper()


def is_valid_code(value: str) -> bool:
    """Check whether user input normalizes to a well-formed group code."""
    code = normalize_code(value)
    return len(code) == CODE_LENGTH and all(c in CODE_ALPHABET for c in code)


def ensure_unique_code(
    exists: Callable[[str], bool],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    length: int = CODE_LENGTH,
) -> str:
    """
    Generate a group code that the ``exists`` predicate reports as unused.

    The check is best-effort: two concurrent callers can both see the same
    code as free before either writes it. Closing that window is up to the
    store's write path.

    Args:
        exists: Lookup against the store; returns True if the code is taken.
            Errors it raises propagate unchanged.
        max_attempts: Number of codes to try before giving up.
        length: Code length.

    Returns:
        A code for which ``exists`` returned False.

    Raises:
        CodeCollisionExhaustedError: If every attempt collided.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        code = generate_code(length)
        if not exists(code):
            return code
        logger.info(f"Group code collision on attempt {attempt}/{max_attempts}")

    raise CodeCollisionExhaustedError(max_attempts)
