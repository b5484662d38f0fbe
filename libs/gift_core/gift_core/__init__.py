# libs/gift_core/gift_core/__init__.py

from .codes import (
    CODE_ALPHABET,
    CODE_LENGTH,
    ensure_unique_code,
    format_code,
    generate_code,
    is_valid_code,
    normalize_code,
)
from .errors import (
    CodeCollisionExhaustedError,
    GiftCoreError,
    InsufficientMembersError,
    MatchExhaustedError,
)
from .matching import MAX_MATCH_ATTEMPTS, generate_matches, shuffle_members, verify_matches

__all__ = [
    "CODE_ALPHABET",
    "CODE_LENGTH",
    "MAX_MATCH_ATTEMPTS",
    "generate_code",
    "format_code",
    "normalize_code",
    "is_valid_code",
    "ensure_unique_code",
    "generate_matches",
    "shuffle_members",
    "verify_matches",
    "GiftCoreError",
    "InsufficientMembersError",
    "MatchExhaustedError",
    "CodeCollisionExhaustedError",
]
