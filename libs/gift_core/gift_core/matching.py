import logging
import random
from typing import Dict, List, Optional, Sequence

from .errors import InsufficientMembersError, MatchExhaustedError

logger = logging.getLogger(__name__)

MAX_MATCH_ATTEMPTS = 100


def shuffle_members(
    members: Sequence[str], rng: Optional[random.Random] = None
) -> List[str]:
    """Return a uniformly shuffled copy of ``members`` (Fisher-Yates)."""
    rng = rng or random
    shuffled = list(members)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def generate_matches(
    members: Sequence[str],
    max_attempts: int = MAX_MATCH_ATTEMPTS,
    rng: Optional[random.Random] = None,
) -> Dict[str, str]:
    """
    Assign every member exactly one recipient, never themselves.

    Draws random permutations of the member list and pairs the original
    order with the shuffled order position by position. A draw that maps
    anyone to themselves is rejected and redrawn. On average fewer than three
    draws are needed for any group size, so the bound only guards against
    pathological inputs.

    Args:
        members: Unique member identifiers.
        max_attempts: Number of permutations to draw before giving up.
        rng: Optional ``random.Random`` instance for reproducible draws.

    Returns:
        A mapping of giver to recipient covering every member once on each
        side.

    Raises:
        InsufficientMembersError: Fewer than two members.
        MatchExhaustedError: No valid permutation within ``max_attempts``.
    """
    if len(members) < 2:
        raise InsufficientMembersError(len(members))

    if len(set(members)) != len(members):
        raise ValueError("Member identifiers must be unique.")

    for attempt in range(1, max_attempts + 1):
        shuffled = shuffle_members(members, rng)
        if any(giver == recipient for giver, recipient in zip(members, shuffled)):
            continue

        logger.info(
            f"Generated matches for {len(members)} members in {attempt} attempt(s)"
        )
        return dict(zip(members, shuffled))

    raise MatchExhaustedError(max_attempts)


def verify_matches(matches: Dict[str, str], members: Sequence[str]) -> None:
    """
    Check that ``matches`` is a complete assignment over ``members``.

    Raises:
        ValueError: Listing every problem found.
    """
    member_set = set(members)
    giver_set = set(matches.keys())
    recipient_values = list(matches.values())
    recipient_set = set(recipient_values)

    issues = []

    missing_givers = member_set - giver_set
    if missing_givers:
        issues.append(f"Missing givers: {sorted(missing_givers)}")

    missing_recipients = member_set - recipient_set
    if missing_recipients:
        issues.append(f"Missing recipients: {sorted(missing_recipients)}")

    if len(recipient_values) != len(recipient_set):
        issues.append("Duplicate recipients detected")

    extra_givers = giver_set - member_set
    if extra_givers:
        issues.append(f"Unexpected givers: {sorted(extra_givers)}")

    extra_recipients = recipient_set - member_set
    if extra_recipients:
        issues.append(f"Unexpected recipients: {sorted(extra_recipients)}")

    self_matched = sorted(g for g, r in matches.items() if g == r)
    if self_matched:
        issues.append(f"Self matches: {self_matched}")

    if issues:
        raise ValueError("Match verification failed; " + "; ".join(issues))
