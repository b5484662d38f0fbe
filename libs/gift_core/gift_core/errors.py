"""Errors raised by the matching and join code helpers."""


class GiftCoreError(Exception):
    """Base class for gift_core failures."""


class InsufficientMembersError(GiftCoreError):
    """Matching was requested for fewer than two members."""

    def __init__(self, member_count: int):
        self.member_count = member_count
        super().__init__(
            f"Need at least 2 members to generate matches (got {member_count})"
        )


class MatchExhaustedError(GiftCoreError):
    """No valid assignment was drawn within the attempt bound."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Failed to generate valid matches after {attempts} attempts"
        )


class CodeCollisionExhaustedError(GiftCoreError):
    """Every generated join code collided with an existing one."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Failed to generate a unique group code after {attempts} attempts"
        )
