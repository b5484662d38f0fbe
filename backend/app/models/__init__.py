"""
Models for the Gift Exchange application.

``Document`` is the only table; groups and their match results are typed
views over documents in the ``groups`` collection.
"""

from .document import Document
from .group import GROUPS, Group, MatchResult

# Export all models for Alembic auto-generation
__all__ = [
    "Document",
    "GROUPS",
    "Group",
    "MatchResult",
]
