"""
hacknight.errors — Exception Taxonomy
======================================

Data-inconsistency errors are raised when a referenced row is missing.
Storage failures are not wrapped: ``sqlalchemy.exc.SQLAlchemyError``
propagates as-is.  Duplicate attendance / duplicate badge grants are never
raised — the unique constraints reject them and the services treat the
rejection as a no-op.
"""

from __future__ import annotations


class HackNightError(Exception):
    """Base class for all domain errors."""


class DataInconsistencyError(HackNightError):
    """A referenced member, event, or badge definition does not exist."""

    kind = "record"

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"{self.kind} not found: {key}")


class MemberNotFoundError(DataInconsistencyError):
    kind = "Member"


class EventNotFoundError(DataInconsistencyError):
    kind = "Event"


class BadgeNotFoundError(DataInconsistencyError):
    kind = "Badge"
