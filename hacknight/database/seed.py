"""
hacknight.database.seed — Default Badge Seeder
===============================================

The ten milestone badges the award pipeline looks up by name.  Seeded on
startup by :func:`hacknight.database.engine.init_db` and by the
``seed-badges`` CLI command.

Idempotent — only inserts names that don't already exist.  Icons or
criteria edited by an admin are never overwritten.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from hacknight.database.models import Badge
from hacknight.database.stores import SqlBadgeStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Default badge catalogue
# ---------------------------------------------------------------------------
BADGE_DEFINITIONS: list[tuple[str, str, str]] = [
    ("First Check-in", "🎯", "Check in to your first hack night"),
    ("5 Check-ins", "⭐", "Check in to 5 hack nights"),
    ("10 Check-ins", "🌟", "Check in to 10 hack nights"),
    ("25 Check-ins", "💫", "Check in to 25 hack nights"),
    ("50 Check-ins", "✨", "Check in to 50 hack nights"),
    ("3 Week Streak", "🔥", "Maintain a 3 week attendance streak"),
    ("5 Week Streak", "🔥🔥", "Maintain a 5 week attendance streak"),
    ("10 Week Streak", "🚀", "Maintain a 10 week attendance streak"),
    ("25 Week Streak", "💪", "Maintain a 25 week attendance streak"),
    ("52 Week Streak", "👑", "Maintain a 52 week attendance streak (1 year!)"),
]
"""Each entry is ``(name, icon, criteria)``."""


# ---------------------------------------------------------------------------
# Seeder
# ---------------------------------------------------------------------------
def seed_badges(engine: Engine) -> int:
    """Insert badge definitions that don't yet exist.

    Returns the number of rows inserted (0 when everything is present).
    """
    session = Session(engine)
    store = SqlBadgeStore(session)
    inserted = 0
    try:
        for name, icon, criteria in BADGE_DEFINITIONS:
            if store.get_by_name(name) is not None:
                continue
            session.add(Badge(name=name, icon=icon, criteria=criteria))
            inserted += 1
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    if inserted:
        logger.info("Seeded %d badge definitions.", inserted)
    else:
        logger.info("Badge definitions already seeded — skipping.")
    return inserted
