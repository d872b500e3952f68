"""
hacknight.services.badge_service — Milestone Badge Awards
==========================================================

Turns a member's check-in count and streak into badge grants.

Every call re-reads the member's holdings, so repeating it with the same
data grants nothing new.  Within one call:

- eligible definitions are resolved in a single query by name;
- a definition missing from the ``badges`` table is logged and skipped;
- a grant rejected by the (member, badge) primary key is a silent no-op;
- any other storage error on one grant is logged and the rest continue.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hacknight.database.models import Badge, MemberBadge
from hacknight.database.stores import Stores
from hacknight.engine.badges import eligible_badge_names
from hacknight.errors import BadgeNotFoundError

logger = logging.getLogger(__name__)


def check_and_award_badges(
    stores: Stores,
    member_id: str,
    check_in_count: int,
    streak_count: int,
) -> list[Badge]:
    """Grant every eligible badge the member doesn't hold yet.

    Returns the badges newly granted by this call, in milestone-table order.
    The caller owns the transaction.
    """
    names = eligible_badge_names(check_in_count, streak_count)
    if not names:
        return []

    definitions = stores.badges.get_by_names(names)
    held = stores.badges.held_badge_ids(member_id)
    awarded: list[Badge] = []

    for name in names:
        badge = definitions.get(name)
        if badge is None:
            logger.warning('Badge "%s" not found in database', name)
            continue
        if badge.id in held:
            continue

        try:
            grant = stores.badges.grant(member_id, badge.id)
        except SQLAlchemyError:
            logger.exception('Error awarding badge "%s" to member %s', name, member_id)
            continue
        if grant is None:
            continue

        held.add(badge.id)
        awarded.append(badge)
        logger.info('Awarded badge "%s" to member %s', name, member_id)

    return awarded


def award_check_in_badges(
    stores: Stores,
    member_id: str,
    streak_count: int,
) -> list[Badge]:
    """Look up the member's check-in total, then award milestones.

    This is what runs after a check-in.
    """
    check_in_count = stores.attendance.get_checked_in_count_by_member(member_id)
    return check_and_award_badges(stores, member_id, check_in_count, streak_count)


def award_badges_for_member(engine: Engine, member_id: str, streak_count: int) -> list[Badge]:
    """Session-owning wrapper around :func:`award_check_in_badges`.

    Returned :class:`Badge` rows stay readable after the session closes.
    """
    with Session(engine, expire_on_commit=False) as session:
        awarded = award_check_in_badges(Stores.for_session(session), member_id, streak_count)
        session.commit()
        return awarded


# ---------------------------------------------------------------------------
# Read / admin helpers
# ---------------------------------------------------------------------------
def get_member_badges(engine: Engine, member_id: str) -> list[dict]:
    """Badges held by a member, oldest award first."""
    with Session(engine) as session:
        rows = session.execute(
            select(Badge, MemberBadge.awarded_at)
            .join(MemberBadge, MemberBadge.badge_id == Badge.id)
            .where(MemberBadge.member_id == member_id)
            .order_by(MemberBadge.awarded_at, Badge.name)
        ).all()
        return [
            {
                "id": badge.id,
                "name": badge.name,
                "icon": badge.icon,
                "criteria": badge.criteria,
                "awarded_at": awarded_at.isoformat() if awarded_at else None,
            }
            for badge, awarded_at in rows
        ]


def revoke_badge(engine: Engine, member_id: str, badge_id: str) -> bool:
    """Remove a grant.  Returns ``False`` if the member didn't hold it.

    Raises :class:`BadgeNotFoundError` when *badge_id* is not a definition.
    """
    with Session(engine) as session:
        if session.get(Badge, badge_id) is None:
            raise BadgeNotFoundError(badge_id)
        result = session.execute(
            delete(MemberBadge).where(
                MemberBadge.member_id == member_id,
                MemberBadge.badge_id == badge_id,
            )
        )
        session.commit()
    revoked = (result.rowcount or 0) > 0
    if revoked:
        logger.info("Revoked badge %s from member %s", badge_id, member_id)
    return revoked
