"""
hacknight.api.routes.admin — Badge seeding, streak backfill, revocation
========================================================================
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import Engine

from hacknight.api.deps import get_config, get_current_admin, get_engine
from hacknight.config import HackNightConfig
from hacknight.database.seed import seed_badges
from hacknight.errors import BadgeNotFoundError
from hacknight.services import badge_service, streak_service

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger(__name__)


@router.post("/badges/seed")
def seed_badge_definitions(
    admin: dict = Depends(get_current_admin),
    engine: Engine = Depends(get_engine),
):
    inserted = seed_badges(engine)
    logger.info("Admin %s seeded badges (%d inserted)", admin["sub"], inserted)
    return {"inserted": inserted}


@router.post("/streaks/recalculate")
def recalculate_streaks(
    admin: dict = Depends(get_current_admin),
    engine: Engine = Depends(get_engine),
    cfg: HackNightConfig = Depends(get_config),
):
    logger.info("Admin %s triggered streak recalculation", admin["sub"])
    return streak_service.recalculate_all_streaks(
        engine, skip_canceled=cfg.skip_canceled_events,
    )


@router.delete("/members/{member_id}/badges/{badge_id}", status_code=204)
def revoke_member_badge(
    member_id: str,
    badge_id: str,
    admin: dict = Depends(get_current_admin),
    engine: Engine = Depends(get_engine),
):
    try:
        revoked = badge_service.revoke_badge(engine, member_id, badge_id)
    except BadgeNotFoundError:
        raise HTTPException(404, "Badge not found")
    if not revoked:
        raise HTTPException(404, "Member does not hold this badge")
    logger.info("Admin %s revoked badge %s from %s", admin["sub"], badge_id, member_id)
