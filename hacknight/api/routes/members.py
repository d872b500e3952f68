"""
hacknight.api.routes.members — Check-in, streak, badges & history
==================================================================
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import Engine

from hacknight.api.deps import (
    get_config,
    get_current_member,
    get_engine,
    get_luma_client,
)
from hacknight.config import HackNightConfig
from hacknight.database.engine import run_db
from hacknight.database.models import Attendance, Badge
from hacknight.errors import EventNotFoundError, MemberNotFoundError
from hacknight.services import attendance_service, badge_service, streak_service
from hacknight.services.luma_client import LumaClient

router = APIRouter(tags=["members"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class CheckInRequest(BaseModel):
    luma_event_id: str
    luma_attendee_id: str | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _attendance_dict(a: Attendance) -> dict:
    return {
        "id": a.id,
        "member_id": a.member_id,
        "luma_event_id": a.luma_event_id,
        "status": a.status,
        "checked_in_at": a.checked_in_at.isoformat() if a.checked_in_at else None,
    }


def _badge_dict(b: Badge) -> dict:
    return {"id": b.id, "name": b.name, "icon": b.icon, "criteria": b.criteria}


# ---------------------------------------------------------------------------
# POST /check-in
# ---------------------------------------------------------------------------
@router.post("/check-in")
async def check_in(
    body: CheckInRequest,
    member: dict = Depends(get_current_member),
    engine: Engine = Depends(get_engine),
    cfg: HackNightConfig = Depends(get_config),
    luma: LumaClient | None = Depends(get_luma_client),
):
    """Check the authenticated member in to an event."""
    member_id = member["sub"]
    try:
        result = await run_db(
            attendance_service.process_check_in,
            engine,
            member_id,
            body.luma_event_id,
            luma_attendee_id=body.luma_attendee_id,
            skip_canceled=cfg.skip_canceled_events,
            luma_client=luma,
        )
    except MemberNotFoundError:
        raise HTTPException(404, "Profile not found. Please complete onboarding first.")
    except EventNotFoundError:
        raise HTTPException(404, "Event not found. Please sync events first.")

    return {
        "success": True,
        "message": (
            "You are already checked in to this event"
            if result.already_checked_in else "Checked in successfully"
        ),
        "already_checked_in": result.already_checked_in,
        "attendance": _attendance_dict(result.attendance),
        "streak_count": result.streak_count,
        "awarded_badges": [_badge_dict(b) for b in result.awarded_badges],
        "luma_updated": result.luma_updated,
    }


# ---------------------------------------------------------------------------
# GET /members/{member_id}/...
# ---------------------------------------------------------------------------
@router.get("/members/{member_id}/streak")
def get_streak(
    member_id: str,
    engine: Engine = Depends(get_engine),
    cfg: HackNightConfig = Depends(get_config),
):
    streak = streak_service.get_streak_count(
        engine, member_id, skip_canceled=cfg.skip_canceled_events,
    )
    return {"member_id": member_id, "streak_count": streak}


@router.get("/members/{member_id}/badges")
def get_badges(member_id: str, engine: Engine = Depends(get_engine)):
    return {"badges": badge_service.get_member_badges(engine, member_id)}


@router.get("/members/{member_id}/check-ins")
def get_check_ins(member_id: str, engine: Engine = Depends(get_engine)):
    history = attendance_service.get_check_in_history(engine, member_id)
    return {"success": True, "history": history, "total_check_ins": len(history)}


@router.get("/events/{luma_event_id}/attendance")
def get_event_attendance(luma_event_id: str, engine: Engine = Depends(get_engine)):
    return attendance_service.get_event_attendance_counts(engine, luma_event_id)
