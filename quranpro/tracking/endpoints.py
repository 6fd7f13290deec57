"""
Reading tracking API endpoints for the Quran Pro API
"""
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends

from quranpro.auth.deps import get_current_user_id, get_database
from quranpro.database import DatabaseManager
from quranpro.tracking.schemas import (
    FavoriteRequest, GoalCreateRequest, GoalUpdateRequest, HistoryRequest, ProgressRequest,
    SessionEndRequest, SessionStartRequest, StatsIncrementRequest,
)
from quranpro.tracking.service import TrackingService

router = APIRouter(prefix="/api", tags=["tracking"])


def get_tracking_service(db: DatabaseManager = Depends(get_database)) -> TrackingService:
    return TrackingService(db)


# -------- Progress --------
@router.post("/progress")
def save_progress(
    request: ProgressRequest,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    service.save_progress(user_id, request.surah, request.ayah)
    return {"success": True, "message": "Progress saved"}


@router.get("/progress")
def get_progress(user_id: str = Depends(get_current_user_id), service: TrackingService = Depends(get_tracking_service)):
    return {"success": True, "progress": asdict(service.get_progress(user_id))}


# -------- History --------
@router.post("/history")
def add_history(
    request: HistoryRequest,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    entry_id = service.add_history(user_id, request.surah, request.ayah, request.action_type, request.duration)
    return {"success": True, "id": entry_id, "message": "History entry added"}


@router.get("/history")
@router.get("/history/{limit}")
def get_history(
    limit: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    """Newest first; limit defaults to 50 and is capped at 100"""
    history = service.get_history(user_id, limit)
    return {"success": True, "history": [asdict(entry) for entry in history]}


# -------- Favorites --------
@router.post("/favorites")
def add_favorite(
    request: FavoriteRequest,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    favorite_id = service.add_favorite(user_id, request.type, request.reference_id, request.reference_text, request.notes)
    return {"success": True, "id": favorite_id, "message": "Favorite added"}


@router.get("/favorites")
def get_favorites(user_id: str = Depends(get_current_user_id), service: TrackingService = Depends(get_tracking_service)):
    return {"success": True, "favorites": [asdict(favorite) for favorite in service.get_favorites(user_id)]}


@router.delete("/favorites/{favorite_id}")
def delete_favorite(
    favorite_id: int,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    service.delete_favorite(user_id, favorite_id)
    return {"success": True, "message": "Favorite deleted"}


# -------- Goals --------
@router.post("/goals")
def create_goal(
    request: GoalCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    goal_id = service.create_goal(user_id, request.goal_type, request.target_value, request.start_date, request.end_date)
    return {"success": True, "goalId": goal_id, "message": "Goal created"}


@router.get("/goals")
def get_goals(user_id: str = Depends(get_current_user_id), service: TrackingService = Depends(get_tracking_service)):
    return {"success": True, "goals": [asdict(goal) for goal in service.get_goals(user_id)]}


@router.put("/goals/{goal_id}")
def update_goal(
    goal_id: int,
    request: GoalUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    service.update_goal(user_id, goal_id, request.current_value, request.is_completed)
    return {"success": True, "message": "Goal updated"}


# -------- Reading sessions --------
@router.post("/sessions/start")
def start_session(
    request: Optional[SessionStartRequest] = None,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    session_id = service.start_session(user_id, request.device_info if request else None)
    return {"success": True, "sessionId": session_id, "message": "Session started"}


@router.put("/sessions/{session_id}/end")
def end_session(
    session_id: int,
    request: Optional[SessionEndRequest] = None,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    request = request or SessionEndRequest()
    session = service.end_session(user_id, session_id, request.verses_read, request.hasanat_earned)
    return {"success": True, "session": asdict(session), "message": "Session ended"}


# -------- Daily stats --------
@router.post("/stats")
@router.post("/quran/stats/increment")
def increment_stats(
    request: StatsIncrementRequest,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    """Add reading activity to today's totals"""
    if not service.increment_stats(
        user_id,
        hasanat=request.hasanat,
        verses=request.verses,
        time_seconds=request.time_seconds,
        pages_read=request.pages_read,
    ):
        return {"success": True, "message": "No stats to increment"}
    return {"success": True, "message": "Stats updated"}


@router.get("/stats/today")
def get_today_stats(user_id: str = Depends(get_current_user_id), service: TrackingService = Depends(get_tracking_service)):
    return {"success": True, "stats": [row.to_dict() for row in service.get_today(user_id)]}


@router.get("/stats/week")
def get_week_stats(user_id: str = Depends(get_current_user_id), service: TrackingService = Depends(get_tracking_service)):
    return {"success": True, "stats": [row.to_dict() for row in service.get_week(user_id)]}


@router.get("/stats/all")
def get_all_stats(user_id: str = Depends(get_current_user_id), service: TrackingService = Depends(get_tracking_service)):
    return {"success": True, "stats": [row.to_dict() for row in service.get_all(user_id)]}


@router.get("/stats/daily/{days}")
def get_daily_stats(
    days: str,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    return {"success": True, "stats": [row.to_dict() for row in service.get_daily(user_id, days)]}


@router.get("/stats/period/{period}")
def get_period_stats(
    period: str,
    user_id: str = Depends(get_current_user_id),
    service: TrackingService = Depends(get_tracking_service),
):
    return {"success": True, "stats": service.get_period(user_id, period).to_dict()}
