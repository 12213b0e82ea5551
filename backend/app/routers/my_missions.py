# backend/app/routers/my_missions.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import CurrentUser, get_current_user
from app.db import get_db
from app.schemas.user_mission import MissionProgressOut
from app.services import progress

router = APIRouter(prefix="/api/my-missions", tags=["user-missions"])


@router.get("", response_model=List[MissionProgressOut])
def list_my_missions(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Missions the caller started, newest first, with live progress."""
    return progress.list_for_user(db, user)
