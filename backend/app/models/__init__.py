# backend/app/models/__init__.py
# IMPORTANT: Use Base from app.db (not from .base) since all models import from app.db
from app.db import Base

# import all model modules so tables get registered on Base.metadata
from .hospital import Hospital
from .mission_category import MissionCategory
from .mission_folder import MissionFolder
from .action_type import ActionType
from .mission import Mission
from .sub_mission import SubMission
from .submission import Submission
from .mission_progress import UserMissionProgress


__all__ = [
    "Base",
    "Hospital",
    "MissionCategory",
    "MissionFolder",
    "ActionType",
    "Mission",
    "SubMission",
    "Submission",
    "UserMissionProgress",
]
