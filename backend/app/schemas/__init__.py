# backend/app/schemas/__init__.py

from .common import CamelModel, ReviewCounts

# Missions
from .mission import (
    MissionCreate,
    MissionUpdate,
    MissionOut,
    MissionTreeOut,
    MissionDetailOut,
    MissionReorder,
    MissionReorderResult,
)

# Folders / categories / action types
from .folder import FolderCreate, FolderUpdate, FolderOut, FolderReorder
from .category import CategoryCreate, CategoryUpdate, CategoryOut, CategoryReorder
from .action_type import ActionTypeCreate, ActionTypeUpdate, ActionTypeOut

# Sub-missions and submissions
from .sub_mission import SubMissionCreate, SubMissionUpdate, SubMissionOut, SubMissionReorder
from .submission import SubmissionIn, SubmissionOut, ReviewSubmissionOut, ReviewDecision

__all__ = [
    "CamelModel", "ReviewCounts",
    "MissionCreate", "MissionUpdate", "MissionOut", "MissionTreeOut", "MissionDetailOut",
    "MissionReorder", "MissionReorderResult",
    "FolderCreate", "FolderUpdate", "FolderOut", "FolderReorder",
    "CategoryCreate", "CategoryUpdate", "CategoryOut", "CategoryReorder",
    "ActionTypeCreate", "ActionTypeUpdate", "ActionTypeOut",
    "SubMissionCreate", "SubMissionUpdate", "SubMissionOut", "SubMissionReorder",
    "SubmissionIn", "SubmissionOut", "ReviewSubmissionOut", "ReviewDecision",
]
