# backend/app/routers/mission_folders.py
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.auth import require_content_admin
from app.db import get_db
from app.errors import NotFoundError
from app.models.mission import Mission
from app.models.mission_folder import MissionFolder
from app.schemas.folder import FolderCreate, FolderOut, FolderReorder, FolderUpdate
from app.services.ordering import next_order, reorder_folders

router = APIRouter(
    prefix="/api/admin/mission-folders",
    tags=["mission-folders"],
    dependencies=[Depends(require_content_admin)],
)
logger = logging.getLogger(__name__)


def _get_folder(db: Session, folder_id: int) -> MissionFolder:
    folder = db.get(MissionFolder, folder_id)
    if not folder:
        raise NotFoundError("Folder not found")
    return folder


def _serialize(folder: MissionFolder, mission_count: int = 0) -> dict:
    return {
        "id": folder.id,
        "name": folder.name,
        "color": folder.color,
        "order": folder.order,
        "is_collapsed": folder.is_collapsed,
        "mission_count": mission_count,
        "created_at": folder.created_at,
        "updated_at": folder.updated_at,
    }


def _folder_list(db: Session) -> list:
    counts = dict(
        db.execute(
            select(Mission.folder_id, func.count())
            .where(Mission.folder_id.is_not(None))
            .group_by(Mission.folder_id)
        ).all()
    )
    folders = db.scalars(select(MissionFolder).order_by(MissionFolder.order, MissionFolder.id)).all()
    return [_serialize(f, counts.get(f.id, 0)) for f in folders]


@router.get("", response_model=List[FolderOut])
def list_folders(db: Session = Depends(get_db)):
    return _folder_list(db)


@router.post("", response_model=FolderOut, status_code=201)
def create_folder(payload: FolderCreate, db: Session = Depends(get_db)):
    folder = MissionFolder(
        name=payload.name,
        color=payload.color,
        order=next_order(db, MissionFolder.order),
    )
    db.add(folder)
    db.commit()
    db.refresh(folder)
    logger.info(f"[folders] created {folder.id} '{folder.name}' (order {folder.order})")
    return _serialize(folder)


@router.put("/reorder", response_model=List[FolderOut])
def reorder(payload: FolderReorder, db: Session = Depends(get_db)):
    """`folderIds` must list every folder; position becomes the order."""
    reorder_folders(db, payload.folder_ids)
    return _folder_list(db)


@router.put("/{folder_id}", response_model=FolderOut)
def update_folder(folder_id: int, payload: FolderUpdate, db: Session = Depends(get_db)):
    folder = _get_folder(db, folder_id)
    values = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in values:
        values["name"] = values["name"].strip() or folder.name
    for key, value in values.items():
        setattr(folder, key, value)
    db.commit()
    db.refresh(folder)
    count = db.scalar(select(func.count()).select_from(Mission).where(Mission.folder_id == folder.id))
    return _serialize(folder, count or 0)


@router.delete("/{folder_id}", status_code=204)
def delete_folder(folder_id: int, db: Session = Depends(get_db)):
    """Missions in the folder become uncategorized; none are deleted."""
    folder = _get_folder(db, folder_id)
    res = db.execute(
        update(Mission)
        .where(Mission.folder_id == folder_id)
        .values(folder_id=None)
        .execution_options(synchronize_session=False)
    )
    db.delete(folder)
    db.commit()
    logger.info(f"[folders] deleted {folder_id}; {res.rowcount} missions moved to uncategorized")
    return None
