# backend/app/services/review.py
"""
Review dashboard aggregation: pending / approved / rejected counts per
sub-mission, per mission subtree and globally, limited to a hospital scope.

Counts are cached in-process (cachetools) and invalidated by the submission lifecycle.
"""
from __future__ import annotations

import logging
import os
import threading
from collections import defaultdict
from typing import Dict, Hashable, Iterable, List, Optional, Set

from cachetools import TTLCache
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.constants import (
    STATUS_APPROVED,
    STATUS_REJECTED,
    STATUS_SUBMITTED,
    SUBMISSION_STATUSES,
)
from app.errors import NotFoundError, ValidationError
from app.models.mission import Mission
from app.models.sub_mission import SubMission
from app.models.submission import Submission
from app.services.periods import period_status

logger = logging.getLogger(__name__)

REVIEW_STATS_TTL = float(os.getenv("REVIEW_STATS_TTL", "60"))
REVIEW_STATS_MAXSIZE = int(os.getenv("REVIEW_STATS_MAXSIZE", "4096"))


def empty_counts() -> dict:
    return {"pending": 0, "approved": 0, "rejected": 0, "total": 0}


# ----------------------------------------------------------------------
# Cache
# ----------------------------------------------------------------------
class ReviewStatsCache:
    """
    TTL cache for count dicts, keyed by ("sub", id) / ("mission", id, scope) / ("global", scope).

    Readers take `generation()` before counting and hand it back to `set`.
    Every invalidation bumps the generation, so counts computed before an
    invalidation are never stored after it. Invalidation is per process;
    other workers converge within the TTL.
    """

    def __init__(self, ttl: float = REVIEW_STATS_TTL, maxsize: int = REVIEW_STATS_MAXSIZE):
        self.ttl = ttl
        self._entries = TTLCache(maxsize=maxsize, ttl=max(ttl, 0.001))
        self._generation = 0
        self._lock = threading.Lock()

    def generation(self) -> int:
        with self._lock:
            return self._generation

    def get(self, key: Hashable) -> Optional[dict]:
        with self._lock:
            value = self._entries.get(key)
            return dict(value) if value is not None else None

    def set(self, key: Hashable, value: dict, generation: int) -> bool:
        if self.ttl <= 0:
            return False
        with self._lock:
            if generation != self._generation:
                return False
            self._entries[key] = dict(value)
            return True

    def invalidate(self, sub_mission_id: int, mission_ids: Iterable[int]) -> None:
        """Drop whatever a change to this sub-mission can affect; global totals always go."""
        mission_ids = set(mission_ids)
        with self._lock:
            self._generation += 1
            for key in list(self._entries.keys()):
                kind = key[0]
                if (
                    (kind == "sub" and key[1] == sub_mission_id)
                    or (kind == "mission" and key[1] in mission_ids)
                    or kind == "global"
                ):
                    self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()


stats_cache = ReviewStatsCache()


# ----------------------------------------------------------------------
# Mission tree
# ----------------------------------------------------------------------
class MissionGraph:
    """Adjacency view of all missions (id, parent, hospital) for one request."""

    def __init__(self, rows: Iterable[tuple]):
        self.parent: Dict[int, Optional[int]] = {}
        self.hospital: Dict[int, Optional[int]] = {}
        self.children: Dict[Optional[int], List[int]] = defaultdict(list)
        for mid, parent_id, hospital_id in rows:
            self.parent[mid] = parent_id
            self.hospital[mid] = hospital_id
            self.children[parent_id].append(mid)
        self._effective: Dict[int, Optional[int]] = {}

    @classmethod
    def load(cls, db: Session) -> "MissionGraph":
        rows = db.execute(
            select(Mission.id, Mission.parent_id, Mission.hospital_id).order_by(Mission.order, Mission.id)
        ).all()
        return cls(rows)

    def __contains__(self, mission_id: int) -> bool:
        return mission_id in self.parent

    def ancestors(self, mission_id: int) -> List[int]:
        """The mission itself followed by its parents up to the root."""
        chain, seen = [], set()
        current = mission_id
        while current is not None and current not in seen:
            seen.add(current)
            chain.append(current)
            current = self.parent.get(current)
        return chain

    def effective_hospital(self, mission_id: int) -> Optional[int]:
        """Own hospital, else the nearest ancestor's."""
        if mission_id not in self._effective:
            found = None
            for mid in self.ancestors(mission_id):
                if self.hospital.get(mid) is not None:
                    found = self.hospital[mid]
                    break
            self._effective[mission_id] = found
        return self._effective[mission_id]

    def in_scope(self, mission_id: int, scope: Optional[int]) -> bool:
        return scope is None or self.effective_hospital(mission_id) == scope

    def subtree(self, mission_id: int, scope: Optional[int] = None) -> List[int]:
        out, stack = [], [mission_id]
        while stack:
            mid = stack.pop()
            if not self.in_scope(mid, scope):
                continue
            out.append(mid)
            stack.extend(self.children.get(mid, []))
        return out

    def scoped_ids(self, scope: Optional[int]) -> Set[int]:
        return {mid for mid in self.parent if self.in_scope(mid, scope)}


# ----------------------------------------------------------------------
# Counting
# ----------------------------------------------------------------------
def _count(db: Session, *criteria) -> dict:
    rows = db.execute(
        select(Submission.status, func.count())
        .join(SubMission, SubMission.id == Submission.sub_mission_id)
        .where(*criteria)
        .group_by(Submission.status)
    ).all()
    counts = empty_counts()
    for status, n in rows:
        if status == STATUS_SUBMITTED:
            counts["pending"] += n
        elif status == STATUS_APPROVED:
            counts["approved"] += n
        elif status == STATUS_REJECTED:
            counts["rejected"] += n
        counts["total"] += n
    return counts


def sub_mission_counts(db: Session, sub_mission_id: int) -> dict:
    key = ("sub", sub_mission_id)
    cached = stats_cache.get(key)
    if cached is not None:
        return cached
    generation = stats_cache.generation()
    counts = _count(db, Submission.sub_mission_id == sub_mission_id)
    stats_cache.set(key, counts, generation)
    return counts


def mission_counts(db: Session, graph: MissionGraph, mission_id: int, scope: Optional[int] = None) -> dict:
    """Counts over the mission and every descendant mission within scope."""
    key = ("mission", mission_id, scope)
    cached = stats_cache.get(key)
    if cached is not None:
        return cached
    generation = stats_cache.generation()
    ids = graph.subtree(mission_id, scope)
    counts = _count(db, SubMission.mission_id.in_(sorted(ids))) if ids else empty_counts()
    stats_cache.set(key, counts, generation)
    return counts


def global_counts(db: Session, scope: Optional[int] = None) -> dict:
    key = ("global", scope)
    cached = stats_cache.get(key)
    if cached is not None:
        return cached
    generation = stats_cache.generation()
    if scope is None:
        counts = _count(db)
    else:
        ids = MissionGraph.load(db).scoped_ids(scope)
        counts = _count(db, SubMission.mission_id.in_(sorted(ids))) if ids else empty_counts()
    stats_cache.set(key, counts, generation)
    return counts


def invalidate_for_sub_mission(db: Session, sub_mission_id: int) -> None:
    mission_id = db.scalar(select(SubMission.mission_id).where(SubMission.id == sub_mission_id))
    chain = MissionGraph.load(db).ancestors(mission_id) if mission_id is not None else []
    stats_cache.invalidate(sub_mission_id, chain)
    logger.debug(f"[review] cache invalidated for sub-mission {sub_mission_id} (missions {chain})")


# ----------------------------------------------------------------------
# Dashboard reads
# ----------------------------------------------------------------------
def _sub_mission_totals(db: Session) -> Dict[int, int]:
    rows = db.execute(
        select(SubMission.mission_id, func.count()).group_by(SubMission.mission_id)
    ).all()
    return {mid: n for mid, n in rows}


def theme_mission_tree(db: Session, scope: Optional[int]) -> List[dict]:
    graph = MissionGraph.load(db)
    visible = graph.scoped_ids(scope)
    if not visible:
        return []

    missions = {
        m.id: m for m in db.scalars(select(Mission).where(Mission.id.in_(sorted(visible)))).all()
    }
    sub_totals = _sub_mission_totals(db)

    def node(mid: int) -> dict:
        m = missions[mid]
        return {
            "id": m.id,
            "title": m.title,
            "visibility": m.visibility,
            "hospital_id": m.hospital_id,
            "folder_id": m.folder_id,
            "order": m.order,
            "is_active": m.is_active,
            "period_status": period_status(m.start_date, m.end_date),
            "sub_mission_count": sub_totals.get(mid, 0),
            "stats": mission_counts(db, graph, mid, scope),
            "child_missions": [node(c) for c in graph.children.get(mid, []) if c in visible],
        }

    # a scoped child under an out-of-scope parent surfaces as a root
    roots = [mid for mid in visible if graph.parent[mid] is None or graph.parent[mid] not in visible]
    roots.sort(key=lambda mid: (missions[mid].order, mid))
    return [node(mid) for mid in roots]


def get_scoped_mission(db: Session, mission_id: int, scope: Optional[int]) -> Mission:
    mission = db.get(Mission, mission_id)
    if not mission or not MissionGraph.load(db).in_scope(mission_id, scope):
        raise NotFoundError("Mission not found")
    return mission


def sub_missions_with_stats(db: Session, mission_id: int, scope: Optional[int]) -> List[dict]:
    get_scoped_mission(db, mission_id, scope)
    subs = db.scalars(
        select(SubMission)
        .where(SubMission.mission_id == mission_id)
        .order_by(SubMission.order, SubMission.id)
    ).all()
    return [
        {
            "id": s.id,
            "title": s.title,
            "order": s.order,
            "is_active": s.is_active,
            "sequential_level": s.sequential_level,
            "require_review": s.require_review,
            "period_status": period_status(s.start_date, s.end_date),
            "stats": sub_mission_counts(db, s.id),
        }
        for s in subs
    ]


def list_submissions(
    db: Session,
    scope: Optional[int],
    sub_mission_id: Optional[int] = None,
    status: Optional[str] = None,
) -> List[dict]:
    if status and status != "all" and status not in SUBMISSION_STATUSES:
        raise ValidationError(f"Unknown status: {status}", field="status")

    graph = MissionGraph.load(db)
    q = (
        select(Submission, SubMission, Mission)
        .join(SubMission, SubMission.id == Submission.sub_mission_id)
        .join(Mission, Mission.id == SubMission.mission_id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
    )
    if scope is not None:
        ids = graph.scoped_ids(scope)
        if not ids:
            return []
        q = q.where(SubMission.mission_id.in_(sorted(ids)))
    if sub_mission_id is not None:
        sub = db.get(SubMission, sub_mission_id)
        if not sub or not graph.in_scope(sub.mission_id, scope):
            raise NotFoundError("Sub-mission not found")
        q = q.where(Submission.sub_mission_id == sub_mission_id)
    if status and status != "all":
        q = q.where(Submission.status == status)

    out = []
    for sm, sub, mission in db.execute(q).all():
        out.append({
            "id": sm.id,
            "user_id": sm.user_id,
            "sub_mission_id": sm.sub_mission_id,
            "slots": sm.slots or [],
            "status": sm.status,
            "is_locked": sm.is_locked,
            "reviewer_note": sm.reviewer_note,
            "reviewed_by": sm.reviewed_by,
            "reviewed_at": sm.reviewed_at,
            "submitted_at": sm.submitted_at,
            "updated_at": sm.updated_at,
            "sub_mission_title": sub.title,
            "mission_id": mission.id,
            "mission_title": mission.title,
            "hospital_id": graph.effective_hospital(mission.id),
        })
    return out
