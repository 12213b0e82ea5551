# backend/app/auth.py
"""
Caller identity. Sessions are handled upstream; the gateway forwards the
authenticated user as X-User-Id / X-Member-Type / X-Hospital-Id headers.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException

from app.constants import (
    CONTENT_ADMIN_TYPES,
    MEMBER_SUPERADMIN,
    MEMBER_USER,
    REVIEW_ADMIN_TYPES,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    id: int
    member_type: str = MEMBER_USER
    hospital_id: Optional[int] = None

    @property
    def is_superadmin(self) -> bool:
        return self.member_type == MEMBER_SUPERADMIN

    @property
    def is_content_admin(self) -> bool:
        return self.member_type in CONTENT_ADMIN_TYPES


def get_current_user(
    x_user_id: Optional[int] = Header(None),
    x_member_type: Optional[str] = Header(None),
    x_hospital_id: Optional[int] = Header(None),
) -> CurrentUser:
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return CurrentUser(
        id=x_user_id,
        member_type=(x_member_type or MEMBER_USER).strip().lower(),
        hospital_id=x_hospital_id,
    )


def require_content_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Missions, folders, categories, sub-missions and action-type writes."""
    if user.member_type not in CONTENT_ADMIN_TYPES:
        logger.warning(f"[auth] user {user.id} ({user.member_type}) denied content admin access")
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def require_review_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if user.member_type not in REVIEW_ADMIN_TYPES:
        logger.warning(f"[auth] user {user.id} ({user.member_type}) denied review access")
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
