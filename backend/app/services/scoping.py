# backend/app/services/scoping.py
"""Hospital scoping for review reads and decisions."""
from __future__ import annotations

import logging
from typing import Optional, Union

from app.auth import CurrentUser
from app.errors import AuthorizationError, ValidationError

logger = logging.getLogger(__name__)

ALL_HOSPITALS = "all"


def resolve_hospital_scope(user: CurrentUser, requested: Union[str, int, None]) -> Optional[int]:
    """
    Return the hospital id a query must be limited to, or None for global.

    Superadmins get what they ask for ("all"/absent = global). Everyone else
    is pinned to their own hospital whatever they request.
    """
    if not user.is_superadmin:
        if user.hospital_id is None:
            raise AuthorizationError("No hospital is associated with this account")
        if requested not in (None, "", ALL_HOSPITALS) and str(requested) != str(user.hospital_id):
            logger.warning(
                f"[scope] user {user.id} asked for hospital {requested}; pinned to {user.hospital_id}"
            )
        return user.hospital_id

    if requested is None or requested == "" or requested == ALL_HOSPITALS:
        return None
    try:
        return int(requested)
    except (TypeError, ValueError):
        raise ValidationError("hospitalId must be a number or 'all'", field="hospitalId")
