"""
slackstats.api.routes.admin — Administrative endpoints (JWT‑protected)
=======================================================================

Normal operation never deletes a member row; removing one (e.g. a
deactivated account) is an explicit admin action.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from slackstats.api.deps import get_current_admin, get_store
from slackstats.errors import NotFoundError, UnavailableError
from slackstats.services.member_store import MemberStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.delete("/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(
    member_id: int,
    admin: dict = Depends(get_current_admin),
    store: MemberStore = Depends(get_store),
):
    try:
        store.delete(member_id)
    except NotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc))
    except UnavailableError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))
    logger.info("Admin %s deleted member id=%d", admin.get("sub"), member_id)
