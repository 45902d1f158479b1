import logging
import re
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument

from gottago.deps import get_required_db
from gottago.models import RoleUpdate, serialize_doc
from gottago.security.auth import ROLES, require_admin, require_moderator, user_oid

logger = logging.getLogger(__name__)

router = APIRouter()

# never sent to clients
_PROJECTION = {"hashed_password": 0}


@router.get("/users", summary="List user profiles (moderator or admin)")
async def list_users(
    q: Optional[str] = Query(None, description="Search by email or name"),
    current_user: dict = Depends(require_moderator),
    database=Depends(get_required_db),
):
    cursor = database.users.find({}, projection=_PROJECTION).sort("created_at", -1)
    users: List[dict] = [serialize_doc(doc) async for doc in cursor]

    counts = {role: 0 for role in ROLES}
    for user in users:
        role = user.get("role", "user")
        counts[role] = counts.get(role, 0) + 1

    if q:
        pattern = re.compile(re.escape(q), re.IGNORECASE)
        users = [
            u for u in users
            if pattern.search(u.get("email") or "") or pattern.search(u.get("full_name") or "")
        ]

    return {
        "items": users,
        "count": len(users),
        "total": sum(counts.values()),
        "role_counts": counts,
        "viewer_role": current_user.get("role"),
    }


@router.patch("/users/{user_id}/role", summary="Change a user's role (admin only)")
async def update_user_role(
    user_id: str,
    payload: RoleUpdate,
    current_user: dict = Depends(require_admin),
    database=Depends(get_required_db),
):
    oid = user_oid(user_id)
    if oid == current_user["_id"]:
        raise HTTPException(status_code=400, detail="You cannot change your own role")

    updated = await database.users.find_one_and_update(
        {"_id": oid},
        {"$set": {"role": payload.role, "updated_at": datetime.now(timezone.utc)}},
        projection=_PROJECTION,
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("User %s set role of %s to %s", current_user.get("email"), user_id, payload.role)
    return serialize_doc(updated)
