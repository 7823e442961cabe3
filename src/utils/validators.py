"""
Validation utilities
"""
from typing import Optional
from uuid import UUID

from fastapi import HTTPException

from src.services.profile_service import APPROVAL_STATUSES


MAX_LIST_LIMIT = 100


def validate_user_id(user_id: Optional[str]) -> str:
    """
    Validate a Supabase auth user id

    Raises:
        HTTPException: If the id is missing or not a UUID
    """
    if not user_id:
        raise HTTPException(status_code=401, detail="Token has no subject")
    try:
        return str(UUID(str(user_id).strip()))
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid user id format")


def validate_status_filter(status: str) -> str:
    """
    Validate the admin profile filter

    Returns:
        "all" or one of the approval statuses
    """
    status = (status or "all").strip().lower()
    if status != "all" and status not in APPROVAL_STATUSES:
        raise HTTPException(
            status_code=400,
            detail="Invalid status. Must be 'all', 'pending', 'approved', or 'rejected'"
        )
    return status


def validate_limit(limit: int, maximum: int = MAX_LIST_LIMIT) -> int:
    if limit < 1 or limit > maximum:
        raise HTTPException(status_code=400, detail=f"Limit must be between 1 and {maximum}")
    return limit
