"""
Profile endpoints for the signed-in user
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from src.database.connection import require_session_maker
from src.services.auth import get_current_user, user_id_from_claims
from src.services.profile_service import ProfileService
from src.utils.validators import validate_user_id

router = APIRouter()


@router.get("/profiles/me")
async def get_my_profile(claims: dict = Depends(get_current_user)):
    """
    Get the current user's profile and role.
    Used by the client to decide between the pending-approval screen, the app and the admin panel.
    """
    user_id = validate_user_id(user_id_from_claims(claims))
    session_maker = require_session_maker()

    try:
        async with session_maker() as session:
            profile = await ProfileService.get_profile(session, user_id)
            is_admin = await ProfileService.is_admin(session, user_id)

        return {
            "status": "ok",
            "profile": profile,
            "is_admin": is_admin,
            "is_approved": bool(profile and profile["approval_status"] == "approved"),
        }
    except HTTPException:
        raise
    except Exception as e:
        import traceback
        print(f"Error in get_my_profile: {type(e).__name__}: {e}")
        traceback.print_exc()
        return JSONResponse(
            status_code=500,
            content={"status": "error", "detail": str(e), "error_type": type(e).__name__}
        )
