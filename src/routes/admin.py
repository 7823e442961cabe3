"""
Admin panel endpoints - user approval and prediction overview
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from src.database.connection import require_session_maker
from src.models.schemas import ApprovalPayload
from src.services.auth import require_admin, user_id_from_claims
from src.services.prediction_service import PredictionService
from src.services.profile_service import ProfileService
from src.utils.validators import validate_limit, validate_status_filter, validate_user_id

router = APIRouter(prefix="/admin")


def _error_response(endpoint: str, e: Exception) -> JSONResponse:
    import traceback
    error_msg = str(e)
    error_type = type(e).__name__
    print(f"Error in {endpoint}: {error_type}: {error_msg}")
    traceback.print_exc()
    return JSONResponse(
        status_code=500,
        content={"status": "error", "detail": error_msg, "error_type": error_type}
    )


@router.get("/profiles")
async def list_profiles(
    status: str = Query("all", description="all, pending, approved or rejected"),
    claims: dict = Depends(require_admin),
):
    """List user profiles, newest first, optionally filtered by approval status"""
    status = validate_status_filter(status)
    session_maker = require_session_maker()

    try:
        async with session_maker() as session:
            profiles = await ProfileService.list_profiles(session, status)
        return {"status": "ok", "filter": status, "profiles": profiles}
    except HTTPException:
        raise
    except Exception as e:
        return _error_response("listProfiles", e)


@router.post("/profiles/{user_id}/approval")
async def set_profile_approval(
    user_id: str,
    body: ApprovalPayload,
    claims: dict = Depends(require_admin),
):
    """Approve or reject a user's access"""
    target_id = validate_user_id(user_id)
    admin_id = validate_user_id(user_id_from_claims(claims))
    session_maker = require_session_maker()

    try:
        async with session_maker() as session:
            async with session.begin():
                profile = await ProfileService.set_approval_status(session, target_id, body.status, admin_id)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")

        print(f"User {target_id} {body.status} by admin {admin_id}")
        return {"status": "ok", "profile": profile}
    except HTTPException:
        raise
    except Exception as e:
        return _error_response("setProfileApproval", e)


@router.get("/predictions")
async def list_predictions(
    limit: int = Query(100, description="Maximum number of rows"),
    claims: dict = Depends(require_admin),
):
    """All stored predictions with the requesting user's email, newest first"""
    limit = validate_limit(limit)
    session_maker = require_session_maker()

    try:
        async with session_maker() as session:
            predictions = await PredictionService.list_all(session, limit)
        return {"status": "ok", "predictions": predictions}
    except HTTPException:
        raise
    except Exception as e:
        return _error_response("listPredictions", e)
