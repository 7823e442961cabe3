"""
Assessment endpoints - scoring, storage and per-user history
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from src.config import settings
from src.database.connection import require_session_maker
from src.models.assessment import AssessmentInput, InvalidInput
from src.models.schemas import AssessmentPayload, HistoryEditPayload, HistoryEntryPayload
from src.services.auth import require_approved_user, user_id_from_claims
from src.services.history import (
    SessionEntry,
    clear_history,
    delete_session,
    entry_from_row,
    new_entry,
    push_session,
)
from src.services.prediction_service import PredictionService
from src.services.scoring import score
from src.utils.validators import validate_limit, validate_user_id

router = APIRouter()


def _build_input(payload: AssessmentPayload) -> AssessmentInput:
    try:
        return AssessmentInput.build(payload.age, payload.gender, payload.responses)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=e.message)


def _client_history(entries: Optional[List[HistoryEntryPayload]]) -> List[SessionEntry]:
    return [SessionEntry.from_dict(entry.model_dump()) for entry in entries or []]


@router.post("/scoreAssessment")
async def score_assessment(payload: AssessmentPayload):
    """
    Score an assessment without storing it.
    The new session is pushed onto the history sent by the client and the capped list is returned.
    """
    assessment = _build_input(payload)
    result = score(assessment)
    entry = new_entry(assessment, result)
    history = push_session(_client_history(payload.history), entry, settings.HISTORY_LIMIT)

    return {
        "status": "ok",
        "result": result.to_dict(),
        "session_id": entry.id,
        "history": [item.to_dict() for item in history],
    }


@router.post("/updateHistory")
async def update_history(payload: HistoryEditPayload):
    """
    Delete one session from the history sent by the client, or clear it.
    Returns the resulting list; nothing is stored.
    """
    if payload.clear:
        history = clear_history()
    elif payload.session_id:
        history = delete_session(_client_history(payload.history), payload.session_id)
    else:
        raise HTTPException(status_code=400, detail="Provide session_id or clear=true")

    return {
        "status": "ok",
        "history": [item.to_dict() for item in history],
    }


@router.post("/sendAssessment")
async def send_assessment(payload: AssessmentPayload, claims: dict = Depends(require_approved_user)):
    """Score an assessment and store it for the signed-in user"""
    user_id = validate_user_id(user_id_from_claims(claims))
    assessment = _build_input(payload)
    session_maker = require_session_maker()
    result = score(assessment)

    try:
        async with session_maker() as session:
            async with session.begin():
                prediction_id = await PredictionService.save_prediction(session, user_id, assessment, result)
    except Exception as e:
        import traceback
        error_msg = str(e)
        error_type = type(e).__name__
        print(f"Error in sendAssessment: {error_type}: {error_msg}")
        traceback.print_exc()
        return JSONResponse(
            status_code=500,
            content={"status": "error", "detail": error_msg, "error_type": error_type}
        )

    entry = new_entry(assessment, result, entry_id=prediction_id)
    history = push_session(_client_history(payload.history), entry, settings.HISTORY_LIMIT)
    return {
        "status": "ok",
        "id": prediction_id,
        "result": result.to_dict(),
        "history": [item.to_dict() for item in history],
    }


@router.get("/getPredictionHistory")
async def get_prediction_history(
    limit: int = Query(settings.HISTORY_LIMIT, description="Number of sessions to return"),
    claims: dict = Depends(require_approved_user),
):
    """Get the signed-in user's stored sessions, newest first"""
    user_id = validate_user_id(user_id_from_claims(claims))
    limit = validate_limit(limit)
    session_maker = require_session_maker()

    try:
        async with session_maker() as session:
            rows = await PredictionService.list_for_user(session, user_id, limit)
        return {
            "status": "ok",
            "history": [entry_from_row(row).to_dict() for row in rows],
        }
    except HTTPException:
        raise
    except Exception as e:
        import traceback
        error_msg = str(e)
        error_type = type(e).__name__
        print(f"Error in getPredictionHistory: {error_type}: {error_msg}")
        traceback.print_exc()
        return JSONResponse(
            status_code=500,
            content={"status": "error", "detail": error_msg, "error_type": error_type}
        )
