"""
Health check endpoints
"""
from fastapi import APIRouter

from src.database.connection import is_initialized
from src.services.scoring import score_responses

router = APIRouter()


@router.get("/healthz")
async def healthcheck():
    """Health check endpoint - reports database configuration and runs one scoring pass"""
    db_status = "ok" if is_initialized() else "not_configured"
    try:
        score_responses(5, "F", ["sometimes"] * 10)
        scoring_status = "ok"
    except Exception as e:
        print(f"Scoring self-check failed: {type(e).__name__}: {e}")
        scoring_status = "error"
    return {"status": "ok", "database": db_status, "scoring": scoring_status}
