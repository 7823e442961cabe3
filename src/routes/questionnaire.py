"""
Questionnaire definition endpoints
"""
from fastapi import APIRouter

from src.models.assessment import (
    MAX_AGE,
    MIN_AGE,
    QUESTIONNAIRE_ITEMS,
    Gender,
    QuestionnaireResponse,
)

router = APIRouter()


@router.get("/getQuestionnaire")
async def get_questionnaire():
    """
    Return everything the form wizard needs to collect an assessment:
    the ten questions in order, the answer scale and the supported demographics.
    """
    return {
        "status": "ok",
        "questions": [
            {"index": index, "id": f"q{index}", "text": text}
            for index, text in enumerate(QUESTIONNAIRE_ITEMS, start=1)
        ],
        "responses": [
            {"value": response.value, "score": response.score}
            for response in QuestionnaireResponse
        ],
        "age_range": {"min": MIN_AGE, "max": MAX_AGE},
        "genders": [gender.value for gender in Gender],
    }
