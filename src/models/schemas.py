"""
Pydantic models for request/response validation
"""
from typing import Any, List, Optional
from pydantic import BaseModel, Field


class HistoryEntryPayload(BaseModel):
    """One past session as held by the client"""
    id: str
    timestamp: str
    age: int
    gender: str
    totalScore: int
    result: dict = Field(default_factory=dict)


class AssessmentPayload(BaseModel):
    """
    Finalized questionnaire submission.

    Values are not typed here. AssessmentInput.build makes every value
    decision (InvalidInput -> 400); a string age such as "5" is rejected, not
    coerced.
    """
    age: Any
    gender: Any
    responses: List[Any]
    history: Optional[List[HistoryEntryPayload]] = None  # client-held history, newest first


class HistoryEditPayload(BaseModel):
    """Remove one session from the client-held history, or all of them"""
    history: List[HistoryEntryPayload] = Field(default_factory=list)
    session_id: Optional[str] = None
    clear: bool = False


class ApprovalPayload(BaseModel):
    """Admin decision on a user's access request"""
    status: str = Field(..., pattern="^(approved|rejected)$")
