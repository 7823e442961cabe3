"""
Session history - most recent screening sessions, newest first.

History is always passed in and returned explicitly; nothing here keeps state
between calls.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Sequence

from src.models.assessment import AssessmentInput, AssessmentResult


DEFAULT_HISTORY_LIMIT = 10


@dataclass(frozen=True)
class SessionEntry:
    """One past screening session"""
    id: str
    timestamp: str
    age: int
    gender: str
    total_score: int
    result: dict = field(hash=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "age": self.age,
            "gender": self.gender,
            "totalScore": self.total_score,
            "result": self.result,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionEntry":
        return cls(
            id=str(data["id"]),
            timestamp=str(data["timestamp"]),
            age=int(data["age"]),
            gender=str(data["gender"]),
            total_score=int(data.get("totalScore", data.get("total_score", 0))),
            result=dict(data.get("result") or {}),
        )


def new_entry(
    assessment: AssessmentInput,
    result: AssessmentResult,
    now: Optional[datetime] = None,
    entry_id: Optional[str] = None,
) -> SessionEntry:
    """Create a history entry for a freshly scored assessment"""
    now = now or datetime.now(timezone.utc)
    result_dict = result.to_dict()
    result_dict["timestamp"] = now.isoformat()
    return SessionEntry(
        id=entry_id or uuid.uuid4().hex,
        timestamp=now.isoformat(),
        age=assessment.age,
        gender=assessment.gender.value,
        total_score=result.total_score,
        result=result_dict,
    )


def push_session(
    history: Sequence[SessionEntry],
    entry: SessionEntry,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> List[SessionEntry]:
    """
    Put an entry at the front of the history

    Args:
        history: Existing entries, newest first
        entry: Entry to add
        limit: Maximum number of entries to keep; the oldest are evicted

    Returns:
        A new list; the input sequence is left untouched
    """
    if limit < 1:
        raise ValueError("History limit must be at least 1")
    return [entry, *history][:limit]


def delete_session(history: Sequence[SessionEntry], entry_id: str) -> List[SessionEntry]:
    return [entry for entry in history if entry.id != entry_id]


def clear_history() -> List[SessionEntry]:
    return []


def entry_from_row(row: Mapping[str, Any]) -> SessionEntry:
    """Convert a stored prediction record into a history entry"""
    created_at = row.get("created_at")
    if isinstance(created_at, datetime):
        timestamp = created_at.isoformat()
    else:
        timestamp = str(created_at) if created_at else ""

    result = row.get("prediction_result") or {}
    if not result:
        # Rows written without the full payload still carry the summary columns
        result = {
            "totalScore": row.get("total_score"),
            "riskPercentage": _as_float(row.get("risk_percentage")),
            "riskLevel": row.get("risk_level"),
            "confidence": _as_float(row.get("confidence")),
            "recommendation": row.get("recommendation"),
        }

    return SessionEntry(
        id=str(row["id"]),
        timestamp=timestamp,
        age=int(row["age"]),
        gender=str(row["gender"]),
        total_score=int(row["total_score"]),
        result=dict(result),
    )


def _as_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None
