"""
Prediction service - stores and reads scored assessments
"""
import json
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.queries import execute_with_retry
from src.models.assessment import AssessmentInput, AssessmentResult


RESPONSE_COLUMNS = tuple(f"q{i}" for i in range(1, 11))

PREDICTION_COLUMNS = """
    pr.id, pr.user_id, pr.age, pr.gender,
    pr.q1, pr.q2, pr.q3, pr.q4, pr.q5, pr.q6, pr.q7, pr.q8, pr.q9, pr.q10,
    pr.total_score, pr.risk_level, pr.confidence, pr.risk_percentage,
    pr.recommendation, pr.prediction_result, pr.created_at
"""


def build_record(user_id: str, assessment: AssessmentInput, result: AssessmentResult) -> Dict[str, Any]:
    """
    Flatten an assessment and its result into a prediction_results row

    Args:
        user_id: Supabase auth user id of the submitter
        assessment: Scored input
        result: Scoring output

    Returns:
        Column name -> value mapping
    """
    record: Dict[str, Any] = {
        "user_id": str(user_id),
        "age": assessment.age,
        "gender": assessment.gender.value,
    }
    for column, response in zip(RESPONSE_COLUMNS, assessment.responses):
        record[column] = response.value
    record.update({
        "total_score": result.total_score,
        "risk_level": result.risk_level.value,
        "confidence": result.confidence,
        "risk_percentage": result.risk_percentage,
        "recommendation": result.recommendation,
        "prediction_result": result.to_dict(),
    })
    return record


def _row_to_dict(row: Any) -> Dict[str, Any]:
    data = dict(row)
    for key in ("id", "user_id"):
        if data.get(key) is not None:
            data[key] = str(data[key])
    for key in ("confidence", "risk_percentage"):
        if data.get(key) is not None:
            data[key] = float(data[key])
    if isinstance(data.get("prediction_result"), str):
        data["prediction_result"] = json.loads(data["prediction_result"])
    return data


class PredictionService:
    """Service for prediction_results operations"""

    @staticmethod
    async def save_prediction(
        session: AsyncSession,
        user_id: str,
        assessment: AssessmentInput,
        result: AssessmentResult,
    ) -> str:
        """
        Insert a scored assessment

        Returns:
            New row id (UUID as string)
        """
        record = build_record(user_id, assessment, result)
        params = dict(record)
        params["user_id"] = UUID(record["user_id"])
        params["prediction_result"] = json.dumps(record["prediction_result"])

        columns = ", ".join(record.keys())
        placeholders = ", ".join(
            "CAST(:prediction_result AS JSONB)" if key == "prediction_result" else f":{key}"
            for key in record.keys()
        )
        result_proxy = await execute_with_retry(
            session,
            text(f"""
                INSERT INTO prediction_results ({columns})
                VALUES ({placeholders})
                RETURNING id
            """).bindparams(**params)
        )

        row = result_proxy.first() if result_proxy is not None else None
        if row is None:
            raise RuntimeError("Failed to store prediction result")
        return str(row[0])

    @staticmethod
    async def list_for_user(session: AsyncSession, user_id: str, limit: int) -> List[Dict[str, Any]]:
        """Get a user's stored predictions, newest first"""
        result = await execute_with_retry(
            session,
            text(f"""
                SELECT {PREDICTION_COLUMNS}
                FROM prediction_results pr
                WHERE pr.user_id = :uid
                ORDER BY pr.created_at DESC
                LIMIT :limit
            """).bindparams(uid=UUID(str(user_id)), limit=limit)
        )
        return [_row_to_dict(row) for row in result.mappings().all()]

    @staticmethod
    async def list_all(session: AsyncSession, limit: int) -> List[Dict[str, Any]]:
        """
        Get predictions from every user for the admin panel, newest first.
        Requester email/full_name come from profiles; rows without a profile show "Unknown".
        """
        result = await execute_with_retry(
            session,
            text(f"""
                SELECT {PREDICTION_COLUMNS},
                       COALESCE(p.email, 'Unknown') AS email,
                       p.full_name
                FROM prediction_results pr
                LEFT JOIN profiles p ON p.id = pr.user_id
                ORDER BY pr.created_at DESC
                LIMIT :limit
            """).bindparams(limit=limit)
        )

        predictions = []
        for row in result.mappings().all():
            data = _row_to_dict(row)
            if data.get("created_at") is not None:
                data["created_at"] = data["created_at"].isoformat()
            data["profiles"] = {"email": data.pop("email"), "full_name": data.pop("full_name")}
            predictions.append(data)
        return predictions
