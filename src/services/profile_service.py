"""
Profile service - user profiles, roles and the admin approval workflow
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.queries import execute_with_retry


APPROVAL_STATUSES = ("pending", "approved", "rejected")
PROFILE_COLUMNS = "id, email, full_name, created_at, approval_status, approved_by, approved_at"


def _profile_to_dict(row: Any) -> Dict[str, Any]:
    return {
        "id": str(row["id"]),
        "email": row["email"],
        "full_name": row["full_name"],
        "created_at": row["created_at"].isoformat() if row["created_at"] else None,
        "approval_status": row["approval_status"],
        "approved_by": str(row["approved_by"]) if row["approved_by"] else None,
        "approved_at": row["approved_at"].isoformat() if row["approved_at"] else None,
    }


class ProfileService:
    """Service for profile and role operations"""

    @staticmethod
    async def get_profile(session: AsyncSession, user_id: str) -> Optional[Dict[str, Any]]:
        result = await execute_with_retry(
            session,
            text(f"SELECT {PROFILE_COLUMNS} FROM profiles WHERE id = :uid").bindparams(uid=UUID(str(user_id)))
        )
        row = result.mappings().first()
        return _profile_to_dict(row) if row else None

    @staticmethod
    async def is_admin(session: AsyncSession, user_id: str) -> bool:
        result = await execute_with_retry(
            session,
            text("""
                SELECT EXISTS (
                    SELECT 1 FROM user_roles WHERE user_id = :uid AND role = 'admin'
                )
            """).bindparams(uid=UUID(str(user_id)))
        )
        return bool(result.scalar())

    @staticmethod
    async def list_profiles(session: AsyncSession, status: str = "all") -> List[Dict[str, Any]]:
        """
        List profiles, newest first

        Args:
            session: Database session
            status: "all" or one of APPROVAL_STATUSES
        """
        if status == "all":
            query = text(f"SELECT {PROFILE_COLUMNS} FROM profiles ORDER BY created_at DESC")
        else:
            query = text(f"""
                SELECT {PROFILE_COLUMNS} FROM profiles
                WHERE approval_status = :status
                ORDER BY created_at DESC
            """).bindparams(status=status)

        result = await execute_with_retry(session, query)
        return [_profile_to_dict(row) for row in result.mappings().all()]

    @staticmethod
    async def set_approval_status(
        session: AsyncSession,
        user_id: str,
        status: str,
        admin_id: str,
    ) -> Optional[Dict[str, Any]]:
        """
        Approve or reject a user

        Returns:
            Updated profile, or None if no profile exists for user_id
        """
        if status not in ("approved", "rejected"):
            raise ValueError(f"Invalid approval status: {status}")

        result = await execute_with_retry(
            session,
            text(f"""
                UPDATE profiles SET
                    approval_status = :status,
                    approved_by = :admin_id,
                    approved_at = now()
                WHERE id = :uid
                RETURNING {PROFILE_COLUMNS}
            """).bindparams(status=status, admin_id=UUID(str(admin_id)), uid=UUID(str(user_id)))
        )
        row = result.mappings().first()
        return _profile_to_dict(row) if row else None
