"""
Entry point re-exporting the FastAPI app for hosts that expect ``app:app``.

The application itself lives in src/main.py:
- src/models/ - domain types and Pydantic payloads
- src/services/ - scoring, history, persistence and auth
- src/routes/ - API endpoints organized by domain
- src/database/ - Database connection and utilities
- src/utils/ - Utility functions
"""

from src.main import app

from src.models.schemas import AssessmentPayload, ApprovalPayload

__all__ = ['app', 'AssessmentPayload', 'ApprovalPayload']
