"""
Session Context Schema for Portal Operations

Identifies the signed-in user an operation runs on behalf of.
"""

from pydantic import BaseModel, Field
from typing import Any, Mapping, Optional


class SessionContext(BaseModel):
    """Session context for portal operation execution"""

    user_id: Optional[str] = Field(None, description="Authenticated user id (token subject)")
    email: Optional[str] = Field(None, description="Authenticated user email")

    @classmethod
    def from_claims(cls, claims: Optional[Mapping[str, Any]]) -> "SessionContext":
        """Build a context from decoded JWT claims."""
        if not claims:
            return cls()
        user_id = claims.get("sub") or claims.get("user_id") or claims.get("uid")
        email = claims.get("email")
        return cls(
            user_id=str(user_id) if user_id else None,
            email=str(email) if email else None,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "u8a1Zx3kq",
                "email": "admin@bpm.pr.gov.br",
            }
        }
