"""
Session schemas.
"""

from pydantic import BaseModel, field_validator


class SessionRequest(BaseModel):
    """Schema for opening a session for a user id."""
    
    user_id: str

    @field_validator("user_id")
    @classmethod
    def strip_user_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("user_id must not be empty")
        return value


class SessionResponse(BaseModel):
    """Schema for session response."""
    
    access_token: str
    token_type: str = "bearer"
    user_id: str
