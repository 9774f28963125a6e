"""
Profile Pydantic schemas.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class ProfileRead(BaseModel):
    """Schema for reading profile data (API response)."""
    
    id: UUID
    user_id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    
    model_config = ConfigDict(from_attributes=True)


class DisplayNameUpdate(BaseModel):
    """Schema for changing the display name."""
    
    display_name: str

    @field_validator("display_name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("display_name must not be empty")
        return value
