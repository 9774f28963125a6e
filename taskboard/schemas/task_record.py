"""
Wire shapes for task records exchanged with the record store.

Nullable columns stay nullable here and timestamps travel as ISO-8601 text
(model_dump(mode="json")). Nothing outside the record-store boundary and the
mapping layer should handle these directly.
"""

from typing import Optional
from uuid import UUID
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class TaskRecordCreate(BaseModel):
    """Insert payload; the record store assigns id and timestamps."""
    
    user_id: str
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[datetime] = None


class TaskRecordUpdate(BaseModel):
    """Partial write. Only fields that were set are applied."""
    
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None

    model_config = ConfigDict(extra="forbid")


class TaskRecordRead(BaseModel):
    """A full row as returned by the record store."""
    
    id: UUID
    user_id: str
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    
    # This tells Pydantic to work with SQLAlchemy models
    model_config = ConfigDict(from_attributes=True)
