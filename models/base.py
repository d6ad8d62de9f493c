"""
Shared schema bases.

Request and response models derive from BaseSchema. Rows read back from
Supabase also mix in StoredRecord for the columns the database fills.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """Strings trimmed, assignments re-validated, buildable from row dicts."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


class StoredRecord(BaseModel):
    """Database-generated columns."""

    id: str = Field(..., description="Row UUID")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
