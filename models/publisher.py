"""
Publisher schemas.

Publishers own guest blog sites; bulk upload rows reference them by
name or email.
"""

from typing import Optional
from pydantic import Field

from models.base import BaseSchema, StoredRecord


class PublisherResponse(BaseSchema, StoredRecord):
    """Publisher as stored (only the fields bulk upload needs)."""

    name: str = Field(..., description="Publisher display name")
    email: Optional[str] = Field(None, description="Publisher contact email")
    is_active: bool = True
