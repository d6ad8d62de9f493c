"""
Client schemas.
"""

from decimal import Decimal
from typing import Optional
from pydantic import Field

from models.base import BaseSchema, StoredRecord


class ClientResponse(BaseSchema, StoredRecord):
    """Client with its pricing markup."""

    name: str
    email: Optional[str] = None
    percentage: Optional[Decimal] = Field(
        None,
        ge=0,
        description="Markup percentage applied to base prices for this client"
    )
    is_active: bool = True
