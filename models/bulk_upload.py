"""
Bulk upload schemas.

Covers the four operator steps: parse → map → preview → commit.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from models.base import BaseSchema


# ===================
# COLUMN MAPPING
# ===================

class ColumnMappingPair(BaseSchema):
    """One spreadsheet column feeding one guest blog site field."""

    csv_column: str = Field(..., description="Header text as found in the file")
    guest_blog_site_field: str = Field(..., description="Target field key, e.g. 'da'")


class TargetFieldResponse(BaseSchema):
    """Target field descriptor shown in the mapping step."""

    key: str
    label: str
    required: bool


class ReplaceMappingsRequest(BaseModel):
    """Operator-confirmed mapping list."""

    mappings: list[ColumnMappingPair] = Field(default_factory=list)


class SetMappingRequest(BaseModel):
    """Single mapping edit. csv_column=None clears the field."""

    guest_blog_site_field: str
    csv_column: Optional[str] = None


class MappingStateResponse(BaseModel):
    """Current mapping of an upload session and its violations."""

    session_id: str
    mappings: list[ColumnMappingPair]
    errors: list[str] = Field(default_factory=list)
    is_valid: bool


# ===================
# PARSE STEP
# ===================

class ParseUploadResponse(BaseModel):
    """Result of uploading a file: session handle plus suggested mapping."""

    session_id: str
    filename: str
    total_rows: int
    available_columns: list[str]
    auto_mappings: list[ColumnMappingPair]
    guest_blog_site_columns: list[TargetFieldResponse]
    column_order_warnings: list[str] = Field(default_factory=list)
    client_percentage: Decimal


# ===================
# PREVIEW STEP
# ===================

class RowError(BaseSchema):
    """Validation failure for a single field of a single row."""

    row_index: int
    field: str
    raw_value: Optional[str] = None
    message: str


class PreviewRow(BaseSchema):
    """
    Validated, priced, not-yet-persisted candidate record.

    is_valid holds exactly when errors is empty.
    """

    row_index: int = Field(..., ge=1, description="1-based position among non-blank data rows")
    site_url: str = ""
    da: Optional[int] = None
    dr: Optional[int] = None
    ahrefs_traffic: Optional[int] = None
    ss: Optional[int] = None
    tat: str = ""
    category: str = ""
    status: str = "ACTIVE"
    base_price: Optional[Decimal] = None
    country: str = ""
    publisher: str = ""
    publisher_id: Optional[str] = None
    site_language: str = "en"
    displayed_price: Optional[Decimal] = None
    displayed_price_rounded: Optional[int] = None
    is_valid: bool
    errors: list[RowError] = Field(default_factory=list)


class PreviewRequest(BaseModel):
    """Optional client whose markup is used for displayed prices."""

    client_id: Optional[str] = None


class BulkUploadPreview(BaseModel):
    """Reviewable preview table with counts."""

    session_id: Optional[str] = None
    total_rows: int
    valid_rows: int
    invalid_rows: int
    rows: list[PreviewRow]
    column_mappings: list[ColumnMappingPair]
    available_columns: list[str]
    client_percentage: Decimal


# ===================
# COMMIT STEP
# ===================

class CommitRequest(BaseModel):
    """Rows the operator selected for saving."""

    selected_row_indexes: list[int] = Field(default_factory=list)


class CommitReport(BaseModel):
    """Per-batch save report. Partial success is normal."""

    saved: int = 0
    errors: list[str] = Field(default_factory=list)
    message: str = ""
