"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    StoredRecord,
)
from models.guest_blog_site import (
    GuestBlogSiteCategory,
    GuestBlogSiteStatus,
    TargetField,
    TARGET_FIELDS,
    TARGET_FIELDS_BY_KEY,
    GuestBlogSiteCreate,
    GuestBlogSiteResponse,
    GuestBlogSiteWithPrice,
    GuestBlogSiteListResponse,
)
from models.publisher import PublisherResponse
from models.client import ClientResponse
from models.bulk_upload import (
    ColumnMappingPair,
    TargetFieldResponse,
    ReplaceMappingsRequest,
    SetMappingRequest,
    MappingStateResponse,
    ParseUploadResponse,
    RowError,
    PreviewRow,
    PreviewRequest,
    BulkUploadPreview,
    CommitRequest,
    CommitReport,
)

__all__ = [
    # Base
    "BaseSchema",
    "StoredRecord",

    # Guest blog sites
    "GuestBlogSiteCategory",
    "GuestBlogSiteStatus",
    "TargetField",
    "TARGET_FIELDS",
    "TARGET_FIELDS_BY_KEY",
    "GuestBlogSiteCreate",
    "GuestBlogSiteResponse",
    "GuestBlogSiteWithPrice",
    "GuestBlogSiteListResponse",

    # Publishers / clients
    "PublisherResponse",
    "ClientResponse",

    # Bulk upload
    "ColumnMappingPair",
    "TargetFieldResponse",
    "ReplaceMappingsRequest",
    "SetMappingRequest",
    "MappingStateResponse",
    "ParseUploadResponse",
    "RowError",
    "PreviewRow",
    "PreviewRequest",
    "BulkUploadPreview",
    "CommitRequest",
    "CommitReport",
]
