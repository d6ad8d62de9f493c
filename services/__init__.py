"""
Business logic services.

Each service handles one domain area.
"""

from services.column_mapping_service import (
    ColumnMappingSet,
    auto_map_columns,
    check_column_order,
    EXPECTED_COLUMN_ORDER,
)
from services.row_validator import (
    validate_row,
    parse_number,
    TypedRowValues,
    RowValidationResult,
)
from services.pricing_service import (
    PricingService,
    get_pricing_service,
    PricingContext,
    calculate_displayed_price,
    calculate_site_price,
    DEFAULT_MARKUP_PERCENTAGE,
)
from services.preview_service import build_preview, summarize_preview
from services.bulk_commit_service import BulkCommitService, get_bulk_commit_service
from services.upload_session_service import (
    UploadSession,
    UploadSessionStore,
    get_upload_session_store,
)
from services.publisher_service import (
    PublisherService,
    get_publisher_service,
    PublisherDirectory,
)
from services.guest_blog_site_service import GuestBlogSiteService, get_guest_blog_site_service
from services.client_service import ClientService, get_client_service
from services.template_service import build_csv_template

__all__ = [
    # Column mapping
    "ColumnMappingSet",
    "auto_map_columns",
    "check_column_order",
    "EXPECTED_COLUMN_ORDER",

    # Row validation
    "validate_row",
    "parse_number",
    "TypedRowValues",
    "RowValidationResult",

    # Pricing
    "PricingService",
    "get_pricing_service",
    "PricingContext",
    "calculate_displayed_price",
    "calculate_site_price",
    "DEFAULT_MARKUP_PERCENTAGE",

    # Preview / commit / sessions
    "build_preview",
    "summarize_preview",
    "BulkCommitService",
    "get_bulk_commit_service",
    "UploadSession",
    "UploadSessionStore",
    "get_upload_session_store",

    # Persistence
    "PublisherService",
    "get_publisher_service",
    "PublisherDirectory",
    "GuestBlogSiteService",
    "get_guest_blog_site_service",
    "ClientService",
    "get_client_service",
    "build_csv_template",
]
