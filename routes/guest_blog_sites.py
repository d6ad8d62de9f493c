"""
Guest blog site API routes.

Bulk upload flow (one operator session at a time):
    POST   /bulk-upload/parse                     → session + suggested mapping
    PUT    /bulk-upload/sessions/{id}/mappings    → replace mapping
    PATCH  /bulk-upload/sessions/{id}/mappings    → edit one field
    POST   /bulk-upload/sessions/{id}/preview     → validated, priced rows
    POST   /bulk-upload/sessions/{id}/commit      → save selected rows
    DELETE /bulk-upload/sessions/{id}             → cancel

Plus the CSV template download and site reads with client pricing.
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse, Response
import structlog

from config import settings
from exceptions import AppError, FileTooLargeError
from models.bulk_upload import (
    BulkUploadPreview,
    CommitReport,
    CommitRequest,
    MappingStateResponse,
    ParseUploadResponse,
    PreviewRequest,
    ReplaceMappingsRequest,
    SetMappingRequest,
    TargetFieldResponse,
)
from models.guest_blog_site import (
    TARGET_FIELDS,
    GuestBlogSiteCategory,
    GuestBlogSiteListResponse,
    GuestBlogSiteResponse,
    GuestBlogSiteStatus,
    GuestBlogSiteWithPrice,
)
from parsers.upload_parser import parse_upload
from services.bulk_commit_service import get_bulk_commit_service
from services.client_service import get_client_service
from services.column_mapping_service import (
    ColumnMappingSet,
    auto_map_columns,
    check_column_order,
)
from services.guest_blog_site_service import get_guest_blog_site_service
from services.preview_service import build_preview, summarize_preview
from services.pricing_service import PricingContext, calculate_site_price, get_pricing_service
from services.publisher_service import get_publisher_service
from services.template_service import TEMPLATE_FILENAME, build_csv_template
from services.upload_session_service import UploadSession, get_upload_session_store
from utils.price_rounding import round_display_price

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


def _mapping_state(session: UploadSession) -> MappingStateResponse:
    errors = session.mapping.validate()
    return MappingStateResponse(
        session_id=session.session_id,
        mappings=session.mapping.to_list(),
        errors=errors,
        is_valid=not errors
    )


def _with_price(
    site: GuestBlogSiteResponse,
    pricing: PricingContext,
    override_price: Optional[Decimal] = None
) -> GuestBlogSiteWithPrice:
    displayed = calculate_site_price(site.base_price, pricing.percentage, override_price)
    return GuestBlogSiteWithPrice(
        **site.model_dump(),
        displayed_price=displayed,
        displayed_price_rounded=round_display_price(displayed),
        markup_percentage=pricing.percentage,
        is_override=override_price is not None
    )


# ===================
# BULK UPLOAD
# ===================

@router.get("/bulk-upload/template")
async def download_template():
    """Download the CSV template (header row plus sample sites)."""
    try:
        content = build_csv_template()
        logger.info("bulk_upload_template_downloaded")
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{TEMPLATE_FILENAME}"'}
        )
    except Exception as e:
        return handle_error(e)


@router.post("/bulk-upload/parse", response_model=ParseUploadResponse)
async def parse_bulk_upload(
    file: UploadFile = File(..., description="CSV or Excel file (.csv, .xls, .xlsx)"),
    client_id: Optional[str] = Form(None, description="Client whose markup is previewed")
):
    """
    Upload a spreadsheet and start a bulk upload session.

    Parses the file, suggests a column mapping and keeps everything in a
    session for the following steps. Nothing is saved.

    Raises:
        400: Unsupported file type
        413: File larger than the upload limit
        422: File could not be parsed
        404: Client not found
    """
    logger.info(
        "bulk_upload_parse_started",
        filename=file.filename,
        content_type=file.content_type,
        client_id=client_id
    )

    try:
        content = await file.read()
        if len(content) > settings.max_upload_size_bytes:
            raise FileTooLargeError(len(content), settings.max_upload_size_bytes)

        parsed = parse_upload(content, file.filename or "", settings.upload_extensions)
        pricing = get_pricing_service().get_pricing_context(client_id)

        suggested = auto_map_columns(parsed.headers)
        mapping = ColumnMappingSet.from_pairs(parsed.headers, suggested)

        session = get_upload_session_store().create(parsed, mapping, pricing)

        return ParseUploadResponse(
            session_id=session.session_id,
            filename=session.filename,
            total_rows=parsed.total_rows,
            available_columns=parsed.headers,
            auto_mappings=suggested,
            guest_blog_site_columns=[
                TargetFieldResponse(key=f.key, label=f.label, required=f.required)
                for f in TARGET_FIELDS
            ],
            column_order_warnings=check_column_order(parsed.headers),
            client_percentage=pricing.percentage
        )

    except Exception as e:
        return handle_error(e)


@router.put("/bulk-upload/sessions/{session_id}/mappings", response_model=MappingStateResponse)
async def replace_mappings(session_id: str, data: ReplaceMappingsRequest):
    """
    Replace the session's column mapping.

    Mapping violations (unmapped required fields, shared columns) are
    returned in the body, not raised; the preview step enforces them.

    Raises:
        404: Session not found or expired
        422: Unknown field or column not in the file
    """
    try:
        session = get_upload_session_store().get(session_id)
        session.replace_mapping(
            ColumnMappingSet.from_pairs(session.parsed.headers, data.mappings)
        )

        logger.info(
            "bulk_upload_mappings_replaced",
            session_id=session_id,
            mapped=len(session.mapping)
        )

        return _mapping_state(session)

    except Exception as e:
        return handle_error(e)


@router.patch("/bulk-upload/sessions/{session_id}/mappings", response_model=MappingStateResponse)
async def set_mapping(session_id: str, data: SetMappingRequest):
    """
    Point one field at a column (csv_column=null clears it).

    A column already used by another field moves to this field.
    """
    try:
        session = get_upload_session_store().get(session_id)
        session.set_mapping(data.guest_blog_site_field, data.csv_column)
        return _mapping_state(session)

    except Exception as e:
        return handle_error(e)


@router.post("/bulk-upload/sessions/{session_id}/preview", response_model=BulkUploadPreview)
async def preview_bulk_upload(session_id: str, data: Optional[PreviewRequest] = None):
    """
    Validate and price every row with the current mapping.

    Passing client_id switches the markup used for displayed prices.

    Raises:
        404: Session or client not found
        422: Column mapping invalid (all violations listed)
    """
    try:
        session = get_upload_session_store().get(session_id)

        if data is not None and data.client_id is not None:
            session.set_pricing(get_pricing_service().get_pricing_context(data.client_id))

        session.mapping.ensure_valid()

        directory = get_publisher_service().build_directory()
        rows = build_preview(session.parsed.rows, session.mapping, session.pricing, directory)
        session.preview = rows

        return summarize_preview(rows, session.mapping, session.pricing, session_id=session_id)

    except Exception as e:
        return handle_error(e)


@router.post("/bulk-upload/sessions/{session_id}/commit", response_model=CommitReport)
async def commit_bulk_upload(session_id: str, data: CommitRequest):
    """
    Save the selected valid rows of the current preview.

    Partial success is normal: failed rows are listed in errors. The
    session is closed afterwards.

    Raises:
        404: Session not found or expired
        409: No preview generated for the current mapping
    """
    try:
        store = get_upload_session_store()
        session = store.get(session_id)
        rows = session.require_preview()

        report = get_bulk_commit_service().commit(rows, data.selected_row_indexes)
        store.discard(session_id)

        return report

    except Exception as e:
        return handle_error(e)


@router.delete("/bulk-upload/sessions/{session_id}", status_code=204)
async def cancel_bulk_upload(session_id: str):
    """Cancel an upload: drops parsed rows, mapping and preview."""
    try:
        store = get_upload_session_store()
        store.get(session_id)
        store.discard(session_id)
        return None  # 204 No Content

    except Exception as e:
        return handle_error(e)


# ===================
# READS
# ===================

@router.get("", response_model=GuestBlogSiteListResponse)
async def list_guest_blog_sites(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    category: Optional[GuestBlogSiteCategory] = Query(None, description="Filter by category"),
    status: Optional[GuestBlogSiteStatus] = Query(None, description="Filter by status"),
    client_id: Optional[str] = Query(None, description="Price for this client")
):
    """
    List guest blog sites with the displayed price for a client.

    Without client_id the default markup applies.
    """
    try:
        pricing = get_pricing_service().get_pricing_context(client_id)
        sites, total = get_guest_blog_site_service().list_sites(
            page=page,
            page_size=page_size,
            category=category,
            status=status
        )

        overrides = {}
        if client_id:
            overrides = get_client_service().get_price_overrides(
                client_id, [site.id for site in sites]
            )

        total_pages = (total + page_size - 1) // page_size

        return GuestBlogSiteListResponse(
            data=[_with_price(site, pricing, overrides.get(site.id)) for site in sites],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages
        )

    except Exception as e:
        return handle_error(e)


@router.get("/{site_id}", response_model=GuestBlogSiteWithPrice)
async def get_guest_blog_site(
    site_id: str,
    client_id: Optional[str] = Query(None, description="Price for this client")
):
    """
    Get a single guest blog site.

    Raises:
        404: Site or client not found
    """
    try:
        pricing = get_pricing_service().get_pricing_context(client_id)
        site = get_guest_blog_site_service().get_by_id(site_id)

        override = None
        if client_id:
            override = get_client_service().get_price_overrides(client_id, [site.id]).get(site.id)

        return _with_price(site, pricing, override)

    except Exception as e:
        return handle_error(e)
