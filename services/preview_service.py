"""
Preview builder for bulk uploads.

Turns parsed rows into validated, priced PreviewRows the operator reviews
before choosing what to save. Pure: no persistence, same input gives the
same output.
"""

from typing import Iterable, Optional, Sequence
import structlog

from models.bulk_upload import BulkUploadPreview, PreviewRow
from parsers.upload_parser import ParsedRow
from services.column_mapping_service import ColumnMappingSet
from services.pricing_service import PricingContext
from services.row_validator import PublisherResolver, validate_row
from utils.price_rounding import round_display_price

logger = structlog.get_logger(__name__)


def build_preview(
    rows: Iterable[ParsedRow],
    mapping: ColumnMappingSet,
    pricing: PricingContext,
    resolve_publisher: PublisherResolver,
) -> list[PreviewRow]:
    """
    Validate and price every parsed row.

    Rows whose mapped cells are all empty are left out entirely. Every
    other row yields exactly one PreviewRow carrying its original
    row_index, in ascending row_index order.

    Args:
        rows: Parsed data rows
        mapping: Column mapping (should already be valid)
        pricing: Markup in effect
        resolve_publisher: Publisher name/email → id lookup

    Returns:
        PreviewRows; is_valid is True exactly when errors is empty
    """
    mapped_columns = mapping.mapped_columns()
    preview: list[PreviewRow] = []
    skipped = 0

    for row in sorted(rows, key=lambda r: r.row_index):
        if row.is_blank(mapped_columns):
            skipped += 1
            continue

        result = validate_row(row, mapping, resolve_publisher)
        values = result.values

        displayed_price = None
        displayed_price_rounded = None
        if values.base_price is not None and values.base_price >= 0:
            displayed_price = pricing.displayed_price(values.base_price)
            displayed_price_rounded = round_display_price(displayed_price)

        preview.append(PreviewRow(
            row_index=row.row_index,
            site_url=values.site_url,
            da=values.da,
            dr=values.dr,
            ahrefs_traffic=values.ahrefs_traffic,
            ss=values.ss,
            tat=values.tat,
            category=values.category,
            status=values.status,
            base_price=values.base_price,
            country=values.country,
            publisher=values.publisher,
            publisher_id=values.publisher_id,
            site_language=values.site_language,
            displayed_price=displayed_price,
            displayed_price_rounded=displayed_price_rounded,
            is_valid=result.is_valid,
            errors=result.errors,
        ))

    valid = sum(1 for r in preview if r.is_valid)
    logger.info(
        "bulk_preview_built",
        rows=len(preview),
        valid=valid,
        invalid=len(preview) - valid,
        skipped_blank=skipped,
        client_id=pricing.client_id
    )

    return preview


def summarize_preview(
    rows: Sequence[PreviewRow],
    mapping: ColumnMappingSet,
    pricing: PricingContext,
    session_id: Optional[str] = None,
) -> BulkUploadPreview:
    """Wrap preview rows with counts and the mapping that produced them."""
    valid = sum(1 for r in rows if r.is_valid)
    return BulkUploadPreview(
        session_id=session_id,
        total_rows=len(rows),
        valid_rows=valid,
        invalid_rows=len(rows) - valid,
        rows=list(rows),
        column_mappings=mapping.to_list(),
        available_columns=mapping.available_columns,
        client_percentage=pricing.percentage,
    )
