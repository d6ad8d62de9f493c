"""
Row validation for bulk uploads.

Applies the column mapping to one parsed row, coerces each field to its
type and collects every rule violation. Validation is exhaustive: all
fields are checked and row data never raises.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional
import structlog

from models.bulk_upload import RowError
from models.guest_blog_site import GuestBlogSiteCategory, GuestBlogSiteStatus
from parsers.upload_parser import ParsedRow
from services.column_mapping_service import ColumnMappingSet
from utils.url_utils import InvalidURLError, normalize_url

logger = structlog.get_logger(__name__)

# Publisher name or email → publisher id (None if unknown)
PublisherResolver = Callable[[str], Optional[str]]

VALID_CATEGORIES = {c.value for c in GuestBlogSiteCategory}
VALID_STATUSES = {s.value for s in GuestBlogSiteStatus}

DEFAULT_STATUS = GuestBlogSiteStatus.ACTIVE.value
DEFAULT_LANGUAGE = "en"

SCORE_MAX = 100
# Stored values must fit the database columns and keep price math finite
MAX_TRAFFIC = 10 ** 12
MAX_BASE_PRICE = Decimal("1000000000")

# (field key, short name, upper bound)
SCORE_FIELDS = (
    ("da", "DA", SCORE_MAX),
    ("dr", "DR", SCORE_MAX),
    ("ss", "SS", SCORE_MAX),
    ("ahrefs_traffic", "Traffic", MAX_TRAFFIC),
)


@dataclass
class TypedRowValues:
    """Field values after coercion. Fields that failed keep a safe default."""
    site_url: str = ""
    da: Optional[int] = None
    dr: Optional[int] = None
    ahrefs_traffic: Optional[int] = None
    ss: Optional[int] = None
    tat: str = ""
    category: str = ""
    status: str = DEFAULT_STATUS
    base_price: Optional[Decimal] = None
    country: str = ""
    publisher: str = ""
    publisher_id: Optional[str] = None
    site_language: str = DEFAULT_LANGUAGE


@dataclass
class RowValidationResult:
    row_index: int
    values: TypedRowValues
    errors: list[RowError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def parse_number(raw: str) -> Optional[Decimal]:
    """
    Parse numeric cell text.

    Tolerates surrounding whitespace, thousands separators and a leading
    "$". Returns None for anything that is not a finite number.

        "15,000,000" → Decimal("15000000")
        "$1,250.50"  → Decimal("1250.50")
        "abc"        → None
    """
    if raw is None:
        return None

    text = str(raw).strip().replace(",", "").replace(" ", "")
    if text.startswith("$"):
        text = text[1:]
    if not text:
        return None

    try:
        value = Decimal(text)
    except InvalidOperation:
        return None

    if not value.is_finite():
        return None
    return value


def validate_row(
    row: ParsedRow,
    mapping: ColumnMappingSet,
    resolve_publisher: PublisherResolver,
) -> RowValidationResult:
    """
    Validate one parsed row against the fixed field rules.

    Args:
        row: Parsed data row
        mapping: Active column mapping
        resolve_publisher: Lookup by publisher name or email

    Returns:
        RowValidationResult with typed values and all errors found
    """
    values = TypedRowValues()
    errors: list[RowError] = []

    def raw(field_key: str) -> str:
        return row.get(mapping.column_for(field_key)).strip()

    def fail(field_key: str, raw_value: Optional[str], message: str) -> None:
        errors.append(RowError(
            row_index=row.row_index,
            field=field_key,
            raw_value=raw_value,
            message=message
        ))

    # Site URL
    site_url = raw("site_url")
    if not site_url:
        fail("site_url", site_url, "Site URL is required")
    else:
        try:
            values.site_url = normalize_url(site_url)
        except InvalidURLError as e:
            values.site_url = site_url
            fail("site_url", site_url, f"Invalid URL format: {e}")

    # Scores and traffic (optional, checked when present)
    for field_key, name, upper in SCORE_FIELDS:
        text = raw(field_key)
        if not text:
            continue
        number = parse_number(text)
        if number is None:
            fail(field_key, text, f"{name} must be a number")
        elif upper == SCORE_MAX and not 0 <= number <= upper:
            fail(field_key, text, f"{name} must be between 0 and {upper}")
        elif number < 0:
            fail(field_key, text, f"{name} must be a non-negative number")
        elif number > upper:
            fail(field_key, text, f"{name} must be at most {upper:,}")
        else:
            setattr(values, field_key, int(number))

    # Turnaround time
    values.tat = raw("tat")
    if not values.tat:
        fail("tat", values.tat, "TAT is required")

    # Category
    category = raw("category")
    values.category = category.upper()
    if not category:
        fail("category", category, "Category is required")
    elif values.category not in VALID_CATEGORIES:
        fail("category", category, "Invalid category")

    # Status
    status = raw("status")
    if status:
        values.status = status.upper()
        if values.status not in VALID_STATUSES:
            fail("status", status, "Status must be ACTIVE or INACTIVE")

    # Base price
    price_text = raw("base_price")
    if not price_text:
        fail("base_price", price_text, "Base Price is required")
    else:
        price = parse_number(price_text)
        if price is None:
            fail("base_price", price_text, "Base Price must be a valid number")
        elif price > MAX_BASE_PRICE:
            fail("base_price", price_text, f"Base Price must be at most {MAX_BASE_PRICE:,}")
        else:
            values.base_price = price
            if price <= 0:
                fail("base_price", price_text, "Base Price must be greater than 0")

    # Country
    values.country = raw("country")
    if not values.country:
        fail("country", values.country, "Country is required")

    # Publisher (optional, must exist when given)
    values.publisher = raw("publisher")
    if values.publisher:
        values.publisher_id = resolve_publisher(values.publisher)
        if values.publisher_id is None:
            fail("publisher", values.publisher, f'Publisher "{values.publisher}" not found')

    # Language
    values.site_language = raw("site_language") or DEFAULT_LANGUAGE

    if errors:
        logger.debug(
            "row_validation_failed",
            row_index=row.row_index,
            fields=[e.field for e in errors]
        )

    return RowValidationResult(row_index=row.row_index, values=values, errors=errors)
