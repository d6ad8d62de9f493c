"""
Guest blog site schemas and the bulk upload target field catalog.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import BaseSchema, StoredRecord


class GuestBlogSiteCategory(str, Enum):
    """Site categories offered to clients."""
    BUSINESS_ENTREPRENEURSHIP = "BUSINESS_ENTREPRENEURSHIP"
    MARKETING_SEO = "MARKETING_SEO"
    TECHNOLOGY_GADGETS = "TECHNOLOGY_GADGETS"
    HEALTH_FITNESS = "HEALTH_FITNESS"
    LIFESTYLE_WELLNESS = "LIFESTYLE_WELLNESS"
    FINANCE_INVESTMENT = "FINANCE_INVESTMENT"
    EDUCATION_CAREER = "EDUCATION_CAREER"
    TRAVEL_TOURISM = "TRAVEL_TOURISM"
    FOOD_NUTRITION = "FOOD_NUTRITION"
    REAL_ESTATE_HOME_IMPROVEMENT = "REAL_ESTATE_HOME_IMPROVEMENT"
    AI_FUTURE_TECH = "AI_FUTURE_TECH"
    ECOMMERCE_STARTUPS = "ECOMMERCE_STARTUPS"
    SUSTAINABILITY_GREEN_LIVING = "SUSTAINABILITY_GREEN_LIVING"
    PARENTING_RELATIONSHIPS = "PARENTING_RELATIONSHIPS"
    FASHION_BEAUTY = "FASHION_BEAUTY"
    ENTERTAINMENT_MEDIA = "ENTERTAINMENT_MEDIA"


class GuestBlogSiteStatus(str, Enum):
    """Whether the site is currently offered."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


# ===================
# TARGET FIELD CATALOG
# ===================

@dataclass(frozen=True)
class TargetField:
    """
    A guest blog site field that a spreadsheet column can be mapped to.

    aliases are extra header spellings recognized by auto-matching, on top
    of the key and the label.
    """
    key: str
    label: str
    required: bool
    aliases: tuple[str, ...] = field(default_factory=tuple)


TARGET_FIELDS: tuple[TargetField, ...] = (
    TargetField("site_url", "Site URL", True, ("url", "website", "site", "domain")),
    TargetField("da", "Domain Authority (DA)", False, ("da", "domain authority", "moz da")),
    TargetField("dr", "Domain Rating (DR)", False, ("dr", "domain rating", "ahrefs dr")),
    TargetField("ahrefs_traffic", "Ahrefs Traffic", False, ("traffic", "organic traffic", "monthly traffic")),
    TargetField("ss", "Spam Score (SS)", False, ("ss", "spam score")),
    TargetField("tat", "Turnaround Time (TAT)", True, ("tat", "turnaround time", "turnaround")),
    TargetField("category", "Category", True, ("niche",)),
    TargetField("status", "Status", False, ()),
    TargetField("base_price", "Base Price", True, ("price", "cost")),
    TargetField("country", "Country", True, ("geo",)),
    TargetField("publisher", "Publisher", False, ("publisher email", "publisher name")),
    TargetField("site_language", "Site Language", True, ("language", "lang")),
)

TARGET_FIELDS_BY_KEY: dict[str, TargetField] = {f.key: f for f in TARGET_FIELDS}


# ===================
# API SCHEMAS
# ===================

class GuestBlogSiteCreate(BaseSchema):
    """
    Fully-typed guest blog site payload handed to persistence.

    Built from a validated preview row.
    """

    site_url: str = Field(..., min_length=4, max_length=2048)
    da: Optional[int] = Field(None, ge=0, le=100, description="Domain Authority")
    dr: Optional[int] = Field(None, ge=0, le=100, description="Domain Rating")
    ahrefs_traffic: Optional[int] = Field(None, ge=0, description="Monthly organic traffic")
    ss: Optional[int] = Field(None, ge=0, le=100, description="Spam score")
    tat: str = Field(..., min_length=1, description="Turnaround time, free text")
    category: GuestBlogSiteCategory
    status: GuestBlogSiteStatus = GuestBlogSiteStatus.ACTIVE
    base_price: Decimal = Field(..., gt=0)
    country: str = Field(..., min_length=1)
    publisher_id: Optional[str] = None
    site_language: str = Field("en", min_length=1)


class GuestBlogSiteResponse(BaseSchema, StoredRecord):
    """Guest blog site as stored."""

    site_url: str
    da: Optional[int] = None
    dr: Optional[int] = None
    ahrefs_traffic: Optional[int] = None
    ss: Optional[int] = None
    tat: str
    category: GuestBlogSiteCategory
    status: GuestBlogSiteStatus
    base_price: Decimal
    country: str
    publisher_id: Optional[str] = None
    site_language: str = "en"


class GuestBlogSiteWithPrice(GuestBlogSiteResponse):
    """Guest blog site with the price shown to a client."""

    displayed_price: Decimal = Field(..., description="Base price plus client markup")
    displayed_price_rounded: int = Field(..., description="Display-only whole number price")
    markup_percentage: Decimal
    is_override: bool = Field(False, description="Client-specific override price in effect")


class GuestBlogSiteListResponse(BaseSchema):
    """Paginated list of guest blog sites."""

    data: list[GuestBlogSiteWithPrice]
    total: int
    page: int
    page_size: int
    total_pages: int
