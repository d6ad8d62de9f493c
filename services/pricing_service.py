"""
Client pricing for guest blog sites.

Displayed price = base price + base price × markup% / 100.
No rounding happens here; whole-number display is utils.price_rounding.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union
import structlog

from config import settings
from exceptions import ValidationError
from services.client_service import ClientService, get_client_service

logger = structlog.get_logger(__name__)

DEFAULT_MARKUP_PERCENTAGE = Decimal("25")

Number = Union[Decimal, int, float, str]


def _as_decimal(value: Number, name: str) -> Decimal:
    if isinstance(value, float):
        value = str(value)
    result = Decimal(value)
    if result < 0:
        raise ValidationError(
            message=f"{name} cannot be negative",
            code="NEGATIVE_PRICE_INPUT",
            details={name: str(value)}
        )
    return result


def calculate_displayed_price(
    base_price: Number,
    percentage: Optional[Number] = None,
) -> Decimal:
    """
    Price shown to a client for a site.

    Args:
        base_price: Publisher price, >= 0
        percentage: Client markup percentage, >= 0 (None means default 25)

    Returns:
        Exact displayed price

    Raises:
        ValidationError: Negative base price or percentage

    Examples:
        calculate_displayed_price(100, 25) → Decimal("125")
        calculate_displayed_price(80) → Decimal("100")
    """
    base = _as_decimal(base_price, "base_price")
    pct = DEFAULT_MARKUP_PERCENTAGE if percentage is None else _as_decimal(percentage, "percentage")
    return base + base * pct / Decimal(100)


def calculate_site_price(
    base_price: Number,
    percentage: Optional[Number] = None,
    override_price: Optional[Number] = None,
) -> Decimal:
    """
    Displayed price, unless a per-site override is set for the client.
    """
    if override_price is not None:
        return _as_decimal(override_price, "override_price")
    return calculate_displayed_price(base_price, percentage)


@dataclass(frozen=True)
class PricingContext:
    """Markup in effect for one upload. client_id None means default markup."""
    client_id: Optional[str] = None
    percentage: Decimal = DEFAULT_MARKUP_PERCENTAGE

    def displayed_price(self, base_price: Number) -> Decimal:
        return calculate_displayed_price(base_price, self.percentage)


def default_pricing_context() -> PricingContext:
    return PricingContext(client_id=None, percentage=Decimal(settings.default_markup_percentage))


class PricingService:
    """Resolves the markup that applies to a client."""

    def __init__(self, client_service: Optional[ClientService] = None):
        self.client_service = client_service or get_client_service()

    def get_pricing_context(self, client_id: Optional[str] = None) -> PricingContext:
        """
        Pricing context for a client.

        Args:
            client_id: Client UUID, or None for the default markup

        Returns:
            PricingContext with the client's percentage (default when unset)

        Raises:
            ClientNotFoundError: If client_id is given but doesn't exist
        """
        if not client_id:
            return default_pricing_context()

        client = self.client_service.get_by_id(client_id)
        percentage = (
            client.percentage
            if client.percentage is not None
            else Decimal(settings.default_markup_percentage)
        )

        logger.debug(
            "pricing_context_resolved",
            client_id=client_id,
            percentage=str(percentage)
        )

        return PricingContext(client_id=client_id, percentage=percentage)


# Singleton instance for convenience
_pricing_service: Optional[PricingService] = None

def get_pricing_service() -> PricingService:
    """Get or create PricingService instance."""
    global _pricing_service
    if _pricing_service is None:
        _pricing_service = PricingService()
    return _pricing_service
