"""
Unit tests for client pricing.

Run: pytest tests/unit/test_pricing_service.py -v
"""

from decimal import Decimal

import pytest

from services.pricing_service import (
    PricingContext,
    PricingService,
    calculate_displayed_price,
    calculate_site_price,
    DEFAULT_MARKUP_PERCENTAGE,
)
from services.client_service import ClientService
from exceptions import ClientNotFoundError, ValidationError
from tests.factories import ClientFactory


class TestCalculateDisplayedPrice:
    """Tests for calculate_displayed_price()"""

    def test_default_markup_is_25_percent(self):
        assert DEFAULT_MARKUP_PERCENTAGE == Decimal("25")
        assert calculate_displayed_price(100) == Decimal("125")

    def test_client_percentage(self):
        assert calculate_displayed_price(Decimal("200"), Decimal("40")) == Decimal("280")

    def test_zero_percentage_returns_base(self):
        assert calculate_displayed_price(99, 0) == Decimal("99")

    def test_zero_base_price(self):
        assert calculate_displayed_price(0, 30) == Decimal("0")

    def test_no_rounding(self):
        """Exact value is kept; display rounding is separate."""
        assert calculate_displayed_price(Decimal("99.99"), 25) == Decimal("124.9875")

    @pytest.mark.parametrize("base", [0, 1, Decimal("10.5"), 1000])
    @pytest.mark.parametrize("pct", [0, 25, Decimal("12.5"), 100])
    def test_never_below_base(self, base, pct):
        assert calculate_displayed_price(base, pct) >= Decimal(base)

    def test_negative_base_raises(self):
        with pytest.raises(ValidationError):
            calculate_displayed_price(-1, 25)

    def test_negative_percentage_raises(self):
        with pytest.raises(ValidationError):
            calculate_displayed_price(100, -5)


class TestCalculateSitePrice:
    """Tests for calculate_site_price()"""

    def test_override_wins(self):
        assert calculate_site_price(100, 25, override_price=Decimal("90")) == Decimal("90")

    def test_without_override_uses_markup(self):
        assert calculate_site_price(100, 10) == Decimal("110")


class TestPricingService:
    """Tests for PricingService.get_pricing_context()"""

    def test_no_client_uses_default(self, mock_db, mock_supabase):
        service = PricingService(ClientService())

        context = service.get_pricing_context(None)

        assert context == PricingContext(client_id=None, percentage=Decimal("25"))

    def test_client_percentage(self, mock_db, mock_supabase):
        # Arrange
        mock_supabase.set_table_data("clients", [ClientFactory.create(id="c-1", percentage=40)])
        service = PricingService(ClientService())

        # Act
        context = service.get_pricing_context("c-1")

        # Assert
        assert context.client_id == "c-1"
        assert context.percentage == Decimal("40")
        assert context.displayed_price(100) == Decimal("140")

    def test_client_without_percentage_uses_default(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("clients", [ClientFactory.create(id="c-2", percentage=None)])
        service = PricingService(ClientService())

        context = service.get_pricing_context("c-2")

        assert context.percentage == Decimal("25")

    def test_unknown_client_raises(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("clients", [])
        service = PricingService(ClientService())

        with pytest.raises(ClientNotFoundError):
            service.get_pricing_context("missing")


class TestClientPriceOverrides:
    """Tests for ClientService.get_price_overrides()"""

    def test_overrides_for_client_and_sites(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("client_site_price_overrides", [
            {"client_id": "c-1", "site_id": "s-1", "override_price": "90"},
            {"client_id": "c-1", "site_id": "s-2", "override_price": "150.50"},
            {"client_id": "c-2", "site_id": "s-1", "override_price": "70"},
        ])
        service = ClientService()

        overrides = service.get_price_overrides("c-1", ["s-1"])

        assert overrides == {"s-1": Decimal("90")}

    def test_empty_site_list_skips_query(self, mock_db, mock_supabase):
        assert ClientService().get_price_overrides("c-1", []) == {}
