"""
Unit tests for row validation.

Run: pytest tests/unit/test_row_validator.py -v
"""

from decimal import Decimal

import pytest

from services.row_validator import validate_row, parse_number
from services.column_mapping_service import ColumnMappingSet, auto_map_columns
from tests.factories import ParsedRowFactory

PUBLISHERS = {"editor@techcrunch.com": "pub-1", "acme media": "pub-3"}


def resolve(value: str):
    return PUBLISHERS.get(value.lower())


@pytest.fixture
def mapping() -> ColumnMappingSet:
    headers = ParsedRowFactory.headers()
    return ColumnMappingSet.from_pairs(headers, auto_map_columns(headers))


def _fields(result) -> list[str]:
    return [e.field for e in result.errors]


class TestParseNumber:
    """Tests for parse_number()"""

    @pytest.mark.parametrize("raw,expected", [
        ("42", Decimal("42")),
        (" 42 ", Decimal("42")),
        ("15,000,000", Decimal("15000000")),
        ("$1,250.50", Decimal("1250.50")),
        ("-3", Decimal("-3")),
    ])
    def test_numbers(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "12abc", "NaN", "Infinity"])
    def test_not_numbers(self, raw):
        assert parse_number(raw) is None


class TestValidateRowValid:
    """Rows that pass every rule."""

    def test_valid_row_typed_values(self, mapping):
        """Should coerce every field and report no errors."""
        # Arrange
        row = ParsedRowFactory.create(
            1,
            **{"Site URL": "TechCrunch.com", "Traffic": "15,000,000", "Publisher Email": "Editor@TechCrunch.com"}
        )

        # Act
        result = validate_row(row, mapping, resolve)

        # Assert
        assert result.errors == []
        assert result.is_valid is True
        values = result.values
        assert values.site_url == "https://techcrunch.com"
        assert values.da == 50
        assert values.ahrefs_traffic == 15000000
        assert values.base_price == Decimal("100")
        assert values.publisher_id == "pub-1"
        assert values.category == "TECHNOLOGY_GADGETS"

    def test_enum_values_case_insensitive(self, mapping):
        row = ParsedRowFactory.create(1, Category="health_fitness", Status="inactive")

        result = validate_row(row, mapping, resolve)

        assert result.is_valid
        assert result.values.category == "HEALTH_FITNESS"
        assert result.values.status == "INACTIVE"

    def test_blank_optional_fields_use_defaults(self, mapping):
        """Blank status → ACTIVE, blank language → en, blank scores → None."""
        row = ParsedRowFactory.create(1, Status="", Language="", DA="", DR="", SS="", Traffic="")

        result = validate_row(row, mapping, resolve)

        assert result.is_valid
        assert result.values.status == "ACTIVE"
        assert result.values.site_language == "en"
        assert result.values.da is None
        assert result.values.ahrefs_traffic is None

    def test_range_bounds_inclusive(self, mapping):
        row = ParsedRowFactory.create(1, DA="0", DR="100", SS="100", Traffic="0")

        result = validate_row(row, mapping, resolve)

        assert result.is_valid
        assert (result.values.da, result.values.dr, result.values.ss) == (0, 100, 100)

    def test_publisher_by_name(self, mapping):
        row = ParsedRowFactory.create(1, **{"Publisher Email": "ACME Media"})

        result = validate_row(row, mapping, resolve)

        assert result.values.publisher_id == "pub-3"


class TestValidateRowErrors:
    """Rows that break rules."""

    def test_non_numeric_da_reports_raw_value(self, mapping):
        """Coercion failures keep the original text for the operator."""
        row = ParsedRowFactory.create(1, DA="abc")

        result = validate_row(row, mapping, resolve)

        assert result.is_valid is False
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.field == "da"
        assert error.raw_value == "abc"
        assert error.row_index == 1
        assert result.values.da is None

    @pytest.mark.parametrize("header,value,field", [
        ("DA", "101", "da"),
        ("DR", "-1", "dr"),
        ("SS", "150", "ss"),
        ("Traffic", "-5", "ahrefs_traffic"),
    ])
    def test_out_of_range(self, mapping, header, value, field):
        row = ParsedRowFactory.create(1, **{header: value})

        result = validate_row(row, mapping, resolve)

        assert _fields(result) == [field]

    def test_missing_required_fields(self, mapping):
        row = ParsedRowFactory.create(
            4, **{"Site URL": "", "TAT": "", "Category": "", "Base Price": "", "Country": ""}
        )

        result = validate_row(row, mapping, resolve)

        assert _fields(result) == ["site_url", "tat", "category", "base_price", "country"]
        assert all(e.row_index == 4 for e in result.errors)

    def test_invalid_url(self, mapping):
        row = ParsedRowFactory.create(1, **{"Site URL": "localhost"})

        result = validate_row(row, mapping, resolve)

        assert _fields(result) == ["site_url"]
        assert result.errors[0].message.startswith("Invalid URL format")

    def test_invalid_category_keeps_upper_value(self, mapping):
        row = ParsedRowFactory.create(1, Category="gardening")

        result = validate_row(row, mapping, resolve)

        assert _fields(result) == ["category"]
        assert result.values.category == "GARDENING"

    def test_invalid_status(self, mapping):
        row = ParsedRowFactory.create(1, Status="paused")

        result = validate_row(row, mapping, resolve)

        assert result.errors[0].message == "Status must be ACTIVE or INACTIVE"

    @pytest.mark.parametrize("price", ["0", "-10"])
    def test_base_price_must_be_positive(self, mapping, price):
        row = ParsedRowFactory.create(1, **{"Base Price": price})

        result = validate_row(row, mapping, resolve)

        assert _fields(result) == ["base_price"]
        assert result.values.base_price == Decimal(price)

    def test_base_price_not_a_number(self, mapping):
        row = ParsedRowFactory.create(1, **{"Base Price": "ask"})

        result = validate_row(row, mapping, resolve)

        assert result.errors[0].raw_value == "ask"
        assert result.values.base_price is None

    @pytest.mark.parametrize("price", ["1e1000000", "1000000000.01"])
    def test_base_price_too_large(self, mapping, price):
        """Huge prices are row errors and never reach the price math."""
        row = ParsedRowFactory.create(1, **{"Base Price": price})

        result = validate_row(row, mapping, resolve)

        assert _fields(result) == ["base_price"]
        assert result.errors[0].message == "Base Price must be at most 1,000,000,000"
        assert result.values.base_price is None

    def test_base_price_at_limit_is_valid(self, mapping):
        row = ParsedRowFactory.create(1, **{"Base Price": "1000000000"})

        result = validate_row(row, mapping, resolve)

        assert result.is_valid
        assert result.values.base_price == Decimal("1000000000")

    @pytest.mark.parametrize("traffic", ["1e1000000", "1000000000001"])
    def test_traffic_too_large(self, mapping, traffic):
        row = ParsedRowFactory.create(1, Traffic=traffic)

        result = validate_row(row, mapping, resolve)

        assert _fields(result) == ["ahrefs_traffic"]
        assert result.errors[0].message == "Traffic must be at most 1,000,000,000,000"
        assert result.values.ahrefs_traffic is None

    def test_unknown_publisher_is_row_error(self, mapping):
        row = ParsedRowFactory.create(1, **{"Publisher Email": "ghost@nowhere.com"})

        result = validate_row(row, mapping, resolve)

        assert _fields(result) == ["publisher"]
        assert result.errors[0].message == 'Publisher "ghost@nowhere.com" not found'

    def test_validation_is_exhaustive(self, mapping):
        """Every broken field is reported, not just the first."""
        row = ParsedRowFactory.create(
            1, DA="x", DR="200", Category="nope", Status="maybe", **{"Base Price": "free"}
        )

        result = validate_row(row, mapping, resolve)

        assert _fields(result) == ["da", "dr", "category", "status", "base_price"]
