"""
Column mapping for bulk uploads.

Links spreadsheet headers to guest blog site fields:
- auto_map_columns: suggests a mapping (exact names first, then fuzzy)
- ColumnMappingSet: the operator-editable mapping, kept one-to-one
- check_column_order: non-blocking warnings against the template layout
"""

from typing import Iterable, Optional, Sequence
import structlog

from rapidfuzz import fuzz

from config import settings
from exceptions import ColumnMappingError, ValidationError
from models.bulk_upload import ColumnMappingPair
from models.guest_blog_site import TargetField, TARGET_FIELDS
from utils.text_utils import normalize_header

logger = structlog.get_logger(__name__)

# Header layout of the downloadable template
EXPECTED_COLUMN_ORDER = [
    "Site URL", "Publisher Email", "DA", "DR", "Traffic", "SS",
    "Category", "Country", "Language", "TAT", "Base Price", "Status",
]


# ===================
# AUTO-MAPPING
# ===================

def _candidate_names(target: TargetField) -> list[str]:
    """Normalized spellings a header may use for this field."""
    names = [
        normalize_header(target.key.replace("_", " ")),
        normalize_header(target.label),
    ]
    names.extend(normalize_header(alias) for alias in target.aliases)
    # Unique, keep order
    return list(dict.fromkeys(n for n in names if n))


def auto_map_columns(
    headers: Sequence[str],
    fields: Sequence[TargetField] = TARGET_FIELDS,
    threshold: Optional[int] = None,
) -> list[ColumnMappingPair]:
    """
    Suggest a column mapping for the given headers.

    Pass 1 matches normalized headers exactly against each field's key,
    label and aliases. Pass 2 scores the leftovers with
    rapidfuzz token_sort_ratio and assigns the best pairs first.
    A header or field is used at most once; exact matches are never
    reassigned by the fuzzy pass.

    Args:
        headers: Header row of the uploaded file
        fields: Target field catalog
        threshold: Minimum fuzzy score (0-100), defaults to settings

    Returns:
        Suggested pairs in header order
    """
    if threshold is None:
        threshold = settings.fuzzy_match_threshold

    candidates = {target.key: _candidate_names(target) for target in fields}

    exact_lookup: dict[str, str] = {}
    for target in fields:
        for name in candidates[target.key]:
            exact_lookup.setdefault(name, target.key)

    assigned: dict[int, str] = {}  # header position → field key
    used_fields: set[str] = set()

    # Pass 1: exact
    for pos, header in enumerate(headers):
        field_key = exact_lookup.get(normalize_header(header))
        if field_key and field_key not in used_fields:
            assigned[pos] = field_key
            used_fields.add(field_key)

    # Pass 2: fuzzy, best scores first
    scored: list[tuple[float, int, int, str]] = []
    for pos, header in enumerate(headers):
        if pos in assigned:
            continue
        normalized = normalize_header(header)
        if not normalized:
            continue
        for field_pos, target in enumerate(fields):
            if target.key in used_fields:
                continue
            score = max(
                fuzz.token_sort_ratio(normalized, name)
                for name in candidates[target.key]
            )
            if score >= threshold:
                scored.append((score, pos, field_pos, target.key))

    scored.sort(key=lambda s: (-s[0], s[1], s[2]))
    for score, pos, _, field_key in scored:
        if pos in assigned or field_key in used_fields:
            continue
        assigned[pos] = field_key
        used_fields.add(field_key)
        logger.debug(
            "column_fuzzy_matched",
            header=headers[pos],
            field=field_key,
            score=round(score, 1)
        )

    mappings = [
        ColumnMappingPair(csv_column=headers[pos], guest_blog_site_field=assigned[pos])
        for pos in sorted(assigned)
    ]

    logger.info(
        "columns_auto_mapped",
        headers=len(headers),
        mapped=len(mappings)
    )

    return mappings


def check_column_order(headers: Sequence[str]) -> list[str]:
    """
    Compare headers with the template layout.

    Returns warnings only; a file in a different order can still be
    mapped by hand.
    """
    warnings = []
    actual = [str(h).strip().lower() for h in headers]
    expected = [h.lower() for h in EXPECTED_COLUMN_ORDER]

    if len(actual) != len(expected):
        warnings.append(
            f"Column count mismatch: expected {len(expected)} columns, found {len(actual)}"
        )

    for i, name in enumerate(expected):
        if i >= len(actual):
            warnings.append(f'Missing column: "{EXPECTED_COLUMN_ORDER[i]}"')
        elif actual[i] != name:
            warnings.append(
                f'Column order mismatch at position {i + 1}: '
                f'expected "{EXPECTED_COLUMN_ORDER[i]}", found "{headers[i]}"'
            )

    return warnings


# ===================
# MAPPING SET
# ===================

class ColumnMappingSet:
    """
    Field ↔ column mapping for one upload.

    Each field has at most one column. set_mapping keeps the mapping
    one-to-one by dropping any other field that held the column.
    from_pairs keeps operator submissions as given so conflicts can be
    reported by validate().
    """

    def __init__(
        self,
        available_columns: Sequence[str],
        fields: Sequence[TargetField] = TARGET_FIELDS,
    ):
        self.available_columns = list(available_columns)
        self.fields = tuple(fields)
        self._fields_by_key = {f.key: f for f in self.fields}
        self._field_to_column: dict[str, str] = {}
        # Reverse of _field_to_column; kept in step by _assign / _unassign
        self._column_to_fields: dict[str, list[str]] = {}
        # Fields submitted more than once by from_pairs
        self._repeated_fields: list[str] = []

    @classmethod
    def from_pairs(
        cls,
        available_columns: Sequence[str],
        pairs: Iterable[ColumnMappingPair],
        fields: Sequence[TargetField] = TARGET_FIELDS,
    ) -> "ColumnMappingSet":
        """
        Build from submitted pairs without resolving conflicts.

        Pairs with an empty column are skipped.

        Raises:
            ValidationError: Unknown field key or column not in the file
        """
        mapping = cls(available_columns, fields)
        for pair in pairs:
            if not pair.csv_column:
                continue
            mapping._check_field(pair.guest_blog_site_field)
            mapping._check_column(pair.csv_column)
            if pair.guest_blog_site_field in mapping._field_to_column:
                if pair.guest_blog_site_field not in mapping._repeated_fields:
                    mapping._repeated_fields.append(pair.guest_blog_site_field)
            mapping._assign(pair.guest_blog_site_field, pair.csv_column)
        return mapping

    # ===================
    # LOOKUPS
    # ===================

    def column_for(self, field_key: str) -> Optional[str]:
        return self._field_to_column.get(field_key)

    def fields_for(self, column: str) -> list[str]:
        """Field keys mapped to a column (more than one only after from_pairs)."""
        return list(self._column_to_fields.get(column, ()))

    def mapped_columns(self) -> list[str]:
        return [
            self._field_to_column[f.key] for f in self.fields
            if f.key in self._field_to_column
        ]

    def to_list(self) -> list[ColumnMappingPair]:
        """Pairs in catalog order."""
        return [
            ColumnMappingPair(csv_column=self._field_to_column[f.key], guest_blog_site_field=f.key)
            for f in self.fields
            if f.key in self._field_to_column
        ]

    def __len__(self) -> int:
        return len(self._field_to_column)

    # ===================
    # EDITS
    # ===================

    def set_mapping(self, field_key: str, column: Optional[str]) -> None:
        """
        Point a field at a column, or clear it with column=None.

        Any other field mapped to the same column loses its mapping.

        Raises:
            ValidationError: Unknown field key or column not in the file
        """
        self._check_field(field_key)
        if column:
            self._check_column(column)

        self._unassign(field_key)
        if field_key in self._repeated_fields:
            self._repeated_fields.remove(field_key)

        if not column:
            logger.debug("column_mapping_cleared", field=field_key)
            return

        for other in self.fields_for(column):
            self._unassign(other)
            logger.debug("column_mapping_replaced", field=other, column=column)

        self._assign(field_key, column)
        logger.debug("column_mapping_set", field=field_key, column=column)

    # ===================
    # VALIDATION
    # ===================

    def validate(self) -> list[str]:
        """
        All mapping violations.

        Unmapped required fields first (catalog order), then fields
        submitted twice, then columns feeding more than one field
        (header order). Empty list means the mapping is usable.
        """
        errors = []

        for target in self.fields:
            if target.required and target.key not in self._field_to_column:
                errors.append(f'Required field "{target.label}" must be mapped')

        for key in self._repeated_fields:
            label = self._fields_by_key[key].label
            errors.append(f'Field "{label}" cannot be mapped to multiple CSV columns')

        for column in self.available_columns:
            if len(self.fields_for(column)) > 1:
                errors.append(f'CSV column "{column}" cannot be mapped to multiple fields')

        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    def ensure_valid(self) -> None:
        """
        Raises:
            ColumnMappingError: With every violation found
        """
        errors = self.validate()
        if errors:
            logger.warning("column_mapping_invalid", errors=errors)
            raise ColumnMappingError(errors)

    # ===================
    # HELPERS
    # ===================

    def _assign(self, field_key: str, column: str) -> None:
        self._unassign(field_key)
        self._field_to_column[field_key] = column
        self._column_to_fields.setdefault(column, []).append(field_key)

    def _unassign(self, field_key: str) -> None:
        column = self._field_to_column.pop(field_key, None)
        if column is None:
            return
        remaining = [key for key in self._column_to_fields[column] if key != field_key]
        if remaining:
            self._column_to_fields[column] = remaining
        else:
            del self._column_to_fields[column]

    def _check_field(self, field_key: str) -> None:
        if field_key not in self._fields_by_key:
            raise ValidationError(
                message=f'Unknown guest blog site field "{field_key}"',
                code="UNKNOWN_FIELD",
                details={"field": field_key}
            )

    def _check_column(self, column: str) -> None:
        if column not in self.available_columns:
            raise ValidationError(
                message=f'Column "{column}" is not in the uploaded file',
                code="UNKNOWN_COLUMN",
                details={"column": column, "available_columns": self.available_columns}
            )
