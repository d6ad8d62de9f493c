"""
Text utilities for spreadsheet headers and lookup keys.

Used for column auto-matching and publisher name/email comparison.
"""

import re
import unicodedata
from typing import Optional


def strip_accents(text: str) -> str:
    """
    Remove accent marks while keeping base characters.

    "Catégorie" → "Categorie"
    """
    # NFD decomposition separates base chars from accents
    normalized = unicodedata.normalize('NFD', text)
    return ''.join(
        c for c in normalized
        if unicodedata.category(c) != 'Mn'
    )


def normalize_header(header: Optional[str]) -> str:
    """
    Normalize a column header for matching.

    Handles case, accents, punctuation and spacing variations:
    - "Domain Authority (DA)" → "domain authority da"
    - "  Site_URL " → "site url"
    - "Turnaround-Time" → "turnaround time"

    Args:
        header: Raw header cell from the uploaded file

    Returns:
        Lower-case ASCII words separated by single spaces ("" for empty input)
    """
    if not header:
        return ""

    text = strip_accents(str(header)).lower()
    text = re.sub(r'[^a-z0-9]+', ' ', text)
    return text.strip()


def normalize_lookup_key(value: Optional[str]) -> Optional[str]:
    """
    Normalize a name or email for case-insensitive lookups.

    Returns None for empty/whitespace-only strings.
    """
    if not value:
        return None

    value = value.strip()

    if not value:
        return None

    return value.casefold()


def clean_cell(value) -> str:
    """
    Convert a raw cell to a trimmed string.

    None becomes "". Floats with no fractional part lose the trailing ".0"
    that spreadsheet engines add to whole numbers.
    """
    if value is None:
        return ""

    if isinstance(value, float):
        if value != value:  # NaN
            return ""
        if value.is_integer():
            return str(int(value))

    return str(value).strip()
