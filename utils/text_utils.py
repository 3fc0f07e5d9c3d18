"""
Text utilities for SKU validation and search matching.
"""

import re
import unicodedata
from typing import Iterable, Optional

SKU_PATTERN = re.compile(r"[A-Za-z0-9-]+")


def is_valid_sku(sku: Optional[str]) -> bool:
    """SKUs are letters, digits and hyphens only (e.g. "FG-1001")."""
    if not sku:
        return False
    return SKU_PATTERN.fullmatch(sku) is not None


def normalize_search_term(term: Optional[str]) -> str:
    """
    Normalize a search term for case-insensitive matching.

    - "  Pork BBQ " -> "pork bbq"
    - None -> ""
    """
    if not term:
        return ""
    return unicodedata.normalize("NFC", term).strip().casefold()


def contains_term(term: str, values: Iterable[Optional[str]]) -> bool:
    """
    True if any value contains the (already normalized) term.

    An empty term matches everything.
    """
    if not term:
        return True
    for value in values:
        if value and term in unicodedata.normalize("NFC", value).casefold():
            return True
    return False
