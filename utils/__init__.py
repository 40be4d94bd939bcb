"""Utility modules"""

from .numbers import coerce_number
from .vocabulary import (
    GROUND_TRUTH_SHEET,
    SHEET_VOCABULARY,
    match_identifier,
    names_match,
)

__all__ = [
    "coerce_number",
    "GROUND_TRUTH_SHEET",
    "SHEET_VOCABULARY",
    "match_identifier",
    "names_match",
]
