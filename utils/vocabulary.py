"""Known simulation-report sheet identifiers and name matching"""

from typing import Dict, List, Optional


# Canonical sheet identifier -> additional names that identify the same sheet.
# The canonical identifier always matches itself.
SHEET_VOCABULARY: Dict[str, List[str]] = {
    "ProjectInformation": [],
    "AcrossReplicationsSummary": [],
    "DiscreteTimeStatsByRep": [],
    "CounterStatsByRep": [],
    "OutputStatByStep": [],
    "FrequencyStatsByRep": [],
}

# Sheet treated as ground truth when present
GROUND_TRUTH_SHEET = "AcrossReplicationsSummary"


def names_match(sheet_name: str, identifier: str) -> bool:
    """
    Substring containment in either direction, case-sensitive.

    "AcrossReplicationsSummary (2)" matches "AcrossReplicationsSummary",
    and so does the abbreviated "AcrossReplications".
    """
    return identifier in sheet_name or sheet_name in identifier


def match_identifier(
    sheet_name: str,
    vocabulary: Dict[str, List[str]]
) -> Optional[str]:
    """
    Find the canonical identifier a sheet name belongs to

    Args:
        sheet_name: Name of the decoded sheet
        vocabulary: Canonical identifier -> aliases

    Returns:
        Canonical identifier of the first matching entry, None otherwise
    """
    for canonical, aliases in vocabulary.items():
        for candidate in [canonical, *aliases]:
            if names_match(sheet_name, candidate):
                return canonical
    return None
