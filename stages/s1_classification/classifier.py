"""Stage 1: Sheet Classification"""

import logging
from typing import Dict, List, Optional

from core.interfaces import Stage
from core.models import Sheet, SheetSelection, SheetStore
from utils.vocabulary import SHEET_VOCABULARY, match_identifier

logger = logging.getLogger(__name__)


class SheetClassifier(Stage[SheetStore, SheetSelection]):
    """Stage 1: Select the sheets relevant to simulation analysis"""

    @property
    def name(self) -> str:
        return "Sheet Classification"

    @property
    def stage_number(self) -> int:
        return 1

    def __init__(self, vocabulary: Optional[Dict[str, List[str]]] = None):
        self.vocabulary = vocabulary if vocabulary is not None else SHEET_VOCABULARY

    def validate_input(self, input_data: SheetStore) -> bool:
        return isinstance(input_data, SheetStore)

    def classify(self, store: SheetStore) -> tuple[Sheet, ...]:
        """
        Return the sheets whose name matches a vocabulary entry, in store order.

        An empty result means no known sheets; callers fall back to all sheets.
        """
        return tuple(
            sheet for sheet in store.sheets
            if match_identifier(sheet.name, self.vocabulary) is not None
        )

    async def execute(self, input_data: SheetStore) -> SheetSelection:
        """Execute classification stage"""
        matched = self.classify(input_data)

        found = []
        for sheet in matched:
            identifier = match_identifier(sheet.name, self.vocabulary)
            if identifier not in found:
                found.append(identifier)
        missing = [key for key in self.vocabulary if key not in found]

        fallback_used = not matched
        if fallback_used:
            logger.warning(
                "No known simulation sheets among %s; using all %d sheets",
                input_data.names, len(input_data)
            )
        else:
            logger.info(
                "Selected %d of %d sheets: %s",
                len(matched), len(input_data), [s.name for s in matched]
            )

        return SheetSelection(
            matched=matched,
            selected=input_data.sheets if fallback_used else matched,
            matched_identifiers=tuple(found),
            missing_identifiers=tuple(missing),
            fallback_used=fallback_used,
        )
