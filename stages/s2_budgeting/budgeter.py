"""Stage 2: Payload Budgeting"""

import json
import logging
from typing import Iterable, Optional

from core.interfaces import Stage
from core.models import BudgetedPayload, Sheet, SheetSelection
from config import settings

logger = logging.getLogger(__name__)


class PayloadBudgeter(Stage[SheetSelection, BudgetedPayload]):
    """
    Stage 2: Serialize the selected sheets and cut them to a character budget.

    The budget is a conservative proxy for the engine's request-size limit,
    not a token count. The cut is a hard character cut and may end the
    payload in the middle of a row record.
    """

    @property
    def name(self) -> str:
        return "Payload Budgeting"

    @property
    def stage_number(self) -> int:
        return 2

    def __init__(self, max_chars: Optional[int] = None):
        max_chars = max_chars if max_chars is not None else settings.MAX_PAYLOAD_CHARS
        if max_chars <= 0:
            raise ValueError(f"max_chars must be positive, got {max_chars}")
        self.max_chars = max_chars

    def validate_input(self, input_data: SheetSelection) -> bool:
        return isinstance(input_data, SheetSelection) and bool(input_data.selected)

    def serialize(self, sheets: Iterable[Sheet]) -> str:
        """Self-describing JSON: [{"name": ..., "data": [row, ...]}, ...]"""
        document = [
            {"name": sheet.name, "data": list(sheet.rows)}
            for sheet in sheets
        ]
        return json.dumps(document, ensure_ascii=False, default=str)

    def truncate(self, text: str) -> str:
        return text[:self.max_chars]

    async def execute(self, input_data: SheetSelection) -> BudgetedPayload:
        """Execute budgeting stage"""
        full = self.serialize(input_data.selected)
        text = self.truncate(full)

        if len(text) < len(full):
            logger.warning(
                "Payload truncated from %d to %d characters; the last row may be cut",
                len(full), len(text)
            )

        return BudgetedPayload(
            text=text,
            full_length=len(full),
            max_chars=self.max_chars,
        )
