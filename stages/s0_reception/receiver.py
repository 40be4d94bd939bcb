"""Stage 0: Reception - Workbook decoding"""

import logging
from typing import Optional

from core.interfaces import Stage
from core.models import SheetStore, WorkbookFile
from core.exceptions import NoReadableDataError
from .parsers import ExcelDecoder, WorkbookDecoder

logger = logging.getLogger(__name__)


class Receiver(Stage[WorkbookFile, SheetStore]):
    """Stage 0: Reception - Decode the uploaded workbook into sheets"""

    @property
    def name(self) -> str:
        return "Reception"

    @property
    def stage_number(self) -> int:
        return 0

    def __init__(self, decoder: Optional[WorkbookDecoder] = None):
        self.decoder = decoder or ExcelDecoder()

    def validate_input(self, input_data: WorkbookFile) -> bool:
        """Validate uploaded file"""
        return isinstance(input_data, WorkbookFile)

    async def execute(self, input_data: WorkbookFile) -> SheetStore:
        """Execute reception stage"""
        store = self.decoder.decode(input_data.content, input_data.file_name)

        if len(store) == 0:
            raise NoReadableDataError(
                f"No sheets found in {input_data.file_name}", input_data.file_name
            )
        if not any(sheet.rows for sheet in store.sheets):
            raise NoReadableDataError(
                f"No data rows found in any sheet of {input_data.file_name}",
                input_data.file_name
            )

        logger.info(
            "Received %s: %s", input_data.file_name, ", ".join(store.names)
        )
        return store
