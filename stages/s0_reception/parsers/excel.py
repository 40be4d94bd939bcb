"""Excel workbook decoder"""

import io
import logging
from typing import Any, List

import pandas as pd

from core.models import Sheet, SheetStore
from core.enums import FileType
from core.exceptions import DecodeError
from .base import WorkbookDecoder

logger = logging.getLogger(__name__)

XLSX_MAGIC = b"PK\x03\x04"
XLS_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


class ExcelDecoder(WorkbookDecoder):
    """Decoder for Excel workbooks (.xlsx, .xls)"""

    ENGINES = {
        FileType.EXCEL_XLSX: "openpyxl",
        FileType.EXCEL_XLS: "xlrd",
    }

    @property
    def supported_extensions(self) -> List[str]:
        return [".xlsx", ".xls"]

    def detect_file_type(self, content: bytes, file_name: str) -> FileType:
        """Detect workbook format from magic bytes, then from the extension"""
        if content.startswith(XLSX_MAGIC):
            return FileType.EXCEL_XLSX
        if content.startswith(XLS_MAGIC):
            return FileType.EXCEL_XLS

        lowered = file_name.lower()
        if lowered.endswith(".xlsx"):
            return FileType.EXCEL_XLSX
        if lowered.endswith(".xls"):
            return FileType.EXCEL_XLS

        raise DecodeError(
            f"Unsupported workbook format: {file_name}. "
            f"Supported: {', '.join(self.supported_extensions)}",
            file_name
        )

    def decode(self, content: bytes, file_name: str) -> SheetStore:
        """
        Decode workbook content into ordered sheets of row records

        The first row of every sheet is the header; each following row
        becomes a record keyed by header text. Empty cells become "".

        Raises:
            DecodeError: content is empty, corrupt or not a workbook
        """
        if not content:
            raise DecodeError(f"Empty file: {file_name}", file_name)

        file_type = self.detect_file_type(content, file_name)

        try:
            frames = pd.read_excel(
                io.BytesIO(content),
                sheet_name=None,
                header=0,
                engine=self.ENGINES[file_type],
            )
        except Exception as e:
            raise DecodeError(
                f"Failed to decode {file_type.value} workbook {file_name}: {e}",
                file_name
            ) from e

        sheets = [
            Sheet(name=str(sheet_name), rows=tuple(self._records(df)))
            for sheet_name, df in frames.items()
        ]
        logger.info(
            "Decoded %s (%s): %d sheet(s)", file_name, file_type.value, len(sheets)
        )
        return SheetStore(sheets=tuple(sheets), file_type=file_type)

    def _records(self, df: pd.DataFrame) -> List[dict[str, Any]]:
        """Convert a sheet frame to records with Python scalars and "" for blanks"""
        if df.empty:
            return []
        df = df.dropna(how="all")
        df.columns = [str(col) for col in df.columns]
        cleaned = df.astype(object).where(pd.notna(df), "")
        return cleaned.to_dict(orient="records")
