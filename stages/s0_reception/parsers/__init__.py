"""Workbook decoders"""

from .base import WorkbookDecoder
from .excel import ExcelDecoder

__all__ = ["WorkbookDecoder", "ExcelDecoder"]
