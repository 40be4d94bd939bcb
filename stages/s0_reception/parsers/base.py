"""Base workbook decoder"""

from abc import ABC, abstractmethod
from core.interfaces import WorkbookDecoder as IWorkbookDecoder
from core.models import SheetStore


class WorkbookDecoder(IWorkbookDecoder, ABC):
    """Abstract base class for workbook decoders"""

    @abstractmethod
    def decode(self, content: bytes, file_name: str) -> SheetStore:
        """Decode workbook content into a SheetStore"""
        pass
