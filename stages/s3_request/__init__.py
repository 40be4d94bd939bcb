"""Stage 3: Report Request Building"""

from .builder import ReportRequestBuilder

__all__ = ["ReportRequestBuilder"]
