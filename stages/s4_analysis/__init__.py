"""Stage 4: Report Analysis"""

from .analyzer import ReportAnalyzer

__all__ = ["ReportAnalyzer"]
