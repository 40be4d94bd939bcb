"""Stage 5: Report Validation"""

from .validator import ReportValidator

__all__ = ["ReportValidator"]
