"""Core abstractions for the SimConsultant pipeline"""

from .models import *
from .enums import *
from .exceptions import *
from .interfaces import *

__all__ = [
    # Models
    "WorkbookFile",
    "Sheet",
    "SheetStore",
    "SheetSelection",
    "BudgetedPayload",
    "AnalysisRequest",
    "ReportSummary",
    "Kpi",
    "ChartPoint",
    "ReportCharts",
    "ReportInsight",
    "Recommendation",
    "SimulationReport",
    # Enums
    "FileType",
    "Trend",
    "InsightKind",
    "Priority",
    "SessionState",
    "LLMProvider",
    # Exceptions
    "SimConsultantError",
    "StageError",
    "DecodeError",
    "NoReadableDataError",
    "ConfigurationError",
    "TransportError",
    "EmptyResponseError",
    "MalformedReportError",
    # Interfaces
    "Stage",
    "WorkbookDecoder",
    "LLMTask",
    "ReportGateway",
]
