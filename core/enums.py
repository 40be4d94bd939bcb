"""Core enumerations for SimConsultant"""

from enum import Enum


class FileType(str, Enum):
    """Supported workbook formats"""
    EXCEL_XLSX = "xlsx"
    EXCEL_XLS = "xls"


class Trend(str, Enum):
    """KPI trend direction"""
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class InsightKind(str, Enum):
    """Insight classification"""
    BOTTLENECK = "bottleneck"
    RISK = "risk"
    OPPORTUNITY = "opportunity"


class Priority(str, Enum):
    """Recommendation priority"""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class SessionState(str, Enum):
    """Analysis session lifecycle"""
    IDLE = "idle"
    INGESTING = "ingesting"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    FAILED = "failed"


class LLMProvider(str, Enum):
    """Supported generative engines"""
    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
