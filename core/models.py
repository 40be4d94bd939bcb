"""Core data models for the SimConsultant pipeline"""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import FileType, InsightKind, Priority, Trend


class FrozenModel(BaseModel):
    """Immutable model; wire names are accepted as aliases"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ─────────────────────────────────────────────────────────────
# Stage 0: Reception
# ─────────────────────────────────────────────────────────────

class WorkbookFile(FrozenModel):
    """Uploaded workbook blob"""
    file_name: str
    content: bytes

    @classmethod
    def from_path(cls, file_path: str) -> "WorkbookFile":
        path = Path(file_path)
        return cls(file_name=path.name, content=path.read_bytes())


class Sheet(FrozenModel):
    """One named table of row records decoded from a workbook"""
    name: str
    rows: tuple[dict[str, Any], ...] = ()

    @property
    def row_count(self) -> int:
        return len(self.rows)


class SheetStore(FrozenModel):
    """Ordered collection of decoded sheets"""
    sheets: tuple[Sheet, ...] = ()
    file_type: Optional[FileType] = None

    @property
    def names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    def __len__(self) -> int:
        return len(self.sheets)


# ─────────────────────────────────────────────────────────────
# Stage 1: Sheet classification
# ─────────────────────────────────────────────────────────────

class SheetSelection(FrozenModel):
    """Output of Stage 1"""
    matched: tuple[Sheet, ...] = ()
    selected: tuple[Sheet, ...] = ()
    matched_identifiers: tuple[str, ...] = ()
    missing_identifiers: tuple[str, ...] = ()
    fallback_used: bool = False


# ─────────────────────────────────────────────────────────────
# Stage 2: Payload budgeting
# ─────────────────────────────────────────────────────────────

class BudgetedPayload(FrozenModel):
    """Output of Stage 2"""
    text: str
    full_length: int
    max_chars: int

    @property
    def truncated(self) -> bool:
        return self.full_length > len(self.text)


# ─────────────────────────────────────────────────────────────
# Stage 3: Request building
# ─────────────────────────────────────────────────────────────

class AnalysisRequest(FrozenModel):
    """Output of Stage 3: everything the engine needs for one call"""
    instruction: str
    prompt: str
    sheet_names_detected: frozenset[str]
    payload: str
    output_schema: dict[str, Any]  # Not 'schema', which shadows BaseModel.schema
    estimation_enabled: bool = False


# ─────────────────────────────────────────────────────────────
# Stage 5: Validated report
# ─────────────────────────────────────────────────────────────

class ReportSummary(FrozenModel):
    detected_sheets: tuple[str, ...] = Field(alias="detectedSheets")
    missing_sheets: tuple[str, ...] = Field(alias="missingSheets")
    overview: str


class Kpi(FrozenModel):
    """Single labeled summary metric"""
    label: str
    value: str
    unit: str
    trend: Optional[Trend] = None

    @field_validator("value", mode="before")
    @classmethod
    def _value_as_display_string(cls, value: Any) -> Any:
        # Numbers are kept verbatim for display; formatted strings pass through
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ChartPoint(FrozenModel):
    name: str
    value: float = Field(ge=0, strict=True, allow_inf_nan=False)
    category: Optional[str] = None
    estimated: bool = False


class ReportCharts(FrozenModel):
    resource_utilization: tuple[ChartPoint, ...] = Field(alias="resourceUtilization")
    queue_times: tuple[ChartPoint, ...] = Field(alias="queueTimes")
    throughput: tuple[ChartPoint, ...] = ()

    def series(self) -> dict[str, tuple[ChartPoint, ...]]:
        return {
            "resourceUtilization": self.resource_utilization,
            "queueTimes": self.queue_times,
            "throughput": self.throughput,
        }


class ReportInsight(FrozenModel):
    """Classified observation"""
    kind: InsightKind
    title: str
    description: str


class Recommendation(FrozenModel):
    title: str
    action: str
    priority: Priority


class SimulationReport(FrozenModel):
    """Normalized executive report, ready for rendering"""
    summary: ReportSummary
    kpis: tuple[Kpi, ...]
    charts: ReportCharts
    insights: tuple[ReportInsight, ...]
    recommendations: tuple[Recommendation, ...]

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
