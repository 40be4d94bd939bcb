"""Stage 5: Report Validation & Normalization"""

import json
import logging
from typing import Any, Dict, Iterable, List, Tuple

from pydantic import ValidationError

from core.interfaces import Stage
from core.models import AnalysisRequest, SimulationReport
from core.exceptions import MalformedReportError
from llm.prompts import SimulationReportPrompt
from utils.numbers import coerce_number

logger = logging.getLogger(__name__)

ROOT_PATH = "$"
CHART_SERIES = ("resourceUtilization", "queueTimes", "throughput")
UTILIZATION_SERIES = "resourceUtilization"


def format_loc(loc: Iterable[Any]) -> str:
    """("kpis", 0, "trend") -> "kpis[0].trend" """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or ROOT_PATH


class ReportValidator(Stage[Dict[str, Any], SimulationReport]):
    """
    Stage 5: Check the engine's response against the report shape.

    The request schema is not trusted: structure, enumerations, sheet
    names and chart numbers are all checked again here. Every failure is
    a MalformedReportError naming the offending field path.
    """

    @property
    def name(self) -> str:
        return "Report Validation"

    @property
    def stage_number(self) -> int:
        return 5

    def __init__(self):
        self.parser = SimulationReportPrompt()

    def validate_input(self, input_data: Dict[str, Any]) -> bool:
        return (
            isinstance(input_data.get("raw"), str)
            and isinstance(input_data.get("request"), AnalysisRequest)
        )

    async def execute(self, input_data: Dict[str, Any]) -> SimulationReport:
        """Execute validation stage"""
        request: AnalysisRequest = input_data["request"]
        raw: str = input_data["raw"]
        try:
            return self.validate(
                raw,
                request.sheet_names_detected,
                allow_estimates=request.estimation_enabled
            )
        except MalformedReportError as e:
            logger.warning(
                "Rejected report at %s: %s\nOffending payload:\n%s",
                e.field_path, e.message, raw
            )
            raise

    def validate(
        self,
        raw: str,
        sheet_names: Iterable[str],
        allow_estimates: bool = False
    ) -> SimulationReport:
        """
        Parse and validate raw response text

        Args:
            raw: Response text from the engine
            sheet_names: Names of the sheets actually present in the workbook
            allow_estimates: Accept chart points flagged as estimated

        Returns:
            Immutable SimulationReport

        Raises:
            MalformedReportError: on the first violation found
        """
        try:
            data = self.parser.parse_response(raw)
        except json.JSONDecodeError as e:
            raise MalformedReportError(
                ROOT_PATH, f"response is not valid JSON: {e}", raw
            ) from e
        except (ValueError, RecursionError) as e:
            # Integer literals past the digit limit, or nesting past the recursion limit
            raise MalformedReportError(
                ROOT_PATH, f"response cannot be parsed: {type(e).__name__}", raw
            ) from e

        if not isinstance(data, dict):
            raise MalformedReportError(
                ROOT_PATH, f"expected a JSON object, got {type(data).__name__}", raw
            )

        data = self._normalize_charts(data, raw, allow_estimates)

        try:
            report = SimulationReport.model_validate(data)
        except ValidationError as e:
            error = e.errors()[0]
            raise MalformedReportError(format_loc(error["loc"]), error["msg"], raw) from e

        actual = set(sheet_names)
        for index, sheet_name in enumerate(report.summary.detected_sheets):
            if sheet_name not in actual:
                raise MalformedReportError(
                    f"summary.detectedSheets[{index}]",
                    f"sheet {sheet_name!r} is not present in the workbook",
                    raw
                )

        return report

    def _normalize_charts(
        self,
        data: Dict[str, Any],
        raw: str,
        allow_estimates: bool
    ) -> Dict[str, Any]:
        """Coerce chart values to floats; structural problems are left to the model"""
        charts = data.get("charts")
        if not isinstance(charts, dict):
            return data

        normalized = dict(charts)
        for series in CHART_SERIES:
            points = charts.get(series)
            if isinstance(points, list):
                normalized[series] = self._normalize_series(
                    series, points, raw, allow_estimates
                )
        return {**data, "charts": normalized}

    def _normalize_series(
        self,
        series: str,
        points: List[Any],
        raw: str,
        allow_estimates: bool
    ) -> List[Dict[str, Any]]:
        is_utilization = series == UTILIZATION_SERIES
        coerced: List[Tuple[Dict[str, Any], float, bool]] = []

        for index, point in enumerate(points):
            path = f"charts.{series}[{index}]"
            if not isinstance(point, dict):
                raise MalformedReportError(path, "expected an object", raw)
            if point.get("estimated") is True and not allow_estimates:
                raise MalformedReportError(
                    f"{path}.estimated",
                    "estimated values are not accepted; only literal data may be charted",
                    raw
                )
            if "value" not in point:
                raise MalformedReportError(f"{path}.value", "Field required", raw)

            try:
                number, is_percent = coerce_number(point["value"])
            except ValueError as e:
                raise MalformedReportError(f"{path}.value", str(e), raw) from e
            if is_percent and not is_utilization:
                raise MalformedReportError(
                    f"{path}.value", "percentages are only accepted for utilization", raw
                )
            if number < 0:
                raise MalformedReportError(f"{path}.value", "must be >= 0", raw)
            coerced.append((point, number, is_percent))

        if not is_utilization:
            return [{**point, "value": number} for point, number, _ in coerced]

        # One bare value above 1 puts the whole series on the 0-100 scale
        percent_scale = any(number > 1 for _, number, is_percent in coerced if not is_percent)
        result = []
        for index, (point, number, is_percent) in enumerate(coerced):
            if is_percent or percent_scale:
                number = number / 100
            if number > 1:
                raise MalformedReportError(
                    f"charts.{series}[{index}].value",
                    "utilization must lie in [0, 1] or [0, 100]",
                    raw
                )
            result.append({**point, "value": number})
        return result
