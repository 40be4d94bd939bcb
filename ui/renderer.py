"""Report rendering"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, TextIO, Tuple
import sys

from core.models import ChartPoint, SimulationReport
from core.enums import Trend
from config import settings


class ReportRenderer(ABC):
    """Consumes a validated report; has no return value"""

    @abstractmethod
    def render(self, report: SimulationReport, on_reset: Callable[[], None]):
        """Render the report; on_reset starts over with a new file"""
        pass


class ConsoleRenderer(ReportRenderer):
    """Plain-text executive report"""

    TREND_MARKS = {
        Trend.UP: "▲",
        Trend.DOWN: "▼",
        Trend.STABLE: "■",
    }
    BAR_WIDTH = 30

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self.on_reset = None

    def render(self, report: SimulationReport, on_reset: Callable[[], None]):
        self.on_reset = on_reset
        self.stream.write("\n".join(self.format(report)) + "\n")

    def format(self, report: SimulationReport) -> List[str]:
        """Report as a list of text lines"""
        summary = report.summary
        lines = [
            "SIMULATION EXECUTIVE SUMMARY",
            f"Based on {len(summary.detected_sheets)} detected sheet(s)",
            "",
            summary.overview,
            "",
        ]
        lines += [f"  ✓ {name}" for name in summary.detected_sheets]
        if summary.missing_sheets:
            lines.append(f"  - {len(summary.missing_sheets)} sheet(s) missing: "
                         f"{', '.join(summary.missing_sheets)}")

        lines += ["", "KPIs"]
        for kpi in report.kpis:
            mark = self.TREND_MARKS.get(kpi.trend, " ")
            lines.append(f"  {mark} {kpi.label}: {kpi.value} {kpi.unit}".rstrip())

        charts = report.charts
        lines += ["", "RESOURCE UTILIZATION"]
        lines += self._utilization_chart(charts.resource_utilization)
        lines += ["", "QUEUE WAITING TIMES"]
        lines += self._value_chart(charts.queue_times, "queue times")
        if charts.throughput:
            lines += ["", "THROUGHPUT"]
            lines += self._value_chart(charts.throughput, "throughput")

        lines += ["", "INSIGHTS"]
        for insight in report.insights:
            lines.append(f"  [{insight.kind.value.upper()}] {insight.title}")
            lines.append(f"      {insight.description}")

        lines += ["", "RECOMMENDATIONS"]
        for rec in report.recommendations:
            lines.append(f"  ({rec.priority.value}) {rec.title}: {rec.action}")

        return lines

    def _utilization_chart(self, points: Tuple[ChartPoint, ...]) -> List[str]:
        if not points:
            return ["  Insufficient data to chart utilization"]
        threshold = settings.UTILIZATION_BOTTLENECK_THRESHOLD
        lines = []
        for point in points:
            bar = "█" * round(point.value * self.BAR_WIDTH)
            flag = "  CRITICAL" if point.value > threshold else ""
            lines.append(
                f"  {point.name:<20} {bar:<{self.BAR_WIDTH}} "
                f"{point.value * 100:5.1f}%{self._estimate_label(point)}{flag}"
            )
        lines.append(f"  * CRITICAL marks utilization above {threshold * 100:.0f}%")
        return lines

    def _value_chart(self, points: Tuple[ChartPoint, ...], label: str) -> List[str]:
        if not points:
            return [f"  Insufficient data to chart {label}"]
        peak = max(point.value for point in points) or 1.0
        lines = []
        for point in points:
            bar = "█" * round(point.value / peak * self.BAR_WIDTH)
            lines.append(
                f"  {point.name:<20} {bar:<{self.BAR_WIDTH}} "
                f"{point.value:g}{self._estimate_label(point)}"
            )
        return lines

    def _estimate_label(self, point: ChartPoint) -> str:
        return " (estimated)" if point.estimated else ""
