"""LLM prompt templates and output schema for the simulation report"""

import json
from typing import Any, Dict, List, Optional

from core.interfaces import LLMTask
from core.enums import InsightKind, Priority, Trend
from utils.vocabulary import GROUND_TRUTH_SHEET


def _string() -> Dict[str, Any]:
    return {"type": "string"}


def _array(items: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "array", "items": items}


def _object(properties: Dict[str, Any]) -> Dict[str, Any]:
    # Every property required and nothing else allowed: strict structured output
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


def _enum(values: List[Optional[str]], nullable: bool = False) -> Dict[str, Any]:
    if nullable:
        return {"type": ["string", "null"], "enum": [*values, None]}
    return {"type": "string", "enum": values}


class SimulationReportPrompt(LLMTask):
    """Instruction, prompt and output schema for the executive report request"""

    def __init__(
        self,
        estimation_enabled: bool = False,
        bottleneck_threshold: float = 0.85
    ):
        self.estimation_enabled = estimation_enabled
        self.bottleneck_threshold = bottleneck_threshold

    @property
    def instruction_template(self) -> str:
        return """You are an expert operations analyst and discrete-event simulation consultant (Arena, Simio and similar tools).
Your job is to analyze raw simulation spreadsheet exports and produce an executive report as JSON.

ANALYSIS RULES:
1. SHEET PRIORITY: Treat '{ground_truth}' (the across-replication summary), when present, as ground truth. Use the per-replication detail sheets (DiscreteTimeStatsByRep, CounterStatsByRep, FrequencyStatsByRep, OutputStatByStep) only to refine it.
2. KPI EXTRACTION: Report these four KPI families when the data contains them: wait time, total time in system, resource utilization, number in queue (queue length).
3. INSIGHTS: Classify each insight as
   - bottleneck: a resource with utilization above {threshold:.2f} ({threshold_pct:.0f}%), or materially long queues;
   - risk: high variability across replications;
   - opportunity: otherwise, where there is headroom (under-used capacity).
4. RECOMMENDATIONS: Give actionable operational levers only (add or remove capacity, change dispatching or scheduling rules, rebalance work). Tag every recommendation with a priority: High, Medium or Low.
5. CHARTS: {chart_rule}
   - resourceUtilization: resource names and their average utilization (0-1 or 0-100).
   - queueTimes: queue names and their average waiting time.
   - throughput: output counts per entity or step, if present.

OUTPUT:
Return only JSON that follows the provided schema. Use null for a KPI trend you cannot determine.
List in summary.detectedSheets only sheet names that appear in the data; list expected but absent sheets in summary.missingSheets."""

    @property
    def literal_chart_rule(self) -> str:
        return (
            "Extract chart values only from literal values present in the data. "
            "If a series has no literal values, return it as an empty array. Never invent values."
        )

    @property
    def estimated_chart_rule(self) -> str:
        return (
            "Prefer literal values present in the data. If a series has no literal values, "
            "you may return best-effort estimates, and every estimated point must have "
            "\"estimated\": true. Literal points have \"estimated\": false. "
            "If you cannot estimate, return an empty array."
        )

    @property
    def prompt_template(self) -> str:
        return """Analyze this simulation export (JSON derived from an Excel workbook).

SHEETS IN WORKBOOK: {sheet_names}
SHEETS INCLUDED IN DATA: {included_sheets}
EXPECTED SHEETS NOT FOUND: {missing_sheets}
{truncation_note}
Produce the consulting report.

DATA:
{payload}"""

    def build_instruction(self) -> str:
        chart_rule = (
            self.estimated_chart_rule if self.estimation_enabled
            else self.literal_chart_rule
        )
        return self.instruction_template.format(
            ground_truth=GROUND_TRUTH_SHEET,
            threshold=self.bottleneck_threshold,
            threshold_pct=self.bottleneck_threshold * 100,
            chart_rule=chart_rule,
        )

    def build_prompt(self, context: Dict[str, Any]) -> str:
        truncation_note = ""
        if context.get("truncated"):
            truncation_note = (
                "NOTE: the data was cut to fit the request size limit; "
                "the final record may be incomplete.\n"
            )
        return self.prompt_template.format(
            sheet_names=", ".join(context.get("sheet_names", [])) or "none",
            included_sheets=", ".join(context.get("included_sheets", [])) or "none",
            missing_sheets=", ".join(context.get("missing_sheets", [])) or "none",
            truncation_note=truncation_note,
            payload=context.get("payload", ""),
        )

    def build_schema(self) -> Dict[str, Any]:
        """JSON Schema that structurally forces the SimulationReport shape"""
        point = {
            "name": _string(),
            "value": {"type": "number"},
            "category": {"type": ["string", "null"]},
        }
        if self.estimation_enabled:
            point["estimated"] = {"type": "boolean"}
        chart_point = _object(point)

        return _object({
            "summary": _object({
                "detectedSheets": _array(_string()),
                "missingSheets": _array(_string()),
                "overview": _string(),
            }),
            "kpis": _array(_object({
                "label": _string(),
                "value": _string(),
                "unit": _string(),
                "trend": _enum([t.value for t in Trend], nullable=True),
            })),
            "charts": _object({
                "resourceUtilization": _array(chart_point),
                "queueTimes": _array(chart_point),
                "throughput": _array(chart_point),
            }),
            "insights": _array(_object({
                "kind": _enum([k.value for k in InsightKind]),
                "title": _string(),
                "description": _string(),
            })),
            "recommendations": _array(_object({
                "title": _string(),
                "action": _string(),
                "priority": _enum([p.value for p in Priority]),
            })),
        })

    def parse_response(self, response: str) -> Any:
        """
        Parse the response text as JSON.

        Markdown code fences are removed; nothing else is repaired.

        Raises:
            json.JSONDecodeError: text is not well-formed JSON
        """
        return json.loads(self._clean_json_response(response))

    def _clean_json_response(self, response: str) -> str:
        """Remove a surrounding markdown code block, if any"""
        clean = response.strip()

        if clean.startswith("```"):
            parts = clean.split("```")
            if len(parts) >= 3:
                clean = parts[1]
                if clean.startswith("json"):
                    clean = clean[4:]

        return clean.strip()
