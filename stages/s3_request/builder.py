"""Stage 3: Report Request Building"""

from typing import Any, Dict, Optional

from core.interfaces import Stage
from core.models import AnalysisRequest, BudgetedPayload, SheetSelection, SheetStore
from llm.prompts import SimulationReportPrompt
from config import settings


class ReportRequestBuilder(Stage[Dict[str, Any], AnalysisRequest]):
    """Stage 3: Compose instruction, prompt and output schema"""

    @property
    def name(self) -> str:
        return "Request Building"

    @property
    def stage_number(self) -> int:
        return 3

    def __init__(
        self,
        estimation_enabled: Optional[bool] = None,
        bottleneck_threshold: Optional[float] = None
    ):
        if estimation_enabled is None:
            estimation_enabled = settings.CHART_ESTIMATION_ENABLED
        if bottleneck_threshold is None:
            bottleneck_threshold = settings.UTILIZATION_BOTTLENECK_THRESHOLD
        self.prompt_builder = SimulationReportPrompt(
            estimation_enabled=estimation_enabled,
            bottleneck_threshold=bottleneck_threshold
        )

    @property
    def estimation_enabled(self) -> bool:
        return self.prompt_builder.estimation_enabled

    def validate_input(self, input_data: Dict[str, Any]) -> bool:
        return (
            isinstance(input_data.get("store"), SheetStore)
            and isinstance(input_data.get("selection"), SheetSelection)
            and isinstance(input_data.get("payload"), BudgetedPayload)
        )

    def build(
        self,
        store: SheetStore,
        selection: SheetSelection,
        payload: BudgetedPayload
    ) -> AnalysisRequest:
        context = {
            "sheet_names": store.names,
            "included_sheets": [sheet.name for sheet in selection.selected],
            "missing_sheets": list(selection.missing_identifiers),
            "truncated": payload.truncated,
            "payload": payload.text,
        }
        return AnalysisRequest(
            instruction=self.prompt_builder.build_instruction(),
            prompt=self.prompt_builder.build_prompt(context),
            sheet_names_detected=frozenset(store.names),
            payload=payload.text,
            output_schema=self.prompt_builder.build_schema(),
            estimation_enabled=self.estimation_enabled,
        )

    async def execute(self, input_data: Dict[str, Any]) -> AnalysisRequest:
        """Execute request building stage"""
        return self.build(
            input_data["store"],
            input_data["selection"],
            input_data["payload"]
        )
