"""Pipeline orchestrator"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.models import (
    AnalysisRequest, BudgetedPayload, SheetSelection, SheetStore,
    SimulationReport, WorkbookFile
)
from core.exceptions import SimConsultantError, StageError
from core.interfaces import ReportGateway
from stages import (
    Receiver, SheetClassifier, PayloadBudgeter,
    ReportRequestBuilder, ReportAnalyzer, ReportValidator
)
from stages.s0_reception.parsers import WorkbookDecoder
from ui.progress import NullProgress, ProgressTracker

logger = logging.getLogger(__name__)


@dataclass
class PipelineContext:
    """Shared context passed through pipeline"""
    workbook: WorkbookFile
    store: Optional[SheetStore] = None
    selection: Optional[SheetSelection] = None
    payload: Optional[BudgetedPayload] = None
    request: Optional[AnalysisRequest] = None
    raw_response: Optional[str] = None
    report: Optional[SimulationReport] = None


class Orchestrator:
    """
    Pipeline coordinator.

    Stages run strictly in sequence; the engine call in stage 4 is the only
    suspension point. A failing stage raises exactly one error of the
    taxonomy in core.exceptions and no later stage runs.
    """

    def __init__(
        self,
        progress: Optional[ProgressTracker] = None,
        gateway: Optional[ReportGateway] = None,
        decoder: Optional[WorkbookDecoder] = None,
        vocabulary: Optional[Dict[str, List[str]]] = None,
        max_payload_chars: Optional[int] = None,
        estimation_enabled: Optional[bool] = None
    ):
        self.progress = progress or NullProgress()

        # Initialize stages
        self.stages = {
            0: Receiver(decoder),
            1: SheetClassifier(vocabulary),
            2: PayloadBudgeter(max_payload_chars),
            3: ReportRequestBuilder(estimation_enabled),
            4: ReportAnalyzer(gateway),
            5: ReportValidator(),
        }

    async def run(self, workbook: WorkbookFile) -> PipelineContext:
        """Execute full pipeline"""
        ctx = PipelineContext(workbook=workbook)

        # Stage 0: Reception
        ctx.store = await self._execute_stage(0, workbook)

        # Stage 1: Sheet classification (falls back to all sheets)
        ctx.selection = await self._execute_stage(1, ctx.store)

        # Stage 2: Payload budgeting
        ctx.payload = await self._execute_stage(2, ctx.selection)

        # Stage 3: Request building
        ctx.request = await self._execute_stage(3, {
            "store": ctx.store,
            "selection": ctx.selection,
            "payload": ctx.payload
        })

        # Stage 4: Engine call
        ctx.raw_response = await self._execute_stage(4, ctx.request)

        # Stage 5: Validation
        ctx.report = await self._execute_stage(5, {
            "raw": ctx.raw_response,
            "request": ctx.request
        })

        await self._notify(self.progress.complete())
        return ctx

    async def analyze(self, workbook: WorkbookFile) -> SimulationReport:
        """Execute full pipeline and return only the validated report"""
        ctx = await self.run(workbook)
        return ctx.report

    async def _execute_stage(self, stage_num: int, input_data) -> Any:
        """Execute a single stage with progress tracking"""
        stage = self.stages[stage_num]

        await self._notify(self.progress.start_stage(stage_num, stage.name))

        try:
            if not stage.validate_input(input_data):
                raise StageError(stage_num, "Invalid input")
            result = await stage.execute(input_data)
        except SimConsultantError as e:
            logger.error(
                "Stage %d (%s) failed with %s: %s",
                stage_num, stage.name, type(e).__name__, e
            )
            await self._notify(self.progress.fail(stage_num, str(e)))
            raise

        await self._notify(self.progress.complete_stage(stage_num))
        return result

    async def _notify(self, result) -> None:
        # Handle both sync and async progress trackers
        if hasattr(result, '__await__'):
            await result
