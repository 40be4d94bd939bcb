"""Single-flight analysis session"""

import asyncio
import logging
from typing import Callable, Optional

from core.enums import SessionState
from core.exceptions import SimConsultantError
from core.models import SimulationReport, WorkbookFile
from orchestrator import Orchestrator
from ui.progress import ProgressTracker
from ui.renderer import ReportRenderer

logger = logging.getLogger(__name__)


class SessionProgress(ProgressTracker):
    """Moves the session through its states while its run is still current"""

    def __init__(self, session: "AnalysisSession", generation: int):
        self.session = session
        self.generation = generation

    def start_stage(self, stage_num: int, stage_name: str):
        if self.session.is_current(self.generation):
            # Stage 0 decodes the upload; everything after it is analysis
            self.session.state = (
                SessionState.INGESTING if stage_num == 0 else SessionState.ANALYZING
            )

    def complete_stage(self, stage_num: int):
        pass

    def fail(self, stage_num: int, message: str):
        pass

    def complete(self):
        pass


class AnalysisSession:
    """
    One user's analysis session: Idle -> Ingesting -> Analyzing -> Complete | Failed.

    Every analyze() or reset() bumps the generation counter. A run only
    applies its outcome while its generation is still the current one, so a
    superseded or cancelled run never reaches the renderer
    (last request wins). Each run gets its own pipeline instance.
    """

    def __init__(
        self,
        renderer: ReportRenderer,
        orchestrator_factory: Optional[Callable[[ProgressTracker], Orchestrator]] = None
    ):
        self.renderer = renderer
        self.orchestrator_factory = orchestrator_factory or (
            lambda progress: Orchestrator(progress=progress)
        )
        self.state = SessionState.IDLE
        self.generation = 0
        self.report: Optional[SimulationReport] = None
        self.error: Optional[SimConsultantError] = None
        self.error_message: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def retryable(self) -> bool:
        """Whether the last failure can be retried by uploading again"""
        return self.error is not None and self.error.retryable

    async def analyze(self, workbook: WorkbookFile) -> Optional[SimulationReport]:
        """
        Run the pipeline for a new upload, superseding any run in flight

        Returns:
            The rendered report, or None when the run failed or was superseded
        """
        self._cancel_in_flight()
        self.generation += 1
        generation = self.generation

        self.state = SessionState.INGESTING
        self.report = None
        self.error = None
        self.error_message = None

        orchestrator = self.orchestrator_factory(SessionProgress(self, generation))
        task = asyncio.ensure_future(orchestrator.analyze(workbook))
        self._task = task

        try:
            report = await task
        except asyncio.CancelledError:
            if self.is_current(generation):
                self.state = SessionState.IDLE
                raise
            logger.info("Discarded superseded analysis of %s", workbook.file_name)
            return None
        except SimConsultantError as e:
            if self.is_current(generation):
                self.state = SessionState.FAILED
                self.error = e
                self.error_message = e.user_message
            return None
        except Exception as e:
            if self.is_current(generation):
                logger.exception("Analysis of %s failed unexpectedly", workbook.file_name)
                self.state = SessionState.FAILED
                self.error = SimConsultantError(f"{type(e).__name__}: {e}")
                self.error_message = self.error.user_message
            return None
        finally:
            if self._task is task:
                self._task = None

        if not self.is_current(generation):
            logger.info("Discarded stale report for %s", workbook.file_name)
            return None

        self.report = report
        self.state = SessionState.COMPLETE
        self.renderer.render(report, self.reset)
        return report

    def cancel(self) -> None:
        """Abandon the run in flight; its result is never applied"""
        if self.busy:
            self.generation += 1
            self._cancel_in_flight()
            self.state = SessionState.IDLE

    def reset(self) -> None:
        """Discard any report or error and return to Idle"""
        self.generation += 1
        self._cancel_in_flight()
        self.state = SessionState.IDLE
        self.report = None
        self.error = None
        self.error_message = None

    def _cancel_in_flight(self) -> None:
        if self.busy:
            self._task.cancel()
