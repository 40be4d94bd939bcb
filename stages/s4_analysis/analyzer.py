"""Stage 4: Report Analysis - the generative engine call"""

from typing import Optional

from core.interfaces import ReportGateway, Stage
from core.models import AnalysisRequest
from llm.client import create_gateway


class ReportAnalyzer(Stage[AnalysisRequest, str]):
    """Stage 4: Send the request to the engine and return its raw text"""

    @property
    def name(self) -> str:
        return "Analysis"

    @property
    def stage_number(self) -> int:
        return 4

    def __init__(self, gateway: Optional[ReportGateway] = None):
        self.gateway = gateway or create_gateway()

    def validate_input(self, input_data: AnalysisRequest) -> bool:
        return isinstance(input_data, AnalysisRequest)

    async def execute(self, input_data: AnalysisRequest) -> str:
        """Execute analysis stage"""
        return await self.gateway.generate(
            input_data.instruction,
            input_data.prompt,
            input_data.output_schema
        )
