"""Abstract base classes for SimConsultant components"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class Stage(ABC, Generic[InputT, OutputT]):
    """Abstract base class for all pipeline stages"""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable stage name"""
        pass

    @property
    @abstractmethod
    def stage_number(self) -> int:
        """Stage number (0-5)"""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """Execute the stage"""
        pass

    @abstractmethod
    def validate_input(self, input_data: InputT) -> bool:
        """Validate input before processing"""
        pass


class WorkbookDecoder(ABC):
    """Abstract base class for workbook decoders"""

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """List of supported file extensions"""
        pass

    @abstractmethod
    def decode(self, content: bytes, file_name: str) -> "SheetStore":
        """Decode a workbook blob into named sheets of row records"""
        pass


class LLMTask(ABC):
    """Abstract base class for LLM-powered tasks"""

    @property
    @abstractmethod
    def prompt_template(self) -> str:
        """Prompt template for this task"""
        pass

    @abstractmethod
    def build_prompt(self, context: dict) -> str:
        """Build prompt from context"""
        pass

    @abstractmethod
    def parse_response(self, response: str) -> Any:
        """Parse LLM response into structured data"""
        pass


class ReportGateway(ABC):
    """Sends one schema-constrained request to a generative engine"""

    @property
    @abstractmethod
    def provider(self) -> str:
        """Engine name, used in logs and errors"""
        pass

    @abstractmethod
    async def generate(self, instruction: str, prompt: str, schema: dict) -> str:
        """
        Return the raw response text.

        Raises:
            ConfigurationError: no credential available
            TransportError: the call could not complete
            EmptyResponseError: the call completed without text
        """
        pass
