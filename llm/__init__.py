"""LLM integration module"""

from .client import (
    AnthropicGateway,
    GeminiGateway,
    OpenAIGateway,
    RetryingGateway,
    create_gateway,
)
from .prompts import SimulationReportPrompt

__all__ = [
    "AnthropicGateway",
    "GeminiGateway",
    "OpenAIGateway",
    "RetryingGateway",
    "create_gateway",
    "SimulationReportPrompt",
]
