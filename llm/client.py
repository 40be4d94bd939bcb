"""Report gateways for the supported generative engines"""

import asyncio
import json
import logging
from abc import abstractmethod
from typing import Any, Optional

import anthropic
import openai
from google import genai

from core.exceptions import (
    ConfigurationError, EmptyResponseError, SimConsultantError, TransportError
)
from core.enums import LLMProvider
from core.interfaces import ReportGateway
from config import settings

logger = logging.getLogger(__name__)


class SDKGateway(ReportGateway):
    """
    Gateway backed by a blocking provider SDK.

    The SDK call runs in the default executor so the awaiting task stays
    cancellable; a cancelled call is abandoned and its result never returned.
    Exactly one request per call: no retries at this layer.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Any = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens or settings.LLM_MAX_TOKENS
        self.temperature = temperature if temperature is not None else settings.LLM_TEMPERATURE
        self.timeout = timeout or settings.LLM_TIMEOUT
        self._client = client

    @property
    def client(self) -> Any:
        """SDK client, created on first use"""
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError(
                    f"No API key configured for {self.provider}"
                )
            self._client = self._create_client()
        return self._client

    @abstractmethod
    def _create_client(self) -> Any:
        pass

    @abstractmethod
    def _send(self, client: Any, instruction: str, prompt: str, schema: dict) -> Optional[str]:
        """Blocking SDK call returning the response text"""
        pass

    async def generate(self, instruction: str, prompt: str, schema: dict) -> str:
        client = self.client

        logger.info(
            "Requesting report from %s (%s), prompt %d chars",
            self.provider, self.model, len(prompt)
        )

        loop = asyncio.get_running_loop()
        try:
            text = await loop.run_in_executor(
                None,
                lambda: self._send(client, instruction, prompt, schema)
            )
        except SimConsultantError:
            raise
        except Exception as e:
            raise TransportError(
                f"{self.provider} request failed: {e}",
                provider=self.provider
            ) from e

        if not text or not text.strip():
            raise EmptyResponseError(
                f"{self.provider} returned no text", provider=self.provider
            )

        logger.info("Received %d chars from %s", len(text), self.provider)
        return text


class GeminiGateway(SDKGateway):
    """Google Gemini through google-genai, JSON mode with a response schema"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, **kwargs):
        super().__init__(
            api_key=api_key or settings.GOOGLE_API_KEY,
            model=model or settings.GEMINI_MODEL_ID,
            **kwargs
        )

    @property
    def provider(self) -> str:
        return LLMProvider.GEMINI.value

    def _create_client(self) -> Any:
        return genai.Client(
            api_key=self.api_key,
            http_options={"timeout": int(self.timeout * 1000)}  # milliseconds
        )

    def _send(self, client: Any, instruction: str, prompt: str, schema: dict) -> Optional[str]:
        response = client.models.generate_content(
            model=self.model,
            contents=prompt,
            config={
                "system_instruction": instruction,
                "response_mime_type": "application/json",
                "response_json_schema": schema,
                "max_output_tokens": self.max_tokens,
                "temperature": self.temperature,
            }
        )
        return response.text


class OpenAIGateway(SDKGateway):
    """OpenAI chat completions with a strict json_schema response format"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, **kwargs):
        super().__init__(
            api_key=api_key or settings.OPENAI_API_KEY,
            model=model or settings.OPENAI_MODEL,
            **kwargs
        )

    @property
    def provider(self) -> str:
        return LLMProvider.OPENAI.value

    def _create_client(self) -> Any:
        return openai.OpenAI(api_key=self.api_key, timeout=self.timeout)

    def _send(self, client: Any, instruction: str, prompt: str, schema: dict) -> Optional[str]:
        response = client.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=[
                {"role": "system", "content": instruction},
                {"role": "user", "content": prompt}
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "simulation_report",
                    "schema": schema,
                    "strict": True,
                },
            }
        )
        if not response.choices:
            return None
        return response.choices[0].message.content


class AnthropicGateway(SDKGateway):
    """Anthropic messages API; the schema is enforced through a forced tool call"""

    TOOL_NAME = "submit_report"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, **kwargs):
        super().__init__(
            api_key=api_key or settings.ANTHROPIC_API_KEY,
            model=model or settings.ANTHROPIC_MODEL,
            **kwargs
        )

    @property
    def provider(self) -> str:
        return LLMProvider.ANTHROPIC.value

    def _create_client(self) -> Any:
        return anthropic.Anthropic(api_key=self.api_key, timeout=self.timeout)

    def _send(self, client: Any, instruction: str, prompt: str, schema: dict) -> Optional[str]:
        response = client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=instruction,
            messages=[{"role": "user", "content": prompt}],
            tools=[{
                "name": self.TOOL_NAME,
                "description": "Submit the simulation executive report.",
                "input_schema": schema,
            }],
            tool_choice={"type": "tool", "name": self.TOOL_NAME}
        )
        for block in response.content:
            if block.type == "tool_use" and block.name == self.TOOL_NAME:
                return json.dumps(block.input, ensure_ascii=False)
        return None


class RetryingGateway(ReportGateway):
    """Wraps a gateway and retries transport failures with exponential backoff"""

    def __init__(
        self,
        inner: ReportGateway,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None
    ):
        self.inner = inner
        self.max_retries = max(1, max_retries or settings.LLM_MAX_RETRIES)
        self.retry_delay = retry_delay if retry_delay is not None else settings.LLM_RETRY_DELAY

    @property
    def provider(self) -> str:
        return self.inner.provider

    async def generate(self, instruction: str, prompt: str, schema: dict) -> str:
        last_error: Optional[TransportError] = None

        for attempt in range(self.max_retries):
            try:
                return await self.inner.generate(instruction, prompt, schema)
            except TransportError as e:
                last_error = e
                logger.warning(
                    "Attempt %d/%d to %s failed: %s",
                    attempt + 1, self.max_retries, self.provider, e
                )
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(self.retry_delay * (2 ** attempt))

        raise TransportError(
            f"{self.provider} failed after {self.max_retries} attempts. Last error: {last_error}",
            provider=self.provider,
            retries=self.max_retries
        ) from last_error


GATEWAYS = {
    LLMProvider.GEMINI: GeminiGateway,
    LLMProvider.OPENAI: OpenAIGateway,
    LLMProvider.ANTHROPIC: AnthropicGateway,
}


def create_gateway(provider: Optional[str] = None) -> ReportGateway:
    """
    Build the gateway for the configured engine

    Args:
        provider: Engine name, defaults to settings.LLM_PROVIDER

    Returns:
        Gateway, wrapped in RetryingGateway when LLM_MAX_RETRIES > 1

    Raises:
        ConfigurationError: unknown provider
    """
    name = (provider or settings.LLM_PROVIDER).strip().lower()
    try:
        gateway_cls = GATEWAYS[LLMProvider(name)]
    except ValueError:
        raise ConfigurationError(
            f"Unknown LLM provider: {name}. "
            f"Supported: {', '.join(p.value for p in LLMProvider)}"
        ) from None

    gateway = gateway_cls()
    if settings.LLM_MAX_RETRIES > 1:
        return RetryingGateway(gateway)
    return gateway
