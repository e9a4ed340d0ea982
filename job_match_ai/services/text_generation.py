"""Text generation providers for chat advice: Hugging Face Inference API or OpenAI."""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from job_match_ai.config import (
    GENERATION_MAX_NEW_TOKENS,
    GENERATION_REPETITION_PENALTY,
    GENERATION_TEMPERATURE,
    GENERATION_TOP_P,
    HTTP_TIMEOUT_SECONDS,
    HUGGINGFACE_API_KEY,
    HUGGINGFACE_INFERENCE_BASE,
    MODEL_NAME,
    OPENAI_API_KEY,
    TEXT_GENERATION_MODEL,
    TEXT_GENERATION_PROVIDER,
)
from job_match_ai.errors import GenerationError
from job_match_ai.utils.logger import get_logger

logger = get_logger(__name__)


class GenerationParams(BaseModel):
    """Fixed decoding parameters; the prompt is never echoed back."""

    model_config = ConfigDict(frozen=True)

    max_new_tokens: int = Field(default=GENERATION_MAX_NEW_TOKENS, gt=0)
    temperature: float = Field(default=GENERATION_TEMPERATURE, ge=0.0)
    top_p: float = Field(default=GENERATION_TOP_P, gt=0.0, le=1.0)
    repetition_penalty: float = Field(default=GENERATION_REPETITION_PENALTY, ge=1.0)
    return_full_text: bool = False


class TextGenerationService(ABC):
    """Abstract text generation provider. Any failure raises GenerationError."""

    @abstractmethod
    async def generate(self, prompt: str, params: GenerationParams) -> str:
        ...


class HuggingFaceTextGenerationService(TextGenerationService):
    """Hosted inference for causal LMs (default gpt2)."""

    def __init__(
        self,
        api_key: str = HUGGINGFACE_API_KEY,
        model: str = TEXT_GENERATION_MODEL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._url = f"{HUGGINGFACE_INFERENCE_BASE}/{model}"
        self._timeout = timeout
        self._transport = transport

    def _payload(self, prompt: str, params: GenerationParams) -> dict[str, Any]:
        return {
            "inputs": prompt,
            "parameters": params.model_dump(),
            "options": {"wait_for_model": True},
        }

    async def generate(self, prompt: str, params: GenerationParams) -> str:
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._url, json=self._payload(prompt, params), headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Hugging Face HTTP error: %s %s", e.response.status_code, e.response.text[:200])
            raise GenerationError(f"Text generation failed with HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Hugging Face request failed: %s", e)
            raise GenerationError(f"Text generation request failed: {e}") from e

        if isinstance(data, dict) and data.get("error"):
            raise GenerationError(f"Text generation error: {data['error']}")
        item = data[0] if isinstance(data, list) and data else data
        text = item.get("generated_text") if isinstance(item, dict) else None
        if not text:
            raise GenerationError("Empty response from text generation provider")
        return text


class OpenAITextGenerationService(TextGenerationService):
    """Chat completion with the same decoding budget."""

    def __init__(self, api_key: str = OPENAI_API_KEY, model: str = MODEL_NAME) -> None:
        self._api_key = api_key
        self._model = model

    def _get_client(self):
        from openai import AsyncOpenAI
        return AsyncOpenAI(api_key=self._api_key)

    async def generate(self, prompt: str, params: GenerationParams) -> str:
        if not self._api_key:
            raise GenerationError("OPENAI_API_KEY is not set")
        try:
            response = await self._get_client().chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=params.max_new_tokens,
                temperature=params.temperature,
                top_p=params.top_p,
                # OpenAI has no repetition penalty; frequency_penalty is the closest knob
                frequency_penalty=min(2.0, params.repetition_penalty - 1.0),
            )
        except Exception as e:
            logger.exception("OpenAI generation failed: %s", e)
            raise GenerationError(f"Text generation request failed: {e}") from e
        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message or not choice.message.content:
            raise GenerationError("Empty response from text generation provider")
        return choice.message.content


def get_text_generation_service(provider: Optional[str] = None) -> TextGenerationService:
    """provider: override config; None uses TEXT_GENERATION_PROVIDER."""
    p = (provider or TEXT_GENERATION_PROVIDER).strip().lower()
    if p == "openai":
        if not OPENAI_API_KEY:
            logger.warning("OPENAI_API_KEY not set; falling back to Hugging Face inference")
            return HuggingFaceTextGenerationService()
        return OpenAITextGenerationService()
    return HuggingFaceTextGenerationService()
