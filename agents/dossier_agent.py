"""
Persona Dossier Agent (Gemini + Google Search grounding)

- Built on the Google Gen AI SDK (`google-genai`).
- One `generate_content` call per analysis, with the Google Search tool enabled
  so the model can consult live web results and report the pages it used.
- The provider response is normalized into `DossierResult` by `agents.grounding`.

Required env:
  - GEMINI_API_KEY (checked when an analysis starts, not at import)
Optional env:
  - DOSSIER_MODEL_NAME (defaults to gemini-2.5-flash)
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Callable, Coroutine, List, Optional

from google import genai
from google.genai import types
from pydantic import ValidationError

from dossier_state_manager import GENERIC_ERROR_MESSAGE, DossierResult

from .dossier_prompts import DOSSIER_SYSTEM_PROMPT, dossier_request_prompt
from .grounding import normalize_response

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gemini-2.5-flash"

# Every harm category runs at BLOCK_NONE so investigative output is not truncated.
PERMISSIVE_HARM_CATEGORIES: tuple[types.HarmCategory, ...] = (
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
    types.HarmCategory.HARM_CATEGORY_CIVIC_INTEGRITY,
)


class DossierError(RuntimeError):
    """Base class for failures surfaced to the user."""


class ConfigurationError(DossierError, EnvironmentError):
    """Raised when the provider credential is missing."""


class ProviderError(DossierError):
    """Raised when the Gemini call fails or returns an unusable response."""


class DossierAgent:
    """Turns free-text notes about a person into a grounded dossier."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        client_factory: Callable[..., Any] = genai.Client,
    ) -> None:
        self._api_key = api_key
        self._model_name = model_name or os.getenv("DOSSIER_MODEL_NAME", DEFAULT_MODEL_NAME)
        self._client_factory = client_factory
        logger.info("Initializing dossier agent with Gemini model '%s'", self._model_name)

    @property
    def model_name(self) -> str:
        return self._model_name

    def analyze(self, person_text: str) -> DossierResult:
        """Blocking wrapper around `analyze_async`."""

        return self._run_async(self.analyze_async(person_text))

    async def analyze_async(self, person_text: str) -> DossierResult:
        api_key = self._resolve_api_key()

        logger.info("Requesting dossier from '%s' (%d characters of input).", self._model_name, len(person_text))
        client = None
        try:
            client = self._client_factory(api_key=api_key)
            response = await client.aio.models.generate_content(
                model=self._model_name,
                contents=self._build_contents(person_text),
                config=self._build_config(),
            )
            result = normalize_response(response)
        except ValidationError as exc:
            logger.exception("Gemini returned a malformed response: %s", exc)
            raise ProviderError(f"Malformed response from the model provider: {exc.error_count()} invalid field(s).") from exc
        except Exception as exc:
            logger.exception("Gemini API error: %s", exc)
            raise ProviderError(self._provider_message(exc)) from exc
        finally:
            if client is not None:
                await self._close_client(client)

        logger.info("Dossier generated with %d sources.", len(result.sources))
        return result

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------
    def _resolve_api_key(self) -> str:
        api_key = self._api_key or os.getenv("GEMINI_API_KEY")
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set")
        return api_key

    @staticmethod
    def _build_contents(person_text: str) -> List[types.Content]:
        return [
            types.Content(
                role="user",
                parts=[types.Part(text=dossier_request_prompt(person_text))],
            )
        ]

    @staticmethod
    def _build_config() -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=DOSSIER_SYSTEM_PROMPT,
            tools=[types.Tool(google_search=types.GoogleSearch())],
            safety_settings=[
                types.SafetySetting(category=category, threshold=types.HarmBlockThreshold.BLOCK_NONE)
                for category in PERMISSIVE_HARM_CATEGORIES
            ],
        )

    @staticmethod
    def _provider_message(exc: Exception) -> str:
        message = getattr(exc, "message", None) or str(exc)
        return message or GENERIC_ERROR_MESSAGE

    @staticmethod
    async def _close_client(client: Any) -> None:
        """Release the async HTTP pool before the event loop that owns it closes."""

        try:
            await client.aio.aclose()
        except Exception as exc:  # pragma: no cover - defensive path
            logger.warning("Failed to close Gemini client: %s", exc)

    @staticmethod
    def _run_async(coro: Coroutine[Any, Any, DossierResult]) -> DossierResult:
        return asyncio.run(coro)
