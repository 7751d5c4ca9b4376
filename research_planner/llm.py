"""Chat-completions client and the drafter capability the flows depend on."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol, Type

import requests
from pydantic import BaseModel, ValidationError

from .config import OPENAI_BASE_URL
from .errors import GenerationError, MissingInputError
from .prompts import PROMPTS, render_prompt

logger = logging.getLogger(__name__)


class Drafter(Protocol):
    def draft(self, prompt_kind: str, facts: Dict[str, Any]) -> Dict[str, Any]:
        """Return the structured result for ``prompt_kind`` or raise GenerationError."""


class LLM:
    """Minimal JSON-mode chat client. Raw HTTP keeps us clear of SDK version drift."""

    def __init__(self, model: str, api_key: Optional[str], base_url: str = OPENAI_BASE_URL,
                 timeout: int = 120, session: Optional[requests.Session] = None):
        self.model = model
        self.key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.key)

    def generate_json(self, system: str, user: str, schema: Type[BaseModel],
                      temperature: float = 0.2) -> BaseModel:
        if not self.enabled:
            raise MissingInputError("An API key is required before generating content.")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": temperature,
            "response_format": {"type": "json_object"},
        }
        logger.info("LLM request: model=%s schema=%s", self.model, schema.__name__)
        try:
            r = self.http.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.key}", "Content-Type": "application/json"},
                json=payload,
                timeout=self.timeout,
            )
            r.raise_for_status()
            content = r.json()["choices"][0]["message"]["content"]
        except requests.RequestException as e:
            logger.error("LLM request failed: %s", e)
            raise GenerationError(f"The AI service request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise GenerationError("The AI service returned an unexpected response.") from e

        if not content:
            raise GenerationError("The AI service returned an empty response.")
        try:
            return schema.model_validate(json.loads(content))
        except (ValueError, ValidationError) as e:
            logger.error("LLM output failed validation for %s: %s", schema.__name__, e)
            raise GenerationError("The AI response did not match the expected format.") from e


class LLMDrafter:
    """Drafter backed by :class:`LLM` and the prompt registry."""

    def __init__(self, llm: LLM):
        self.llm = llm

    def draft(self, prompt_kind: str, facts: Dict[str, Any]) -> Dict[str, Any]:
        spec = PROMPTS[prompt_kind]
        result = self.llm.generate_json(spec.system, render_prompt(spec.template, facts), spec.output)
        return result.model_dump(exclude_none=True)
