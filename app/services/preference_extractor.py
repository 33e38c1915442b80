"""
Preference Extractor Service

Derives a client's writing preferences from a freshly generated contract
with a second, low-temperature model call.

The model is asked for JSON mode where supported; fence stripping is kept
for models that still wrap the reply in a Markdown code block, and every
reply is validated through ExtractionResult before it can reach the store.
"""
import json
import logging
import re
from typing import Optional

from pydantic import ValidationError

from app.config import settings
from app.domain.errors import ExtractionParseError, ExtractionUnavailable
from app.models.memory_schema import ExtractionResult
from app.utils.prompt_engine import PromptEngine

logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"^```[a-zA-Z0-9_-]*[ \t]*\r?\n?")
_CLOSING_FENCE = re.compile(r"\r?\n?```\s*$")


def strip_code_fence(raw: str) -> str:
    """Remove an optional ```/```json wrapper around a model reply."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
        cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_extraction_reply(raw: Optional[str]) -> ExtractionResult:
    """
    Parse the extraction model's raw reply.

    Raises:
        ExtractionParseError: If the reply is not a JSON object after
            fence stripping
    """
    if not raw or not raw.strip():
        raise ExtractionParseError("Empty extraction reply", raw_reply=raw or "")

    cleaned = strip_code_fence(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionParseError(f"Extraction reply is not valid JSON: {e}", raw_reply=raw) from e

    if not isinstance(data, dict):
        raise ExtractionParseError(
            f"Extraction reply must be a JSON object, got {type(data).__name__}",
            raw_reply=raw
        )

    try:
        return ExtractionResult.model_validate(data)
    except ValidationError as e:
        raise ExtractionParseError(f"Extraction reply failed validation: {e}", raw_reply=raw) from e


class PreferenceExtractor:
    """
    Extracts an ExtractionResult from contract text.
    """

    def __init__(
        self,
        openai_service=None,
        prompt_engine: Optional[PromptEngine] = None,
        char_limit: int = None,
        temperature: float = None
    ):
        """
        Args:
            openai_service: OpenAIService (None means extraction is unavailable)
            prompt_engine: Builds the extraction prompt
            char_limit: How much of the contract is sent to the model
            temperature: Sampling temperature for the extraction call
        """
        self.openai_service = openai_service
        self.prompt_engine = prompt_engine or PromptEngine()
        self.char_limit = char_limit or settings.MEMORY_EXTRACTION_CHAR_LIMIT
        self.temperature = settings.MEMORY_EXTRACTION_TEMPERATURE if temperature is None else temperature

    async def extract(
        self,
        contract_text: str,
        client_name: str,
        contract_type: str
    ) -> ExtractionResult:
        """
        Extract client preferences from a contract.

        Raises:
            ExtractionUnavailable: No model configured or the model call failed
            ExtractionParseError: The model reply could not be parsed
        """
        if self.openai_service is None:
            raise ExtractionUnavailable("No text generation service configured")

        prompt = self.prompt_engine.build_extraction_prompt(
            contract_text=contract_text,
            client_name=client_name,
            contract_type=contract_type,
            char_limit=self.char_limit
        )

        try:
            raw = await self.openai_service.generate_text(
                prompt=prompt,
                system_message=PromptEngine.EXTRACTION_SYSTEM_MESSAGE,
                temperature=self.temperature,
                max_tokens=500,
                model=getattr(self.openai_service, "extraction_model", None),
                json_mode=True
            )
        except Exception as e:
            raise ExtractionUnavailable(f"Extraction call failed: {e}") from e

        result = parse_extraction_reply(raw)
        logger.info(
            f"[PreferenceExtractor] Extracted preferences for '{client_name}': "
            f"{result.non_empty_fields() or 'nothing'}"
        )
        return result
