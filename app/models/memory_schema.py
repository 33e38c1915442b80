"""
Pydantic schemas for AI memory

ExtractionResult validates the structured reply of the preference
extraction model before it is merged into a client's stored preferences.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional

from app.config import settings
from app.domain.constants import Tone, PreferredStyle


_NULLISH = {"", "null", "none", "unknown", "n/a", "unset"}


def _clean_optional_text(value: Any) -> Optional[str]:
    if value is None or not isinstance(value, str):
        return None
    value = value.strip()
    if value.lower() in _NULLISH:
        return None
    return value


class ExtractionResult(BaseModel):
    """
    Preferences derived from a single generated contract.

    Unknown enum values and non-string fields are treated as absent rather
    than rejected, so a partially useful reply still updates memory.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    tone: Optional[Tone] = None
    industry: Optional[str] = None
    preferred_style: Optional[PreferredStyle] = Field(None, alias="preferredStyle")
    key_terms: List[str] = Field(default_factory=list, alias="keyTerms")

    @field_validator("tone", mode="before")
    @classmethod
    def _coerce_tone(cls, value):
        value = _clean_optional_text(value)
        if value is None:
            return None
        value = value.lower()
        return value if value in {t.value for t in Tone} else None

    @field_validator("preferred_style", mode="before")
    @classmethod
    def _coerce_style(cls, value):
        value = _clean_optional_text(value)
        if value is None:
            return None
        value = value.lower()
        return value if value in {s.value for s in PreferredStyle} else None

    @field_validator("industry", mode="before")
    @classmethod
    def _coerce_industry(cls, value):
        return _clean_optional_text(value)

    @field_validator("key_terms", mode="before")
    @classmethod
    def _coerce_key_terms(cls, value):
        if not isinstance(value, list):
            return []
        terms: List[str] = []
        for term in value:
            if not isinstance(term, str):
                continue
            term = term.strip()
            if term and term not in terms:
                terms.append(term)
        return terms[:settings.MEMORY_KEY_TERMS_LIMIT]

    def non_empty_fields(self) -> dict:
        """Fields to write into a stored preference, keyed by column name."""
        fields = {}
        if self.tone is not None:
            fields["tone"] = self.tone.value
        if self.industry:
            fields["industry"] = self.industry
        if self.preferred_style is not None:
            fields["preferred_style"] = self.preferred_style.value
        if self.key_terms:
            fields["key_terms"] = list(self.key_terms)
        return fields

    def is_empty(self) -> bool:
        return not self.non_empty_fields()
