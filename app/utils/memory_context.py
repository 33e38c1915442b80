"""
Memory context rendering.

Turns a stored client preference into the bullet list that is appended to
the contract generation prompt.
"""
from typing import Any, Dict, Optional

from app.domain.constants import STYLE_PHRASES, DEFAULT_STYLE_PHRASE


def build_memory_context(preference: Optional[Dict[str, Any]]) -> Optional[str]:
    """
    Render a client preference record as prompt clauses.

    Clauses are emitted in a fixed order: tone, style, industry, key terms.
    Returns None when there is no record or nothing worth saying.
    """
    if not preference:
        return None

    clauses = []

    tone = preference.get("tone")
    if tone:
        clauses.append(f"- Writing Tone: Use a {tone} tone throughout the contract")

    style = preference.get("preferred_style")
    if style:
        clauses.append(f"- Style: {STYLE_PHRASES.get(style, DEFAULT_STYLE_PHRASE)}")

    industry = preference.get("industry")
    if industry:
        clauses.append(f"- Industry Context: Client is in the {industry} industry")

    key_terms = [t for t in (preference.get("key_terms") or []) if t]
    if key_terms:
        clauses.append(f"- Preferred Terms: Consistently use these terms: {', '.join(key_terms)}")

    return "\n".join(clauses) or None
