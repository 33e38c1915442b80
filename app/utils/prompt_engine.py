"""
Prompt Engine for Contract Generation

Handles:
- Contract generation prompts built from the request fields
- Injection of learned client preferences (memory context)
- The structured preference extraction prompt

This separates prompt logic from the contract service for better maintainability.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class PromptEngine:
    """
    Builds the prompts sent to the text generation model.
    """

    CONTRACT_SYSTEM_MESSAGE = """You are an experienced contracts writer for freelancers and small agencies.

You write clear, professional, legally-sound service contracts in plain English.

RULES:
1. Use the exact party names, budget and timeline you are given
2. Never invent fees, dates or obligations that were not provided
3. Organize the contract in titled sections (PARTIES, SCOPE OF WORK, PAYMENT TERMS, ...)
4. End with signature blocks for both parties
5. Output the contract text only, with no commentary before or after it"""

    EXTRACTION_SYSTEM_MESSAGE = (
        "You analyze contracts and describe the writing preferences they reflect. "
        "You always answer with a single JSON object."
    )

    def build_contract_prompt(
        self,
        contract_type: str,
        client_name: str,
        freelancer_name: str,
        project_scope: str,
        budget: str,
        timeline: str,
        memory_context: Optional[str] = None
    ) -> str:
        """
        Build the contract generation prompt.

        Args:
            memory_context: Rendered client preferences, appended when present

        Returns:
            Prompt for OpenAI
        """
        logger.debug(f"[PromptEngine] Building {contract_type} contract prompt (memory={bool(memory_context)})")

        prompt = f"""Generate a professional {contract_type} contract between:
- Client: {client_name}
- Freelancer: {freelancer_name}

Project Details:
- Scope: {project_scope}
- Budget: {budget}
- Timeline: {timeline}"""

        if memory_context:
            prompt += f"""

Client Preferences (learned from previous contracts with {client_name}):
{memory_context}

Apply these preferences throughout the contract."""

        prompt += "\n\nPlease generate a comprehensive, legally-sound contract in a clear format."
        return prompt

    def build_extraction_prompt(
        self,
        contract_text: str,
        client_name: str,
        contract_type: str,
        char_limit: int = 2000
    ) -> str:
        """
        Build the preference extraction prompt.

        Only the first char_limit characters of the contract are embedded.
        """
        excerpt = contract_text[:char_limit]

        return f"""Analyze this {contract_type} contract written for {client_name} and extract the client's writing preferences and patterns:

CONTRACT:
{excerpt}

Return ONLY valid JSON (no markdown, no code blocks) with:
{{
  "tone": "formal|casual|balanced" (most prominent tone),
  "industry": "name of industry if detectable, else null",
  "preferredStyle": "detailed|concise|moderate" (level of detail in clauses),
  "keyTerms": ["term1", "term2"] (up to 3 unique/important terms)
}}"""
