"""
Centralized Constants for the Contract Service

SINGLE SOURCE OF TRUTH for enums, labels and prompt phrasings.
All modules should import from here.
"""

from typing import Dict
from enum import Enum


# =============================================================================
# CLIENT PREFERENCE ENUMS
# =============================================================================

class Tone(str, Enum):
    """Most prominent writing tone of a client's contracts."""
    FORMAL = "formal"
    CASUAL = "casual"
    BALANCED = "balanced"


class PreferredStyle(str, Enum):
    """Level of detail a client prefers in contract clauses."""
    DETAILED = "detailed"
    CONCISE = "concise"
    MODERATE = "moderate"


# =============================================================================
# CONTRACTS
# =============================================================================

class ContractType(str, Enum):
    SERVICE = "service"
    NDA = "nda"
    DEVELOPMENT = "development"
    DESIGN = "design"
    CONTENT = "content"


class ContractSource(str, Enum):
    """Which path produced the contract text."""
    AI = "ai"
    TEMPLATE = "template"


class GenerationOutcome(str, Enum):
    """Terminal states of one generation request."""
    MEMORY_APPLIED = "memory_applied"
    WITHOUT_MEMORY = "without_memory"
    FALLBACK_TEMPLATE = "fallback_template"


CONTRACT_TYPE_LABELS: Dict[str, str] = {
    ContractType.SERVICE.value: "SERVICE AGREEMENT",
    ContractType.NDA.value: "NON-DISCLOSURE AGREEMENT",
    ContractType.DEVELOPMENT.value: "SOFTWARE DEVELOPMENT AGREEMENT",
    ContractType.DESIGN.value: "DESIGN SERVICES AGREEMENT",
    ContractType.CONTENT.value: "CONTENT CREATION AGREEMENT",
}

DEFAULT_CONTRACT_LABEL = "SERVICE AGREEMENT"

DRAFT_STATUS = "draft"


# =============================================================================
# MEMORY CONTEXT PHRASINGS
# =============================================================================

STYLE_PHRASES: Dict[str, str] = {
    PreferredStyle.DETAILED.value: (
        "This client prefers detailed, comprehensive clauses with thorough explanations"
    ),
    PreferredStyle.CONCISE.value: (
        "This client prefers concise, straightforward language without unnecessary elaboration"
    ),
    PreferredStyle.MODERATE.value: "Use a balanced approach with moderate detail levels",
}

# Used when a stored style is set but is not one of the known values
DEFAULT_STYLE_PHRASE = "Keep a balanced level of detail suited to the contract type"

MEMORY_EXTRACTION_TYPE = "client_preference"


# =============================================================================
# WEBHOOKS
# =============================================================================

class WebhookEventType(str, Enum):
    PROPOSAL_CREATED = "proposal.created"
    PROPOSAL_SENT = "proposal.sent"
    PROPOSAL_VIEWED = "proposal.viewed"
    PROPOSAL_SIGNED = "proposal.signed"
    PAYMENT_COMPLETED = "payment.completed"
    PAYMENT_FAILED = "payment.failed"
    CLIENT_INVITED = "client.invited"
    TEST = "test"


class WebhookPlatform(str, Enum):
    ZAPIER = "zapier"
    MAKE = "make"
