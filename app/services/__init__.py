"""
Application Services - Business Logic Layer

Services contain business logic extracted from route handlers,
coordinating repositories and external services.
"""

from app.services.contract_service import ContractService, ContractRequest, GenerationResult
from app.services.preference_extractor import (
    PreferenceExtractor,
    parse_extraction_reply,
    strip_code_fence,
)
from app.services.webhook_service import WebhookService

__all__ = [
    "ContractService",
    "ContractRequest",
    "GenerationResult",
    "PreferenceExtractor",
    "parse_extraction_reply",
    "strip_code_fence",
    "WebhookService",
]
