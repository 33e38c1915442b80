"""
MongoDB Repositories - Domain-specific data access.

Repository Pattern Implementation:
- ClientPreferenceRepository - AI memory of per-client writing preferences
- ContractRepository, MemoryLogRepository - Contract drafts and extraction log
- WebhookIntegrationRepository, WebhookEventRepository - Zapier/Make fan-out
- UserRepository - API key authentication
"""

from app.infra.mongodb.repositories.preference_repo import ClientPreferenceRepository
from app.infra.mongodb.repositories.contract_repo import (
    ContractRepository,
    MemoryLogRepository,
)
from app.infra.mongodb.repositories.webhook_repo import (
    WebhookIntegrationRepository,
    WebhookEventRepository,
)
from app.infra.mongodb.repositories.user_repo import UserRepository

__all__ = [
    "ClientPreferenceRepository",
    "ContractRepository",
    "MemoryLogRepository",
    "WebhookIntegrationRepository",
    "WebhookEventRepository",
    "UserRepository",
]
