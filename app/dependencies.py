"""
FastAPI dependency providers.

Shared handles (database, OpenAI service) live on app.state and are created
in the application lifespan; repositories and services are built per request
on top of them. Tests replace any of these with app.dependency_overrides.
"""
from typing import Optional

from fastapi import Depends, Request
from pymongo.database import Database

from app.infra.mongodb.repositories import (
    ClientPreferenceRepository,
    ContractRepository,
    MemoryLogRepository,
    WebhookIntegrationRepository,
    WebhookEventRepository,
    UserRepository,
)
from app.services.contract_service import ContractService
from app.services.webhook_service import WebhookService
from app.utils.openai_service import OpenAIService


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_openai_service(request: Request) -> Optional[OpenAIService]:
    return getattr(request.app.state, "openai_service", None)


def get_user_repo(db: Database = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_preference_repo(db: Database = Depends(get_db)) -> ClientPreferenceRepository:
    return ClientPreferenceRepository(db)


def get_contract_repo(db: Database = Depends(get_db)) -> ContractRepository:
    return ContractRepository(db)


def get_memory_log_repo(db: Database = Depends(get_db)) -> MemoryLogRepository:
    return MemoryLogRepository(db)


def get_contract_service(
    preference_repo: ClientPreferenceRepository = Depends(get_preference_repo),
    contract_repo: ContractRepository = Depends(get_contract_repo),
    memory_log_repo: MemoryLogRepository = Depends(get_memory_log_repo),
    openai_service: Optional[OpenAIService] = Depends(get_openai_service)
) -> ContractService:
    return ContractService(
        preference_repo=preference_repo,
        contract_repo=contract_repo,
        memory_log_repo=memory_log_repo,
        openai_service=openai_service
    )


def get_webhook_service(db: Database = Depends(get_db)) -> WebhookService:
    return WebhookService(
        integration_repo=WebhookIntegrationRepository(db),
        event_repo=WebhookEventRepository(db)
    )
