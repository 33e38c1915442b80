"""
Contract Generation Routes

- POST /api/contracts/generate: AI contract with optional client memory.
  Always returns a contract (AI or template); only missing fields are rejected.
- GET  /api/contracts: the caller's saved drafts
- GET  /api/contracts/{contract_id}: one draft

Learning from the generated contract and the proposal.created webhook run
as background tasks after the response is sent.
"""

import logging
from fastapi import APIRouter, BackgroundTasks, HTTPException, Depends, Query
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.dependencies import get_contract_repo, get_contract_service, get_webhook_service
from app.domain.constants import WebhookEventType
from app.domain.errors import InputValidationError
from app.infra.mongodb.repositories import ContractRepository
from app.middleware.auth import get_current_user
from app.services.contract_service import ContractRequest, ContractService
from app.services.webhook_service import WebhookService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contracts", tags=["contracts"])


# ===================== REQUEST/RESPONSE MODELS =====================

class CamelModel(BaseModel):
    """Accepts and emits camelCase, also accepts snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateContractRequest(CamelModel):
    """Request to generate a contract. Blank fields are rejected with 400."""
    contract_type: Optional[str] = Field(None, description="service, nda, development, design or content")
    client_name: Optional[str] = Field(None, description="Client name; memory is keyed on it exactly")
    freelancer_name: Optional[str] = Field(None, description="Freelancer / service provider name")
    project_scope: Optional[str] = Field(None, description="Description of the work")
    budget: Optional[str] = Field(None, description="Fee as written, e.g. '$2,000'")
    timeline: Optional[str] = Field(None, description="Timeline as written, e.g. '2 weeks'")
    use_memory: bool = Field(False, description="Apply and update this client's learned preferences")


class GenerateContractResponse(CamelModel):
    success: bool
    contract: str
    source: str = Field(description="'ai' or 'template'")
    outcome: str
    memory_applied: bool
    contract_id: Optional[str] = None
    diagnostics: List[Dict[str, str]] = Field(default_factory=list)


class ContractListResponse(CamelModel):
    success: bool
    contracts: List[Dict[str, Any]]
    count: int


# ===================== ENDPOINTS =====================

@router.post(
    "/generate",
    response_model=GenerateContractResponse,
    status_code=200,
    responses={
        200: {"description": "Contract generated (AI or template fallback)"},
        400: {"description": "Missing required fields"}
    }
)
async def generate_contract(
    request: GenerateContractRequest,
    background_tasks: BackgroundTasks,
    user: dict = Depends(get_current_user),
    contract_service: ContractService = Depends(get_contract_service),
    webhook_service: WebhookService = Depends(get_webhook_service)
):
    """
    Generate a contract.

    **Request Example:**
    ```json
    {
        "contractType": "service",
        "clientName": "Acme",
        "freelancerName": "Jane",
        "projectScope": "Build a landing page",
        "budget": "$2,000",
        "timeline": "2 weeks",
        "useMemory": true
    }
    ```
    """
    service_request = ContractRequest(
        contract_type=(request.contract_type or "").strip(),
        client_name=request.client_name or "",
        freelancer_name=request.freelancer_name or "",
        project_scope=request.project_scope or "",
        budget=request.budget or "",
        timeline=request.timeline or "",
        use_memory=request.use_memory
    )

    try:
        result = await contract_service.generate_contract(user["user_id"], service_request)
    except InputValidationError as e:
        raise HTTPException(status_code=400, detail={
            "error": "Missing required fields",
            "missing_fields": e.missing_fields
        })

    if result.learn_scheduled:
        background_tasks.add_task(
            contract_service.learn_from_contract,
            user["user_id"],
            result.contract_id,
            result.contract,
            service_request.client_name,
            service_request.contract_type
        )

    if result.contract_id:
        background_tasks.add_task(
            webhook_service.trigger,
            user["user_id"],
            WebhookEventType.PROPOSAL_CREATED,
            proposal_id=result.contract_id,
            proposal_title=f"{service_request.contract_type} contract",
            client_name=service_request.client_name,
            metadata={"source": result.source.value}
        )

    return GenerateContractResponse(
        success=True,
        contract=result.contract,
        source=result.source.value,
        outcome=result.outcome.value,
        memory_applied=result.memory_applied,
        contract_id=result.contract_id,
        diagnostics=result.diagnostics
    )


@router.get("", response_model=ContractListResponse)
async def list_contracts(
    limit: int = Query(50, ge=1, le=200),
    user: dict = Depends(get_current_user),
    repo: ContractRepository = Depends(get_contract_repo)
):
    """List the caller's contract drafts, newest first."""
    try:
        contracts = repo.list_by_user(user["user_id"], limit=limit)
        return ContractListResponse(success=True, contracts=contracts, count=len(contracts))
    except Exception as e:
        logger.error(f"Error listing contracts: {e}")
        raise HTTPException(500, str(e))


@router.get("/{contract_id}")
async def get_contract(
    contract_id: str,
    user: dict = Depends(get_current_user),
    repo: ContractRepository = Depends(get_contract_repo)
):
    """Get one of the caller's contracts."""
    try:
        contract = repo.get_for_user(user["user_id"], contract_id)
        if not contract:
            raise HTTPException(404, "Contract not found")
        return {"success": True, "contract": contract}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching contract: {e}")
        raise HTTPException(500, str(e))
