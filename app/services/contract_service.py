"""
Contract Service

Business logic for contract generation with AI memory:
- Optional memory context from the client's learned preferences
- AI generation with a deterministic template fallback
- Draft persistence
- Post-response preference extraction ("learning")

Every step after input validation degrades instead of failing: the caller
always gets a contract. Absorbed failures are logged and reported back as
diagnostics.
"""
import logging
from typing import Optional, List, Dict, Any, Callable
from dataclasses import dataclass, field
from datetime import date

from app.config import settings
from app.domain.constants import ContractSource, GenerationOutcome
from app.domain.errors import (
    ContractServiceError,
    ExtractionParseError,
    ExtractionUnavailable,
    GenerationUnavailable,
    InputValidationError,
    MemoryFetchFailure,
    MemoryUpdateFailure,
    PersistFailure,
)
from app.services.preference_extractor import PreferenceExtractor
from app.utils.fallback_contract import render_fallback_contract
from app.utils.memory_context import build_memory_context
from app.utils.prompt_engine import PromptEngine

logger = logging.getLogger(__name__)


@dataclass
class ContractRequest:
    """Input parameters for contract generation."""
    contract_type: str
    client_name: str
    freelancer_name: str
    project_scope: str
    budget: str
    timeline: str
    use_memory: bool = False

    REQUIRED_FIELDS = (
        "contract_type",
        "client_name",
        "freelancer_name",
        "project_scope",
        "budget",
        "timeline",
    )

    def missing_fields(self) -> List[str]:
        return [
            name for name in self.REQUIRED_FIELDS
            if not isinstance(getattr(self, name), str) or not getattr(self, name).strip()
        ]


@dataclass
class GenerationResult:
    """Result of contract generation."""
    contract: str
    source: ContractSource
    outcome: GenerationOutcome
    memory_applied: bool = False
    contract_id: Optional[str] = None
    learn_scheduled: bool = False
    diagnostics: List[Dict[str, str]] = field(default_factory=list)


class ContractService:
    """
    Orchestrates one contract generation request.

    Collaborators are passed in so tests can substitute fakes:
    - preference_repo: ClientPreferenceRepository
    - contract_repo: ContractRepository
    - memory_log_repo: MemoryLogRepository (optional)
    - openai_service: OpenAIService (None means template-only)
    """

    def __init__(
        self,
        preference_repo,
        contract_repo,
        memory_log_repo=None,
        openai_service=None,
        prompt_engine: Optional[PromptEngine] = None,
        extractor: Optional[PreferenceExtractor] = None,
        today: Callable[[], date] = date.today
    ):
        self.preference_repo = preference_repo
        self.contract_repo = contract_repo
        self.memory_log_repo = memory_log_repo
        self.openai_service = openai_service
        self.prompt_engine = prompt_engine or PromptEngine()
        self.extractor = extractor or PreferenceExtractor(
            openai_service=openai_service,
            prompt_engine=self.prompt_engine
        )
        self.today = today

    # ===================== GENERATION =====================

    async def generate_contract(self, user_id: str, request: ContractRequest) -> GenerationResult:
        """
        Generate a contract for the request.

        Steps:
        1. Validate required fields
        2. Fetch memory context (use_memory only)
        3. Generate with AI, falling back to the local template
        4. Save the draft

        The learning step is not run here; when learn_scheduled is set the
        caller runs learn_from_contract after responding.

        Raises:
            InputValidationError: If required fields are missing
        """
        missing = request.missing_fields()
        if missing:
            raise InputValidationError(missing)

        logger.info(
            f"[ContractService] Generating {request.contract_type} contract for "
            f"'{request.client_name}' (memory={request.use_memory})"
        )
        diagnostics: List[Dict[str, str]] = []

        memory_context = None
        if request.use_memory:
            try:
                memory_context = self._fetch_memory_context(user_id, request.client_name)
            except MemoryFetchFailure as e:
                self._absorb(e, diagnostics, user_id=user_id, client_name=request.client_name)

        try:
            contract = await self._generate_with_ai(request, memory_context)
            source = ContractSource.AI
        except GenerationUnavailable as e:
            self._absorb(e, diagnostics, user_id=user_id, client_name=request.client_name)
            contract = self.render_fallback(request)
            source = ContractSource.TEMPLATE

        memory_applied = bool(memory_context) and source == ContractSource.AI

        contract_id = None
        try:
            contract_id = self._save_draft(user_id, request, contract, source, memory_applied)
        except PersistFailure as e:
            self._absorb(e, diagnostics, user_id=user_id, client_name=request.client_name)

        if source == ContractSource.TEMPLATE:
            outcome = GenerationOutcome.FALLBACK_TEMPLATE
        elif memory_applied:
            outcome = GenerationOutcome.MEMORY_APPLIED
        else:
            outcome = GenerationOutcome.WITHOUT_MEMORY

        logger.info(f"[ContractService] Contract ready ({outcome.value}, draft={contract_id})")

        return GenerationResult(
            contract=contract,
            source=source,
            outcome=outcome,
            memory_applied=memory_applied,
            contract_id=contract_id,
            learn_scheduled=request.use_memory and source == ContractSource.AI,
            diagnostics=diagnostics
        )

    def render_fallback(self, request: ContractRequest) -> str:
        """Render the deterministic template for a request."""
        return render_fallback_contract(
            contract_type=request.contract_type,
            client_name=request.client_name,
            freelancer_name=request.freelancer_name,
            project_scope=request.project_scope,
            budget=request.budget,
            timeline=request.timeline,
            issued_on=self.today()
        )

    def _fetch_memory_context(self, user_id: str, client_name: str) -> Optional[str]:
        try:
            preference = self.preference_repo.get(user_id, client_name)
        except Exception as e:
            raise MemoryFetchFailure(f"Could not read client preferences: {e}") from e
        return build_memory_context(preference)

    async def _generate_with_ai(self, request: ContractRequest, memory_context: Optional[str]) -> str:
        if self.openai_service is None:
            raise GenerationUnavailable("OpenAI API key not configured")

        prompt = self.prompt_engine.build_contract_prompt(
            contract_type=request.contract_type,
            client_name=request.client_name,
            freelancer_name=request.freelancer_name,
            project_scope=request.project_scope,
            budget=request.budget,
            timeline=request.timeline,
            memory_context=memory_context
        )

        try:
            contract = await self.openai_service.generate_text(
                prompt=prompt,
                system_message=PromptEngine.CONTRACT_SYSTEM_MESSAGE,
                temperature=settings.CONTRACT_TEMPERATURE,
                max_tokens=settings.CONTRACT_MAX_TOKENS
            )
        except Exception as e:
            raise GenerationUnavailable(f"AI generation failed: {e}") from e

        if not contract or not contract.strip():
            raise GenerationUnavailable("AI generation returned an empty contract")
        return contract

    def _save_draft(
        self,
        user_id: str,
        request: ContractRequest,
        contract: str,
        source: ContractSource,
        memory_applied: bool
    ) -> str:
        try:
            return self.contract_repo.save_draft(
                user_id=user_id,
                contract_type=request.contract_type,
                client_name=request.client_name,
                freelancer_name=request.freelancer_name,
                project_scope=request.project_scope,
                budget=request.budget,
                timeline=request.timeline,
                contract_text=contract,
                source=source.value,
                memory_applied=memory_applied
            )
        except Exception as e:
            raise PersistFailure(f"Could not save contract draft: {e}") from e

    # ===================== LEARNING =====================

    async def learn_from_contract(
        self,
        user_id: str,
        contract_id: Optional[str],
        contract_text: str,
        client_name: str,
        contract_type: str
    ) -> Optional[Dict[str, Any]]:
        """
        Extract preferences from a generated contract and merge them into memory.

        Never raises: this runs after the response has been sent.

        Returns:
            The updated preference record, or None if memory was not updated
        """
        try:
            extraction = await self.extractor.extract(contract_text, client_name, contract_type)
        except (ExtractionUnavailable, ExtractionParseError) as e:
            self._absorb(e, user_id=user_id, client_name=client_name)
            return None

        if extraction.is_empty():
            logger.info(
                f"[ContractService] No preferences found for '{client_name}', "
                f"counting the contract without changing stored fields"
            )

        try:
            record = self.preference_repo.upsert(user_id, client_name, extraction)
        except Exception as e:
            self._absorb(
                MemoryUpdateFailure(f"Could not update client preferences: {e}"),
                user_id=user_id,
                client_name=client_name
            )
            return None

        if self.memory_log_repo is not None:
            try:
                self.memory_log_repo.log_extraction(
                    user_id=user_id,
                    contract_id=contract_id,
                    client_name=client_name,
                    extracted_data=extraction.non_empty_fields()
                )
            except Exception as e:
                logger.warning(f"[ContractService] Could not log memory extraction: {e}")

        return record

    # ===================== DIAGNOSTICS =====================

    @staticmethod
    def _absorb(
        error: ContractServiceError,
        diagnostics: Optional[List[Dict[str, str]]] = None,
        **context
    ):
        """Log an absorbed failure and add it to the request's diagnostics."""
        logger.warning(
            f"[ContractService] Absorbed {error.stage} failure: {error}",
            extra={
                "pipeline_stage": error.stage,
                "absorbed_error": type(error).__name__,
                "absorbed": True,
                **context
            }
        )
        if diagnostics is not None:
            diagnostics.append({
                "stage": error.stage,
                "error": type(error).__name__,
                "message": str(error),
            })
