"""
Tests for ContractService: generation, fallback, draft saving and learning.
"""

import json
from dataclasses import replace
from datetime import date
from unittest.mock import MagicMock

import pytest

from app.domain.constants import ContractSource, GenerationOutcome
from app.domain.errors import InputValidationError
from app.models.memory_schema import ExtractionResult
from app.utils.fallback_contract import render_fallback_contract

from conftest import FIXED_DAY, FakeLLM


class TestValidation:
    @pytest.mark.asyncio
    async def test_missing_fields_are_reported(self, make_service, acme_request):
        service = make_service(FakeLLM())
        request = replace(acme_request, budget="", timeline="   ")

        with pytest.raises(InputValidationError) as exc:
            await service.generate_contract("usr_1", request)

        assert exc.value.missing_fields == ["budget", "timeline"]

    @pytest.mark.asyncio
    async def test_nothing_happens_on_invalid_input(self, acme_request):
        from app.services.contract_service import ContractService

        preference_repo, contract_repo, llm = MagicMock(), MagicMock(), FakeLLM()
        service = ContractService(preference_repo, contract_repo, openai_service=llm)

        with pytest.raises(InputValidationError):
            await service.generate_contract("usr_1", replace(acme_request, client_name=""))

        assert preference_repo.method_calls == []
        assert contract_repo.method_calls == []
        assert llm.calls == []


class TestGeneration:
    @pytest.mark.asyncio
    async def test_ai_contract_is_returned_and_saved(self, make_service, acme_request, contract_repo):
        service = make_service(FakeLLM())

        result = await service.generate_contract("usr_1", acme_request)

        assert result.source == ContractSource.AI
        assert "Acme" in result.contract and "$2,000" in result.contract
        assert result.contract_id.startswith("ctr_")
        draft = contract_repo.get_for_user("usr_1", result.contract_id)
        assert draft["status"] == "draft"
        assert draft["contract_text"] == result.contract
        assert draft["source"] == "ai"

    @pytest.mark.asyncio
    async def test_without_memory_the_store_is_never_touched(self, contract_repo, acme_request):
        from app.services.contract_service import ContractService

        preference_repo = MagicMock()
        llm = FakeLLM()
        service = ContractService(preference_repo, contract_repo, openai_service=llm)

        result = await service.generate_contract("usr_1", replace(acme_request, use_memory=False))

        assert preference_repo.method_calls == []
        assert result.learn_scheduled is False
        assert result.outcome == GenerationOutcome.WITHOUT_MEMORY
        assert "Client Preferences" not in llm.contract_prompts[0]

    @pytest.mark.asyncio
    async def test_first_contract_for_client_has_no_memory(self, make_service, acme_request):
        llm = FakeLLM()
        result = await make_service(llm).generate_contract("usr_1", acme_request)

        assert result.memory_applied is False
        assert result.outcome == GenerationOutcome.WITHOUT_MEMORY
        assert result.learn_scheduled is True
        assert "Client Preferences" not in llm.contract_prompts[0]

    @pytest.mark.asyncio
    async def test_stored_preferences_are_injected(self, make_service, preference_repo, acme_request):
        preference_repo.upsert("usr_1", "Acme", ExtractionResult(tone="formal", industry="SaaS"))
        llm = FakeLLM()

        result = await make_service(llm).generate_contract("usr_1", acme_request)

        prompt = llm.contract_prompts[0]
        assert "Client Preferences (learned from previous contracts with Acme)" in prompt
        assert "- Writing Tone: Use a formal tone throughout the contract" in prompt
        assert "- Industry Context: Client is in the SaaS industry" in prompt
        assert result.memory_applied is True
        assert result.outcome == GenerationOutcome.MEMORY_APPLIED


class TestFallback:
    @pytest.mark.asyncio
    async def test_failed_model_returns_template_byte_for_byte(self, make_service, acme_request):
        service = make_service(FakeLLM(fail_generation=True))

        result = await service.generate_contract("usr_1", acme_request)

        expected = render_fallback_contract(
            contract_type="service",
            client_name="Acme",
            freelancer_name="Jane",
            project_scope="Build a landing page",
            budget="$2,000",
            timeline="2 weeks",
            issued_on=FIXED_DAY,
        )
        assert result.contract == expected
        assert result.source == ContractSource.TEMPLATE
        assert result.outcome == GenerationOutcome.FALLBACK_TEMPLATE
        assert result.memory_applied is False
        assert [d["stage"] for d in result.diagnostics] == ["generation"]

    @pytest.mark.asyncio
    async def test_no_model_configured_uses_template(self, make_service, acme_request):
        result = await make_service(None).generate_contract("usr_1", acme_request)
        assert result.source == ContractSource.TEMPLATE
        assert result.contract_id is not None

    @pytest.mark.asyncio
    async def test_fallback_never_schedules_learning(self, make_service, acme_request, preference_repo):
        result = await make_service(FakeLLM(fail_generation=True)).generate_contract("usr_1", acme_request)

        assert result.learn_scheduled is False
        assert preference_repo.get("usr_1", "Acme") is None

    @pytest.mark.asyncio
    async def test_empty_model_reply_falls_back(self, make_service, acme_request):
        class BlankLLM(FakeLLM):
            async def generate_text(self, prompt, **kwargs):
                return "   "

        result = await make_service(BlankLLM()).generate_contract("usr_1", acme_request)
        assert result.source == ContractSource.TEMPLATE

    def test_template_is_deterministic(self, make_service, acme_request):
        service = make_service(None)
        assert service.render_fallback(acme_request) == service.render_fallback(replace(acme_request))

    def test_template_mentions_parties_and_terms(self):
        text = render_fallback_contract(
            contract_type="design",
            client_name="Globex",
            freelancer_name="Sam",
            project_scope="Logo refresh",
            budget="$800",
            timeline="10 days",
            issued_on=date(2026, 1, 5),
        )
        assert text.startswith("DESIGN SERVICES AGREEMENT")
        assert "January 05, 2026" in text
        assert "two (2)" in text
        for value in ("Globex", "Sam", "Logo refresh", "$800", "10 days"):
            assert value in text

    def test_unknown_type_uses_default_label(self):
        text = render_fallback_contract("consulting", "A", "B", "scope", "$1", "1 day", date(2026, 1, 1))
        assert text.startswith("SERVICE AGREEMENT")
        assert "one (1)" in text


class TestAbsorbedFailures:
    @pytest.mark.asyncio
    async def test_unreadable_memory_still_generates(self, contract_repo, acme_request):
        from app.services.contract_service import ContractService

        preference_repo = MagicMock()
        preference_repo.get.side_effect = RuntimeError("connection reset")
        service = ContractService(preference_repo, contract_repo, openai_service=FakeLLM())

        result = await service.generate_contract("usr_1", acme_request)

        assert result.source == ContractSource.AI
        assert result.memory_applied is False
        assert [d["stage"] for d in result.diagnostics] == ["memory_fetch"]

    @pytest.mark.asyncio
    async def test_unsaveable_draft_still_returns_contract(self, preference_repo, acme_request):
        from app.services.contract_service import ContractService

        contract_repo = MagicMock()
        contract_repo.save_draft.side_effect = RuntimeError("write concern timeout")
        service = ContractService(preference_repo, contract_repo, openai_service=FakeLLM())

        result = await service.generate_contract("usr_1", acme_request)

        assert result.contract
        assert result.contract_id is None
        assert [d["stage"] for d in result.diagnostics] == ["persist"]

    @pytest.mark.asyncio
    async def test_absorbed_failures_are_logged(self, make_service, acme_request, caplog):
        with caplog.at_level("WARNING", logger="app.services.contract_service"):
            await make_service(FakeLLM(fail_generation=True)).generate_contract("usr_1", acme_request)

        record = next(r for r in caplog.records if getattr(r, "absorbed", False))
        assert record.pipeline_stage == "generation"
        assert record.absorbed_error == "GenerationUnavailable"


class TestLearning:
    @pytest.mark.asyncio
    async def test_learning_creates_then_updates_record(self, make_service, preference_repo, memory_log_repo):
        service = make_service(FakeLLM())

        first = await service.learn_from_contract("usr_1", "ctr_1", "contract text", "Acme", "service")
        second = await service.learn_from_contract("usr_1", "ctr_2", "contract text", "Acme", "service")

        assert first["contract_count"] == 1
        assert second["contract_count"] == 2
        assert second["tone"] == "formal"
        assert second["key_terms"] == ["deliverables", "milestones", "acceptance criteria"]
        logs = memory_log_repo.list_recent("usr_1")
        assert len(logs) == 2
        assert {log["contract_id"] for log in logs} == {"ctr_1", "ctr_2"}

    @pytest.mark.asyncio
    async def test_unparseable_extraction_leaves_memory_alone(self, make_service, preference_repo):
        preference_repo.upsert("usr_1", "Acme", ExtractionResult(tone="casual"))
        service = make_service(FakeLLM(extraction_reply="I could not find any preferences."))

        record = await service.learn_from_contract("usr_1", "ctr_1", "contract", "Acme", "service")

        assert record is None
        stored = preference_repo.get("usr_1", "Acme")
        assert stored["contract_count"] == 1
        assert stored["tone"] == "casual"

    @pytest.mark.asyncio
    async def test_extraction_call_failure_never_raises(self, make_service, preference_repo):
        service = make_service(FakeLLM(fail_extraction=True))

        assert await service.learn_from_contract("usr_1", None, "contract", "Acme", "service") is None
        assert preference_repo.get("usr_1", "Acme") is None

    @pytest.mark.asyncio
    async def test_store_failure_never_raises(self, contract_repo):
        from app.services.contract_service import ContractService

        preference_repo = MagicMock()
        preference_repo.upsert.side_effect = RuntimeError("primary stepped down")
        service = ContractService(preference_repo, contract_repo, openai_service=FakeLLM())

        assert await service.learn_from_contract("usr_1", None, "contract", "Acme", "service") is None

    @pytest.mark.asyncio
    async def test_empty_extraction_counts_without_overwriting(self, make_service, preference_repo, caplog):
        preference_repo.upsert("usr_1", "Acme", ExtractionResult(tone="casual"))
        service = make_service(FakeLLM(extraction_reply='{"tone": null, "keyTerms": []}'))

        with caplog.at_level("INFO", logger="app.services.contract_service"):
            record = await service.learn_from_contract("usr_1", None, "contract", "Acme", "service")

        assert record["contract_count"] == 2
        assert record["tone"] == "casual"
        assert any("No preferences found for 'Acme'" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_fenced_extraction_reply_is_learned(self, make_service, preference_repo):
        reply = "```json\n" + json.dumps({"tone": "Casual", "industry": "Retail"}) + "\n```"
        service = make_service(FakeLLM(extraction_reply=reply))

        record = await service.learn_from_contract("usr_1", None, "contract", "Acme", "service")

        assert record["tone"] == "casual"
        assert record["industry"] == "Retail"
