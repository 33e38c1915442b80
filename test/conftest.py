"""Pytest configuration and shared fixtures."""

import json
import os
import sys
from datetime import date
from pathlib import Path

import mongomock
import pytest

# Make `app` and `main` importable when running from the repo root
sys.path.insert(0, str(Path(__file__).parent.parent))

os.environ.setdefault("OPENAI_API_KEY", "")
os.environ.setdefault("MONGODB_DB_NAME", "proposalfast_test")

from app.infra.mongodb.connection import ensure_indexes
from app.infra.mongodb.repositories import (
    ClientPreferenceRepository,
    ContractRepository,
    MemoryLogRepository,
)
from app.services.contract_service import ContractRequest, ContractService


FIXED_DAY = date(2026, 10, 19)

DEFAULT_EXTRACTION = {
    "tone": "formal",
    "industry": "SaaS",
    "preferredStyle": "detailed",
    "keyTerms": ["deliverables", "milestones", "acceptance criteria"],
}


class FakeLLM:
    """
    Stands in for OpenAIService.

    Contract calls echo the prompt (so party names and budget appear in the
    contract); JSON-mode calls return the configured extraction reply.
    """

    extraction_model = "fake-extraction"

    def __init__(self, extraction_reply=None, fail_generation=False, fail_extraction=False):
        self.extraction_reply = (
            extraction_reply if extraction_reply is not None else json.dumps(DEFAULT_EXTRACTION)
        )
        self.fail_generation = fail_generation
        self.fail_extraction = fail_extraction
        self.calls = []

    @property
    def contract_prompts(self):
        return [c["prompt"] for c in self.calls if not c.get("json_mode")]

    @property
    def extraction_calls(self):
        return [c for c in self.calls if c.get("json_mode")]

    async def generate_text(self, prompt, system_message=None, temperature=0.7,
                            max_tokens=2000, model=None, json_mode=False):
        self.calls.append({
            "prompt": prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "model": model,
            "json_mode": json_mode,
        })
        if json_mode:
            if self.fail_extraction:
                raise RuntimeError("rate limited")
            return self.extraction_reply
        if self.fail_generation:
            raise ConnectionError("OpenAI unreachable")
        return f"SERVICE AGREEMENT\n\n{prompt}\n\nSIGNATURES:"


@pytest.fixture
def mongo_db():
    db = mongomock.MongoClient()["proposalfast_test"]
    ensure_indexes(db)
    return db


@pytest.fixture
def preference_repo(mongo_db):
    return ClientPreferenceRepository(mongo_db)


@pytest.fixture
def contract_repo(mongo_db):
    return ContractRepository(mongo_db)


@pytest.fixture
def memory_log_repo(mongo_db):
    return MemoryLogRepository(mongo_db)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def make_service(preference_repo, contract_repo, memory_log_repo):
    def _make(openai_service=None, **overrides):
        kwargs = {
            "preference_repo": preference_repo,
            "contract_repo": contract_repo,
            "memory_log_repo": memory_log_repo,
            "openai_service": openai_service,
            "today": lambda: FIXED_DAY,
        }
        kwargs.update(overrides)
        return ContractService(**kwargs)
    return _make


@pytest.fixture
def acme_request():
    return ContractRequest(
        contract_type="service",
        client_name="Acme",
        freelancer_name="Jane",
        project_scope="Build a landing page",
        budget="$2,000",
        timeline="2 weeks",
        use_memory=True,
    )
