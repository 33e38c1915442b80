"""
Tests for the client preference store (mongomock backed).
"""

from unittest.mock import MagicMock

from pymongo.errors import DuplicateKeyError

from app.infra.mongodb.repositories import ClientPreferenceRepository
from app.models.memory_schema import ExtractionResult


def _extraction(**fields):
    return ExtractionResult.model_validate(fields)


def test_get_missing_returns_none(preference_repo):
    assert preference_repo.get("usr_1", "Acme") is None


def test_first_upsert_creates_record_with_count_one(preference_repo):
    record = preference_repo.upsert("usr_1", "Acme", _extraction(tone="formal", industry="SaaS"))

    assert record["user_id"] == "usr_1"
    assert record["client_name"] == "Acme"
    assert record["contract_count"] == 1
    assert record["tone"] == "formal"
    assert record["industry"] == "SaaS"
    assert record["preferred_style"] is None
    assert record["key_terms"] == []
    assert isinstance(record["_id"], str)


def test_count_increments_by_one_per_upsert(preference_repo):
    counts = [
        preference_repo.upsert("usr_1", "Acme", _extraction(tone="formal"))["contract_count"]
        for _ in range(4)
    ]
    assert counts == [1, 2, 3, 4]


def test_empty_extraction_keeps_stored_fields_but_still_counts(preference_repo):
    preference_repo.upsert("usr_1", "Acme", _extraction(
        tone="formal", industry="SaaS", preferredStyle="concise", keyTerms=["sla"]
    ))

    record = preference_repo.upsert("usr_1", "Acme", _extraction())

    assert record["contract_count"] == 2
    assert record["tone"] == "formal"
    assert record["industry"] == "SaaS"
    assert record["preferred_style"] == "concise"
    assert record["key_terms"] == ["sla"]


def test_non_empty_fields_overwrite(preference_repo):
    preference_repo.upsert("usr_1", "Acme", _extraction(tone="formal", keyTerms=["sla"]))

    record = preference_repo.upsert("usr_1", "Acme", _extraction(tone="casual", keyTerms=["scope", "fees"]))

    assert record["tone"] == "casual"
    assert record["key_terms"] == ["scope", "fees"]


def test_client_names_are_matched_exactly(preference_repo):
    preference_repo.upsert("usr_1", "Acme", _extraction(tone="formal"))
    preference_repo.upsert("usr_1", "acme", _extraction(tone="casual"))
    preference_repo.upsert("usr_1", "Acme ", _extraction(tone="balanced"))

    assert preference_repo.get("usr_1", "Acme")["tone"] == "formal"
    assert preference_repo.get("usr_1", "acme")["tone"] == "casual"
    assert preference_repo.get("usr_1", "Acme ")["tone"] == "balanced"


def test_records_are_scoped_per_user(preference_repo):
    preference_repo.upsert("usr_1", "Acme", _extraction(tone="formal"))
    assert preference_repo.get("usr_2", "Acme") is None
    assert preference_repo.list_all("usr_2") == []


def test_delete_is_idempotent(preference_repo):
    preference_repo.upsert("usr_1", "Acme", _extraction(tone="formal"))

    assert preference_repo.delete("usr_1", "Acme") is True
    assert preference_repo.delete("usr_1", "Acme") is False
    assert preference_repo.get("usr_1", "Acme") is None


def test_upsert_after_delete_starts_over(preference_repo):
    preference_repo.upsert("usr_1", "Acme", _extraction(tone="formal"))
    preference_repo.upsert("usr_1", "Acme", _extraction(tone="formal"))
    preference_repo.delete("usr_1", "Acme")

    record = preference_repo.upsert("usr_1", "Acme", _extraction())

    assert record["contract_count"] == 1
    assert record["tone"] is None


def test_list_all_orders_by_count_then_name(preference_repo):
    for name, times in (("Beta", 1), ("Acme", 3), ("Gamma", 3), ("Delta", 2)):
        for _ in range(times):
            preference_repo.upsert("usr_1", name, _extraction())

    names = [p["client_name"] for p in preference_repo.list_all("usr_1")]

    assert names == ["Acme", "Gamma", "Delta", "Beta"]


def test_stats(preference_repo):
    preference_repo.upsert("usr_1", "Acme", _extraction(industry="SaaS"))
    preference_repo.upsert("usr_1", "Acme", _extraction())
    preference_repo.upsert("usr_1", "Globex", _extraction(industry="Fintech"))
    preference_repo.upsert("usr_1", "Initech", _extraction(industry="SaaS"))

    stats = preference_repo.stats("usr_1")

    assert stats == {
        "total_clients": 3,
        "total_contracts": 4,
        "industries": ["Fintech", "SaaS"],
    }


def test_stats_cover_every_client_past_the_list_limit(preference_repo):
    for i in range(505):
        preference_repo.upsert("usr_1", f"Client {i:03d}", _extraction(industry="SaaS" if i % 2 else None))
    preference_repo.upsert("usr_1", "Client 000", _extraction())

    stats = preference_repo.stats("usr_1")

    assert len(preference_repo.list_all("usr_1")) == 500
    assert stats["total_clients"] == 505
    assert stats["total_contracts"] == 506
    assert stats["industries"] == ["SaaS"]


def test_stats_for_user_without_clients(preference_repo):
    assert preference_repo.stats("usr_9") == {
        "total_clients": 0,
        "total_contracts": 0,
        "industries": [],
    }


def test_lost_insert_race_retries_as_update():
    db = MagicMock()
    collection = db.__getitem__.return_value
    stored = {"_id": "abc", "user_id": "usr_1", "client_name": "Acme", "contract_count": 2, "tone": "formal"}
    collection.find_one_and_update.side_effect = [DuplicateKeyError("E11000 duplicate key"), stored]

    record = ClientPreferenceRepository(db).upsert("usr_1", "Acme", _extraction(tone="formal"))

    assert record["contract_count"] == 2
    assert collection.find_one_and_update.call_count == 2
    first, second = collection.find_one_and_update.call_args_list
    assert first == second
    query, update = second.args
    assert query == {"user_id": "usr_1", "client_name": "Acme"}
    assert update["$inc"] == {"contract_count": 1}
    assert second.kwargs["upsert"] is True
