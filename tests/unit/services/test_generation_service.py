"""Unit tests for bot.services.generation."""

from __future__ import annotations

import datetime
from types import SimpleNamespace

import pytest

from bot.services import generation
from lead_engine.models import RejectionReason, UsageWindow
from tests.unit.handlers.helpers import FakeSession, build_record

NOW = datetime.datetime(2026, 3, 4, 15, 30)
DENTISTS = SimpleNamespace(id=1, name="Dentists")
ROOFERS = SimpleNamespace(id=2, name="Roofers")


class _FakeStore:
    def __init__(self, used: int, limit: int = 5) -> None:
        self.used = used
        self.limit = limit
        self.saved = []
        self.stored_names = set()
        self.recorded = []
        self.usage_reads = 0

    async def load_usage_window(self, session, user_id, now):  # noqa: ANN001, ARG002
        self.usage_reads += 1
        return UsageWindow(used=self.used, limit=self.limit)

    async def save_generated_leads(self, session, user_id, leads):  # noqa: ANN001, ARG002
        self.saved = list(leads)
        self.stored_names.update(lead.business_name for lead in self.saved)
        return [
            build_record(index, business_name=lead.business_name, niche_name=lead.niche_name)
            for index, lead in enumerate(self.saved, start=1)
        ]

    async def existing_business_names(self, session, user_id):  # noqa: ANN001, ARG002
        return set(self.stored_names)

    async def record_generation(self, session, user_id, now, niche_counts):  # noqa: ANN001, ARG002
        self.recorded = [(niche.name, count) for niche, count in niche_counts]
        self.used += 1
        return sum(count for _, count in self.recorded)


@pytest.fixture
def store(monkeypatch):
    fake = _FakeStore(used=1)
    monkeypatch.setattr(generation, "_local_now", lambda: NOW)
    for name in (
        "load_usage_window",
        "existing_business_names",
        "save_generated_leads",
        "record_generation",
    ):
        monkeypatch.setattr(generation.lead_store, name, getattr(fake, name))
    return fake


@pytest.fixture
def generator(monkeypatch):
    calls = []

    async def _generate(niche, business_type, location, count):  # noqa: ANN001
        calls.append((niche, business_type, location, count))
        return [
            {"business_name": f"{niche} One", "niche_name": niche, "business_type": business_type},
            {"business_name": f"{niche} one", "niche_name": niche, "business_type": business_type},
            {"business_name": f"{niche} Two", "email": "x@y.com", "niche_name": niche},
        ]

    monkeypatch.setattr(generation.lead_generator, "generate_leads_for_niche", _generate)
    return calls


@pytest.mark.unit
@pytest.mark.asyncio
async def test_check_generation_reads_fresh_usage(store) -> None:
    decision, window = await generation.check_generation(FakeSession(), 1, 2)

    assert decision.allowed is True
    assert decision.leads_per_niche == 12
    assert window.remaining == 4
    assert store.usage_reads == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_rejected_request_never_calls_generator(store, generator) -> None:
    store.used = 5
    session = FakeSession()

    result = await generation.run_generation(session, 1, [DENTISTS], "local_service")

    assert result.decision.reason == RejectionReason.QUOTA_EXHAUSTED
    assert generator == []
    assert session.commits == 0
    assert result.leads == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_too_many_niches_rejected_before_generation(store, generator) -> None:
    niches = [SimpleNamespace(id=i, name=f"N{i}") for i in range(6)]

    result = await generation.run_generation(FakeSession(), 1, niches, "local_service")

    assert result.decision.reason == RejectionReason.TOO_MANY_NICHES
    assert generator == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_successful_run_dedupes_saves_and_records(store, generator) -> None:
    session = FakeSession()

    result = await generation.run_generation(
        session, 1, [DENTISTS, ROOFERS], "local_service", "Austin"
    )

    assert generator == [
        ("Dentists", "local_service", "Austin", 12),
        ("Roofers", "local_service", "Austin", 12),
    ]
    assert [lead.business_name for lead in store.saved][:2] == ["Dentists Two", "Roofers Two"]
    assert len(store.saved) == 4
    assert store.recorded == [("Dentists", 2), ("Roofers", 2)]
    assert session.commits == 1
    assert len(result.leads) == 4
    assert result.usage.used == 2
    assert store.usage_reads == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_empty_generation_is_not_charged(monkeypatch, store) -> None:
    async def _nothing(niche, business_type, location, count):  # noqa: ANN001, ARG001
        return []

    monkeypatch.setattr(generation.lead_generator, "generate_leads_for_niche", _nothing)
    session = FakeSession()

    result = await generation.run_generation(session, 1, [DENTISTS], "local_service")

    assert result.decision.allowed is True
    assert result.leads == []
    assert store.recorded == []
    assert session.commits == 0
    assert result.usage.used == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_repeat_run_skips_businesses_already_stored(monkeypatch, store) -> None:
    async def _same_business(niche, business_type, location, count):  # noqa: ANN001, ARG001
        return [{"business_name": "Peak Roofing", "email": "hi@peak.com", "niche_name": niche}]

    monkeypatch.setattr(generation.lead_generator, "generate_leads_for_niche", _same_business)
    session = FakeSession()

    first = await generation.run_generation(session, 1, [ROOFERS], "local_service")
    second = await generation.run_generation(session, 1, [ROOFERS], "local_service")

    assert [lead.business_name for lead in first.leads] == ["Peak Roofing"]
    assert second.decision.allowed is True
    assert second.leads == []
    assert session.commits == 1
    assert second.usage.used == 2
