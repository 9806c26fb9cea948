"""Unit tests for lead_engine.filters and lead_engine.pipeline."""

from __future__ import annotations

import pytest

from lead_engine.filters import available_niches, filter_leads, matches_search
from lead_engine.models import FilterCriteria, SocialPlatforms, SortConfig
from lead_engine.pipeline import build_view


@pytest.fixture
def leads(lead_factory, full_lead):
    return [
        full_lead,
        lead_factory(
            id="ig",
            business_name="Peak Roofing",
            phone="555-0100",
            instagram_handle="@peakroof",
            niche_name="Roofers",
        ),
        lead_factory(
            id="fb",
            owner_name="Sam Lowe",
            email="N/A",
            facebook_page="lowehvac",
            niche_name="HVAC",
        ),
        lead_factory(id="bare"),
    ]


def _ids(result) -> list[str]:  # noqa: ANN001
    return [lead.id for lead in result]


@pytest.mark.unit
def test_default_criteria_pass_everything(leads) -> None:
    assert filter_leads(leads, FilterCriteria()) == leads


@pytest.mark.unit
def test_search_is_case_insensitive_on_business_and_owner(leads, lead_factory) -> None:
    assert _ids(filter_leads(leads, FilterCriteria(search="ROOF"))) == ["ig"]
    assert _ids(filter_leads(leads, FilterCriteria(search="lowe"))) == ["fb"]
    assert matches_search(lead_factory(), "   ") is True


@pytest.mark.unit
def test_search_matches_query_as_typed(lead_factory) -> None:
    lead = lead_factory(business_name="Smiles Co")

    assert matches_search(lead, "smiles") is True
    assert matches_search(lead, "Smile ") is False
    assert matches_search(lead, " co") is True


@pytest.mark.unit
def test_min_score_zero_keeps_zero_score_leads(leads) -> None:
    assert "bare" in _ids(filter_leads(leads, FilterCriteria(min_score=0)))
    assert _ids(filter_leads(leads, FilterCriteria(min_score=50))) == ["1"]


@pytest.mark.unit
def test_contact_toggles_use_presence_rule(leads) -> None:
    with_email = filter_leads(leads, FilterCriteria(has_email=True))
    assert "fb" not in _ids(with_email)

    both = filter_leads(leads, FilterCriteria(has_phone=True, has_email=True))
    assert _ids(both) == ["1"]


@pytest.mark.unit
def test_platform_toggles_or_together(leads) -> None:
    criteria = FilterCriteria(platforms=SocialPlatforms(instagram=True, facebook=True))

    assert _ids(filter_leads(leads, criteria)) == ["1", "ig", "fb"]


@pytest.mark.unit
def test_specific_platform_overrides_generic_toggle(leads) -> None:
    criteria = FilterCriteria(has_socials=True, platforms=SocialPlatforms(facebook=True))

    assert _ids(filter_leads(leads, criteria)) == ["1", "fb"]


@pytest.mark.unit
def test_generic_social_toggle_accepts_any_platform(leads) -> None:
    assert _ids(filter_leads(leads, FilterCriteria(has_socials=True))) == ["1", "ig", "fb"]


@pytest.mark.unit
def test_niche_filter_drops_leads_without_niche(leads) -> None:
    criteria = FilterCriteria(niches=frozenset({"HVAC", "Dentists"}))

    assert _ids(filter_leads(leads, criteria)) == ["1", "fb"]


@pytest.mark.unit
def test_filter_is_idempotent_and_composition_narrows(leads) -> None:
    loose = FilterCriteria(has_socials=True)
    strict = FilterCriteria(has_socials=True, has_phone=True)

    once = filter_leads(leads, loose)
    assert filter_leads(once, loose) == once
    assert len(filter_leads(leads, strict)) <= len(once)


@pytest.mark.unit
def test_available_niches_sorted_and_unique(leads, lead_factory) -> None:
    extra = leads + [lead_factory(niche_name="HVAC"), lead_factory(niche_name="N/A")]

    assert available_niches(extra) == ["Dentists", "HVAC", "Roofers"]


@pytest.mark.unit
def test_build_view_filters_then_sorts(leads) -> None:
    view = build_view(leads, FilterCriteria(has_socials=True), SortConfig("score", "asc"))

    assert _ids(view) == ["fb", "ig", "1"]
