"""Unit tests for lead_engine.scoring."""

from __future__ import annotations

import dataclasses

import pytest

from lead_engine.models import Lead
from lead_engine.scoring import (
    lead_priority,
    score_distribution,
    score_lead,
    score_leads,
    stale_scores,
)

_SCORED_FIELDS = (
    "email",
    "phone",
    "website",
    "instagram_handle",
    "facebook_page",
    "linkedin_profile",
    "twitter_handle",
    "business_name",
    "owner_name",
    "city",
    "state_province",
)


@pytest.mark.unit
def test_empty_lead_scores_zero_with_complete_breakdown() -> None:
    breakdown = score_lead(Lead(id="1", business_type="local_service"))

    assert breakdown.total == 0
    items = [item for category in breakdown.categories for item in category.items]
    assert len(items) == 12
    assert all(item.present is False for item in items)
    assert [c.max for c in breakdown.categories] == [45, 30, 15, 10]


@pytest.mark.unit
def test_full_lead_scores_hundred(full_lead) -> None:
    breakdown = score_lead(full_lead)

    assert breakdown.total == 100
    assert all(c.score == c.max for c in breakdown.categories)


@pytest.mark.unit
def test_contact_and_location_example() -> None:
    lead = Lead(
        id="1",
        email="a@b.com",
        phone="555-1212",
        city="Austin",
        state_province="TX",
    )

    breakdown = score_lead(lead)

    assert breakdown.contact_info.score == 35
    assert breakdown.geographic.score == 10
    assert breakdown.business_info.score == 0
    assert breakdown.social_presence.score == 0
    assert breakdown.total == 45


@pytest.mark.unit
def test_na_state_scores_like_missing_state() -> None:
    with_na = Lead(id="1", city="Austin", state_province="N/A")
    without = Lead(id="2", city="Austin")

    assert score_lead(with_na) == score_lead(without)
    assert score_lead(with_na).geographic.score == 3


@pytest.mark.unit
def test_city_only_gets_no_location_bonus() -> None:
    breakdown = score_lead(Lead(id="1", city="Austin"))

    bonus = breakdown.geographic.items[-1]
    assert bonus.name == "Complete Location"
    assert bonus.present is False
    assert breakdown.total == 3


@pytest.mark.unit
@pytest.mark.parametrize("field_name", _SCORED_FIELDS)
def test_adding_a_field_never_lowers_the_score(field_name) -> None:  # noqa: ANN001
    base = Lead(id="1", city="Austin", email="a@b.com")
    richer = dataclasses.replace(base, **{field_name: "value"})

    assert score_lead(richer).total >= score_lead(base).total


@pytest.mark.unit
def test_total_is_sum_of_categories_and_bounded(lead_factory) -> None:
    leads = [
        lead_factory(),
        lead_factory(email="a@b.com", twitter_handle="@x"),
        lead_factory(owner_name="Dana", state_province="TX", website="N/A"),
    ]

    for lead in leads:
        breakdown = score_lead(lead)
        assert 0 <= breakdown.total <= 100
        assert breakdown.total == sum(c.score for c in breakdown.categories)


@pytest.mark.unit
def test_breakdown_to_dict_shape() -> None:
    payload = score_lead(Lead(id="1", email="a@b.com")).to_dict()

    assert payload["total"] == 18
    assert payload["breakdown"]["contact_info"]["score"] == 18
    email = payload["breakdown"]["contact_info"]["items"][0]
    assert email["name"] == "Email Address"
    assert email["present"] is True


@pytest.mark.unit
@pytest.mark.parametrize(
    ("total", "expected"),
    [(100, "high"), (80, "high"), (79, "medium"), (65, "medium"), (64, "low"), (0, "low")],
)
def test_lead_priority_thresholds(total, expected) -> None:  # noqa: ANN001
    assert lead_priority(total) == expected


@pytest.mark.unit
def test_score_leads_keys_by_id(lead_factory) -> None:
    a = lead_factory(id="a", email="a@b.com")
    b = lead_factory(id="b")

    scores = score_leads([a, b])

    assert scores["a"].total == 18
    assert scores["b"].total == 0


@pytest.mark.unit
def test_score_distribution_buckets(lead_factory, full_lead) -> None:
    leads = [
        full_lead,
        lead_factory(email="a@b.com"),
        lead_factory(),
    ]

    distribution = score_distribution(leads)

    assert distribution == {"90-100": 1, "80-89": 0, "70-79": 0, "60-69": 0, "0-59": 2}


@pytest.mark.unit
def test_stale_scores_reports_only_outdated_cache(lead_factory) -> None:
    fresh = lead_factory(id="1", email="a@b.com", lead_score=18)
    stale = lead_factory(id="2", email="a@b.com", lead_score=50)
    uncached = lead_factory(id="3")

    assert stale_scores([fresh, stale, uncached]) == [("2", 18), ("3", 0)]
