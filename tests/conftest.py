"""Shared pytest fixtures and test helpers."""

from __future__ import annotations

import datetime

import pytest

from lead_engine.models import Lead


@pytest.fixture
def lead_factory():
    """Build engine leads; every field not given stays missing."""
    counter = iter(range(1, 10_000))

    def _build(**fields) -> Lead:  # noqa: ANN003
        fields.setdefault("id", str(next(counter)))
        return Lead(**fields)

    return _build


@pytest.fixture
def full_lead(lead_factory):
    """A lead with every scored field filled in (scores 100)."""
    return lead_factory(
        business_name="Bright Smile Dental",
        owner_name="Dana Reyes",
        phone="+1 512 555 0101",
        email="hello@brightsmile.com",
        website="https://brightsmile.com",
        city="Austin",
        state_province="TX",
        niche_name="Dentists",
        instagram_handle="@brightsmile",
        facebook_page="brightsmiledental",
        linkedin_profile="bright-smile-dental",
        twitter_handle="@brightsmile",
        created_at=datetime.datetime(2026, 3, 2, 10, 0, 0),
    )
