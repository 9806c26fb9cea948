"""Weighted completeness score for a lead (0-100)."""

from __future__ import annotations

from typing import Iterable

import config
from lead_engine.models import Lead, ScoreBreakdown, ScoreCategory, ScoreItem
from lead_engine.presence import is_present

# (category key, category max, [(item name, lead field, points)])
_SCORE_TABLE = (
    ("contact_info", 45, (
        ("Email Address", "email", 18),
        ("Phone Number", "phone", 17),
        ("Website", "website", 10),
    )),
    ("social_presence", 30, (
        ("Instagram", "instagram_handle", 10),
        ("Facebook", "facebook_page", 8),
        ("LinkedIn", "linkedin_profile", 9),
        ("Twitter/X", "twitter_handle", 3),
    )),
    ("business_info", 15, (
        ("Business Name", "business_name", 5),
        ("Owner Name", "owner_name", 10),
    )),
    ("geographic", 10, (
        ("City", "city", 3),
        ("State/Province", "state_province", 4),
    )),
)

COMPLETE_LOCATION_BONUS = 3


def _item(name: str, points: int, present: bool) -> ScoreItem:
    return ScoreItem(name=name, value=points if present else 0, max=points, present=present)


def _category(key: str, max_points: int, items: list[ScoreItem]) -> ScoreCategory:
    return ScoreCategory(
        key=key,
        score=sum(item.value for item in items),
        max=max_points,
        items=tuple(items),
    )


def score_lead(lead: Lead) -> ScoreBreakdown:
    """Scores a lead by which contact, social, business and location fields it has."""
    categories = {}
    for key, max_points, rows in _SCORE_TABLE:
        items = [
            _item(name, points, is_present(getattr(lead, attr)))
            for name, attr, points in rows
        ]
        if key == "geographic":
            # Bonus stacks on top of the city and state points
            complete = is_present(lead.city) and is_present(lead.state_province)
            items.append(_item("Complete Location", COMPLETE_LOCATION_BONUS, complete))
        categories[key] = _category(key, max_points, items)

    return ScoreBreakdown(
        total=sum(c.score for c in categories.values()),
        **categories,
    )


def score_leads(leads: Iterable[Lead]) -> dict[str, ScoreBreakdown]:
    return {lead.id: score_lead(lead) for lead in leads}


def lead_priority(total: int) -> str:
    if total >= config.HIGH_PRIORITY_SCORE:
        return "high"
    if total >= config.MEDIUM_PRIORITY_SCORE:
        return "medium"
    return "low"


def score_distribution(leads: Iterable[Lead]) -> dict[str, int]:
    """Counts leads per score bucket (90-100, 80-89, ... 0-59)."""
    counts = {label: 0 for label, _, _ in config.SCORE_BUCKETS}
    for lead in leads:
        total = score_lead(lead).total
        for label, low, high in config.SCORE_BUCKETS:
            if low <= total <= high:
                counts[label] += 1
                break
    return counts


def stale_scores(leads: Iterable[Lead]) -> list[tuple[str, int]]:
    """(lead id, fresh total) for every lead whose cached lead_score is out of date."""
    updates = []
    for lead in leads:
        total = score_lead(lead).total
        if lead.lead_score != total:
            updates.append((lead.id, total))
    return updates
