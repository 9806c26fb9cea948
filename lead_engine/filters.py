"""Filter pipeline over a scored lead collection."""

from __future__ import annotations

from typing import Iterable

from lead_engine.models import SOCIAL_PLATFORMS, FilterCriteria, Lead
from lead_engine.presence import is_present
from lead_engine.scoring import score_lead


def matches_search(lead: Lead, query: str) -> bool:
    if not query.strip():
        return True
    query = query.lower()
    for value in (lead.business_name, lead.owner_name):
        if is_present(value) and query in value.lower():
            return True
    return False


def matches_social(lead: Lead, criteria: FilterCriteria) -> bool:
    """Platform toggles OR together; the generic toggle accepts any platform."""
    enabled = criteria.platforms.enabled
    if enabled:
        return any(is_present(lead.social_handle(p)) for p in enabled)
    if criteria.has_socials:
        return any(is_present(lead.social_handle(p)) for p in SOCIAL_PLATFORMS)
    return True


def matches(lead: Lead, criteria: FilterCriteria) -> bool:
    if not matches_search(lead, criteria.search):
        return False
    if criteria.min_score > 0 and score_lead(lead).total < criteria.min_score:
        return False
    if criteria.has_phone and not is_present(lead.phone):
        return False
    if criteria.has_email and not is_present(lead.email):
        return False
    if criteria.has_website and not is_present(lead.website):
        return False
    if not matches_social(lead, criteria):
        return False
    if criteria.niches and lead.niche_name not in criteria.niches:
        return False
    return True


def filter_leads(leads: Iterable[Lead], criteria: FilterCriteria) -> list[Lead]:
    """Keeps the leads that pass every active stage, in their original order."""
    return [lead for lead in leads if matches(lead, criteria)]


def available_niches(leads: Iterable[Lead]) -> list[str]:
    """Sorted niche names present in a lead collection."""
    return sorted({lead.niche_name for lead in leads if is_present(lead.niche_name)})
