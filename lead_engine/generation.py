"""Planning and post-processing for a bulk lead generation run."""

from __future__ import annotations

from typing import Iterable, Sequence

from lead_engine.models import Lead
from lead_engine.presence import is_present
from lead_engine.sorting import sort_leads
from lead_engine.usage import leads_per_niche


def plan_generation(niches: Sequence[str]) -> dict[str, int]:
    """Leads to request per niche, preserving the selection order."""
    per_niche = leads_per_niche(len(niches))
    return {niche: per_niche for niche in niches}


def business_key(name: str | None) -> str | None:
    """Case- and whitespace-insensitive identity of a business name."""
    if not is_present(name):
        return None
    return " ".join(name.lower().split())


def dedupe_leads(leads: Iterable[Lead], known_names: Iterable[str | None] = ()) -> list[Lead]:
    """Drops repeated businesses, keeping the first occurrence of each name.

    Names in ``known_names`` (businesses already stored) are dropped too.
    """
    seen = {key for key in map(business_key, known_names) if key is not None}
    kept: list[Lead] = []
    for lead in leads:
        key = business_key(lead.business_name)
        if key is not None:
            if key in seen:
                continue
            seen.add(key)
        kept.append(lead)
    return kept


def finalize_generated(leads: Iterable[Lead], known_names: Iterable[str | None] = ()) -> list[Lead]:
    """Deduplicated batch, best scores first."""
    return sort_leads(dedupe_leads(leads, known_names))
