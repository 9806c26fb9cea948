from __future__ import annotations

from typing import Iterable

from lead_engine.filters import filter_leads
from lead_engine.models import FilterCriteria, Lead, SortConfig
from lead_engine.sorting import DEFAULT_SORT, sort_leads


def build_view(
    leads: Iterable[Lead],
    criteria: FilterCriteria | None = None,
    sort: SortConfig = DEFAULT_SORT,
) -> list[Lead]:
    """Filter then rank; recomputed from scratch on every change."""
    return sort_leads(filter_leads(leads, criteria or FilterCriteria()), sort)
