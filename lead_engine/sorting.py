"""Ranking of filtered leads by score or creation time."""

from __future__ import annotations

import datetime
from typing import Iterable

from lead_engine.models import Lead, SortConfig
from lead_engine.scoring import score_lead

DEFAULT_SORT = SortConfig()


def parse_timestamp(value: datetime.datetime | str | None) -> datetime.datetime | None:
    """Parses created_at values; returns None for anything unusable."""
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, str) and value:
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    # Naive and aware timestamps cannot be compared, so treat naive as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def sort_leads(leads: Iterable[Lead], config: SortConfig = DEFAULT_SORT) -> list[Lead]:
    """Stable sort. Leads without a usable created_at always go last."""
    leads = list(leads)
    if config.key == "score":
        return sorted(leads, key=lambda lead: score_lead(lead).total, reverse=config.descending)

    dated = []
    undated = []
    for lead in leads:
        timestamp = parse_timestamp(lead.created_at)
        if timestamp is None:
            undated.append(lead)
        else:
            dated.append((timestamp, lead))
    dated.sort(key=lambda pair: pair[0], reverse=config.descending)
    return [lead for _, lead in dated] + undated


def toggle_sort(current: SortConfig, key: str) -> SortConfig:
    """Same key flips the direction, a new key starts descending."""
    if current.key == key:
        return SortConfig(key=key, direction="asc" if current.descending else "desc")
    return SortConfig(key=key, direction="desc")
