"""Limits for handing leads over to the outreach pipeline."""

from __future__ import annotations

from typing import Iterable

import config
from lead_engine.models import Lead
from lead_engine.scoring import score_lead


def check_outreach_capacity(
    current_total: int,
    current_pending: int,
    adding: int,
) -> tuple[bool, str | None]:
    if adding <= 0:
        return False, "no-leads-selected"
    if current_total + adding > config.MAX_OUTREACH_TOTAL:
        return False, "total-limit"
    if current_pending + adding > config.MAX_OUTREACH_PENDING:
        return False, "pending-limit"
    return True, None


def remaining_outreach_slots(current_total: int, current_pending: int) -> int:
    return max(
        0,
        min(
            config.MAX_OUTREACH_TOTAL - current_total,
            config.MAX_OUTREACH_PENDING - current_pending,
        ),
    )


def follow_up_candidates(leads: Iterable[Lead]) -> list[Lead]:
    """High-priority leads that get an initial follow-up task."""
    return [lead for lead in leads if score_lead(lead).total >= config.HIGH_PRIORITY_SCORE]
