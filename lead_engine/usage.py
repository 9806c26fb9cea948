"""Weekly generation quota and niche cooldown accounting."""

from __future__ import annotations

import datetime
from typing import Iterable

import config
from lead_engine.models import (
    GenerationDecision,
    NicheCooldown,
    RejectionReason,
    UsageWindow,
)


def next_weekly_reset(now: datetime.datetime) -> datetime.datetime:
    """Upcoming Monday 00:00 in ``now``'s timezone.

    On a Monday the boundary is a full week away, never ``now`` itself.
    """
    days_until_monday = (7 - now.weekday()) % 7 or 7
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight + datetime.timedelta(days=days_until_monday)


def week_start(now: datetime.datetime) -> datetime.date:
    """Monday that opened the window ``now`` falls in."""
    return (next_weekly_reset(now) - datetime.timedelta(days=7)).date()


def leads_per_niche(niche_count: int) -> int:
    """Even split of the per-request lead budget; the remainder is dropped."""
    if niche_count <= 0:
        return 0
    return config.LEADS_PER_REQUEST // niche_count


def evaluate_generation_request(
    window: UsageWindow,
    now: datetime.datetime,
    niche_count: int,
) -> GenerationDecision:
    """Decides whether a generation for ``niche_count`` niches may be dispatched."""
    remaining = window.remaining
    reset_at = next_weekly_reset(now)

    reason = None
    if niche_count <= 0:
        reason = RejectionReason.NO_NICHES_SELECTED
    elif niche_count > config.MAX_NICHES_PER_REQUEST:
        reason = RejectionReason.TOO_MANY_NICHES
    elif remaining <= 0:
        reason = RejectionReason.QUOTA_EXHAUSTED

    if reason is not None:
        return GenerationDecision(
            allowed=False, remaining=remaining, reset_at=reset_at, reason=reason
        )

    per_niche = leads_per_niche(niche_count)
    return GenerationDecision(
        allowed=True,
        remaining=remaining,
        reset_at=reset_at,
        leads_per_niche=per_niche,
        total_leads=per_niche * niche_count,
    )


def cooldown_remaining(cooldown: NicheCooldown, now: datetime.datetime) -> datetime.timedelta:
    return max(datetime.timedelta(0), cooldown.cooldown_until - now)


def active_cooldowns(window: UsageWindow, now: datetime.datetime) -> list[NicheCooldown]:
    """Cooldowns still running at ``now``. Shown to the user, never enforced."""
    return [c for c in window.cooldowns if cooldown_remaining(c, now) > datetime.timedelta(0)]


def build_cooldowns(
    usages: Iterable[tuple[str, str, datetime.datetime]],
    hours: int | None = None,
) -> tuple[NicheCooldown, ...]:
    """Cooldown records from (niche_id, niche_name, last_used_at) rows."""
    span = datetime.timedelta(hours=config.NICHE_COOLDOWN_HOURS if hours is None else hours)
    return tuple(
        NicheCooldown(
            niche_id=niche_id,
            niche_name=niche_name,
            last_used_at=last_used_at,
            cooldown_until=last_used_at + span,
        )
        for niche_id, niche_name, last_used_at in usages
    )
