"""Reads leads and usage out of the database as lead_engine values."""

import datetime
import logging
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

import config
from bot.models.lead import LeadRecord
from bot.models.niche import Niche
from bot.models.usage import NicheUsage, WeeklyUsage
from lead_engine.models import Lead, UsageWindow
from lead_engine.presence import is_present
from lead_engine.scoring import score_lead, stale_scores
from lead_engine.usage import build_cooldowns, week_start

logger = logging.getLogger(__name__)

# Statuses that occupy an outreach slot
IN_OUTREACH_STATUSES = ("pending", "contacted")


async def load_lead_records(session: AsyncSession, user_id: int) -> list[LeadRecord]:
    query = (
        select(LeadRecord)
        .where(LeadRecord.user_id == user_id)
        .order_by(LeadRecord.created_at.desc())
    )
    return list((await session.execute(query)).scalars().all())


async def load_leads(session: AsyncSession, user_id: int) -> list[Lead]:
    """All leads of a user, newest first."""
    return [record.to_lead() for record in await load_lead_records(session, user_id)]


async def get_lead_record(
    session: AsyncSession, lead_id: int, user_id: int
) -> LeadRecord | None:
    result = await session.execute(
        select(LeadRecord).where(
            LeadRecord.id == lead_id,
            LeadRecord.user_id == user_id,
        )
    )
    return result.scalars().first()


async def load_niches(session: AsyncSession, business_type: str | None = None) -> list[Niche]:
    query = select(Niche).order_by(Niche.name)
    if business_type:
        query = query.where(Niche.category == business_type)
    return list((await session.execute(query)).scalars().all())


async def load_usage_window(
    session: AsyncSession, user_id: int, now: datetime.datetime
) -> UsageWindow:
    """Fresh usage snapshot for the week ``now`` falls in."""
    usage = (
        await session.execute(
            select(WeeklyUsage).where(
                WeeklyUsage.user_id == user_id,
                WeeklyUsage.week_start == week_start(now),
            )
        )
    ).scalars().first()

    cooldown_since = now - datetime.timedelta(hours=config.NICHE_COOLDOWN_HOURS)
    niche_usage = (
        await session.execute(
            select(NicheUsage)
            .where(
                NicheUsage.user_id == user_id,
                NicheUsage.last_used_at >= cooldown_since,
            )
            .options(selectinload(NicheUsage.niche))
        )
    ).scalars().all()

    cooldowns = build_cooldowns(
        (str(row.niche_id), row.niche.name if row.niche else "Unknown", row.last_used_at)
        for row in niche_usage
    )
    return UsageWindow.from_snapshot(usage_snapshot(usage), cooldowns)


def usage_snapshot(usage: WeeklyUsage | None) -> dict:
    """Weekly usage row as a ``{used, limit, totalLeadsToday}`` payload."""
    return {
        "used": usage.generation_count if usage else 0,
        "limit": config.WEEKLY_GENERATION_LIMIT,
        "totalLeadsToday": usage.leads_generated if usage else 0,
    }


async def existing_business_names(session: AsyncSession, user_id: int) -> set[str]:
    """Business names the user already has stored."""
    result = await session.execute(
        select(LeadRecord.business_name).where(
            LeadRecord.user_id == user_id,
            LeadRecord.business_name.is_not(None),
        )
    )
    return set(result.scalars().all())


async def save_generated_leads(
    session: AsyncSession, user_id: int, leads: Iterable[Lead]
) -> list[LeadRecord]:
    """Adds generated leads with their score cache filled in. Caller commits.

    Leads must already be deduplicated against ``existing_business_names``.
    """
    records = []
    for lead in leads:
        record = LeadRecord(
            user_id=user_id,
            business_type=lead.business_type,
            # NULL names never collide on the unique key
            business_name=lead.business_name if is_present(lead.business_name) else None,
            owner_name=lead.owner_name,
            phone=lead.phone,
            email=lead.email,
            website=lead.website,
            city=lead.city,
            state_province=lead.state_province,
            niche_name=lead.niche_name,
            instagram_handle=lead.instagram_handle,
            facebook_page=lead.facebook_page,
            linkedin_profile=lead.linkedin_profile,
            twitter_handle=lead.twitter_handle,
            monthly_revenue_estimate=lead.monthly_revenue_estimate,
            follower_count_instagram=lead.follower_count_instagram,
            engagement_rate=lead.engagement_rate,
            ad_spend_estimate=lead.ad_spend_estimate,
            shopify_detected=lead.shopify_detected,
            lead_score=score_lead(lead).total,
            outreach_status="new",
        )
        session.add(record)
        records.append(record)
    await session.flush()
    return records


async def record_generation(
    session: AsyncSession,
    user_id: int,
    now: datetime.datetime,
    niche_counts: Iterable[tuple[Niche, int]],
) -> int:
    """Counts one generation against the week and stamps the niches used.

    Returns the number of leads recorded.
    """
    niche_counts = list(niche_counts)
    leads_generated = sum(count for _, count in niche_counts)
    current_week = week_start(now)
    usage = (
        await session.execute(
            select(WeeklyUsage).where(
                WeeklyUsage.user_id == user_id,
                WeeklyUsage.week_start == current_week,
            )
        )
    ).scalars().first()
    if usage is None:
        usage = WeeklyUsage(
            user_id=user_id, week_start=current_week, generation_count=0, leads_generated=0
        )
        session.add(usage)
    usage.generation_count += 1
    usage.leads_generated += leads_generated
    usage.last_generation_at = now

    for niche, count in niche_counts:
        niche_usage = (
            await session.execute(
                select(NicheUsage).where(
                    NicheUsage.user_id == user_id,
                    NicheUsage.niche_id == niche.id,
                )
            )
        ).scalars().first()
        if niche_usage is None:
            niche_usage = NicheUsage(user_id=user_id, niche_id=niche.id, leads_generated=0)
            session.add(niche_usage)
        niche_usage.last_used_at = now
        niche_usage.leads_generated += count
    return leads_generated


async def recalculate_scores(session: AsyncSession, user_id: int) -> int:
    """Refreshes the stored lead_score cache. Returns how many rows changed."""
    records = {str(r.id): r for r in await load_lead_records(session, user_id)}
    updates = stale_scores(record.to_lead() for record in records.values())
    for lead_id, total in updates:
        records[lead_id].lead_score = total
    if updates:
        await session.commit()
    logger.info(f"Recalculated scores for user_id={user_id}: {len(updates)} updated")
    return len(updates)


async def count_outreach(session: AsyncSession, user_id: int) -> tuple[int, int]:
    """(leads in outreach, of which still pending)."""
    rows = (
        await session.execute(
            select(LeadRecord.outreach_status, func.count(LeadRecord.id))
            .where(
                LeadRecord.user_id == user_id,
                LeadRecord.outreach_status.in_(IN_OUTREACH_STATUSES),
            )
            .group_by(LeadRecord.outreach_status)
        )
    ).all()
    counts = {status: count for status, count in rows}
    return sum(counts.values()), counts.get("pending", 0)
