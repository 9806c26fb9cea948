"""Quota-gated lead generation run for one user request."""

import datetime
import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from bot.models.niche import Niche
from bot.services import lead_generator, lead_store
from lead_engine.generation import finalize_generated, plan_generation
from lead_engine.models import GenerationDecision, Lead, UsageWindow
from lead_engine.usage import evaluate_generation_request

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    decision: GenerationDecision
    usage: UsageWindow
    leads: List[Lead] = field(default_factory=list)


def _local_now() -> datetime.datetime:
    return datetime.datetime.now()


async def current_usage(
    session: AsyncSession, user_id: int
) -> tuple[UsageWindow, datetime.datetime]:
    """Usage window as of now, plus the ``now`` it was read at."""
    now = _local_now()
    return await lead_store.load_usage_window(session, user_id, now), now


async def check_generation(
    session: AsyncSession, user_id: int, niche_count: int
) -> tuple[GenerationDecision, UsageWindow]:
    """Evaluates a request against a freshly read usage window."""
    now = _local_now()
    window = await lead_store.load_usage_window(session, user_id, now)
    return evaluate_generation_request(window, now, niche_count), window


async def run_generation(
    session: AsyncSession,
    user_id: int,
    niches: Sequence[Niche],
    business_type: str,
    location: str | None = None,
) -> GenerationResult:
    """Generates, deduplicates and stores leads if the quota allows it.

    The generation backend is never called for a rejected request. Usage is
    re-read from the store after every attempt.
    """
    now = _local_now()
    window = await lead_store.load_usage_window(session, user_id, now)
    decision = evaluate_generation_request(window, now, len(niches))
    if not decision.allowed:
        logger.info(
            f"Generation rejected for user_id={user_id}: {decision.reason.value} "
            f"(remaining={decision.remaining}, niches={len(niches)})"
        )
        return GenerationResult(decision=decision, usage=window)

    plan = plan_generation([niche.name for niche in niches])
    logger.info(
        f"Generation approved for user_id={user_id}: {len(niches)} niches, "
        f"{decision.leads_per_niche} leads each"
    )

    raw_leads: List[Lead] = []
    for niche in niches:
        records = await lead_generator.generate_leads_for_niche(
            niche.name, business_type, location, plan[niche.name]
        )
        logger.info(f"  → {len(records)} leads returned for '{niche.name}'")
        raw_leads.extend(Lead.from_record(record) for record in records)

    stored_names = await lead_store.existing_business_names(session, user_id)
    leads = finalize_generated(raw_leads, stored_names)
    if len(leads) < len(raw_leads):
        logger.info(
            f"Dropped {len(raw_leads) - len(leads)} duplicate or already stored leads "
            f"for user_id={user_id}"
        )
    saved: List[Lead] = []
    if leads:
        records = await lead_store.save_generated_leads(session, user_id, leads)
        per_niche = {niche.name: 0 for niche in niches}
        for lead in leads:
            if lead.niche_name in per_niche:
                per_niche[lead.niche_name] += 1
        await lead_store.record_generation(
            session, user_id, now, [(niche, per_niche[niche.name]) for niche in niches]
        )
        await session.commit()
        saved = [record.to_lead() for record in records]
    else:
        logger.warning(f"Generation for user_id={user_id} produced no new leads; quota not charged")

    usage = await lead_store.load_usage_window(session, user_id, now)
    return GenerationResult(decision=decision, usage=usage, leads=saved)
