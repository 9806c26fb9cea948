import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bot.models.lead import LeadRecord
from bot.services.lead_store import count_outreach
from lead_engine.outreach import check_outreach_capacity, follow_up_candidates

logger = logging.getLogger(__name__)


@dataclass
class OutreachResult:
    sent: List[int] = field(default_factory=list)
    missing: List[int] = field(default_factory=list)
    follow_ups: int = 0
    reason: str | None = None


async def send_to_outreach(
    session: AsyncSession, user_id: int, lead_ids: Iterable[int]
) -> OutreachResult:
    """Moves leads into the outreach queue (status ``pending``).

    Ids that no longer exist are returned in ``missing`` so the caller can
    refresh its lead list.
    """
    lead_ids = list(dict.fromkeys(lead_ids))
    records = (
        await session.execute(
            select(LeadRecord).where(
                LeadRecord.id.in_(lead_ids),
                LeadRecord.user_id == user_id,
            )
        )
    ).scalars().all()
    found = {record.id: record for record in records}
    missing = [lead_id for lead_id in lead_ids if lead_id not in found]
    if missing:
        logger.warning(f"Outreach for user_id={user_id}: leads not found {missing}")

    fresh = [record for record in found.values() if record.outreach_status in ("new", "skipped")]
    total, pending = await count_outreach(session, user_id)
    allowed, reason = check_outreach_capacity(total, pending, len(fresh))
    if not allowed:
        return OutreachResult(missing=missing, reason=reason)

    for record in fresh:
        record.outreach_status = "pending"
    await session.commit()

    follow_ups = follow_up_candidates(record.to_lead() for record in fresh)
    logger.info(
        f"Sent {len(fresh)} leads to outreach for user_id={user_id} "
        f"({len(follow_ups)} high priority)"
    )
    return OutreachResult(
        sent=[record.id for record in fresh],
        missing=missing,
        follow_ups=len(follow_ups),
    )
