"""User-facing texts for engine decisions."""

import datetime

import config
from lead_engine.models import GenerationDecision, RejectionReason, UsageWindow
from lead_engine.usage import active_cooldowns, cooldown_remaining

_REJECTION_TEXT = {
    RejectionReason.NO_NICHES_SELECTED: "Please select at least one niche.",
    RejectionReason.TOO_MANY_NICHES: (
        f"Too many niches selected. Maximum {config.MAX_NICHES_PER_REQUEST} niches per request."
    ),
    RejectionReason.QUOTA_EXHAUSTED: "Weekly generation limit reached.",
}

_OUTREACH_TEXT = {
    "no-leads-selected": "No new leads to send to outreach.",
    "total-limit": (
        f"Outreach is full ({config.MAX_OUTREACH_TOTAL} leads). "
        "Finish existing outreach first."
    ),
    "pending-limit": (
        f"Too many pending leads (max {config.MAX_OUTREACH_PENDING}). "
        "Contact your pending leads first."
    ),
}


def format_reset(reset_at: datetime.datetime) -> str:
    return reset_at.strftime("%a %d %b, %H:%M")


def format_duration(delta: datetime.timedelta) -> str:
    minutes = int(delta.total_seconds() // 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def rejection_message(decision: GenerationDecision) -> str:
    text = _REJECTION_TEXT.get(decision.reason, "Generation is not available right now.")
    if decision.reason == RejectionReason.QUOTA_EXHAUSTED:
        text += f" Resets {format_reset(decision.reset_at)}."
    return text


def outreach_message(reason: str | None) -> str:
    return _OUTREACH_TEXT.get(reason, "Could not send leads to outreach.")


def format_usage(window: UsageWindow, reset_at: datetime.datetime, now: datetime.datetime) -> str:
    text = (
        f"📈 Generations this week: {window.used}/{window.limit} "
        f"({window.remaining} left)\n"
        f"🔄 Resets: {format_reset(reset_at)}\n"
    )
    cooldowns = active_cooldowns(window, now)
    if cooldowns:
        text += "\n⏳ Recently used niches:\n"
        for cooldown in cooldowns:
            text += f"• {cooldown.niche_name} ({format_duration(cooldown_remaining(cooldown, now))})\n"
    return text
