from typing import Sequence

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder
from html import escape

from lead_engine.models import SOCIAL_PLATFORMS, FilterCriteria

_CONTACT_TOGGLES = {
    "has_phone": "Phone",
    "has_email": "Email",
    "has_website": "Website",
    "has_socials": "Any social",
}

_PLATFORM_LABEL = {
    "instagram": "Instagram",
    "facebook": "Facebook",
    "linkedin": "LinkedIn",
    "twitter": "Twitter/X",
}


def _check(value: bool) -> str:
    return "✅" if value else "⬜"


def format_filter_panel(draft: FilterCriteria, matching: int, total: int) -> str:
    text = (
        "🔎 Filters\n"
        "━━━━━━━━━━━\n\n"
        f"Minimum score: {draft.min_score}\n"
        f"Search: {escape(draft.search) if draft.search else '—'}\n\n"
        f"Matching leads: {matching} of {total}\n\n"
        "Changes apply only after you press ✔️ Apply."
    )
    return text


def get_filter_panel_keyboard(
    draft: FilterCriteria, niches: Sequence[str]
) -> InlineKeyboardMarkup:
    """Toggles for the draft criteria plus apply / cancel / clear."""
    builder = InlineKeyboardBuilder()

    for field_name, label in _CONTACT_TOGGLES.items():
        builder.button(
            text=f"{_check(getattr(draft, field_name))} {label}",
            callback_data=f"flt_toggle_{field_name}",
        )
    for platform in SOCIAL_PLATFORMS:
        builder.button(
            text=f"{_check(getattr(draft.platforms, platform))} {_PLATFORM_LABEL[platform]}",
            callback_data=f"flt_platform_{platform}",
        )

    builder.button(text="➖", callback_data="flt_score_down")
    builder.button(text=f"Min score {draft.min_score}", callback_data="noop")
    builder.button(text="➕", callback_data="flt_score_up")

    # Niche names can exceed callback_data limits, so buttons carry an index
    for index, niche in enumerate(niches):
        builder.button(
            text=f"{_check(niche in draft.niches)} {niche}",
            callback_data=f"flt_niche_{index}",
        )

    builder.button(text="🔤 Search", callback_data="flt_search")
    builder.button(text="🧹 Clear", callback_data="flt_clear")
    builder.button(text="✔️ Apply", callback_data="flt_apply")
    builder.button(text="✖️ Cancel", callback_data="flt_cancel")

    niche_rows = [2] * (len(niches) // 2) + ([1] if len(niches) % 2 else [])
    builder.adjust(2, 2, 2, 2, 3, *niche_rows, 2, 2)
    return builder.as_markup()
