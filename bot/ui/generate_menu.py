from typing import Collection, Sequence

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

import config
from bot.models.niche import Niche


def get_business_type_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for business_type, label in config.BUSINESS_TYPES.items():
        builder.button(text=label, callback_data=f"gen_type_{business_type}")
    builder.button(text="◀️ Menu", callback_data="main_menu")
    builder.adjust(2, 1)
    return builder.as_markup()


def get_niche_selection_keyboard(
    niches: Sequence[Niche],
    selected: Collection[int],
    cooling_down: Collection[int] = (),
) -> InlineKeyboardMarkup:
    """Multi-select list of niches. Recently used niches are marked, not hidden."""
    builder = InlineKeyboardBuilder()
    for niche in niches:
        mark = "✅" if niche.id in selected else "⬜"
        suffix = " ⏳" if niche.id in cooling_down else ""
        builder.button(text=f"{mark} {niche.name}{suffix}", callback_data=f"gen_niche_{niche.id}")

    builder.button(text="📍 Location", callback_data="gen_location")
    builder.button(
        text=f"🚀 Generate ({len(selected)}/{config.MAX_NICHES_PER_REQUEST})",
        callback_data="gen_confirm",
    )
    builder.button(text="◀️ Back", callback_data="generate_leads")

    niche_rows = [2] * (len(niches) // 2) + ([1] if len(niches) % 2 else [])
    builder.adjust(*niche_rows, 1, 1, 1)
    return builder.as_markup()


def format_generation_summary(selected_count: int, leads_per_niche: int) -> str:
    if selected_count == 0:
        return "Select up to {} niches.".format(config.MAX_NICHES_PER_REQUEST)
    return (
        f"Will generate {leads_per_niche * selected_count} leads "
        f"({leads_per_niche} per niche) from {selected_count} niches."
    )
