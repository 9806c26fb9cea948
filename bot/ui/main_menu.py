from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

MAIN_MENU_TEXT = """
🎯 Agency Leads

Generate business leads by niche, rank them by how complete
their contact data is and hand the best ones to outreach.
"""


def get_main_menu_keyboard() -> InlineKeyboardMarkup:
    """Returns inline keyboard for the main menu."""
    builder = InlineKeyboardBuilder()
    builder.button(text="📋 My leads", callback_data="view_leads")
    builder.button(text="✨ Generate leads", callback_data="generate_leads")
    builder.button(text="📊 Score overview", callback_data="score_overview")
    builder.adjust(1)
    return builder.as_markup()
