import logging
from aiogram import Router, F
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from aiogram.utils.keyboard import InlineKeyboardBuilder
from sqlalchemy.ext.asyncio import AsyncSession

import config
from bot.services import lead_store
from bot.services.generation import check_generation, current_usage, run_generation
from bot.states import Generate
from bot.ui.generate_menu import (
    format_generation_summary,
    get_business_type_keyboard,
    get_niche_selection_keyboard,
)
from bot.ui.messages import format_usage, rejection_message
from lead_engine.usage import active_cooldowns, leads_per_niche, next_weekly_reset

router = Router()
logger = logging.getLogger(__name__)


def _after_generation_keyboard():
    builder = InlineKeyboardBuilder()
    builder.button(text="📋 My leads", callback_data="view_leads")
    builder.button(text="✨ Generate more", callback_data="generate_leads")
    builder.button(text="◀️ Menu", callback_data="main_menu")
    builder.adjust(1)
    return builder.as_markup()


async def _niche_selection_content(
    session: AsyncSession, user_id: int, state: FSMContext
):
    data = await state.get_data()
    business_type = data["gen_type"]
    selected = data.get("gen_niches", [])
    niches = await lead_store.load_niches(session, business_type)
    window, now = await current_usage(session, user_id)
    cooling_down = {int(c.niche_id) for c in active_cooldowns(window, now)}

    text = (
        f"✨ {config.BUSINESS_TYPES[business_type]}\n"
        f"📍 Location: {data.get('gen_location') or 'any'}\n"
        f"📈 Generations left this week: {window.remaining}/{window.limit}\n\n"
        f"{format_generation_summary(len(selected), leads_per_niche(len(selected)))}"
    )
    if cooling_down:
        text += "\n⏳ marks niches you generated in the last 24 hours."
    keyboard = get_niche_selection_keyboard(niches, selected, cooling_down)
    return text, keyboard


async def _render_niche_selection(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
) -> None:
    text, keyboard = await _niche_selection_content(session, callback.from_user.id, state)
    await callback.message.edit_text(text, reply_markup=keyboard)
    await callback.answer()


@router.callback_query(F.data == "generate_leads")
async def generate_menu_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    """Shows the weekly quota and asks for a business type."""
    await state.set_state(None)
    await state.update_data(gen_type=None, gen_niches=[], gen_location=None)
    window, now = await current_usage(session, callback.from_user.id)
    text = (
        "✨ Lead generation\n━━━━━━━━━━━\n\n"
        f"{format_usage(window, next_weekly_reset(now), now)}\n"
        "Choose the type of business to find:"
    )
    await callback.message.edit_text(text, reply_markup=get_business_type_keyboard())
    await callback.answer()


@router.callback_query(F.data.startswith("gen_type_"))
async def business_type_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    business_type = callback.data.removeprefix("gen_type_")
    if business_type not in config.BUSINESS_TYPES:
        await callback.answer()
        return
    await state.set_state(Generate.choose_niches)
    await state.update_data(gen_type=business_type, gen_niches=[])
    await _render_niche_selection(callback, session, state)


@router.callback_query(F.data.startswith("gen_niche_"))
async def toggle_niche_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    niche_id = int(callback.data.split("_")[-1])
    data = await state.get_data()
    if not data.get("gen_type"):
        await callback.answer("Choose a business type first.", show_alert=True)
        return
    selected = list(data.get("gen_niches", []))
    if niche_id in selected:
        selected.remove(niche_id)
    else:
        selected.append(niche_id)
    await state.update_data(gen_niches=selected)
    await _render_niche_selection(callback, session, state)


@router.callback_query(F.data == "gen_location")
async def location_prompt_handler(callback: CallbackQuery, state: FSMContext):
    await state.set_state(Generate.enter_location)
    await callback.message.edit_text(
        "📍 Send a city or region to search in.\nSend - to search anywhere."
    )
    await callback.answer()


@router.message(Generate.enter_location)
async def location_text_handler(
    message: Message, session: AsyncSession, state: FSMContext
):
    location = (message.text or "").strip()
    await state.update_data(gen_location=None if location in ("", "-") else location)
    await state.set_state(Generate.choose_niches)
    text, keyboard = await _niche_selection_content(session, message.from_user.id, state)
    await message.answer(text, reply_markup=keyboard)


@router.callback_query(F.data == "gen_confirm")
async def confirm_generation_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    """Runs a generation if the weekly quota and niche count allow it."""
    user_id = callback.from_user.id
    data = await state.get_data()
    business_type = data.get("gen_type")
    if not business_type:
        await callback.answer("Choose a business type first.", show_alert=True)
        return
    selected = set(data.get("gen_niches", []))
    niches = [n for n in await lead_store.load_niches(session, business_type) if n.id in selected]

    decision, _ = await check_generation(session, user_id, len(niches))
    if not decision.allowed:
        await callback.answer(rejection_message(decision), show_alert=True)
        return

    await callback.answer()
    await callback.message.edit_text(
        f"⏳ Generating {decision.total_leads} leads across {len(niches)} niches..."
    )
    result = await run_generation(
        session, user_id, niches, business_type, data.get("gen_location")
    )
    await state.set_state(None)
    await state.update_data(gen_type=None, gen_niches=[], gen_location=None)

    if not result.decision.allowed:
        text = rejection_message(result.decision)
    elif result.leads:
        text = (
            f"✅ Generated {len(result.leads)} new leads.\n\n"
            f"📈 Generations left this week: {result.usage.remaining}/{result.usage.limit}"
        )
    else:
        text = (
            "😕 No leads could be generated this time.\n"
            "Your weekly quota was not charged."
        )
    await callback.message.edit_text(text, reply_markup=_after_generation_keyboard())
