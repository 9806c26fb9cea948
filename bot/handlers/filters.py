import logging
from aiogram import Router, F
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from sqlalchemy.ext.asyncio import AsyncSession

import config
from bot.handlers.lead_viewer import get_filter_panel, show_lead_page
from bot.services import lead_store
from bot.states import LeadFilters
from bot.ui.filter_panel import format_filter_panel, get_filter_panel_keyboard
from lead_engine.filters import available_niches, filter_leads
from lead_engine.models import FilterPanel

router = Router()
logger = logging.getLogger(__name__)

_TOGGLE_FIELDS = ("has_phone", "has_email", "has_website", "has_socials")


async def _save_panel(state: FSMContext, panel: FilterPanel) -> None:
    await state.update_data(filters=panel.to_dict())


async def _panel_content(session: AsyncSession, user_id: int, panel: FilterPanel):
    leads = await lead_store.load_leads(session, user_id)
    matching = len(filter_leads(leads, panel.draft))
    text = format_filter_panel(panel.draft, matching, len(leads))
    keyboard = get_filter_panel_keyboard(panel.draft, available_niches(leads))
    return text, keyboard


async def _render_panel(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext, panel: FilterPanel
) -> None:
    await _save_panel(state, panel)
    text, keyboard = await _panel_content(session, callback.from_user.id, panel)
    await callback.message.edit_text(text, reply_markup=keyboard)
    await callback.answer()


@router.callback_query(F.data == "filters_open")
async def open_filters_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    """Opens the panel with a draft copied from the applied filters."""
    panel = (await get_filter_panel(state)).discard()
    await _render_panel(callback, session, state, panel)


@router.callback_query(F.data.startswith("flt_toggle_"))
async def toggle_filter_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    field_name = callback.data.removeprefix("flt_toggle_")
    if field_name not in _TOGGLE_FIELDS:
        await callback.answer()
        return
    panel = await get_filter_panel(state)
    panel = panel.edit(**{field_name: not getattr(panel.draft, field_name)})
    await _render_panel(callback, session, state, panel)


@router.callback_query(F.data.startswith("flt_platform_"))
async def toggle_platform_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    platform = callback.data.removeprefix("flt_platform_")
    panel = await get_filter_panel(state)
    try:
        panel = panel.with_draft(panel.draft.toggle_platform(platform))
    except ValueError:
        logger.warning(f"Ignoring unknown platform '{platform}'")
        await callback.answer()
        return
    await _render_panel(callback, session, state, panel)


@router.callback_query(F.data.startswith("flt_niche_"))
async def toggle_niche_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    index = int(callback.data.split("_")[-1])
    niches = available_niches(await lead_store.load_leads(session, callback.from_user.id))
    if index >= len(niches):
        # Lead list changed since the panel was drawn
        await callback.answer("This niche is no longer available.")
        return
    panel = await get_filter_panel(state)
    panel = panel.with_draft(panel.draft.toggle_niche(niches[index]))
    await _render_panel(callback, session, state, panel)


@router.callback_query(F.data.in_({"flt_score_up", "flt_score_down"}))
async def min_score_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    panel = await get_filter_panel(state)
    step = config.MIN_SCORE_STEP if callback.data == "flt_score_up" else -config.MIN_SCORE_STEP
    min_score = max(0, min(100, panel.draft.min_score + step))
    if min_score == panel.draft.min_score:
        await callback.answer()
        return
    await _render_panel(callback, session, state, panel.edit(min_score=min_score))


@router.callback_query(F.data == "flt_search")
async def search_prompt_handler(callback: CallbackQuery, state: FSMContext):
    await state.set_state(LeadFilters.enter_search)
    await callback.message.edit_text(
        "🔤 Send a business or owner name to search for.\n"
        "Send - to clear the search."
    )
    await callback.answer()


@router.message(LeadFilters.enter_search)
async def search_text_handler(
    message: Message, session: AsyncSession, state: FSMContext
):
    query = (message.text or "").strip()
    if query == "-":
        query = ""
    panel = (await get_filter_panel(state)).edit(search=query)
    await state.set_state(None)
    await _save_panel(state, panel)
    text, keyboard = await _panel_content(session, message.from_user.id, panel)
    await message.answer(text, reply_markup=keyboard)


@router.callback_query(F.data == "flt_clear")
async def clear_filters_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    """Resets the draft only; applied filters stay until Apply."""
    panel = (await get_filter_panel(state)).clear_draft()
    await _render_panel(callback, session, state, panel)


@router.callback_query(F.data == "flt_apply")
async def apply_filters_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    panel = (await get_filter_panel(state)).commit()
    await _save_panel(state, panel)
    logger.info(f"Filters applied for user_id={callback.from_user.id}: {panel.active.to_dict()}")
    await show_lead_page(callback, session, state, page=0, notice="✔️ Filters applied")


@router.callback_query(F.data == "flt_cancel")
async def cancel_filters_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    panel = (await get_filter_panel(state)).discard()
    await _save_panel(state, panel)
    data = await state.get_data()
    await show_lead_page(callback, session, state, page=data.get("lead_page", 0))
