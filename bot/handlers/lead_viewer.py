import logging
from aiogram import Router, F
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery
from aiogram.utils.keyboard import InlineKeyboardBuilder
from sqlalchemy.ext.asyncio import AsyncSession

from bot.services import lead_store
from bot.services.outreach import send_to_outreach
from bot.ui.lead_card import format_lead_card, get_lead_navigation_keyboard
from bot.ui.messages import outreach_message
from lead_engine.models import FilterPanel, SortConfig
from lead_engine.pipeline import build_view
from lead_engine.scoring import score_distribution
from lead_engine.sorting import DEFAULT_SORT, toggle_sort

router = Router()
logger = logging.getLogger(__name__)


async def get_filter_panel(state: FSMContext) -> FilterPanel:
    data = await state.get_data()
    return FilterPanel.from_dict(data.get("filters"))


async def get_sort(state: FSMContext) -> SortConfig:
    data = await state.get_data()
    sort = data.get("sort")
    if not sort:
        return DEFAULT_SORT
    return SortConfig(key=sort["key"], direction=sort["direction"])


def _empty_view_keyboard():
    builder = InlineKeyboardBuilder()
    builder.button(text="🔎 Filters", callback_data="filters_open")
    builder.button(text="◀️ Menu", callback_data="main_menu")
    builder.adjust(1)
    return builder.as_markup()


@router.callback_query(F.data == "view_leads")
async def view_leads_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    """Shows the first lead of the current filtered and sorted view."""
    await show_lead_page(callback, session, state, page=0)


@router.callback_query(F.data.startswith("lead_page_"))
async def lead_page_navigation_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    """Handles pagination navigation between leads."""
    page = int(callback.data.split("_")[-1])
    await show_lead_page(callback, session, state, page)


@router.callback_query(F.data.startswith("lead_sort_"))
async def lead_sort_handler(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    """Same key flips the direction, a new key starts descending."""
    key = callback.data.removeprefix("lead_sort_")
    current = await get_sort(state)
    try:
        new_sort = toggle_sort(current, key)
    except ValueError:
        logger.warning(f"Ignoring unknown sort key '{key}'")
        await callback.answer()
        return
    await state.update_data(sort={"key": new_sort.key, "direction": new_sort.direction})
    await show_lead_page(callback, session, state, page=0)


async def show_lead_page(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
    page: int,
    notice: str | None = None,
) -> None:
    """Shows one lead of the view derived from the stored leads, filters and sort."""
    user_id = callback.from_user.id
    records = await lead_store.load_lead_records(session, user_id)
    if not records:
        await callback.answer(
            "You have no leads yet. Generate some first.", show_alert=True
        )
        return

    statuses = {str(record.id): record.outreach_status for record in records}
    panel = await get_filter_panel(state)
    sort = await get_sort(state)
    view = build_view((record.to_lead() for record in records), panel.active, sort)
    logger.info(
        f"Lead view for user_id={user_id}: {len(view)}/{len(records)} leads, "
        f"sort={sort.key}:{sort.direction}"
    )

    if not view:
        await callback.message.edit_text(
            f"No leads match the current filters ({len(records)} leads in total).",
            reply_markup=_empty_view_keyboard(),
        )
        await callback.answer(notice)
        return

    # The view can shrink between taps, so clamp instead of rejecting
    page = max(0, min(page, len(view) - 1))
    await state.update_data(lead_page=page)

    lead = view[page]
    status = statuses.get(lead.id, "new")
    card_text = format_lead_card(lead, page + 1, len(view), status)
    keyboard = get_lead_navigation_keyboard(
        page, len(view), lead.id, status, sort, filters_active=panel.active.is_active
    )
    await callback.message.edit_text(
        card_text, reply_markup=keyboard, disable_web_page_preview=True
    )
    await callback.answer(notice)


async def _current_page(state: FSMContext) -> int:
    data = await state.get_data()
    return data.get("lead_page", 0)


# --- Outreach status handlers ---

@router.callback_query(F.data.startswith("lead_outreach_"))
async def send_lead_to_outreach(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    """Moves a lead into the outreach queue."""
    lead_id = int(callback.data.split("_")[-1])
    result = await send_to_outreach(session, callback.from_user.id, [lead_id])
    if result.missing:
        notice = "⚠️ This lead no longer exists. List refreshed."
    elif result.reason:
        await callback.answer(outreach_message(result.reason), show_alert=True)
        return
    else:
        notice = "📤 Sent to outreach"
    await show_lead_page(callback, session, state, await _current_page(state), notice)


async def _set_status(
    callback: CallbackQuery,
    session: AsyncSession,
    state: FSMContext,
    status: str,
    notice: str,
) -> None:
    lead_id = int(callback.data.split("_")[-1])
    record = await lead_store.get_lead_record(session, lead_id, callback.from_user.id)
    if record is None:
        notice = "⚠️ This lead no longer exists. List refreshed."
    else:
        record.outreach_status = status
        await session.commit()
    await show_lead_page(callback, session, state, await _current_page(state), notice)


@router.callback_query(F.data.startswith("lead_contacted_"))
async def mark_lead_contacted(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    await _set_status(callback, session, state, "contacted", "✅ Marked as contacted")


@router.callback_query(F.data.startswith("lead_skipped_"))
async def mark_lead_skipped(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    await _set_status(callback, session, state, "skipped", "❌ Skipped")


@router.callback_query(F.data.startswith("lead_restore_"))
async def restore_lead(
    callback: CallbackQuery, session: AsyncSession, state: FSMContext
):
    """Restores a skipped lead back to new."""
    await _set_status(callback, session, state, "new", "↩️ Back in the queue")


@router.callback_query(F.data == "score_overview")
async def score_overview_handler(callback: CallbackQuery, session: AsyncSession):
    """Refreshes cached scores and shows how leads spread across score buckets."""
    user_id = callback.from_user.id
    updated = await lead_store.recalculate_scores(session, user_id)
    leads = await lead_store.load_leads(session, user_id)
    distribution = score_distribution(leads)

    text = f"📊 Score overview ({len(leads)} leads)\n━━━━━━━━━━━\n\n"
    for label, count in distribution.items():
        text += f"{label}: {count}\n"
    if updated:
        text += f"\n🔄 {updated} scores recalculated."

    builder = InlineKeyboardBuilder()
    builder.button(text="📋 My leads", callback_data="view_leads")
    builder.button(text="◀️ Menu", callback_data="main_menu")
    builder.adjust(1)
    await callback.message.edit_text(text, reply_markup=builder.as_markup())
    await callback.answer()


@router.callback_query(F.data == "noop")
async def noop_handler(callback: CallbackQuery):
    """Handles the page counter button (does nothing)."""
    await callback.answer()
