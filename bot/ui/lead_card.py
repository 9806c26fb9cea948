from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder
from html import escape

from lead_engine.models import Lead, SortConfig
from lead_engine.presence import contact_methods, is_present, social_links
from lead_engine.scoring import lead_priority, score_lead

_STATUS_LABEL = {
    "new": "",
    "pending": "📤 In outreach",
    "contacted": "✅ Contacted",
    "skipped": "❌ Skipped",
}

_PRIORITY_LABEL = {
    "high": "🔥 High priority",
    "medium": "👍 Medium priority",
    "low": "💤 Low priority",
}

_SORT_LABEL = {
    "score": "Score",
    "created_at": "Date",
}


def _action_buttons(builder: InlineKeyboardBuilder, lead_id: str, status: str) -> int:
    if status == "new":
        builder.button(text="📤 To outreach", callback_data=f"lead_outreach_{lead_id}")
        builder.button(text="❌ Skip", callback_data=f"lead_skipped_{lead_id}")
        return 2
    if status == "pending":
        builder.button(text="✅ Contacted", callback_data=f"lead_contacted_{lead_id}")
        return 1
    if status == "skipped":
        builder.button(text="↩️ Restore", callback_data=f"lead_restore_{lead_id}")
        return 1
    # contacted: nothing left to do
    return 0


def get_lead_card_keyboard(lead_id: str, status: str = "new") -> InlineKeyboardMarkup:
    """Returns outreach action buttons based on current lead status."""
    builder = InlineKeyboardBuilder()
    count = _action_buttons(builder, lead_id, status)
    if count:
        builder.adjust(count)
    return builder.as_markup()


def sort_button_text(key: str, sort: SortConfig) -> str:
    label = _SORT_LABEL[key]
    if sort.key != key:
        return label
    return f"{label} {'⬇️' if sort.descending else '⬆️'}"


def get_lead_navigation_keyboard(
    current_page: int,
    total_pages: int,
    lead_id: str,
    lead_status: str,
    sort: SortConfig,
    filters_active: bool = False,
) -> InlineKeyboardMarkup:
    """Outreach actions, pagination, sort and filter buttons for the lead viewer."""
    builder = InlineKeyboardBuilder()

    action_count = _action_buttons(builder, lead_id, lead_status)

    # Navigation
    nav_count = 0
    if current_page > 0:
        builder.button(text="◀️ Back", callback_data=f"lead_page_{current_page - 1}")
        nav_count += 1
    builder.button(text=f"{current_page + 1}/{total_pages}", callback_data="noop")
    nav_count += 1
    if current_page < total_pages - 1:
        builder.button(text="Next ▶️", callback_data=f"lead_page_{current_page + 1}")
        nav_count += 1

    builder.button(text=sort_button_text("score", sort), callback_data="lead_sort_score")
    builder.button(text=sort_button_text("created_at", sort), callback_data="lead_sort_created_at")
    builder.button(
        text="🔎 Filters •" if filters_active else "🔎 Filters",
        callback_data="filters_open",
    )
    builder.button(text="◀️ Menu", callback_data="main_menu")

    if action_count > 0:
        builder.adjust(action_count, nav_count, 2, 1, 1)
    else:
        builder.adjust(nav_count, 2, 1, 1)

    return builder.as_markup()


def _line(label: str, value) -> str:  # noqa: ANN001
    return f"{label}: {escape(str(value))}\n" if is_present(value) else ""


def format_lead_card(lead: Lead, index: int, total: int, status: str = "new") -> str:
    """Formats a lead and its score breakdown into a message for the bot."""
    breakdown = score_lead(lead)
    status_label = _STATUS_LABEL.get(status, "")
    status_line = f"{status_label}\n" if status_label else ""

    card = (
        f"🎯 Lead #{index} of {total}\n"
        f"━━━━━━━━━━━━━\n\n"
        f"🏢 {escape(lead.business_name) if is_present(lead.business_name) else 'Unnamed business'}\n"
        f"⭐ Score: {breakdown.total}/100 · {_PRIORITY_LABEL[lead_priority(breakdown.total)]}\n"
        f"{status_line}"
    )
    if is_present(lead.niche_name):
        card += f"🏷 {escape(lead.niche_name)}\n"
    card += "\n"

    card += _line("👤 Owner", lead.owner_name)
    card += _line("📧 Email", lead.email)
    card += _line("📞 Phone", lead.phone)
    card += _line("🌐 Website", lead.website)

    location = ", ".join(v for v in (lead.city, lead.state_province) if is_present(v))
    if location:
        card += f"📍 {escape(location)}\n"

    links = social_links(lead)
    if links:
        card += "\n🔗 Social:\n"
        for platform, link in links.items():
            card += f"• {platform.capitalize()}: {link}\n"

    if lead.business_type == "ecommerce":
        card += _line("💰 Revenue/month", lead.monthly_revenue_estimate)
        card += _line("📸 IG followers", lead.follower_count_instagram)
        card += _line("📣 Ad spend/month", lead.ad_spend_estimate)
        if lead.shopify_detected:
            card += "🛍 Shopify store\n"

    card += "\n📊 Score breakdown:\n"
    for category in breakdown.categories:
        missing = [item.name for item in category.items if not item.present]
        card += f"• {category.key.replace('_', ' ').capitalize()}: {category.score}/{category.max}"
        if missing:
            card += f" (missing: {', '.join(missing)})"
        card += "\n"

    methods = contact_methods(lead)
    if methods:
        card += f"\n✉️ Reach via: {', '.join(methods)}\n"

    return card


def format_lead_summary(lead: Lead) -> str:
    """Short one-line summary for console output."""
    total = score_lead(lead).total
    name = lead.business_name if is_present(lead.business_name) else "unnamed"
    niche = f" [{lead.niche_name}]" if is_present(lead.niche_name) else ""
    return f"{name}{niche} ⭐{total} {lead_priority(total)}".strip()
