import argparse
import asyncio
import json
import logging
from typing import List

import config
from bot.ui.lead_card import format_lead_summary
from lead_engine.models import FilterCriteria, Lead, SortConfig
from lead_engine.pipeline import build_view
from lead_engine.scoring import score_distribution, score_leads

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def load_leads_file(path: str) -> List[Lead]:
    """Reads leads from a JSON file: a list of records or {"leads": [...]}."""
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict):
        payload = payload.get("leads", [])
    leads = []
    seen_ids = set()
    for index, record in enumerate(payload):
        if not isinstance(record, dict):
            logger.warning(f"Skipping record #{index}: not an object")
            continue
        lead_id = record.get("id")
        if lead_id is None or str(lead_id) == "":
            lead_id = f"row-{index}"
        if str(lead_id) in seen_ids:
            logger.warning(f"Record #{index} repeats id {lead_id!r}; renamed")
            lead_id = f"{lead_id}-row-{index}"
        seen_ids.add(str(lead_id))
        leads.append(Lead.from_record({**record, "id": lead_id}))
    return leads


def print_report(leads: List[Lead], criteria: FilterCriteria, sort: SortConfig, limit: int) -> None:
    """Prints the ranked view and the score distribution of all leads."""
    view = build_view(leads, criteria, sort)
    breakdowns = score_leads(leads)

    print("\n" + "=" * 50)
    print("🎯 Lead report")
    print("=" * 50)
    print(f"📊 Leads loaded: {len(leads)}")
    print(f"🔎 Matching filters: {len(view)}")
    print(f"↕️  Sorted by: {sort.key} ({sort.direction})")
    print("=" * 50 + "\n")

    for position, lead in enumerate(view[:limit], start=1):
        print(f"{position:>3}. {format_lead_summary(lead)}")
        breakdown = breakdowns[lead.id]
        print(
            f"     contact {breakdown.contact_info.score}/{breakdown.contact_info.max}"
            f" · social {breakdown.social_presence.score}/{breakdown.social_presence.max}"
            f" · business {breakdown.business_info.score}/{breakdown.business_info.max}"
            f" · geo {breakdown.geographic.score}/{breakdown.geographic.max}"
        )
    if len(view) > limit:
        print(f"\n   ... and {len(view) - limit} more")

    print("\n📈 Score distribution:")
    for label, count in score_distribution(leads).items():
        print(f"   {label:>7}: {count}")
    print("=" * 50 + "\n")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Agency lead scoring and generation")
    subparsers = parser.add_subparsers(
        dest="command", required=True, help="Available commands"
    )

    subparsers.add_parser("bot", help="Run the Telegram bot.")

    parser_report = subparsers.add_parser(
        "report", help="Score, filter and rank leads from a JSON file."
    )
    parser_report.add_argument("file", type=str, help="JSON file with lead records.")
    parser_report.add_argument(
        "--min-score", type=int, default=0, help="Minimum lead score."
    )
    parser_report.add_argument(
        "--search", type=str, default="", help="Business or owner name substring."
    )
    parser_report.add_argument(
        "--niche", action="append", default=[], help="Niche to keep (repeatable)."
    )
    parser_report.add_argument(
        "--sort", type=str, choices=["score", "created_at"], default="score",
        help="Sort key."
    )
    parser_report.add_argument(
        "--asc", action="store_true", help="Sort ascending instead of descending."
    )
    parser_report.add_argument(
        "--limit", type=int, default=25, help="Maximum leads to print."
    )

    args = parser.parse_args()

    if args.command == "bot":
        if not config.TELEGRAM_BOT_TOKEN:
            logger.error("TELEGRAM_BOT_TOKEN is not set. Exiting.")
            return
        from bot.main import main as run_bot
        asyncio.run(run_bot(config.TELEGRAM_BOT_TOKEN))
    elif args.command == "report":
        criteria = FilterCriteria(
            min_score=args.min_score,
            search=args.search,
            niches=frozenset(args.niche),
        )
        sort = SortConfig(key=args.sort, direction="asc" if args.asc else "desc")
        print_report(load_leads_file(args.file), criteria, sort, args.limit)


if __name__ == '__main__':
    main()
