"""Unit tests for lead_engine.usage."""

from __future__ import annotations

import datetime

import pytest

from lead_engine.models import RejectionReason, UsageWindow
from lead_engine.usage import (
    active_cooldowns,
    build_cooldowns,
    cooldown_remaining,
    evaluate_generation_request,
    leads_per_niche,
    next_weekly_reset,
    week_start,
)

# A Wednesday
NOW = datetime.datetime(2026, 3, 4, 15, 30)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("now", "expected"),
    [
        (datetime.datetime(2026, 3, 4, 15, 30), datetime.datetime(2026, 3, 9)),
        (datetime.datetime(2026, 3, 8, 23, 59), datetime.datetime(2026, 3, 9)),
        (datetime.datetime(2026, 3, 9, 0, 0), datetime.datetime(2026, 3, 16)),
        (datetime.datetime(2026, 3, 9, 10, 0), datetime.datetime(2026, 3, 16)),
    ],
)
def test_next_weekly_reset_is_always_a_future_monday(now, expected) -> None:  # noqa: ANN001
    reset = next_weekly_reset(now)

    assert reset == expected
    assert reset.weekday() == 0
    assert reset > now


@pytest.mark.unit
def test_next_weekly_reset_keeps_timezone() -> None:
    tz = datetime.timezone(datetime.timedelta(hours=-5))
    reset = next_weekly_reset(NOW.replace(tzinfo=tz))

    assert reset.tzinfo is tz
    assert reset == datetime.datetime(2026, 3, 9, tzinfo=tz)


@pytest.mark.unit
def test_week_start_is_previous_monday() -> None:
    assert week_start(NOW) == datetime.date(2026, 3, 2)
    assert week_start(datetime.datetime(2026, 3, 9, 0, 0)) == datetime.date(2026, 3, 9)


@pytest.mark.unit
@pytest.mark.parametrize(("count", "expected"), [(1, 25), (2, 12), (3, 8), (5, 5), (0, 0)])
def test_leads_per_niche_floors_the_split(count, expected) -> None:  # noqa: ANN001
    assert leads_per_niche(count) == expected


@pytest.mark.unit
def test_allowed_request_reports_split_and_remaining() -> None:
    decision = evaluate_generation_request(UsageWindow(used=2, limit=5), NOW, 3)

    assert decision.allowed is True
    assert decision.reason is None
    assert decision.remaining == 3
    assert decision.leads_per_niche == 8
    assert decision.total_leads == 24
    assert decision.reset_at == datetime.datetime(2026, 3, 9)


@pytest.mark.unit
def test_quota_exhausted() -> None:
    decision = evaluate_generation_request(UsageWindow(used=1, limit=1), NOW, 3)

    assert decision.allowed is False
    assert decision.reason == RejectionReason.QUOTA_EXHAUSTED
    assert decision.remaining == 0


@pytest.mark.unit
def test_too_many_niches_regardless_of_quota() -> None:
    fresh = evaluate_generation_request(UsageWindow(used=0, limit=1), NOW, 6)
    spent = evaluate_generation_request(UsageWindow(used=1, limit=1), NOW, 6)

    assert fresh.reason == RejectionReason.TOO_MANY_NICHES
    assert spent.reason == RejectionReason.TOO_MANY_NICHES
    assert fresh.allowed is False


@pytest.mark.unit
def test_no_niches_selected() -> None:
    decision = evaluate_generation_request(UsageWindow(used=0, limit=5), NOW, 0)

    assert decision.allowed is False
    assert decision.reason == RejectionReason.NO_NICHES_SELECTED
    assert decision.reason.value == "no-niches-selected"


@pytest.mark.unit
def test_remaining_never_negative() -> None:
    window = UsageWindow(used=7, limit=5)

    assert window.remaining == 0
    assert evaluate_generation_request(window, NOW, 1).remaining == 0


@pytest.mark.unit
def test_usage_window_from_snapshot_recomputes_remaining() -> None:
    window = UsageWindow.from_snapshot({"used": 4, "limit": 5, "remaining": 5, "totalLeadsToday": 40})

    assert window.remaining == 1
    assert window.leads_generated == 40


@pytest.mark.unit
def test_cooldowns_are_informational() -> None:
    cooldowns = build_cooldowns(
        [
            ("1", "Dentists", NOW - datetime.timedelta(hours=2)),
            ("2", "Roofers", NOW - datetime.timedelta(hours=30)),
        ]
    )
    window = UsageWindow(used=0, limit=5, cooldowns=cooldowns)

    active = active_cooldowns(window, NOW)
    assert [c.niche_name for c in active] == ["Dentists"]
    assert cooldown_remaining(active[0], NOW) == datetime.timedelta(hours=22)
    assert cooldown_remaining(cooldowns[1], NOW) == datetime.timedelta(0)
    assert evaluate_generation_request(window, NOW, 1).allowed is True


@pytest.mark.unit
def test_build_cooldowns_custom_span() -> None:
    (cooldown,) = build_cooldowns([("1", "HVAC", NOW)], hours=6)

    assert cooldown.cooldown_until == NOW + datetime.timedelta(hours=6)
