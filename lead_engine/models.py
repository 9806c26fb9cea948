"""Value types shared by the scoring, filtering, sorting and usage stages."""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

BUSINESS_TYPES = ("ecommerce", "local_service")
SOCIAL_PLATFORMS = ("instagram", "facebook", "linkedin", "twitter")

# Platform name -> Lead attribute holding the handle
SOCIAL_FIELDS = {
    "instagram": "instagram_handle",
    "facebook": "facebook_page",
    "linkedin": "linkedin_profile",
    "twitter": "twitter_handle",
}


@dataclass(frozen=True)
class Lead:
    """A sparse prospect record. Every field except identity is optional."""

    id: str
    business_type: str = "local_service"
    business_name: str | None = None
    owner_name: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    city: str | None = None
    state_province: str | None = None
    niche_name: str | None = None
    instagram_handle: str | None = None
    facebook_page: str | None = None
    linkedin_profile: str | None = None
    twitter_handle: str | None = None
    # E-commerce enrichment
    monthly_revenue_estimate: float | None = None
    follower_count_instagram: int | None = None
    engagement_rate: float | None = None
    ad_spend_estimate: float | None = None
    shopify_detected: bool | None = None
    lead_score: int | None = None
    created_at: datetime.datetime | str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Lead":
        """Build a Lead from a loose mapping (extra keys are ignored)."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in record.items() if k in known}
        lead_id = record.get("id")
        values["id"] = "" if lead_id is None else str(lead_id)
        values["business_type"] = record.get("business_type") or "local_service"
        return cls(**values)

    def social_handle(self, platform: str) -> str | None:
        try:
            return getattr(self, SOCIAL_FIELDS[platform])
        except KeyError:
            raise ValueError(f"Unknown social platform: {platform}") from None


@dataclass(frozen=True)
class ScoreItem:
    name: str
    value: int
    max: int
    present: bool


@dataclass(frozen=True)
class ScoreCategory:
    key: str
    score: int
    max: int
    items: tuple[ScoreItem, ...]


@dataclass(frozen=True)
class ScoreBreakdown:
    total: int
    contact_info: ScoreCategory
    social_presence: ScoreCategory
    business_info: ScoreCategory
    geographic: ScoreCategory

    @property
    def categories(self) -> tuple[ScoreCategory, ...]:
        return (
            self.contact_info,
            self.social_presence,
            self.business_info,
            self.geographic,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "breakdown": {
                category.key: {
                    "score": category.score,
                    "max": category.max,
                    "items": [
                        {
                            "name": item.name,
                            "value": item.value,
                            "max": item.max,
                            "present": item.present,
                        }
                        for item in category.items
                    ],
                }
                for category in self.categories
            },
        }


@dataclass(frozen=True)
class SocialPlatforms:
    instagram: bool = False
    facebook: bool = False
    linkedin: bool = False
    twitter: bool = False

    @property
    def enabled(self) -> tuple[str, ...]:
        return tuple(p for p in SOCIAL_PLATFORMS if getattr(self, p))


@dataclass(frozen=True)
class FilterCriteria:
    """Snapshot of the filter selections applied to a lead list."""

    has_phone: bool = False
    has_email: bool = False
    has_website: bool = False
    has_socials: bool = False
    platforms: SocialPlatforms = field(default_factory=SocialPlatforms)
    niches: frozenset[str] = frozenset()
    min_score: int = 0
    search: str = ""

    @property
    def is_active(self) -> bool:
        return bool(
            self.has_phone
            or self.has_email
            or self.has_website
            or self.has_socials
            or self.platforms.enabled
            or self.niches
            or self.min_score > 0
            or self.search.strip()
        )

    def toggle_platform(self, platform: str) -> "FilterCriteria":
        if platform not in SOCIAL_PLATFORMS:
            raise ValueError(f"Unknown social platform: {platform}")
        current = getattr(self.platforms, platform)
        return replace(self, platforms=replace(self.platforms, **{platform: not current}))

    def toggle_niche(self, niche_name: str) -> "FilterCriteria":
        return replace(self, niches=self.niches ^ {niche_name})

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_phone": self.has_phone,
            "has_email": self.has_email,
            "has_website": self.has_website,
            "has_socials": self.has_socials,
            "platforms": {p: getattr(self.platforms, p) for p in SOCIAL_PLATFORMS},
            "niches": sorted(self.niches),
            "min_score": self.min_score,
            "search": self.search,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "FilterCriteria":
        payload = payload or {}
        platforms_payload = payload.get("platforms") or {}
        return cls(
            has_phone=bool(payload.get("has_phone", False)),
            has_email=bool(payload.get("has_email", False)),
            has_website=bool(payload.get("has_website", False)),
            has_socials=bool(payload.get("has_socials", False)),
            platforms=SocialPlatforms(
                **{p: bool(platforms_payload.get(p, False)) for p in SOCIAL_PLATFORMS}
            ),
            niches=frozenset(payload.get("niches") or ()),
            min_score=int(payload.get("min_score", 0)),
            search=payload.get("search") or "",
        )


@dataclass(frozen=True)
class FilterPanel:
    """Active criteria plus the draft being edited in the filter panel.

    Edits only ever touch the draft. ``commit`` promotes it, ``discard``
    throws it away.
    """

    active: FilterCriteria = field(default_factory=FilterCriteria)
    draft: FilterCriteria = field(default_factory=FilterCriteria)

    def edit(self, **changes: Any) -> "FilterPanel":
        return replace(self, draft=replace(self.draft, **changes))

    def with_draft(self, draft: FilterCriteria) -> "FilterPanel":
        return replace(self, draft=draft)

    def commit(self) -> "FilterPanel":
        return FilterPanel(active=self.draft, draft=self.draft)

    def discard(self) -> "FilterPanel":
        return FilterPanel(active=self.active, draft=self.active)

    def clear_draft(self) -> "FilterPanel":
        return replace(self, draft=FilterCriteria())

    @property
    def has_pending_changes(self) -> bool:
        return self.draft != self.active

    def to_dict(self) -> dict[str, Any]:
        return {"active": self.active.to_dict(), "draft": self.draft.to_dict()}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "FilterPanel":
        payload = payload or {}
        return cls(
            active=FilterCriteria.from_dict(payload.get("active")),
            draft=FilterCriteria.from_dict(payload.get("draft")),
        )


SORT_KEYS = ("score", "created_at")
SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class SortConfig:
    key: str = "score"
    direction: str = "desc"

    def __post_init__(self) -> None:
        if self.key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key: {self.key}")
        if self.direction not in SORT_DIRECTIONS:
            raise ValueError(f"Unknown sort direction: {self.direction}")

    @property
    def descending(self) -> bool:
        return self.direction == "desc"


@dataclass(frozen=True)
class NicheCooldown:
    niche_id: str
    niche_name: str
    last_used_at: datetime.datetime
    cooldown_until: datetime.datetime


@dataclass(frozen=True)
class UsageWindow:
    """Weekly generation quota as last read from the store."""

    used: int
    limit: int
    cooldowns: tuple[NicheCooldown, ...] = ()
    leads_generated: int = 0

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Mapping[str, Any],
        cooldowns: tuple[NicheCooldown, ...] = (),
    ) -> "UsageWindow":
        """Rebuild a window from a generation backend usage payload.

        A ``remaining`` value in the payload is ignored.
        """
        return cls(
            used=int(snapshot.get("used") or 0),
            limit=int(snapshot.get("limit") or 0),
            cooldowns=cooldowns,
            leads_generated=int(snapshot.get("totalLeadsToday") or 0),
        )


class RejectionReason(str, enum.Enum):
    NO_NICHES_SELECTED = "no-niches-selected"
    TOO_MANY_NICHES = "too-many-niches"
    QUOTA_EXHAUSTED = "quota-exhausted"


@dataclass(frozen=True)
class GenerationDecision:
    allowed: bool
    remaining: int
    reset_at: datetime.datetime
    reason: RejectionReason | None = None
    leads_per_niche: int = 0
    total_leads: int = 0
