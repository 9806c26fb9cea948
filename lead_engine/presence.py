"""Presence rule for lead fields and the helpers built on top of it."""

from __future__ import annotations

import re
from typing import Any

from lead_engine.models import Lead

MISSING_SENTINEL = "N/A"
ESTIMATED_MARKER = "(estimated)"

_FACEBOOK_URL_PREFIX = re.compile(r"^https?://(www\.)?facebook\.com/", re.IGNORECASE)
_FACEBOOK_PAGE = re.compile(r"^[a-zA-Z0-9.\-]{5,}$")


def is_present(value: Any) -> bool:
    """True when a field carries real data.

    None, the empty string and the "N/A" placeholder written by enrichment
    all count as missing.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return value != "" and value != MISSING_SENTINEL
    return True


def social_link(platform: str, handle: str | None) -> str | None:
    """Returns a profile URL for a social handle, or None if none can be built."""
    if not is_present(handle) or ESTIMATED_MARKER in handle:
        return None

    if platform == "instagram":
        return f"https://instagram.com/{handle.replace('@', '')}"
    if platform == "twitter":
        return f"https://twitter.com/{handle.replace('@', '')}"
    if platform == "linkedin":
        if handle.startswith("http"):
            return handle
        return f"https://linkedin.com/company/{handle}"
    if platform == "facebook":
        return _facebook_link(handle)
    raise ValueError(f"Unknown social platform: {platform}")


def _facebook_link(handle: str) -> str | None:
    # Personal profiles, groups and bare @mentions are not linkable pages
    if handle.startswith("@") or "profile.php" in handle:
        return None
    if re.search(r"/groups/", handle, re.IGNORECASE):
        return None

    page = _FACEBOOK_URL_PREFIX.sub("", handle).rstrip("/")
    page = page.lstrip("@")
    if not page or page.lower() == "facebook-f" or page.startswith("profile"):
        return None
    if not _FACEBOOK_PAGE.match(page):
        return None
    return f"https://facebook.com/{page}"


def social_links(lead: Lead) -> dict[str, str]:
    """All linkable social profiles of a lead, keyed by platform."""
    links = {}
    for platform in ("instagram", "facebook", "linkedin", "twitter"):
        link = social_link(platform, lead.social_handle(platform))
        if link:
            links[platform] = link
    return links


def contact_methods(lead: Lead) -> list[str]:
    """Outreach channels available for a lead, in preferred order."""
    methods = []
    if is_present(lead.email):
        methods.append("email")
    if is_present(lead.phone):
        methods.append("phone")
    if is_present(lead.linkedin_profile):
        methods.append("linkedin")
    if is_present(lead.instagram_handle):
        methods.append("instagram")
    if is_present(lead.facebook_page):
        methods.append("facebook")
    return methods
