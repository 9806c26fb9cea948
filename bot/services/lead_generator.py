"""Generation backend: asks the LLM for businesses in a niche."""

import json
import logging
import math
import time
from typing import Any, Dict, List

from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage, SystemMessage

import config

logger = logging.getLogger(__name__)

# Fields the model is allowed to fill in; anything else is dropped
LEAD_FIELDS = (
    "business_name",
    "owner_name",
    "phone",
    "email",
    "website",
    "city",
    "state_province",
    "instagram_handle",
    "facebook_page",
    "linkedin_profile",
    "twitter_handle",
    "monthly_revenue_estimate",
    "follower_count_instagram",
    "engagement_rate",
    "ad_spend_estimate",
    "shopify_detected",
)

FLOAT_FIELDS = ("monthly_revenue_estimate", "engagement_rate", "ad_spend_estimate")
INT_FIELDS = ("follower_count_instagram",)
_SUFFIXES = {"k": 1_000, "m": 1_000_000}

try:
    llm = ChatOpenAI(
        openai_api_key=config.COMET_API_KEY,
        openai_api_base=config.COMET_API_BASE_URL,
        model=config.COMET_API_MODEL,
        temperature=0,
        request_timeout=config.GENERATION_TIMEOUT_SECONDS,
    )
    logger.info("LLM client initialized successfully.")
except Exception as e:
    llm = None
    logger.error(f"Failed to initialize LLM client: {e}")


def build_prompt(niche: str, business_type: str, location: str | None, count: int) -> str:
    """Builds the discovery request for one niche."""
    if business_type == "ecommerce":
        scope = "online stores (e-commerce brands) selling to consumers"
        extra = (
            "For each store also estimate monthly_revenue_estimate (USD), "
            "follower_count_instagram, engagement_rate (percent), "
            "ad_spend_estimate (USD per month) and shopify_detected (true/false).\n"
        )
    else:
        scope = "local service businesses"
        if location:
            scope += f" located in or near {location}"
        extra = ""

    return (
        f"Find {count} real {scope} in the '{niche}' niche.\n"
        "Return a JSON array. Each element is an object with the keys: "
        "business_name, owner_name, phone, email, website, city, state_province, "
        "instagram_handle, facebook_page, linkedin_profile, twitter_handle.\n"
        f"{extra}"
        "Use null for anything you cannot find. Never invent contact details; "
        "if a social handle is a guess, append ' (estimated)' to it."
    )


def parse_response(content: str) -> List[Dict[str, Any]]:
    """Parses the model output into raw lead records."""
    cleaned = content.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`").strip()
        if cleaned.startswith("json"):
            cleaned = cleaned[len("json"):]
    parsed = json.loads(cleaned)

    if isinstance(parsed, dict):
        parsed = parsed.get("businesses") or parsed.get("leads") or []
    if not isinstance(parsed, list):
        return []

    records = []
    for item in parsed:
        if not isinstance(item, dict):
            continue
        record = {}
        for key in LEAD_FIELDS:
            value = item.get(key)
            if key in FLOAT_FIELDS:
                value = _to_number(value)
            elif key in INT_FIELDS:
                value = _to_number(value)
                value = int(value) if value is not None else None
            elif key == "shopify_detected":
                value = _to_bool(value)
            elif isinstance(value, (int, float)) and not isinstance(value, bool):
                value = str(value)
            elif not isinstance(value, str):
                value = None
            if value is not None:
                record[key] = value
        records.append(record)
    return records


def _to_number(value: Any) -> float | None:
    """Reads "50000", "$12k", "3.5%" or plain numbers; None if unreadable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    text = value.strip().lower().replace("$", "").replace(",", "").rstrip("%").strip()
    multiplier = 1
    if text[-1:] in _SUFFIXES:
        multiplier = _SUFFIXES[text[-1]]
        text = text[:-1].strip()
    try:
        number = float(text) * multiplier
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _to_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        return {"true": True, "yes": True, "false": False, "no": False}.get(value.strip().lower())
    return None


async def generate_leads_for_niche(
    niche: str,
    business_type: str,
    location: str | None,
    count: int,
) -> List[Dict[str, Any]]:
    """Returns up to ``count`` raw lead records for a niche, or [] on failure."""
    if not llm:
        logger.error("LLM client is not initialized; cannot generate leads.")
        return []

    system_message = SystemMessage(
        content=(
            "You are a lead research assistant for a marketing agency. "
            "Answer with a JSON array only, no text before or after it."
        )
    )
    human_message = HumanMessage(content=build_prompt(niche, business_type, location, count))

    try:
        logger.info(f"Generating {count} leads for niche '{niche}' ({business_type}). Waiting for LLM...")
        start_time = time.time()
        response = await llm.ainvoke([system_message, human_message])
        duration = time.time() - start_time
        logger.info(f"LLM response for niche '{niche}' received in {duration:.2f} seconds.")

        records = parse_response(response.content)
    except json.JSONDecodeError as e:
        logger.error(f"Could not parse LLM response for niche '{niche}': {e}")
        return []
    except Exception as e:
        logger.error(f"Lead generation failed for niche '{niche}': {e}")
        return []

    for record in records:
        record["niche_name"] = niche
        record["business_type"] = business_type
    return records[:count]
