import os
from dotenv import load_dotenv

load_dotenv()

#
# API Keys
#
COMET_API_KEY = os.getenv("COMET_API_KEY")
COMET_API_BASE_URL = os.getenv("COMET_API_BASE_URL", "https://api.cometapi.com/v1")
COMET_API_MODEL = os.getenv("COMET_API_MODEL", "gpt-4o-mini")

#
# Telegram API
#
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")

#
# Lead Generation Quota
#
# Generations allowed per weekly window (resets Monday 00:00 local time)
WEEKLY_GENERATION_LIMIT = int(os.getenv("WEEKLY_GENERATION_LIMIT", 5))

# Leads requested per generation, split evenly across the selected niches
LEADS_PER_REQUEST = int(os.getenv("LEADS_PER_REQUEST", 25))
MAX_NICHES_PER_REQUEST = int(os.getenv("MAX_NICHES_PER_REQUEST", 5))

# Niche cooldowns are shown to the user but do not block a request
NICHE_COOLDOWN_HOURS = int(os.getenv("NICHE_COOLDOWN_HOURS", 24))

#
# Outreach Limits
#
MAX_OUTREACH_TOTAL = int(os.getenv("MAX_OUTREACH_TOTAL", 200))
MAX_OUTREACH_PENDING = int(os.getenv("MAX_OUTREACH_PENDING", 75))

#
# Scoring
#
HIGH_PRIORITY_SCORE = 80
MEDIUM_PRIORITY_SCORE = 65
MIN_SCORE_STEP = 10

SCORE_BUCKETS = [
    ("90-100", 90, 100),
    ("80-89", 80, 89),
    ("70-79", 70, 79),
    ("60-69", 60, 69),
    ("0-59", 0, 59),
]

#
# Bot Settings
#
GENERATION_TIMEOUT_SECONDS = int(os.getenv("GENERATION_TIMEOUT_SECONDS", 120))

BUSINESS_TYPES = {
    "local_service": "Local services",
    "ecommerce": "E-commerce",
}

# Seeded into lead_niches on first start, keyed by business type
DEFAULT_NICHES = {
    "local_service": [
        "Dentists",
        "Chiropractors",
        "Med Spas",
        "Roofers",
        "HVAC",
        "Plumbers",
        "Landscapers",
        "Law Firms",
        "Real Estate Agents",
        "Fitness Studios",
    ],
    "ecommerce": [
        "Apparel",
        "Beauty & Skincare",
        "Supplements",
        "Pet Products",
        "Home Decor",
        "Jewelry",
    ],
}
