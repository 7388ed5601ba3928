"""Placeholder images for prompts the provider could not serve."""

import logging
import random
import re
from urllib.parse import quote

logger = logging.getLogger(__name__)

PLACEHOLDER_BASE_URL = "https://via.placeholder.com/400x400"

COLOR_SCHEMES = [
    {"bg": "2563eb", "text": "ffffff", "desc": "Professional Blue"},
    {"bg": "059669", "text": "ffffff", "desc": "Growth Green"},
    {"bg": "dc2626", "text": "ffffff", "desc": "Bold Red"},
    {"bg": "7c3aed", "text": "ffffff", "desc": "Creative Purple"},
    {"bg": "ea580c", "text": "ffffff", "desc": "Energy Orange"},
]

REASON_CAPTIONS = {
    "quota-exceeded": "Quota Exceeded",
    "api-error": "Demo Mode",
    "timeout": "Demo Mode",
}

_NAME_PATTERNS = (
    re.compile(r'for "([^"]+)"', re.IGNORECASE),
    re.compile(r'called "([^"]+)"', re.IGNORECASE),
)

DEFAULT_BUSINESS_NAME = "Your Business"


def extract_business_name(prompt: str) -> str:
    """
    Pull the quoted business name out of a prompt.

    'Create a logo for "Acme Bakery".' -> "Acme Bakery"
    'A shop called "Bolt"' -> "Bolt"
    anything else -> "Your Business"
    """
    for pattern in _NAME_PATTERNS:
        match = pattern.search(prompt)
        if match:
            return match.group(1)
    return DEFAULT_BUSINESS_NAME


def placeholder_url(prompt: str, reason: str = "demo", rng: random.Random | None = None) -> str:
    """Build a placeholder image URL showing the business name and failure reason."""
    scheme = (rng or random).choice(COLOR_SCHEMES)
    business_name = extract_business_name(prompt)

    text = business_name
    caption = REASON_CAPTIONS.get(reason)
    if caption:
        text = f"{text}\n\n({caption})"

    logger.info("Placeholder (%s) for %s: %s", reason, business_name, scheme["desc"])
    return f"{PLACEHOLDER_BASE_URL}/{scheme['bg']}/{scheme['text']}?text={quote(text)}"
