"""
Static disclosure wording.

Built once at import and exposed as read-only mappings.
"""

from types import MappingProxyType
from typing import Mapping

from .models import Platform


# Appended by ensure_disclosure() when a platform's content has no disclosure
PLATFORM_DISCLOSURES: Mapping[Platform, str] = MappingProxyType({
    Platform.YOUTUBE: (
        "[DISCLOSURE]\n"
        "As an Amazon Associate, I earn from qualifying purchases. "
        "This video contains affiliate links, which means I may earn a commission "
        "if you click through and make a purchase at no additional cost to you."
    ),
    Platform.TIKTOK: (
        "#ad #affiliate\n"
        "As an Amazon Associate, I earn from qualifying purchases."
    ),
    Platform.INSTAGRAM: (
        "#ad #affiliate #amazonfind\n"
        "Disclosure: This post contains affiliate links. "
        "As an Amazon Associate, I earn from qualifying purchases at no extra cost to you."
    ),
    Platform.BLOG: (
        "**Disclosure:** This post contains affiliate links. "
        "As an Amazon Associate, I earn from qualifying purchases. "
        "This means if you click on a link and make a purchase, I may receive a small "
        "commission at no extra cost to you. I only recommend products I genuinely believe in."
    ),
})

# Default wording used by add_disclosure()
DEFAULT_DISCLOSURES: Mapping[str, str] = MappingProxyType({
    "amazon": "As an Amazon Associate, I earn from qualifying purchases.",
    "general": (
        "This post contains affiliate links. This means I may receive a commission "
        "when you click on my affiliate links and make a purchase at no additional "
        "cost to you."
    ),
    "short": "Affiliate links may earn commission.",
    "detailed": (
        "As an Amazon Associate and affiliate partner with various networks, I earn "
        "from qualifying purchases. This means I may receive a commission when you "
        "click on my affiliate links and make a purchase at no additional cost to you. "
        "I only recommend products and services I genuinely believe in and have "
        "researched thoroughly."
    ),
})

COMPLIANCE_HASHTAGS = ("#ad", "#affiliate", "#sponsored", "#partnership")

# Keywords for the quick has_disclosure() scan
DISCLOSURE_KEYWORDS = (
    "affiliate",
    "commission",
    "earn from qualifying purchases",
    "#ad",
    "sponsored",
    "partnership",
)

CREATOR_REMINDER = """
IMPORTANT: FTC Compliance Reminder
-----------------------------------
- All affiliate links must be clearly disclosed
- Disclosure must be prominent and unavoidable
- Use clear language like "affiliate link" or "I earn commission"
- Place disclosure BEFORE affiliate links
- Include #ad hashtag for social media posts
- Update disclosure if compensation changes

Failure to disclose may result in FTC penalties.
""".strip()


def platform_disclosure(platform) -> str:
    """Disclosure block for a platform; unknown platforms get the blog text."""
    try:
        return PLATFORM_DISCLOSURES[Platform(platform)]
    except ValueError:
        return PLATFORM_DISCLOSURES[Platform.BLOG]
