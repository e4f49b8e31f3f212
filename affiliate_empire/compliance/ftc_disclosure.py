"""
FTC disclosure insertion at generation time.

Where FtcDisclosureValidator repairs content after the fact, this module is
used while content is being assembled: it builds the disclosure block for a
content type and places it according to a DisclosureConfig.

Usage:
    service = FtcDisclosureService()
    post = service.add_disclosure(post, ContentType.BLOG)
    caption = service.add_disclosure(
        caption,
        ContentType.SOCIAL,
        DisclosureConfig(position=DisclosurePosition.TOP),
    )
"""

from typing import List, Optional, Union

from loguru import logger

from .models import ContentType, DisclosureConfig, DisclosurePosition, Platform
from .templates import (
    COMPLIANCE_HASHTAGS,
    CREATOR_REMINDER,
    DEFAULT_DISCLOSURES,
    DISCLOSURE_KEYWORDS,
)


def _placement(config: Optional[DisclosureConfig]) -> DisclosurePosition:
    """Configured position; missing or unknown values mean bottom."""
    if config is None or not config.position:
        return DisclosurePosition.BOTTOM
    try:
        return DisclosurePosition(config.position)
    except ValueError:
        logger.warning(f"[FtcDisclosure] Unknown position '{config.position}', using bottom")
        return DisclosurePosition.BOTTOM


class FtcDisclosureService:
    """Build and place FTC disclosure blocks."""

    def get_blog_disclosure(self, config: Optional[DisclosureConfig] = None) -> str:
        if config is not None and not config.enabled:
            return ""
        text = (config and config.custom_text) or DEFAULT_DISCLOSURES["detailed"]
        return f"\n\n---\n\n**Disclosure:** {text}\n\n---\n\n"

    def get_video_disclosure(self, config: Optional[DisclosureConfig] = None) -> str:
        if config is not None and not config.enabled:
            return ""
        text = (config and config.custom_text) or DEFAULT_DISCLOSURES["amazon"]
        return f"\n\n{text}\n\n#ad #affiliate"

    def get_social_disclosure(self, config: Optional[DisclosureConfig] = None) -> str:
        if config is not None and not config.enabled:
            return ""
        text = (config and config.custom_text) or DEFAULT_DISCLOSURES["short"]
        return f"\n\n{text} #ad"

    def add_disclosure(
        self,
        content: str,
        content_type: Union[ContentType, str],
        config: Optional[DisclosureConfig] = None,
    ) -> str:
        """
        Add a disclosure block to content.

        Args:
            content: Generated content
            content_type: blog, video or social
            config: enabled / custom_text / position (default bottom)

        Returns:
            New string; content itself when disclosures are disabled
        """
        content_type = ContentType(content_type)
        position = _placement(config)

        builders = {
            ContentType.BLOG: self.get_blog_disclosure,
            ContentType.VIDEO: self.get_video_disclosure,
            ContentType.SOCIAL: self.get_social_disclosure,
        }
        disclosure = builders[content_type](config)

        if not disclosure:
            return content

        logger.debug(f"[FtcDisclosure] Adding {content_type.value} disclosure ({position.value})")

        if position == DisclosurePosition.TOP:
            return disclosure + content
        if position == DisclosurePosition.BOTH:
            return disclosure + content + disclosure
        return content + disclosure

    def has_disclosure(self, content: str) -> bool:
        """Quick keyword scan; use FtcDisclosureValidator for a full check."""
        lower = content.lower()
        return any(keyword in lower for keyword in DISCLOSURE_KEYWORDS)

    def get_compliance_hashtags(self) -> List[str]:
        return list(COMPLIANCE_HASHTAGS)

    def format_for_platform(self, disclosure: str, platform: Union[Platform, str]) -> str:
        """Format a disclosure for a video/social platform description."""
        platform = Platform(platform)
        if platform is Platform.YOUTUBE:
            # YouTube requires disclosure in the description
            return f"📢 DISCLOSURE\n{disclosure}\n"
        if platform is Platform.TIKTOK:
            return f"{DEFAULT_DISCLOSURES['short']}\n#TikTokMadeMeBuyIt #ad"
        if platform is Platform.INSTAGRAM:
            return f"⚠️ {disclosure}\n#ad #sponsored"
        return disclosure

    def get_creator_reminder(self) -> str:
        return CREATOR_REMINDER
