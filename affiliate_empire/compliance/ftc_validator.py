"""
FTC Disclosure Validator

Checks generated content for an affiliate/sponsorship disclosure and makes
sure one is present before publishing.

Checks:
1. Disclosure present (first matching rule wins)
2. Disclosure placed early enough (first 75% of the content)
3. Disclosure long enough to be clear (10+ characters)
4. Video scripts: [DISCLOSURE] marker and a spoken-length disclosure
5. Social captions: #ad / #affiliate hashtag within the first 3 lines

Usage:
    validator = FtcDisclosureValidator()

    result = validator.validate_content(article)
    if not result.is_valid:
        print(result.issues)

    caption = validator.ensure_disclosure(caption, Platform.TIKTOK)

    report = validator.generate_compliance_report({"post-1": result})
"""

import re
from typing import Dict, Iterable, Mapping, Optional, Sequence, Union

from loguru import logger

from . import constants as C
from .models import ComplianceReport, ContentType, Platform, ValidationResult
from .rules import DEFAULT_RULES, DisclosureRule, find_disclosure
from .templates import platform_disclosure

HASHTAG_AD = re.compile(r"#ad\b", re.IGNORECASE)
HASHTAG_AFFILIATE = re.compile(r"#affiliate\b", re.IGNORECASE)
DISCLOSURE_WORD = re.compile(r"disclosure", re.IGNORECASE)
MARKER = re.compile(re.escape(C.DISCLOSURE_MARKER), re.IGNORECASE)

SOCIAL_PLATFORMS = (Platform.TIKTOK, Platform.INSTAGRAM, Platform.YOUTUBE)


class FtcDisclosureValidator:
    """
    Validate and repair FTC affiliate disclosures.

    All methods are pure: they never mutate their input and return fresh
    results. Issues are returned as data, never raised.
    """

    def __init__(self, rules: Optional[Sequence[DisclosureRule]] = None):
        """
        Args:
            rules: Ordered detection rules (defaults to DEFAULT_RULES)
        """
        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES

    def validate_content(self, content: str) -> ValidationResult:
        """
        Check a block of text for a recognised disclosure.

        Args:
            content: Text to check

        Returns:
            ValidationResult with the matched disclosure and any issues
        """
        issues = []
        span = find_disclosure(content, self.rules)

        if span is None:
            issues.append(C.ISSUE_MISSING)
            issues.append(C.ISSUE_MISSING_RELATIONSHIP)
            return ValidationResult(
                is_valid=False,
                has_disclosure=False,
                disclosure_text=None,
                issues=issues,
            )

        disclosure_text = span.text

        position = content.lower().find(disclosure_text.lower())
        if position > len(content) * C.PLACEMENT_THRESHOLD:
            issues.append(C.ISSUE_TOO_LATE)

        if len(disclosure_text) < C.MIN_DISCLOSURE_CHARS:
            issues.append(C.ISSUE_TOO_VAGUE)

        return ValidationResult(
            is_valid=not issues,
            has_disclosure=True,
            disclosure_text=disclosure_text,
            issues=issues,
        )

    def ensure_disclosure(self, content: str, platform: Union[Platform, str]) -> str:
        """
        Append the platform disclosure when the content has none.

        Content that already carries a disclosure is returned as-is (the same
        object), so a second call is always a no-op.
        """
        if self.validate_content(content).has_disclosure:
            return content

        logger.info(f"[FtcValidator] Adding {getattr(platform, 'value', platform)} disclosure")
        return f"{content}\n\n{platform_disclosure(platform)}"

    def validate_video_script(self, script: str) -> ValidationResult:
        """
        Validate a spoken video script.

        Long scripts (over 50 words) need a [DISCLOSURE] section marker and
        the matched disclosure must be long enough to be spoken clearly.
        """
        result = self.validate_content(script)
        extra = []

        word_count = len(script.split())
        if not MARKER.search(script) and word_count > C.VIDEO_MARKER_WORD_LIMIT:
            extra.append(C.ISSUE_NO_MARKER)

        if result.has_disclosure:
            disclosure_words = len((result.disclosure_text or "").split())
            if disclosure_words < C.MIN_SPOKEN_DISCLOSURE_WORDS:
                extra.append(C.ISSUE_SPOKEN_TOO_SHORT)

        return result.with_issues(extra)

    def validate_social_caption(self, caption: str, platform: Union[Platform, str]) -> ValidationResult:
        """
        Validate a short-form social caption.

        A missing #ad/#affiliate hashtag always invalidates the caption. A
        disclosure buried below the first lines is reported but does not by
        itself change validity.

        Raises:
            ValueError: platform is not a social platform
        """
        platform = Platform(platform)
        if platform not in SOCIAL_PLATFORMS:
            raise ValueError(f"Not a social platform: {platform.value}")

        result = self.validate_content(caption)
        issues = list(result.issues)
        is_valid = result.is_valid

        if not HASHTAG_AD.search(caption) and not HASHTAG_AFFILIATE.search(caption):
            issues.append(C.ISSUE_NO_HASHTAG)
            is_valid = False

        visible = caption.split("\n")[:C.SOCIAL_VISIBLE_LINES]
        in_visible_lines = any(
            HASHTAG_AD.search(line) or HASHTAG_AFFILIATE.search(line) or DISCLOSURE_WORD.search(line)
            for line in visible
        )
        if result.has_disclosure and not in_visible_lines:
            issues.append(C.ISSUE_NOT_VISIBLE)

        return ValidationResult(
            is_valid=is_valid,
            has_disclosure=result.has_disclosure,
            disclosure_text=result.disclosure_text,
            issues=issues,
        )

    def validate(
        self,
        content: str,
        content_type: Union[ContentType, str] = ContentType.BLOG,
        platform: Union[Platform, str] = Platform.TIKTOK,
    ) -> ValidationResult:
        """Dispatch to the validator for a content type."""
        content_type = ContentType(content_type)
        if content_type is ContentType.VIDEO:
            return self.validate_video_script(content)
        if content_type is ContentType.SOCIAL:
            return self.validate_social_caption(content, platform)
        return self.validate_content(content)

    def validate_batch(
        self,
        items: Mapping[str, str],
        content_type: Union[ContentType, str] = ContentType.BLOG,
        platform: Union[Platform, str] = Platform.TIKTOK,
    ) -> Dict[str, ValidationResult]:
        """Validate many items; keeps the input order for reporting."""
        return {
            content_id: self.validate(text, content_type, platform)
            for content_id, text in items.items()
        }

    def generate_compliance_report(self, validations: Mapping[str, ValidationResult]) -> ComplianceReport:
        """
        Aggregate validations into a compliance report.

        Args:
            validations: content id -> ValidationResult, in reporting order

        Returns:
            ComplianceReport; the rate is 0 for an empty mapping
        """
        return generate_compliance_report(validations.items())


def generate_compliance_report(entries: Union[Mapping[str, ValidationResult], Iterable]) -> ComplianceReport:
    """Single pass over (content_id, result) pairs."""
    if isinstance(entries, Mapping):
        entries = entries.items()

    compliant = 0
    non_compliant = 0
    issues = []

    for content_id, result in entries:
        if result.is_valid:
            compliant += 1
        else:
            non_compliant += 1
            issues.append(f"{content_id}: {', '.join(result.issues)}")

    total = compliant + non_compliant
    rate = (compliant / total) * 100 if total > 0 else 0

    report = ComplianceReport(
        compliant_count=compliant,
        non_compliant_count=non_compliant,
        compliance_rate=round(rate, 2),
        issues=issues,
    )
    logger.debug(f"[FtcValidator] {report.summary()}")
    return report
