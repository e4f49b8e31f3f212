"""
Compliance data types.

Platforms and content types are closed enums; results are immutable value
objects built fresh for every check.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional


class Platform(str, Enum):
    """Publishing targets that carry platform-specific disclosure wording."""
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    BLOG = "blog"


class ContentType(str, Enum):
    """Content genres handled at generation time."""
    BLOG = "blog"
    VIDEO = "video"
    SOCIAL = "social"


class DisclosurePosition(str, Enum):
    """Where add_disclosure() places the disclosure block."""
    TOP = "top"
    BOTTOM = "bottom"
    BOTH = "both"


@dataclass(frozen=True)
class DisclosureConfig:
    """Generation-time disclosure options."""
    enabled: bool = True
    custom_text: Optional[str] = None
    position: DisclosurePosition = DisclosurePosition.BOTTOM


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of checking one piece of content for an FTC disclosure.

    has_disclosure and issues are independent: a result can hold a
    disclosure and still be invalid because of placement or clarity issues.
    A result without a disclosure is never valid.
    """
    is_valid: bool
    has_disclosure: bool
    disclosure_text: Optional[str] = None
    issues: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.is_valid and not self.has_disclosure:
            raise ValueError("ValidationResult cannot be valid without a disclosure")

    def with_issues(self, extra: List[str]) -> "ValidationResult":
        """Return a copy with extra issues appended and validity recomputed."""
        issues = list(self.issues) + list(extra)
        is_valid = self.has_disclosure and not issues
        return replace(self, issues=issues, is_valid=is_valid)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "has_disclosure": self.has_disclosure,
            "disclosure_text": self.disclosure_text,
            "issues": list(self.issues),
        }


@dataclass(frozen=True)
class ComplianceReport:
    """Aggregate of many validations keyed by content id."""
    compliant_count: int = 0
    non_compliant_count: int = 0
    compliance_rate: float = 0.0
    issues: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.compliant_count + self.non_compliant_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compliant_count": self.compliant_count,
            "non_compliant_count": self.non_compliant_count,
            "compliance_rate": self.compliance_rate,
            "issues": list(self.issues),
        }

    def summary(self) -> str:
        """Human-readable one-liner."""
        return (
            f"FTC compliance: {self.compliant_count}/{self.total} compliant "
            f"({self.compliance_rate:.2f}%)"
        )
