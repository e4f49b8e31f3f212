"""
Compliance Module - FTC affiliate disclosure checks.

Provides:
- FtcDisclosureValidator: detect, validate and repair disclosures
- FtcDisclosureService: place disclosures while content is generated
- generate_compliance_report: aggregate validation results
"""

from .models import (
    ComplianceReport,
    ContentType,
    DisclosureConfig,
    DisclosurePosition,
    Platform,
    ValidationResult,
)
from .rules import (
    DEFAULT_RULES,
    DisclosureRule,
    MatchSpan,
    combine_rules,
    find_disclosure,
    rules_from_patterns,
)
from .ftc_validator import FtcDisclosureValidator, generate_compliance_report
from .ftc_disclosure import FtcDisclosureService
from .templates import PLATFORM_DISCLOSURES, DEFAULT_DISCLOSURES

__all__ = [
    "ComplianceReport",
    "ContentType",
    "DisclosureConfig",
    "DisclosurePosition",
    "Platform",
    "ValidationResult",
    "DEFAULT_RULES",
    "DisclosureRule",
    "MatchSpan",
    "combine_rules",
    "find_disclosure",
    "rules_from_patterns",
    "FtcDisclosureValidator",
    "generate_compliance_report",
    "FtcDisclosureService",
    "PLATFORM_DISCLOSURES",
    "DEFAULT_DISCLOSURES",
]
