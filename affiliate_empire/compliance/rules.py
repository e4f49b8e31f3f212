"""
Disclosure detection rules.

Each rule wraps one case-insensitive pattern. Rules are evaluated in order and
the first match wins, so more specific wording sits ahead of bare hashtags.
Extra rules can be loaded from data (e.g. the YAML config) with
rules_from_patterns().
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Pattern, Sequence, Tuple

from loguru import logger


@dataclass(frozen=True)
class MatchSpan:
    """Location of a matched disclosure inside the checked text."""
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class DisclosureRule:
    """A named disclosure pattern."""
    name: str
    pattern: Pattern[str]

    @classmethod
    def from_pattern(cls, name: str, pattern: str) -> "DisclosureRule":
        return cls(name=name, pattern=re.compile(pattern, re.IGNORECASE))

    def matches(self, text: str) -> Optional[MatchSpan]:
        match = self.pattern.search(text)
        if match is None:
            return None
        return MatchSpan(start=match.start(), end=match.end(), text=match.group(0))


DEFAULT_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("amazon_associate", r"as an? (?:amazon )?associate,?\s*i earn from qualifying purchases"),
    ("hashtag_ad", r"#ad\b"),
    ("hashtag_sponsored", r"#sponsored\b"),
    ("affiliate_link", r"affiliate link"),
    ("earn_commission", r"i (?:may |might )?earn (?:a )?commission"),
    ("paid_partnership", r"paid partnership"),
)

DEFAULT_RULES: Tuple[DisclosureRule, ...] = tuple(
    DisclosureRule.from_pattern(name, pattern) for name, pattern in DEFAULT_PATTERNS
)


def rules_from_patterns(patterns: Mapping[str, str]) -> List[DisclosureRule]:
    """Build rules from a name -> regex mapping, preserving mapping order."""
    rules = []
    for name, pattern in patterns.items():
        try:
            rules.append(DisclosureRule.from_pattern(name, pattern))
        except re.error as e:
            raise ValueError(f"Invalid disclosure pattern '{name}': {e}") from e
    logger.debug(f"[DisclosureRules] Loaded {len(rules)} rule(s): {', '.join(patterns)}")
    return rules


def combine_rules(
    base: Sequence[DisclosureRule] = DEFAULT_RULES,
    extra: Iterable[DisclosureRule] = (),
) -> Tuple[DisclosureRule, ...]:
    """Default rules first, then any extras."""
    return tuple(base) + tuple(extra)


def find_disclosure(
    text: str,
    rules: Sequence[DisclosureRule] = DEFAULT_RULES,
) -> Optional[MatchSpan]:
    """Return the first rule match in text, or None."""
    for rule in rules:
        span = rule.matches(text)
        if span is not None:
            return span
    return None
