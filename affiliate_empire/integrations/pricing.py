"""
Provider pricing and cost estimation.

Rates are USD per 1K units (tokens or characters).
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping

from loguru import logger


@dataclass(frozen=True)
class CostEstimate:
    """Usage and estimated spend for one provider call."""
    input_units: int = 0
    output_units: int = 0
    estimated_cost: float = 0.0
    unit: str = "tokens"

    @property
    def total_units(self) -> int:
        return self.input_units + self.output_units

    @classmethod
    def zero(cls, unit: str = "tokens") -> "CostEstimate":
        return cls(unit=unit)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["total_units"] = self.total_units
        return d


@dataclass(frozen=True)
class TokenPricing:
    input_per_1k: float
    output_per_1k: float


OPENAI_DEFAULT_MODEL = "gpt-4-turbo-preview"
CLAUDE_DEFAULT_MODEL = "claude-3-5-sonnet-20241022"

OPENAI_PRICING: Mapping[str, TokenPricing] = {
    "gpt-4-turbo-preview": TokenPricing(0.01, 0.03),
    "gpt-4-turbo": TokenPricing(0.01, 0.03),
    "gpt-4": TokenPricing(0.03, 0.06),
    "gpt-4o": TokenPricing(0.005, 0.015),
    "gpt-4o-mini": TokenPricing(0.00015, 0.0006),
    "gpt-3.5-turbo": TokenPricing(0.0005, 0.0015),
}

CLAUDE_PRICING: Mapping[str, TokenPricing] = {
    "claude-3-5-sonnet-20241022": TokenPricing(0.003, 0.015),
    "claude-3-opus-20240229": TokenPricing(0.015, 0.075),
    "claude-3-haiku-20240307": TokenPricing(0.00025, 0.00125),
}

# $0.30 per 1K characters
ELEVENLABS_PER_1K_CHARS = 0.30


def estimate_token_cost(
    pricing: Mapping[str, TokenPricing],
    model: str,
    input_tokens: int,
    output_tokens: int,
    default_model: str,
) -> CostEstimate:
    """Cost for a token-billed call; unknown models use the default model's rate."""
    rate = pricing.get(model)
    if rate is None:
        logger.debug(f"[Pricing] No rate for {model}, using {default_model}")
        rate = pricing[default_model]
    cost = (input_tokens / 1000) * rate.input_per_1k + (output_tokens / 1000) * rate.output_per_1k
    return CostEstimate(
        input_units=input_tokens,
        output_units=output_tokens,
        estimated_cost=cost,
        unit="tokens",
    )


def estimate_character_cost(characters: int, rate_per_1k: float = ELEVENLABS_PER_1K_CHARS) -> CostEstimate:
    """Cost for a character-billed call (voice synthesis)."""
    return CostEstimate(
        input_units=characters,
        output_units=0,
        estimated_cost=(characters / 1000) * rate_per_1k,
        unit="characters",
    )
