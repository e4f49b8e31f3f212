"""
Text generation clients: OpenAI (REST via aiohttp) and Claude (anthropic SDK).

Usage:
    handle = ClientHandle(CLAUDE_PROVIDER, resolver, config)
    result = await handle.invoke(TextRequest(prompt="Write a product hook"))
    print(result.payload.text, result.cost.estimated_cost)
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from anthropic import AsyncAnthropic
from loguru import logger

from affiliate_empire.config import Config

from .base import MockClient, ProviderProfile, RealClient, SecretRef
from .errors import ClaudeError, OpenAIError
from .http import request_json
from .pricing import (
    CLAUDE_DEFAULT_MODEL,
    CLAUDE_PRICING,
    OPENAI_DEFAULT_MODEL,
    OPENAI_PRICING,
    CostEstimate,
    estimate_token_cost,
)

OPENAI_BASE_URL = "https://api.openai.com/v1"


@dataclass(frozen=True)
class TextRequest:
    prompt: str
    system_prompt: Optional[str] = None
    model: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: float = 0.7


@dataclass(frozen=True)
class TextGeneration:
    text: str
    model: str


def mock_text(prompt: str) -> str:
    return f'MOCK RESPONSE: Generated content for prompt: "{prompt[:50]}..."'


class OpenAIClient(RealClient):
    """OpenAI chat completions."""

    service_name = "openai"
    error_class = OpenAIError
    DEFAULT_MAX_TOKENS = 500

    def __init__(self, credentials: Dict[str, str], config: Optional[Config] = None, **kwargs):
        super().__init__(credentials, config, **kwargs)
        self.model = self.config.get("OPENAI_MODEL", OPENAI_DEFAULT_MODEL)
        self.base_url = self.config.get("OPENAI_BASE_URL", OPENAI_BASE_URL)

    def _messages(self, request: TextRequest) -> List[Dict[str, str]]:
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.prompt})
        return messages

    async def _call(self, request: TextRequest) -> Any:
        return await request_json(
            "POST",
            f"{self.base_url}/chat/completions",
            headers={
                "Authorization": f"Bearer {self._credentials['openai-api-key']}",
                "Content-Type": "application/json",
            },
            json={
                "model": request.model or self.model,
                "messages": self._messages(request),
                "temperature": request.temperature,
                "max_tokens": request.max_tokens or self.DEFAULT_MAX_TOKENS,
            },
        )

    def _parse(self, raw: Dict[str, Any], request: TextRequest) -> Tuple[TextGeneration, CostEstimate]:
        model = request.model or self.model
        usage = raw.get("usage") or {}
        cost = estimate_token_cost(
            OPENAI_PRICING,
            model,
            usage.get("prompt_tokens", 0),
            usage.get("completion_tokens", 0),
            OPENAI_DEFAULT_MODEL,
        )
        text = raw["choices"][0]["message"]["content"]
        logger.info(f"[openai] Generation: {cost.total_units} tokens, ${cost.estimated_cost:.4f}")
        return TextGeneration(text=text, model=model), cost


class ClaudeClient(RealClient):
    """Anthropic messages API."""

    service_name = "claude"
    error_class = ClaudeError
    DEFAULT_MAX_TOKENS = 1024

    def __init__(self, credentials: Dict[str, str], config: Optional[Config] = None, client=None, **kwargs):
        super().__init__(credentials, config, **kwargs)
        self.model = self.config.get("ANTHROPIC_MODEL", CLAUDE_DEFAULT_MODEL)
        # SDK retries are disabled; RetryPolicy owns retrying
        self.client = client or AsyncAnthropic(api_key=self._credentials["anthropic-api-key"], max_retries=0)

    async def _call(self, request: TextRequest) -> Any:
        kwargs = {
            "model": request.model or self.model,
            "max_tokens": request.max_tokens or self.DEFAULT_MAX_TOKENS,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.system_prompt:
            kwargs["system"] = request.system_prompt
        return await self.client.messages.create(**kwargs)

    def _parse(self, raw: Any, request: TextRequest) -> Tuple[TextGeneration, CostEstimate]:
        model = request.model or self.model
        block = raw.content[0] if raw.content else None
        text = block.text if block is not None and block.type == "text" else ""
        cost = estimate_token_cost(
            CLAUDE_PRICING,
            model,
            raw.usage.input_tokens,
            raw.usage.output_tokens,
            CLAUDE_DEFAULT_MODEL,
        )
        logger.info(f"[claude] Generation: {cost.total_units} tokens, ${cost.estimated_cost:.4f}")
        return TextGeneration(text=text, model=model), cost


class MockTextClient(MockClient):
    """Placeholder text generation shared by both LLM providers."""

    def __init__(self, config: Optional[Config] = None, service_name: str = "llm", model: str = "mock"):
        super().__init__(config)
        self.service_name = service_name
        self.model = model

    def _mock_payload(self, request: TextRequest) -> TextGeneration:
        return TextGeneration(text=mock_text(request.prompt), model=request.model or self.model)


OPENAI_PROVIDER = ProviderProfile(
    service_name="openai",
    secrets=(SecretRef("openai-api-key", "OPENAI_API_KEY"),),
    mock_flag="OPENAI_MOCK_MODE",
    real_factory=lambda creds, config: OpenAIClient(creds, config),
    mock_factory=lambda config: MockTextClient(
        config, service_name="openai", model=config.get("OPENAI_MODEL", OPENAI_DEFAULT_MODEL)
    ),
)

CLAUDE_PROVIDER = ProviderProfile(
    service_name="claude",
    secrets=(SecretRef("anthropic-api-key", "ANTHROPIC_API_KEY"),),
    mock_flag="ANTHROPIC_MOCK_MODE",
    real_factory=lambda creds, config: ClaudeClient(creds, config),
    mock_factory=lambda config: MockTextClient(
        config, service_name="claude", model=config.get("ANTHROPIC_MODEL", CLAUDE_DEFAULT_MODEL)
    ),
)
