"""
Provider client contract and factory.

Every provider comes as two implementations of the same interface:
- RealClient: talks to the provider through resilient_call()
- MockClient: deterministic placeholder output, zero cost, no network

create_client() picks one at startup:
1. <PROVIDER>_MOCK_MODE=true      -> mock, secrets are never touched
2. all credentials resolved      -> real
3. any credential missing        -> mock, with a loud warning
4. secret store itself failing   -> ConfigurationError

ClientHandle wraps create_client() in a one-time async init guard so many
concurrent invoke() calls share one client.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Type

from loguru import logger

from affiliate_empire.config import Config
from affiliate_empire.secrets import SecretsResolver, SecretStoreError

from .errors import ConfigurationError, TransientProviderError
from .pricing import CostEstimate
from .resilient import DEFAULT_POLICY, ProviderResult, RetryPolicy, resilient_call

PLACEHOLDER_VALUES = ("changeme", "placeholder", "xxx", "todo", "none", "null")
PLACEHOLDER_PREFIXES = ("your-", "your_", "<")


class ClientMode(str, Enum):
    UNINITIALIZED = "uninitialized"
    CONFIGURED = "configured"
    MOCK = "mock"


def is_placeholder(value: Optional[str]) -> bool:
    """True for empty or obviously fake credential values."""
    if value is None:
        return True
    cleaned = value.strip().lower()
    if not cleaned:
        return True
    return cleaned in PLACEHOLDER_VALUES or cleaned.startswith(PLACEHOLDER_PREFIXES)


class ProviderClient(ABC):
    """Common interface of real and mock provider clients."""

    service_name = "provider"
    mode = ClientMode.UNINITIALIZED

    @abstractmethod
    async def invoke(self, request: Any, cancel_event: Optional[asyncio.Event] = None) -> ProviderResult:
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        pass


class RealClient(ProviderClient):
    """
    Base for clients that call a live provider.

    Subclasses implement _call() (one raw request) and _parse() (raw response
    to payload + cost). Retry, auth short-circuit and error wrapping come from
    resilient_call().
    """

    mode = ClientMode.CONFIGURED
    error_class: Type[TransientProviderError] = TransientProviderError

    def __init__(self, credentials: Dict[str, str], config: Optional[Config] = None, policy: RetryPolicy = DEFAULT_POLICY):
        self._credentials = dict(credentials)
        self.config = config or Config()
        self.policy = policy

    async def invoke(self, request: Any, cancel_event: Optional[asyncio.Event] = None) -> ProviderResult:
        return await resilient_call(
            self.service_name,
            lambda: self._call(request),
            policy=self.policy,
            error_class=self.error_class,
            cost_fn=lambda raw: self._parse(raw, request),
            cancel_event=cancel_event,
        )

    @abstractmethod
    async def _call(self, request: Any) -> Any:
        pass

    @abstractmethod
    def _parse(self, raw: Any, request: Any) -> Tuple[Any, CostEstimate]:
        pass

    def is_configured(self) -> bool:
        return True


class MockClient(ProviderClient):
    """Base for placeholder clients used without live credentials."""

    mode = ClientMode.MOCK
    cost_unit = "tokens"

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    async def invoke(self, request: Any, cancel_event: Optional[asyncio.Event] = None) -> ProviderResult:
        return ProviderResult(
            payload=self._mock_payload(request),
            cost=CostEstimate.zero(self.cost_unit),
            attempts=0,
            mock=True,
        )

    @abstractmethod
    def _mock_payload(self, request: Any) -> Any:
        pass

    def is_configured(self) -> bool:
        return False


@dataclass(frozen=True)
class SecretRef:
    secret_name: str
    env_var: str


@dataclass(frozen=True)
class ProviderProfile:
    """Everything create_client() needs to build one provider."""
    service_name: str
    secrets: Sequence[SecretRef]
    mock_flag: str
    real_factory: Callable[[Dict[str, str], Config], RealClient]
    mock_factory: Callable[[Config], MockClient]


async def create_client(profile: ProviderProfile, resolver: SecretsResolver, config: Config) -> ProviderClient:
    """
    Build the real or mock client for a provider.

    Raises:
        ConfigurationError: the secret store failed while resolving credentials
    """
    if config.get_bool(profile.mock_flag):
        logger.info(f"[{profile.service_name}] Mock mode enabled via {profile.mock_flag}")
        return profile.mock_factory(config)

    try:
        values = await resolver.get_secrets([(s.secret_name, s.env_var) for s in profile.secrets])
    except SecretStoreError as e:
        raise ConfigurationError(f"[{profile.service_name}] Could not resolve credentials") from e

    missing = [name for name, value in values.items() if is_placeholder(value)]
    if missing:
        logger.warning(
            f"[{profile.service_name}] Running in MOCK MODE - credentials not configured: {', '.join(missing)}"
        )
        return profile.mock_factory(config)

    logger.info(f"[{profile.service_name}] Configured with live credentials")
    return profile.real_factory(values, config)


class ClientHandle:
    """Lazily initialised, shareable provider client."""

    def __init__(self, profile: ProviderProfile, resolver: SecretsResolver, config: Config):
        self.profile = profile
        self._resolver = resolver
        self._config = config
        self._client: Optional[ProviderClient] = None
        self._lock = asyncio.Lock()

    @property
    def mode(self) -> ClientMode:
        return self._client.mode if self._client is not None else ClientMode.UNINITIALIZED

    async def get(self) -> ProviderClient:
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = await create_client(self.profile, self._resolver, self._config)
        return self._client

    async def invoke(self, request: Any, cancel_event: Optional[asyncio.Event] = None) -> ProviderResult:
        client = await self.get()
        return await client.invoke(request, cancel_event=cancel_event)

    def is_configured(self) -> bool:
        return self._client is not None and self._client.is_configured()
