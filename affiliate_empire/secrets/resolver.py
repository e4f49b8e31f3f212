"""
Secrets resolver with caching and environment fallback.

Lookup order for get_secret(name, env_var):
1. In-memory cache (5 minute TTL)
2. Secret store (AWS Secrets Manager or environment)
3. Environment variable env_var (or name)

A missing secret resolves to None. A failing store raises SecretStoreError.
Secret values are never logged.
"""

import asyncio
import os
import time
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from loguru import logger

from .stores import EnvSecretStore, SecretStore, SecretStoreError


@dataclass
class _CachedSecret:
    value: str
    expires_at: float


SecretRequest = Union[str, Tuple[str, Optional[str]]]


class SecretsResolver:
    """Resolve provider credentials."""

    def __init__(
        self,
        store: Optional[SecretStore] = None,
        env: Optional[Mapping[str, str]] = None,
        cache_ttl: float = 300.0,
    ):
        """
        Args:
            store: Secret backend (defaults to the environment)
            env: Fallback variables, usually the loaded Config (defaults to os.environ)
            cache_ttl: Seconds a fetched secret stays cached
        """
        self.store = store or EnvSecretStore()
        self.env = env if env is not None else os.environ
        self.cache_ttl = cache_ttl
        self._cache: Dict[str, _CachedSecret] = {}

    async def get_secret(self, secret_name: str, env_var: Optional[str] = None) -> Optional[str]:
        """
        Resolve one secret.

        Returns:
            Secret value or None when neither the store nor the env has it

        Raises:
            SecretStoreError: the store failed
        """
        cached = self._from_cache(secret_name)
        if cached is not None:
            return cached

        try:
            value = await asyncio.to_thread(self.store.fetch, secret_name)
        except SecretStoreError:
            self._audit("ERROR", secret_name, "Failed to fetch secret")
            raise

        if value:
            self._audit("SUCCESS", secret_name, "Secret accessed successfully")
            self._cache[secret_name] = _CachedSecret(value, time.monotonic() + self.cache_ttl)
            return value

        if not isinstance(self.store, EnvSecretStore):
            logger.warning(f"[SecretsManager] Secret '{secret_name}' not found in {self.store.name}, falling back to env var")
        return self._from_env(env_var or secret_name)

    async def get_secrets(self, requests: Iterable[SecretRequest]) -> Dict[str, Optional[str]]:
        """Resolve several secrets concurrently, keyed by secret name."""
        pairs = [(r, None) if isinstance(r, str) else (r[0], r[1]) for r in requests]
        results = await asyncio.gather(
            *(self.get_secret(name, env_var) for name, env_var in pairs),
            return_exceptions=True,
        )
        # All lookups have settled; raise the first store failure
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return {name: value for (name, _), value in zip(pairs, results)}

    def clear_cache(self, secret_name: Optional[str] = None) -> None:
        if secret_name:
            self._cache.pop(secret_name, None)
            logger.debug(f"[SecretsManager] Cache cleared for secret: {secret_name}")
        else:
            self._cache.clear()
            logger.debug("[SecretsManager] All secret cache cleared")

    def _from_cache(self, secret_name: str) -> Optional[str]:
        cached = self._cache.get(secret_name)
        if cached is None:
            return None
        if time.monotonic() > cached.expires_at:
            del self._cache[secret_name]
            return None
        logger.debug(f"[SecretsManager] Cache hit for secret: {secret_name}")
        return cached.value

    def _from_env(self, env_var: str) -> Optional[str]:
        value = self.env.get(env_var)
        if value:
            logger.debug(f"[SecretsManager] Using environment variable: {env_var}")
        return value or None

    def _audit(self, level: str, secret_name: str, message: str) -> None:
        entry = f"[AUDIT] {level} {self.store.name}:{secret_name} - {message}"
        if level == "SUCCESS":
            logger.debug(entry)
        else:
            logger.warning(entry)
