"""
Configuration loading.

Values come from (highest precedence first):
1. Explicit overrides
2. Process environment (after loading config/.env)
3. config/config.yaml, nested keys flattened to UPPER_SNAKE
   (openai: {model: gpt-4o}  ->  OPENAI_MODEL)

Config is read once at startup and never mutated.
"""

import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger

from affiliate_empire.secrets import AwsSecretsManagerStore, EnvSecretStore, SecretsResolver

TRUE_VALUES = ("1", "true", "yes", "on")


def _flatten(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    flat = {}
    for key, value in data.items():
        name = f"{prefix}_{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, name))
        else:
            flat[name.upper()] = value
    return flat


class Config:
    """Read-only key/value configuration."""

    def __init__(
        self,
        values: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ):
        self._values = MappingProxyType(dict(values or {}))
        self._environ = environ if environ is not None else os.environ
        self._overrides = MappingProxyType(dict(overrides or {}))

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._overrides:
            return self._overrides[key]
        value = self._environ.get(key)
        if value is not None:
            return value
        return self._values.get(key, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in TRUE_VALUES

    def section(self, key: str) -> Dict[str, Any]:
        """Raw nested YAML section, e.g. section("compliance")."""
        raw = self._values.get(f"__section__{key.upper()}")
        return dict(raw) if isinstance(raw, Mapping) else {}

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


def load_config(
    env_file: str = "config/.env",
    yaml_path: str = "config/config.yaml",
    overrides: Optional[Mapping[str, Any]] = None,
) -> Config:
    """
    Load configuration from files.

    Args:
        env_file: dotenv file (skipped when missing)
        yaml_path: YAML config file (skipped when missing)
        overrides: Values that win over everything else
    """
    if Path(env_file).exists():
        load_dotenv(env_file)
        logger.debug(f"[Config] Loaded env file {env_file}")

    values: Dict[str, Any] = {}
    path = Path(yaml_path)
    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        values = _flatten(data)
        # Keep top-level sections for list/dict values (e.g. extra patterns)
        for key, value in data.items():
            if isinstance(value, Mapping):
                values[f"__section__{str(key).upper()}"] = value
        logger.debug(f"[Config] Loaded {len(values)} value(s) from {yaml_path}")

    return Config(values=values, overrides=overrides)


def build_secrets_resolver(config: Config) -> SecretsResolver:
    """Pick AWS Secrets Manager when enabled, otherwise the environment."""
    if config.get_bool("AWS_SECRETS_MANAGER_ENABLED"):
        store = AwsSecretsManagerStore(
            region=config.get("AWS_REGION", "us-east-1"),
            prefix=config.get("SECRET_NAME_PREFIX", "ai-affiliate-empire"),
        )
    else:
        logger.warning("[SecretsManager] AWS Secrets Manager disabled - Using environment variables")
        store = EnvSecretStore()
    return SecretsResolver(store=store, env=config)
