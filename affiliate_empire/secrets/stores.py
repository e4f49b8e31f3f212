"""
Secret store backends.

A store answers None for "not found" and raises SecretStoreError when the
backend itself fails (network, permissions, throttling).
"""

import json
import os
from abc import ABC, abstractmethod
from typing import Mapping, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger


class SecretStoreError(Exception):
    """Secret backend failed (not merely a missing secret)."""
    pass


class SecretStore(ABC):
    """Abstract secret backend."""

    name = "store"

    @abstractmethod
    def fetch(self, secret_name: str) -> Optional[str]:
        """Return the secret value, or None when it does not exist."""
        pass


class EnvSecretStore(SecretStore):
    """Secrets straight from the process environment."""

    name = "env"

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ if environ is not None else os.environ

    def fetch(self, secret_name: str) -> Optional[str]:
        return self._environ.get(secret_name) or None


class AwsSecretsManagerStore(SecretStore):
    """
    AWS Secrets Manager backend.

    Secrets live under "<prefix>/<name>". A JSON secret of the form
    {"value": "..."} is unwrapped; anything else is returned verbatim.
    """

    name = "aws"

    # Treated as "not found" rather than a backend failure
    MISSING_CODES = ("ResourceNotFoundException",)

    def __init__(self, region: str = "us-east-1", prefix: str = "ai-affiliate-empire", client=None):
        """
        Args:
            region: AWS region
            prefix: Secret name prefix
            client: Pre-built secretsmanager client (mainly for tests)
        """
        self.region = region
        self.prefix = prefix
        if client is None:
            client = boto3.client("secretsmanager", region_name=region)
        self._client = client
        logger.info(f"[SecretsManager] AWS Secrets Manager enabled - Region: {region}, Prefix: {prefix}")

    def fetch(self, secret_name: str) -> Optional[str]:
        secret_id = f"{self.prefix}/{secret_name}"
        try:
            response = self._client.get_secret_value(SecretId=secret_id)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in self.MISSING_CODES:
                return None
            raise SecretStoreError(f"Failed to fetch secret '{secret_id}': {code}") from e
        except BotoCoreError as e:
            raise SecretStoreError(f"Failed to fetch secret '{secret_id}': {type(e).__name__}") from e

        if response.get("SecretString"):
            return self._unwrap(response["SecretString"])
        if response.get("SecretBinary"):
            return bytes(response["SecretBinary"]).decode("utf-8")
        return None

    @staticmethod
    def _unwrap(raw: str) -> str:
        try:
            parsed = json.loads(raw)
        except ValueError:
            return raw
        if isinstance(parsed, dict) and parsed.get("value"):
            return parsed["value"]
        return raw
