"""
Secrets Module - provider credential resolution.

- SecretsResolver: cached lookup with environment fallback
- EnvSecretStore / AwsSecretsManagerStore: backends
"""

from .stores import AwsSecretsManagerStore, EnvSecretStore, SecretStore, SecretStoreError
from .resolver import SecretsResolver

__all__ = [
    "AwsSecretsManagerStore",
    "EnvSecretStore",
    "SecretStore",
    "SecretStoreError",
    "SecretsResolver",
]
