"""
Provider error taxonomy.

Messages name the service and the failure kind only; credentials and
response bodies never go into an error message.
"""

from typing import List, Optional


class ComplianceError(Exception):
    """Content failed FTC checks. Raised only by callers that choose to reject."""

    def __init__(self, message: str, issues: Optional[List[str]] = None):
        self.issues = list(issues or [])
        super().__init__(message)


class ConfigurationError(Exception):
    """Secrets or configuration could not be resolved at startup."""
    pass


class ProviderError(Exception):
    """Base exception for external provider failures."""

    retryable = False

    def __init__(self, service: str, message: str, status: Optional[int] = None):
        self.service = service
        self.status = status
        super().__init__(f"[{service}] {message}")


class AuthenticationError(ProviderError):
    """Provider rejected the credentials (401/403). Never retried."""
    pass


class TransientProviderError(ProviderError):
    """5xx, network or timeout failure that survived every retry."""

    retryable = True

    def __init__(self, service: str, message: str, status: Optional[int] = None, attempts: int = 0):
        self.attempts = attempts
        super().__init__(service, message, status=status)


class OpenAIError(TransientProviderError):
    pass


class ClaudeError(TransientProviderError):
    pass


class ElevenLabsError(TransientProviderError):
    pass


class AmazonError(TransientProviderError):
    pass


class YouTubeError(TransientProviderError):
    pass


class CallCancelledError(ProviderError):
    """The caller cancelled the call while it was retrying."""
    pass


class ProviderHTTPError(Exception):
    """Non-2xx HTTP response from a provider endpoint."""

    def __init__(self, status: int, reason: str = ""):
        self.status = status
        self.reason = reason
        super().__init__(f"HTTP {status}{': ' + reason if reason else ''}")
