"""
Integrations Module - resilient external provider clients.

- resilient_call / RetryPolicy: shared retry and error-wrapping policy
- create_client / ClientHandle: real-or-mock selection at startup
- OpenAI, Claude, ElevenLabs, Amazon and YouTube clients
"""

from .errors import (
    AmazonError,
    AuthenticationError,
    CallCancelledError,
    ClaudeError,
    ComplianceError,
    ConfigurationError,
    ElevenLabsError,
    OpenAIError,
    ProviderError,
    ProviderHTTPError,
    TransientProviderError,
    YouTubeError,
)
from .pricing import CostEstimate, TokenPricing, estimate_character_cost, estimate_token_cost
from .resilient import DEFAULT_POLICY, ProviderResult, RetryPolicy, call_with_retry, resilient_call, status_of
from .base import (
    ClientHandle,
    ClientMode,
    MockClient,
    ProviderClient,
    ProviderProfile,
    RealClient,
    SecretRef,
    create_client,
    is_placeholder,
)
from .llm import CLAUDE_PROVIDER, OPENAI_PROVIDER, ClaudeClient, MockTextClient, OpenAIClient, TextGeneration, TextRequest
from .voice import ELEVENLABS_PROVIDER, ElevenLabsClient, MockVoiceClient, VoiceGeneration, VoiceRequest
from .amazon import AMAZON_PROVIDER, AmazonClient, AmazonProduct, MockAmazonClient, ProductSearchRequest
from .youtube import YOUTUBE_PROVIDER, MockYouTubeClient, VideoUpload, VideoUploadRequest, YouTubeClient

PROVIDERS = {
    profile.service_name: profile
    for profile in (OPENAI_PROVIDER, CLAUDE_PROVIDER, ELEVENLABS_PROVIDER, AMAZON_PROVIDER, YOUTUBE_PROVIDER)
}

__all__ = [
    "AmazonError",
    "AuthenticationError",
    "CallCancelledError",
    "ClaudeError",
    "ComplianceError",
    "ConfigurationError",
    "ElevenLabsError",
    "OpenAIError",
    "ProviderError",
    "ProviderHTTPError",
    "TransientProviderError",
    "YouTubeError",
    "CostEstimate",
    "TokenPricing",
    "estimate_character_cost",
    "estimate_token_cost",
    "DEFAULT_POLICY",
    "ProviderResult",
    "RetryPolicy",
    "call_with_retry",
    "resilient_call",
    "status_of",
    "ClientHandle",
    "ClientMode",
    "MockClient",
    "ProviderClient",
    "ProviderProfile",
    "RealClient",
    "SecretRef",
    "create_client",
    "is_placeholder",
    "CLAUDE_PROVIDER",
    "OPENAI_PROVIDER",
    "ClaudeClient",
    "MockTextClient",
    "OpenAIClient",
    "TextGeneration",
    "TextRequest",
    "ELEVENLABS_PROVIDER",
    "ElevenLabsClient",
    "MockVoiceClient",
    "VoiceGeneration",
    "VoiceRequest",
    "AMAZON_PROVIDER",
    "AmazonClient",
    "AmazonProduct",
    "MockAmazonClient",
    "ProductSearchRequest",
    "YOUTUBE_PROVIDER",
    "MockYouTubeClient",
    "VideoUpload",
    "VideoUploadRequest",
    "YouTubeClient",
    "PROVIDERS",
]
