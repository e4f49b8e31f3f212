"""
ElevenLabs text-to-speech client.

Synthesised audio is written to AUDIO_OUTPUT_DIR (default output/audio) and
returned as a file:// URL.
"""

import asyncio
import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from loguru import logger

from affiliate_empire.config import Config

from .base import MockClient, ProviderProfile, RealClient, SecretRef
from .errors import ElevenLabsError
from .http import post_for_bytes
from .pricing import ELEVENLABS_PER_1K_CHARS, CostEstimate, estimate_character_cost

ELEVENLABS_BASE_URL = "https://api.elevenlabs.io/v1"
MOCK_AUDIO_URL = "https://www2.cs.uic.edu/~i101/SoundFiles/BabyElephantWalk60.wav"


@dataclass(frozen=True)
class VoiceRequest:
    text: str
    voice_id: Optional[str] = None
    stability: float = 0.5
    similarity_boost: float = 0.75
    model_id: str = "eleven_monolingual_v1"


@dataclass(frozen=True)
class VoiceGeneration:
    audio_url: str
    characters: int


class ElevenLabsClient(RealClient):
    """Live ElevenLabs synthesis."""

    service_name = "elevenlabs"
    error_class = ElevenLabsError

    def __init__(self, credentials: Dict[str, str], config: Optional[Config] = None, **kwargs):
        super().__init__(credentials, config, **kwargs)
        self.default_voice_id = self.config.get("ELEVENLABS_VOICE_ID", "default")
        self.output_dir = Path(self.config.get("AUDIO_OUTPUT_DIR", "output/audio"))
        self.base_url = self.config.get("ELEVENLABS_BASE_URL", ELEVENLABS_BASE_URL)

    async def _call(self, request: VoiceRequest) -> bytes:
        voice_id = request.voice_id or self.default_voice_id
        logger.info(f"[elevenlabs] Generating voice ({len(request.text.split())} words)")
        audio = await post_for_bytes(
            f"{self.base_url}/text-to-speech/{voice_id}",
            headers={
                "xi-api-key": self._credentials["elevenlabs-api-key"],
                "Content-Type": "application/json",
                "Accept": "audio/mpeg",
            },
            json={
                "text": request.text,
                "model_id": request.model_id,
                "voice_settings": {
                    "stability": request.stability,
                    "similarity_boost": request.similarity_boost,
                },
            },
        )
        return await asyncio.to_thread(self._save_audio, audio, request)

    def _save_audio(self, audio: bytes, request: VoiceRequest) -> str:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        digest = hashlib.sha1(f"{request.voice_id}:{request.text}".encode("utf-8")).hexdigest()[:16]
        path = (self.output_dir / f"voice_{digest}.mp3").resolve()
        path.write_bytes(audio)
        return path.as_uri()

    def _parse(self, audio_url: str, request: VoiceRequest) -> Tuple[VoiceGeneration, CostEstimate]:
        characters = len(request.text)
        cost = estimate_character_cost(characters, ELEVENLABS_PER_1K_CHARS)
        logger.info(f"[elevenlabs] Voice: {characters} chars, ${cost.estimated_cost:.4f}")
        return VoiceGeneration(audio_url=audio_url, characters=characters), cost


class MockVoiceClient(MockClient):
    service_name = "elevenlabs"
    cost_unit = "characters"

    def _mock_payload(self, request: VoiceRequest) -> VoiceGeneration:
        return VoiceGeneration(audio_url=MOCK_AUDIO_URL, characters=len(request.text))


ELEVENLABS_PROVIDER = ProviderProfile(
    service_name="elevenlabs",
    secrets=(SecretRef("elevenlabs-api-key", "ELEVENLABS_API_KEY"),),
    mock_flag="ELEVENLABS_MOCK_MODE",
    real_factory=lambda creds, config: ElevenLabsClient(creds, config),
    mock_factory=lambda config: MockVoiceClient(config),
)
