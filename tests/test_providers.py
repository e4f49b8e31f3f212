"""
Tests for the concrete provider clients (all network calls mocked).

Run with: pytest tests/test_providers.py -v
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from affiliate_empire.compliance import FtcDisclosureValidator
from affiliate_empire.config import Config
from affiliate_empire.integrations import (
    AmazonClient,
    AmazonError,
    AuthenticationError,
    ClaudeClient,
    ElevenLabsClient,
    MockAmazonClient,
    MockVoiceClient,
    MockYouTubeClient,
    OpenAIClient,
    OpenAIError,
    ProductSearchRequest,
    ProviderHTTPError,
    TextRequest,
    VideoUploadRequest,
    VoiceRequest,
    YouTubeClient,
    estimate_token_cost,
)
from affiliate_empire.integrations.pricing import OPENAI_DEFAULT_MODEL, OPENAI_PRICING
from affiliate_empire.integrations.voice import MOCK_AUDIO_URL
from affiliate_empire.integrations.youtube import prepare_description


def openai_response(text="Hook: this blender crushes ice", prompt_tokens=1000, completion_tokens=500):
    return {
        "choices": [{"message": {"role": "assistant", "content": text}}],
        "usage": {"prompt_tokens": prompt_tokens, "completion_tokens": completion_tokens},
    }


# ============================================================
# OpenAI
# ============================================================

class TestOpenAIClient:
    """Tests for OpenAIClient."""

    @pytest.fixture
    def client(self, empty_config, fast_policy):
        return OpenAIClient({"openai-api-key": "sk-test"}, empty_config, policy=fast_policy)

    def test_generation_and_cost(self, client):
        with patch("affiliate_empire.integrations.llm.request_json", new=AsyncMock(return_value=openai_response())):
            result = asyncio.run(client.invoke(TextRequest(prompt="Write a hook")))

        assert result.payload.text == "Hook: this blender crushes ice"
        assert result.payload.model == OPENAI_DEFAULT_MODEL
        assert result.cost.input_units == 1000
        assert result.cost.output_units == 500
        assert result.cost.estimated_cost == pytest.approx(0.01 + 0.015)
        assert not result.mock

    def test_request_payload(self, client):
        request_json = AsyncMock(return_value=openai_response())
        with patch("affiliate_empire.integrations.llm.request_json", new=request_json):
            asyncio.run(client.invoke(TextRequest(prompt="Hi", system_prompt="Be brief", model="gpt-4o")))

        method, url = request_json.call_args.args
        body = request_json.call_args.kwargs["json"]
        headers = request_json.call_args.kwargs["headers"]

        assert method == "POST"
        assert url.endswith("/chat/completions")
        assert headers["Authorization"] == "Bearer sk-test"
        assert body["model"] == "gpt-4o"
        assert body["max_tokens"] == 500
        assert body["messages"] == [
            {"role": "system", "content": "Be brief"},
            {"role": "user", "content": "Hi"},
        ]

    def test_retries_server_errors(self, client):
        request_json = AsyncMock(side_effect=[ProviderHTTPError(500), ProviderHTTPError(502), openai_response()])
        with patch("affiliate_empire.integrations.llm.request_json", new=request_json):
            result = asyncio.run(client.invoke(TextRequest(prompt="Write a hook")))

        assert result.attempts == 3
        assert request_json.await_count == 3

    def test_auth_failure(self, client):
        request_json = AsyncMock(side_effect=ProviderHTTPError(401, "Unauthorized"))
        with patch("affiliate_empire.integrations.llm.request_json", new=request_json):
            with pytest.raises(AuthenticationError):
                asyncio.run(client.invoke(TextRequest(prompt="Write a hook")))
        assert request_json.await_count == 1

    def test_exhausted_raises_openai_error(self, client):
        request_json = AsyncMock(side_effect=ProviderHTTPError(503))
        with patch("affiliate_empire.integrations.llm.request_json", new=request_json):
            with pytest.raises(OpenAIError) as exc_info:
                asyncio.run(client.invoke(TextRequest(prompt="Write a hook")))

        assert exc_info.value.attempts == 3
        assert "sk-test" not in str(exc_info.value)

    def test_malformed_response_raises_openai_error(self, client):
        request_json = AsyncMock(return_value={"choices": [], "usage": {}})
        with patch("affiliate_empire.integrations.llm.request_json", new=request_json):
            with pytest.raises(OpenAIError) as exc_info:
                asyncio.run(client.invoke(TextRequest(prompt="Write a hook")))

        assert request_json.await_count == 1
        assert isinstance(exc_info.value.__cause__, IndexError)

    def test_unknown_model_uses_default_rate(self):
        cost = estimate_token_cost(OPENAI_PRICING, "gpt-99", 1000, 1000, OPENAI_DEFAULT_MODEL)
        assert cost.estimated_cost == pytest.approx(0.04)


# ============================================================
# Claude
# ============================================================

class TestClaudeClient:
    """Tests for ClaudeClient (anthropic SDK mocked)."""

    @pytest.fixture
    def sdk(self):
        sdk = MagicMock()
        sdk.messages.create = AsyncMock(return_value=SimpleNamespace(
            content=[SimpleNamespace(type="text", text="A punchy hook")],
            usage=SimpleNamespace(input_tokens=1000, output_tokens=1000),
        ))
        return sdk

    def test_generation_and_cost(self, empty_config, fast_policy, sdk):
        client = ClaudeClient({"anthropic-api-key": "sk-ant"}, empty_config, client=sdk, policy=fast_policy)
        result = asyncio.run(client.invoke(TextRequest(prompt="Hook please", system_prompt="Be bold")))

        assert result.payload.text == "A punchy hook"
        assert result.cost.estimated_cost == pytest.approx(0.003 + 0.015)

        kwargs = sdk.messages.create.call_args.kwargs
        assert kwargs["system"] == "Be bold"
        assert kwargs["max_tokens"] == 1024
        assert kwargs["messages"] == [{"role": "user", "content": "Hook please"}]

    def test_sdk_status_code_respected(self, empty_config, fast_policy, sdk):
        error = Exception("forbidden")
        error.status_code = 403
        sdk.messages.create = AsyncMock(side_effect=error)
        client = ClaudeClient({"anthropic-api-key": "sk-ant"}, empty_config, client=sdk, policy=fast_policy)

        with pytest.raises(AuthenticationError):
            asyncio.run(client.invoke(TextRequest(prompt="Hook please")))
        assert sdk.messages.create.await_count == 1


# ============================================================
# ElevenLabs
# ============================================================

class TestElevenLabs:
    """Tests for the voice clients."""

    def test_synthesis_writes_file(self, temp_dir, fast_policy):
        config = Config(environ={}, overrides={"AUDIO_OUTPUT_DIR": str(temp_dir), "ELEVENLABS_VOICE_ID": "rachel"})
        client = ElevenLabsClient({"elevenlabs-api-key": "xi-key"}, config, policy=fast_policy)
        post_for_bytes = AsyncMock(return_value=b"ID3fake-mp3")

        with patch("affiliate_empire.integrations.voice.post_for_bytes", new=post_for_bytes):
            result = asyncio.run(client.invoke(VoiceRequest(text="Hello there")))

        url = post_for_bytes.call_args.args[0]
        assert url.endswith("/text-to-speech/rachel")
        assert post_for_bytes.call_args.kwargs["headers"]["xi-api-key"] == "xi-key"
        assert result.payload.audio_url.startswith("file://")
        assert result.payload.characters == 11
        assert result.cost.unit == "characters"
        assert result.cost.estimated_cost == pytest.approx(11 / 1000 * 0.30)
        assert list(temp_dir.glob("voice_*.mp3"))

    def test_mock_voice(self, empty_config):
        result = asyncio.run(MockVoiceClient(empty_config).invoke(VoiceRequest(text="Hello")))
        assert result.payload.audio_url == MOCK_AUDIO_URL
        assert result.cost.estimated_cost == 0


# ============================================================
# Amazon
# ============================================================

class TestAmazon:
    """Tests for product search clients."""

    CREDS = {
        "amazon-access-key": "AKIDEXAMPLE",
        "amazon-secret-key": "secret",
        "amazon-partner-tag": "empire-20",
    }

    def test_mock_catalogue(self, empty_config):
        result = asyncio.run(MockAmazonClient(empty_config).invoke(ProductSearchRequest(limit=3)))

        assert len(result.payload) == 3
        assert result.payload[0].affiliate_url == "https://www.amazon.com/dp/B08N5WRWNW?tag=mock-20"
        assert result.cost.estimated_cost == 0

    def test_search_payload_and_signing(self, empty_config, fast_policy):
        client = AmazonClient(self.CREDS, empty_config, policy=fast_policy)
        request = ProductSearchRequest(keywords="blender", min_price=20, max_price=150.5, limit=25)

        payload = client._payload(request)
        assert payload["ItemCount"] == 10
        assert payload["MinPrice"] == 2000
        assert payload["MaxPrice"] == 15050
        assert payload["PartnerTag"] == "empire-20"

        headers = client._signed_headers("https://webservices.amazon.com/paapi5/searchitems", "{}")
        assert "Authorization" in headers
        assert "secret" not in headers["Authorization"]

    def test_parse_search_result(self, empty_config, fast_policy):
        client = AmazonClient(self.CREDS, empty_config, policy=fast_policy)
        raw = {"SearchResult": {"Items": [
            {
                "ASIN": "B0B3PSRHHN",
                "DetailPageURL": "https://www.amazon.com/dp/B0B3PSRHHN?tag=empire-20",
                "ItemInfo": {
                    "Title": {"DisplayValue": "Ninja Blender"},
                    "ByLineInfo": {"Brand": {"DisplayValue": "Ninja"}},
                },
                "Offers": {"Listings": [{"Price": {"Amount": 129.99}}]},
            },
            {"ItemInfo": {}},
        ]}}

        request_json = AsyncMock(return_value=raw)
        with patch("affiliate_empire.integrations.amazon.request_json", new=request_json):
            result = asyncio.run(client.invoke(ProductSearchRequest(keywords="blender")))

        assert len(result.payload) == 1
        product = result.payload[0]
        assert product.title == "Ninja Blender"
        assert product.price == 129.99
        assert product.brand == "Ninja"
        assert request_json.call_args.kwargs["headers"]["x-amz-target"].endswith("SearchItems")

    def test_amazon_error_after_retries(self, empty_config, fast_policy):
        client = AmazonClient(self.CREDS, empty_config, policy=fast_policy)
        request_json = AsyncMock(side_effect=ProviderHTTPError(429))

        with patch("affiliate_empire.integrations.amazon.request_json", new=request_json):
            with pytest.raises(AmazonError):
                asyncio.run(client.invoke(ProductSearchRequest()))
        assert request_json.await_count == 3


# ============================================================
# YouTube
# ============================================================

class TestYouTube:
    """Tests for the YouTube publisher."""

    CREDS = {
        "youtube-client-id": "id",
        "youtube-client-secret": "secret",
        "youtube-refresh-token": "refresh",
    }

    def test_description_gets_disclosure(self):
        request = VideoUploadRequest(video_path="x.mp4", title="Blender", description="Best blender ever")
        description = prepare_description(request)

        assert FtcDisclosureValidator().validate_content(description).has_disclosure
        assert description.endswith("#Shorts")

    def test_existing_disclosure_kept(self):
        text = "As an Amazon Associate, I earn from qualifying purchases. #Shorts"
        request = VideoUploadRequest(video_path="x.mp4", title="Blender", description=text)
        assert prepare_description(request) == text

    @pytest.mark.parametrize("shorts", [True, False])
    def test_long_description_keeps_disclosure(self, empty_config, shorts):
        request = VideoUploadRequest(
            video_path="x.mp4", title="Blender", description="great blender " * 400, shorts=shorts,
        )
        client = YouTubeClient(self.CREDS, empty_config, service=MagicMock())
        description = client._body(request)["snippet"]["description"]

        assert len(description) <= 5000
        assert description.startswith("great blender great blender")
        assert FtcDisclosureValidator().validate_content(description).has_disclosure
        assert description.endswith("#Shorts") == shorts

    def test_upload(self, temp_dir, empty_config, fast_policy):
        video = temp_dir / "short.mp4"
        video.write_bytes(b"\x00")

        service = MagicMock()
        insert = service.videos.return_value.insert.return_value
        insert.next_chunk.return_value = (None, {"id": "abc123"})
        client = YouTubeClient(self.CREDS, empty_config, service=service, policy=fast_policy)

        with patch("affiliate_empire.integrations.youtube.MediaFileUpload"):
            result = asyncio.run(client.invoke(VideoUploadRequest(
                video_path=str(video), title="Blender", description="Watch this",
            )))

        assert result.payload.video_id == "abc123"
        assert result.payload.url == "https://youtube.com/shorts/abc123"
        body = service.videos.return_value.insert.call_args.kwargs["body"]
        assert "As an Amazon Associate" in body["snippet"]["description"]

    def test_missing_video_not_retried(self, empty_config, fast_policy):
        service = MagicMock()
        client = YouTubeClient(self.CREDS, empty_config, service=service, policy=fast_policy)

        with pytest.raises(FileNotFoundError):
            asyncio.run(client.invoke(VideoUploadRequest(video_path="missing.mp4", title="x")))
        service.videos.assert_not_called()

    def test_mock_upload(self, empty_config):
        result = asyncio.run(MockYouTubeClient(empty_config).invoke(VideoUploadRequest(video_path="x", title="t")))

        assert result.payload.video_id.startswith("YT")
        assert result.mock
