"""
YouTube Shorts publisher.

Uploads through the YouTube Data API v3 (google-api-python-client) using an
OAuth refresh token. The blocking upload runs in a worker thread. Every
description passes through ensure_disclosure() before it is sent, so a
published video always carries an FTC disclosure.

Usage:
    handle = ClientHandle(YOUTUBE_PROVIDER, resolver, config)
    result = await handle.invoke(VideoUploadRequest(
        video_path="output/short.mp4",
        title="This blender changed my mornings",
        description="Full review below",
    ))
    print(result.payload.url)
"""

import asyncio
import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.http import MediaFileUpload
from loguru import logger

from affiliate_empire.compliance import FtcDisclosureValidator, Platform
from affiliate_empire.config import Config

from .base import MockClient, ProviderProfile, RealClient, SecretRef
from .errors import YouTubeError
from .pricing import CostEstimate

TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPES = ["https://www.googleapis.com/auth/youtube.upload"]
MAX_DESCRIPTION_LENGTH = 5000

# YouTube category IDs
CATEGORIES = {
    "people": "22",
    "howto": "26",
    "education": "27",
    "science": "28",
}


@dataclass(frozen=True)
class VideoUploadRequest:
    video_path: str
    title: str
    description: str = ""
    tags: List[str] = field(default_factory=list)
    category: str = "howto"
    privacy: str = "public"
    thumbnail_path: Optional[str] = None
    shorts: bool = True


@dataclass(frozen=True)
class VideoUpload:
    video_id: str
    url: str


def _with_disclosure(text: str, shorts: bool, validator: FtcDisclosureValidator) -> str:
    description = validator.ensure_disclosure(text, Platform.YOUTUBE)
    if shorts and "#shorts" not in description.lower():
        description = f"{description}\n\n#Shorts"
    return description


def prepare_description(request: VideoUploadRequest, validator: Optional[FtcDisclosureValidator] = None) -> str:
    """
    Description with a guaranteed disclosure (and #Shorts tag for Shorts).

    Over-long descriptions lose text from the body, never the disclosure.
    """
    validator = validator or FtcDisclosureValidator()
    description = _with_disclosure(request.description, request.shorts, validator)
    if len(description) <= MAX_DESCRIPTION_LENGTH:
        return description

    reserved = len(_with_disclosure("", request.shorts, validator))
    body = request.description[:MAX_DESCRIPTION_LENGTH - reserved].rstrip()
    logger.warning(f"[youtube] Description trimmed to {len(body)} chars to keep the disclosure")
    return _with_disclosure(body, request.shorts, validator)


class YouTubeClient(RealClient):
    """Live YouTube uploads."""

    service_name = "youtube"
    error_class = YouTubeError
    CHUNK_SIZE = 1024 * 1024

    def __init__(self, credentials: Dict[str, str], config: Optional[Config] = None, service=None, **kwargs):
        super().__init__(credentials, config, **kwargs)
        self.validator = FtcDisclosureValidator()
        self._youtube = service

    @property
    def youtube(self):
        """Authenticated YouTube service (lazy load)."""
        if self._youtube is None:
            creds = Credentials(
                token=None,
                refresh_token=self._credentials["youtube-refresh-token"],
                client_id=self._credentials["youtube-client-id"],
                client_secret=self._credentials["youtube-client-secret"],
                token_uri=TOKEN_URI,
                scopes=SCOPES,
            )
            self._youtube = build("youtube", "v3", credentials=creds, cache_discovery=False)
        return self._youtube

    def _body(self, request: VideoUploadRequest) -> Dict[str, Any]:
        return {
            "snippet": {
                "title": request.title[:100],
                "description": prepare_description(request, self.validator),
                "tags": request.tags,
                "categoryId": CATEGORIES.get(request.category.lower(), "26"),
            },
            "status": {
                "privacyStatus": request.privacy,
                "selfDeclaredMadeForKids": False,
            },
        }

    async def invoke(self, request: VideoUploadRequest, cancel_event: Optional[asyncio.Event] = None):
        # A missing file is a caller error, not something to retry
        if not os.path.exists(request.video_path):
            raise FileNotFoundError(f"Video file not found: {request.video_path}")
        return await super().invoke(request, cancel_event=cancel_event)

    def _upload(self, request: VideoUploadRequest) -> Dict[str, Any]:
        media = MediaFileUpload(request.video_path, mimetype="video/*", resumable=True, chunksize=self.CHUNK_SIZE)
        insert = self.youtube.videos().insert(part="snippet,status", body=self._body(request), media_body=media)

        response = None
        while response is None:
            status, response = insert.next_chunk()
            if status:
                logger.debug(f"[youtube] Upload progress: {int(status.progress() * 100)}%")

        if request.thumbnail_path and os.path.exists(request.thumbnail_path):
            self.youtube.thumbnails().set(
                videoId=response["id"],
                media_body=MediaFileUpload(request.thumbnail_path),
            ).execute()
        return response

    async def _call(self, request: VideoUploadRequest) -> Dict[str, Any]:
        logger.info(f"[youtube] Uploading Short - {request.title}")
        return await asyncio.to_thread(self._upload, request)

    def _parse(self, raw: Dict[str, Any], request: VideoUploadRequest) -> Tuple[VideoUpload, CostEstimate]:
        video_id = raw["id"]
        url = f"https://youtube.com/shorts/{video_id}" if request.shorts else f"https://youtube.com/watch?v={video_id}"
        logger.success(f"[youtube] Upload complete: {url}")
        return VideoUpload(video_id=video_id, url=url), CostEstimate.zero("requests")


class MockYouTubeClient(MockClient):
    service_name = "youtube"
    cost_unit = "requests"

    def _mock_payload(self, request: VideoUploadRequest) -> VideoUpload:
        video_id = f"YT{int(time.time() * 1000)}"
        return VideoUpload(video_id=video_id, url=f"https://youtube.com/shorts/{video_id}")


YOUTUBE_PROVIDER = ProviderProfile(
    service_name="youtube",
    secrets=(
        SecretRef("youtube-client-id", "YOUTUBE_CLIENT_ID"),
        SecretRef("youtube-client-secret", "YOUTUBE_CLIENT_SECRET"),
        SecretRef("youtube-refresh-token", "YOUTUBE_REFRESH_TOKEN"),
    ),
    mock_flag="YOUTUBE_MOCK_MODE",
    real_factory=lambda creds, config: YouTubeClient(creds, config),
    mock_factory=lambda config: MockYouTubeClient(config),
)
