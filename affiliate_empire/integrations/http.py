"""
aiohttp helpers that turn non-2xx responses into ProviderHTTPError.
"""

from typing import Any, Dict, Optional

import aiohttp

from .errors import ProviderHTTPError

DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=60)


async def _raise_for_status(resp: aiohttp.ClientResponse) -> None:
    if resp.status >= 400:
        # Response body stays out of the error; it can echo request data
        raise ProviderHTTPError(resp.status, resp.reason or "")


async def request_json(
    method: str,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    json: Any = None,
    params: Optional[Dict[str, str]] = None,
    data: Any = None,
    timeout: aiohttp.ClientTimeout = DEFAULT_TIMEOUT,
) -> Any:
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.request(method, url, headers=headers, json=json, params=params, data=data) as resp:
            await _raise_for_status(resp)
            return await resp.json(content_type=None)


async def post_for_bytes(
    url: str,
    headers: Optional[Dict[str, str]] = None,
    json: Any = None,
    timeout: aiohttp.ClientTimeout = DEFAULT_TIMEOUT,
) -> bytes:
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.post(url, headers=headers, json=json) as resp:
            await _raise_for_status(resp)
            return await resp.read()
