"""HTTP transport for JSON APIs."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from yardaudit._constants import USER_AGENT
from yardaudit._redact import redact_for_log
from yardaudit.exceptions import TransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the location providers.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str, *, headers: Mapping[str, str] | None = None) -> Any:
        ...


class HttpTransport:
    """aiohttp-backed transport that GETs JSON documents from one base URL."""

    def __init__(self, base_url: str, http_session: aiohttp.ClientSession) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_session

    async def get_json(self, endpoint: str, *, headers: Mapping[str, str] | None = None) -> Any:
        """GET ``base_url + endpoint`` and decode the JSON body.

        Raises
        ------
        TransportError
            On network failure, timeout, a non-2xx status or a body that
            is not decodable JSON.
        """
        request_headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if headers:
            request_headers.update(headers)

        url = f"{self._base_url}{endpoint}"
        _logger.debug("GET %s headers=%s", url, redact_for_log(request_headers))

        try:
            async with self._http.get(url, headers=request_headers) as resp:
                body = await resp.read()
                if not 200 <= resp.status < 300:
                    raise TransportError(
                        f"HTTP {resp.status} from {endpoint}: {_preview(body)}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except TransportError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        # json.loads detects UTF-8/16/32 from the bytes; undecodable input is a ValueError.
        try:
            return json.loads(body)
        except ValueError as exc:
            raise TransportError(
                f"Invalid JSON from {endpoint}: {_preview(body)}",
                endpoint=endpoint,
            ) from exc


def _preview(body: bytes) -> str:
    return body[:200].decode("utf-8", errors="replace")
