"""HTTP data source that returns decoded JSON readings."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from stalestate.exceptions import RequestError

_logger = logging.getLogger(__name__)

_USER_AGENT = "stalestate"


class HttpJsonSource:
    """``DataSource`` that GETs *url* and returns its JSON body.

    Every failure (connection error, timeout, non-200 status, undecodable
    body) surfaces as :class:`~stalestate.exceptions.RequestError`. There
    are no retries: a failed probe is already a vote in verification.

    The aiohttp session is owned by the caller.
    """

    def __init__(
        self,
        url: str,
        http_session: aiohttp.ClientSession,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._url = url
        self._http = http_session
        self._headers: dict[str, str] = {
            "accept": "application/json",
            "cache-control": "no-cache",
            "user-agent": _USER_AGENT,
        }
        if headers:
            self._headers.update(headers)
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def url(self) -> str:
        return self._url

    async def request(self) -> Any:
        _logger.debug("GET %s", self._url)

        try:
            async with self._http.get(self._url, headers=self._headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise RequestError(
                        f"HTTP {resp.status} from {self._url}: {text[:200]}",
                        status_code=resp.status,
                        url=self._url,
                    )
        except RequestError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise RequestError(
                f"Request to {self._url} failed: {exc}",
                url=self._url,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise RequestError(
                f"Invalid JSON from {self._url}: {text[:200]}",
                status_code=200,
                url=self._url,
            ) from exc
