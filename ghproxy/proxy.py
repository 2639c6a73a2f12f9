import logging
from dataclasses import dataclass, replace
from typing import AsyncIterable, Optional

import httpx
from fastapi import HTTPException
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from .headers import rewrite_response_headers
from .redirects import MalformedRedirect, resolve_redirect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProxyRequest:
    """Outbound request description; each redirect hop derives a new one"""
    method: str
    headers: httpx.Headers
    body: Optional[AsyncIterable[bytes]] = None
    follow_redirects: bool = False

    def follow(self) -> "ProxyRequest":
        # the inbound body stream is consumed by the first hop
        return replace(self, body=None, follow_redirects=True)


class ProxyEngine:
    def __init__(self, client: httpx.AsyncClient, prefix: str = "/", max_redirects: int = 10):
        self.client = client
        self.prefix = prefix
        self.max_redirects = max_redirects

    async def fetch(self, url: str, request: ProxyRequest, origin: str) -> StreamingResponse:
        """Fetch ``url`` upstream and stream the answer back with rewritten headers.

        GitHub-shaped redirects are rewritten to loop back through ``origin``;
        foreign redirects are followed here, up to ``max_redirects`` hops.
        """
        hops = 0
        while True:
            upstream = await self._send(url, request)
            headers = rewrite_response_headers(upstream.headers)
            location = upstream.headers.get("location")
            if not location:
                break

            try:
                outcome = resolve_redirect(location, origin, self.prefix)
            except MalformedRedirect as e:
                await upstream.aclose()
                logger.warning("Upstream %s sent a malformed redirect: %s", url, e)
                raise HTTPException(500, f"Proxy Error: {e}") from e

            if not outcome.follow:
                logger.debug("Loopback redirect %s -> %s", location, outcome.location)
                headers["location"] = outcome.location
                break

            await upstream.aclose()
            hops += 1
            if hops > self.max_redirects:
                logger.warning("Too many redirects while fetching %s", url)
                raise HTTPException(500, f"Proxy Error: more than {self.max_redirects} redirects")
            logger.debug("Following foreign redirect %s -> %s", url, outcome.location)
            url = outcome.location
            request = request.follow()

        response = StreamingResponse(
            upstream.aiter_raw(),
            status_code=upstream.status_code,
            background=BackgroundTask(upstream.aclose),
        )
        # keep repeated headers such as set-cookie
        response.raw_headers = [(k.lower(), v) for k, v in headers.raw]
        return response

    async def _send(self, url: str, request: ProxyRequest) -> httpx.Response:
        try:
            req = self.client.build_request(request.method, url, headers=request.headers, content=request.body)
            return await self.client.send(req, stream=True, follow_redirects=request.follow_redirects)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Upstream request to %s failed: %s", url, e)
            raise HTTPException(500, f"Proxy Error: {e}") from e
