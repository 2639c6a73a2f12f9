import logging
import re

import httpx
from fastapi import HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from .config import Config
from .headers import PREFLIGHT_HEADERS, is_preflight, rewrite_request_headers
from .pages import FAVICON_PNG, NGINX_PAGE, landing_page
from .patterns import Dispatch, classify
from .proxy import ProxyEngine, ProxyRequest

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"^https?://", re.I)
_COLLAPSED_SCHEME = re.compile(r"^(https?):/+", re.I)


def normalize_url_param(raw: str) -> str:
    """Clean the URL carried in the request path; percent-escapes are kept as sent"""
    u = raw.strip().lstrip("/")
    # 某些反代会把 // 合并成 /
    return _COLLAPSED_SCHEME.sub(r"\1://", u, count=1)


def extract_target(path: str, prefix: str = "/", query: str = "") -> str:
    """Turn ``/<prefix>/github.com/...`` into ``https://github.com/...``"""
    if prefix != "/" and path.startswith(prefix):
        path = path[len(prefix):]
    target = normalize_url_param(path)
    if not _SCHEME.match(target):
        target = "https://" + target
    if query:
        target = f"{target}?{query}"
    return target


def request_path(request: Request) -> str:
    """The path exactly as the client sent it (undecoded)"""
    raw = request.scope.get("raw_path")
    if raw is None:
        return request.scope["path"]
    return raw.decode("latin-1").split("?", 1)[0]


def request_origin(request: Request) -> str:
    return f"{request.url.scheme}://{request.url.netloc}"


def has_body(request: Request) -> bool:
    return "transfer-encoding" in request.headers or request.headers.get("content-length", "0") != "0"


class Router:
    def __init__(self, config: Config, engine: ProxyEngine):
        self.config = config
        self.engine = engine

    async def handle(self, request: Request) -> Response:
        cfg = self.config

        if is_preflight(request.method, request.headers):
            return Response(status_code=204, headers=PREFLIGHT_HEADERS)

        if cfg.is_blocked_agent(request.headers.get("user-agent")):
            logger.info("Blocked user agent %r", request.headers.get("user-agent"))
            return HTMLResponse(NGINX_PAGE)

        if request.url.path.lower() == "/favicon.ico":
            return Response(FAVICON_PNG, media_type="image/png",
                            headers={"cache-control": "public, max-age=86400"})

        origin = request_origin(request)
        q = request.query_params.get("q")
        if q:
            return RedirectResponse(origin + cfg.prefix + q.strip(), status_code=301)

        target = extract_target(request_path(request), cfg.prefix, request.url.query)
        decision = classify(target, mirror=cfg.mirror, mirror_raw=cfg.mirror_raw, mirror_base=cfg.mirror_base)
        if decision.action is Dispatch.FALLBACK:
            return await self.fallback(request, origin)

        # proxied requests are checked against the URL actually forwarded
        checked = target if decision.action is Dispatch.MIRROR_REDIRECT else decision.url
        if not cfg.is_whitelisted(checked):
            logger.info("Rejected by whitelist: %s", checked)
            raise HTTPException(403, "blocked")

        if decision.action is Dispatch.MIRROR_REDIRECT:
            return RedirectResponse(decision.url, status_code=302)

        try:
            httpx.URL(decision.url)
        except httpx.InvalidURL as e:
            raise HTTPException(400, "Bad Request: Invalid URL format") from e

        logger.info("Proxying %s %s -> %s", request.method, request.url.path, decision.url)
        return await self.engine.fetch(decision.url, self.proxy_request(request), origin)

    async def fallback(self, request: Request, origin: str) -> Response:
        cfg = self.config
        if cfg.redirect_url:
            return RedirectResponse(cfg.redirect_url, status_code=302)
        if cfg.fallback_url:
            if cfg.fallback_url.lower() == "nginx":
                return HTMLResponse(NGINX_PAGE)
            return await self.engine.fetch(cfg.fallback_url, self.proxy_request(request, follow=True), origin)
        return HTMLResponse(landing_page(cfg.prefix))

    @staticmethod
    def proxy_request(request: Request, follow: bool = False) -> ProxyRequest:
        return ProxyRequest(
            method=request.method,
            headers=rewrite_request_headers(request.headers.items()),
            body=request.stream() if has_body(request) else None,
            follow_redirects=follow,
        )
