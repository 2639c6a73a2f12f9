from typing import Iterable, Mapping, Tuple

import httpx

# ===========================
# Header sets
# ===========================
HOP_BY_HOP = frozenset((
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
))

# 可能干扰代理内容的响应头
STRIPPED_RESPONSE_HEADERS = (
    "content-security-policy",
    "content-security-policy-report-only",
    "clear-site-data",
    "x-frame-options",
    "x-content-type-options",
)

PREFLIGHT_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET,POST,PUT,PATCH,TRACE,DELETE,HEAD,OPTIONS",
    "access-control-max-age": "1728000",
}


def is_preflight(method: str, headers: Mapping[str, str]) -> bool:
    return method.upper() == "OPTIONS" and "access-control-request-headers" in headers


def normalize_accept_language(value: str) -> str:
    return value.replace("zh-CN", "zh-SG", 1)


def rewrite_request_headers(headers: Iterable[Tuple[str, str]]) -> httpx.Headers:
    """Copy inbound headers for the upstream request"""
    out = []
    for key, value in headers:
        name = key.lower()
        if name in HOP_BY_HOP or name == "host":
            continue
        if name == "accept-language":
            value = normalize_accept_language(value)
        out.append((key, value))
    return httpx.Headers(out)


def rewrite_response_headers(headers: httpx.Headers) -> httpx.Headers:
    """Open up CORS and strip framing/CSP headers from an upstream response"""
    out = httpx.Headers([(k, v) for k, v in headers.multi_items() if k.lower() not in HOP_BY_HOP])
    out["access-control-expose-headers"] = "*"
    out["access-control-allow-origin"] = "*"
    for name in STRIPPED_RESPONSE_HEADERS:
        if name in out:
            del out[name]
    return out
