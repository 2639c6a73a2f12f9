"""
GitHub URL shapes understood by the proxy and the dispatch decision for each.

Every expression is anchored at the start of the string, case-insensitive, and
accepts the URL with or without an ``http(s)://`` scheme.
"""

import enum
import re
from dataclasses import dataclass
from typing import Iterable, Optional


class Dispatch(enum.Enum):
    PROXY = "proxy"
    MIRROR_REDIRECT = "mirror_redirect"
    FOLLOW_FOREIGN_REDIRECT = "follow_foreign_redirect"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RoutePattern:
    name: str
    expression: re.Pattern
    action: Dispatch

    def matches(self, url: str) -> bool:
        return self.expression.match(url) is not None


def _compile(expr: str) -> re.Pattern:
    return re.compile(expr, re.I)


# ===========================
# Route patterns
# ===========================
RELEASES = RoutePattern(
    "releases", _compile(r"^(?:https?://)?github\.com/.+?/.+?/(?:releases|archive)/.*$"), Dispatch.PROXY)
BLOB = RoutePattern(
    "blob", _compile(r"^(?:https?://)?github\.com/.+?/.+?/(?:blob|raw)/.*$"), Dispatch.PROXY)
GIT = RoutePattern(
    "git", _compile(r"^(?:https?://)?github\.com/.+?/.+?/(?:info|git-).*$"), Dispatch.PROXY)
RAW = RoutePattern(
    "raw", _compile(r"^(?:https?://)?raw\.(?:githubusercontent|github)\.com/.+?/.+?/.+?/.+$"), Dispatch.PROXY)
GIST = RoutePattern(
    "gist", _compile(r"^(?:https?://)?gist\.(?:githubusercontent|github)\.com/.+?/.+?/.+$"), Dispatch.PROXY)
TAGS = RoutePattern(
    "tags", _compile(r"^(?:https?://)?github\.com/.+?/.+?/tags.*$"), Dispatch.PROXY)

ALL_PATTERNS = (RELEASES, BLOB, GIT, RAW, GIST, TAGS)

# 分发顺序：先匹配的优先
DISPATCH_ORDER = (RELEASES, GIST, TAGS, GIT, RAW, BLOB)

_BLOB_PARTS = re.compile(r"^((?:https?://)?github\.com)/(.+?)/(.+?)/(?:blob|raw)/(.*)$", re.I)
_RAW_PARTS = re.compile(
    r"^(?:https?://)?raw\.(?:githubusercontent|github)\.com/(.+?)/(.+?)/(.+?)/(.+)$", re.I)


@dataclass(frozen=True)
class Decision:
    action: Dispatch
    url: str
    pattern: Optional[RoutePattern] = None


def match_pattern(url: str, patterns: Iterable[RoutePattern] = DISPATCH_ORDER) -> Optional[RoutePattern]:
    """Return the first pattern matching ``url``, in the given order"""
    for pattern in patterns:
        if pattern.matches(url):
            return pattern
    return None


def is_github_url(url: str) -> bool:
    return match_pattern(url, ALL_PATTERNS) is not None


def blob_to_raw(url: str) -> str:
    """github.com/<owner>/<repo>/blob/<ref>/<path>  →  github.com/<owner>/<repo>/raw/<ref>/<path>"""
    m = _BLOB_PARTS.match(url)
    if not m:
        return url
    host, owner, repo, rest = m.groups()
    return f"{host}/{owner}/{repo}/raw/{rest}"


def blob_to_mirror(url: str, mirror_base: str) -> str:
    """github.com/<owner>/<repo>/blob/<ref>/<path>  →  <mirror>/<owner>/<repo>@<ref>/<path>"""
    m = _BLOB_PARTS.match(url)
    if not m:
        return url
    _, owner, repo, rest = m.groups()
    return f"{mirror_base}/{owner}/{repo}@{rest}"


def raw_to_mirror(url: str, mirror_base: str) -> str:
    """raw.githubusercontent.com/<owner>/<repo>/<ref>/<path>  →  <mirror>/<owner>/<repo>@<ref>/<path>"""
    m = _RAW_PARTS.match(url)
    if not m:
        return url
    owner, repo, ref, rest = m.groups()
    return f"{mirror_base}/{owner}/{repo}@{ref}/{rest}"


def classify(url: str, mirror: bool = False, mirror_raw: bool = False,
             mirror_base: str = "https://cdn.jsdelivr.net/gh") -> Decision:
    """Decide how a target URL is served.

    raw.githubusercontent.com paths are proxied directly unless ``mirror_raw``
    is set, in which case they are redirected to the mirror; ``mirror`` only
    governs blob/raw paths on github.com.
    """
    if mirror_raw and RAW.matches(url):
        return Decision(Dispatch.MIRROR_REDIRECT, raw_to_mirror(url, mirror_base), RAW)

    pattern = match_pattern(url)
    if pattern is None:
        return Decision(Dispatch.FALLBACK, url)
    if pattern is BLOB:
        if mirror:
            return Decision(Dispatch.MIRROR_REDIRECT, blob_to_mirror(url, mirror_base), BLOB)
        return Decision(Dispatch.PROXY, blob_to_raw(url), BLOB)
    return Decision(pattern.action, url, pattern)
