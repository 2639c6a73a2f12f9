import os
import re
from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional, Tuple

# ===========================
# Defaults
# ===========================
DEFAULT_PREFIX = "/"
DEFAULT_MIRROR_BASE = "https://cdn.jsdelivr.net/gh"
DEFAULT_TIMEOUT = 15.0
DEFAULT_MAX_REDIRECTS = 10

# 默认屏蔽的爬虫UA
SEED_BLOCKED_AGENTS = ("netcraft",)

_TOKEN_SEPARATORS = re.compile(r"[\t |\"'\r\n]+")
_TRUE_VALUES = ("1", "true", "yes", "on")


def parse_tokens(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a free-form list (spaces, quotes, pipes, newlines, commas) into tokens"""
    if not raw:
        return ()
    text = _TOKEN_SEPARATORS.sub(",", raw)
    text = re.sub(r",+", ",", text).strip(",")
    return tuple(t for t in text.split(",") if t)


def normalize_prefix(prefix: str) -> str:
    prefix = "/" + prefix.strip("/")
    return prefix if prefix == "/" else prefix + "/"


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class Config:
    prefix: str = DEFAULT_PREFIX
    mirror: bool = False
    mirror_raw: bool = False
    mirror_base: str = DEFAULT_MIRROR_BASE
    whitelist: Tuple[str, ...] = ()
    extra_blocked_agents: Tuple[str, ...] = ()
    redirect_url: Optional[str] = None
    fallback_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    log_level: str = "INFO"
    blocked_agents: FrozenSet[str] = field(init=False)

    def __post_init__(self):
        # frozen dataclass: derived fields go through object.__setattr__
        object.__setattr__(self, "prefix", normalize_prefix(self.prefix))
        object.__setattr__(self, "mirror_base", self.mirror_base.rstrip("/"))
        agents = SEED_BLOCKED_AGENTS + tuple(self.extra_blocked_agents)
        object.__setattr__(self, "blocked_agents", frozenset(a.lower() for a in agents if a))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build the configuration from GHPROXY_* and the legacy UA/URL302/URL variables"""
        env = os.environ if environ is None else environ
        return cls(
            prefix=env.get("GHPROXY_PREFIX", DEFAULT_PREFIX),
            mirror=_flag(env.get("GHPROXY_JSDELIVR")),
            mirror_raw=_flag(env.get("GHPROXY_JSDELIVR_RAW")),
            mirror_base=env.get("GHPROXY_MIRROR_BASE", DEFAULT_MIRROR_BASE),
            whitelist=parse_tokens(env.get("GHPROXY_WHITELIST")),
            extra_blocked_agents=parse_tokens(env.get("UA")),
            redirect_url=env.get("URL302") or None,
            fallback_url=env.get("URL") or None,
            timeout=float(env.get("GHPROXY_TIMEOUT", DEFAULT_TIMEOUT)),
            max_redirects=int(env.get("GHPROXY_MAX_REDIRECTS", DEFAULT_MAX_REDIRECTS)),
            log_level=env.get("GHPROXY_LOG_LEVEL", "INFO").upper(),
        )

    def is_blocked_agent(self, user_agent: Optional[str]) -> bool:
        ua = user_agent.lower() if user_agent else "null"
        return any(token in ua for token in self.blocked_agents)

    def is_whitelisted(self, target: str) -> bool:
        if not self.whitelist:
            return True
        return any(entry in target for entry in self.whitelist)
