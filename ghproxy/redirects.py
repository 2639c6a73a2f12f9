import re
from dataclasses import dataclass

import httpx

from .patterns import Dispatch, is_github_url

_SCHEME = re.compile(r"^https?://", re.I)


class MalformedRedirect(ValueError):
    pass


@dataclass(frozen=True)
class RedirectOutcome:
    action: Dispatch
    location: str

    @property
    def follow(self) -> bool:
        return self.action is Dispatch.FOLLOW_FOREIGN_REDIRECT


def loopback_location(location: str, origin: str, prefix: str = "/") -> str:
    """Point a GitHub redirect back at this proxy: <origin><prefix><location-without-scheme>"""
    return origin.rstrip("/") + prefix + _SCHEME.sub("", location, count=1)


def resolve_redirect(location: str, origin: str, prefix: str = "/") -> RedirectOutcome:
    """Decide whether a redirect stays in the GitHub family or is followed server-side.

    GitHub-shaped locations are rewritten to loop back through the proxy and the
    redirect is handed to the client. Anything else is followed by the proxy
    itself; such a location has to be an absolute http(s) URL.
    """
    if is_github_url(location):
        return RedirectOutcome(Dispatch.PROXY, loopback_location(location, origin, prefix))

    try:
        url = httpx.URL(location)
    except httpx.InvalidURL as e:
        raise MalformedRedirect(f"invalid redirect location {location!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise MalformedRedirect(f"invalid redirect location {location!r}")
    return RedirectOutcome(Dispatch.FOLLOW_FOREIGN_REDIRECT, str(url))
