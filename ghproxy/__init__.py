"""GitHub file-acceleration reverse proxy"""

from .config import Config
from .patterns import Dispatch, classify
from .proxy import ProxyEngine, ProxyRequest
from .router import Router

__all__ = ["Config", "Dispatch", "ProxyEngine", "ProxyRequest", "Router", "classify"]
