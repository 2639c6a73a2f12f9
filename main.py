"""
GitHub file-acceleration proxy (gh-proxy style)
-----------------------------------------------
Usage:
  /<github-url>            →  proxy releases, archives, files, gists, tags and git clones
  /?q=<github-url>         →  301 to the path form above

Examples:
  http://127.0.0.1:8000/https://github.com/hunshcn/project/releases/download/v0.1.0/example.zip
  http://127.0.0.1:8000/github.com/python/cpython/blob/main/README.rst
  git clone http://127.0.0.1:8000/https://github.com/python/cpython

Run:
  uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse

from ghproxy import Config, ProxyEngine, Router

METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE"]


def create_app(config: Optional[Config] = None, client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    config = config or Config.from_env()
    logging.basicConfig(level=config.log_level, format="[%(asctime)s] [%(levelname)s] %(message)s")

    # ===========================
    # HTTP client
    # ===========================
    client = client or httpx.AsyncClient(timeout=config.timeout)
    router = Router(config, ProxyEngine(client, prefix=config.prefix, max_redirects=config.max_redirects))

    # ===========================
    # Lifespan
    # ===========================
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # 关闭阶段（释放连接池）
        await client.aclose()

    app = FastAPI(title="GitHub file-acceleration proxy", lifespan=lifespan)
    app.state.config = config
    app.state.router = router

    @app.exception_handler(HTTPException)
    async def plain_text_error(request: Request, exc: HTTPException):
        """Errors go back as short plain-text diagnostics"""
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    # ===========================
    # Routes
    # ===========================
    @app.api_route("/{path:path}", methods=METHODS)
    async def dispatch(path: str, request: Request):
        """Every path and method goes through the router"""
        return await router.handle(request)

    return app


app = create_app()
