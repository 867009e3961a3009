from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from govanity import __version__
from govanity.config import VanityConfig
from govanity.resolve import render

logger = logging.getLogger(__name__)


def create_app(config: VanityConfig) -> FastAPI:
    # No docs/openapi routes: every path belongs to the vanity namespace.
    app = FastAPI(
        title="govanity",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.govanity_config = config

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s - %s", request.method, request.scope["path"], response.status_code)
        return response

    @app.api_route("/", methods=["GET", "HEAD"], response_class=HTMLResponse)
    async def root(request: Request) -> HTMLResponse:
        return HTMLResponse(render(request.app.state.govanity_config, "/"))

    @app.api_route("/{path:path}", methods=["GET", "HEAD"], response_class=HTMLResponse)
    async def vanity(request: Request) -> HTMLResponse:
        # scope["path"] is already percent-decoded; request.url.path would reparse
        # a decoded "?" or "#" as the start of a query or fragment.
        return HTMLResponse(render(request.app.state.govanity_config, request.scope["path"]))

    return app
