from __future__ import annotations

import contextlib
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    from endpoints.mcp_endpoints import mcp

    async with mcp.session_manager.run():
        yield


def create_app() -> FastAPI:
    load_dotenv("local.env")

    from endpoints.data_endpoints import router as data_router
    from endpoints.mcp_endpoints import mcp
    from settings import get_settings
    from system_info import APP_VERSION

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    mcp.settings.streamable_http_path = "/"

    app = FastAPI(title="Household Review Data", version=APP_VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.debug_log_requests:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            response = await call_next(request)
            logger.info("REQUEST %s %s -> %s", request.method, request.url.path, response.status_code)
            return response

    @app.post("/mcp")
    async def mcp_redirect_post():
        return RedirectResponse(url="/mcp/", status_code=307)

    @app.get("/mcp")
    async def mcp_redirect_get():
        return RedirectResponse(url="/mcp/", status_code=307)

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok", "version": APP_VERSION}

    app.include_router(data_router)

    app.mount("/mcp", mcp.streamable_http_app())

    return app


app = create_app()
