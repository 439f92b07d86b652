from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse, Response

from skillswap.core.config import settings
from skillswap.core.db import init_db
from skillswap.core.errors import SkillSwapError
from skillswap.core.logging_config import configure_logging
from skillswap.routers import (
    admin,
    auth,
    profile,
    ratings,
    reports,
    requests,
    search,
    skills,
)

configure_logging(settings.log_level)
logger = structlog.get_logger("skillswap.main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_db()
    logger.info("startup", app_name=settings.app_name, env=settings.env)
    yield


app = FastAPI(title="SkillSwap API", lifespan=lifespan)

allow_all_origins = settings.cors_allow_origins == ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=not allow_all_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SkillSwapError)
async def skillswap_error_handler(request: Request, exc: SkillSwapError) -> Response:
    logger.warning(
        "domain_error",
        error=type(exc).__name__,
        status=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return await http_exception_handler(request, exc)


@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    return RedirectResponse(url="/docs")


@app.get("/healthz")
def healthz() -> dict[str, bool]:
    return {"ok": True}


# Register routers
app.include_router(auth.router, prefix=settings.api_v1_str)
app.include_router(profile.router, prefix=settings.api_v1_str)
app.include_router(skills.router, prefix=settings.api_v1_str)
app.include_router(requests.router, prefix=settings.api_v1_str)
app.include_router(ratings.router, prefix=settings.api_v1_str)
app.include_router(search.router, prefix=settings.api_v1_str)
app.include_router(reports.router, prefix=settings.api_v1_str)
app.include_router(admin.router, prefix=settings.api_v1_str)
