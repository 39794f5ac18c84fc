from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from facebook_api.core import db
from facebook_api.core.log import configure_logging
from facebook_api.posts import dependencies as posts_dependencies
from facebook_api.posts import router as posts_router
from facebook_api.posts.repository import PostgresPostRepository

configure_logging()
logger = logging.getLogger(__name__)


def cors_allow_origins() -> list[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", "*")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    backend = posts_dependencies.storage_backend()
    if backend == "postgres":
        # Initialize the DB pool once per process.
        await db.init_pool()
    try:
        repository = posts_dependencies.build_post_repository(backend)
        if isinstance(repository, PostgresPostRepository):
            await repository.ensure_table()
        app.state.post_repository = repository
        logger.info("posts_storage_ready backend=%s", backend)
        yield
    finally:
        if backend == "postgres":
            await db.close_pool()


app = FastAPI(title="facebook-api", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Undecodable or wrongly shaped input is a plain client error.
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


app.include_router(posts_router.router, tags=["posts"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "facebook-api"}
