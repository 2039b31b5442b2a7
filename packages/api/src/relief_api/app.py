"""FastAPI application for the enrichment function boundary.

Routes:
  POST    /functions/v1/fetch-twitter-data   signed social search -> {"tweets": [...]}
  OPTIONS /functions/v1/fetch-twitter-data   empty 204 for a plain OPTIONS
  POST    /posts/refresh                     search and persist
  GET     /posts                             recent persisted posts
  POST    /posts/{post_id}/location          extract and store a post's location
  POST    /analysis/location                 cached location extraction
  POST    /analysis/image-verification       cached image authenticity check
  GET     /feed                              merged reports/disasters/posts
  GET     /health

Failures come back as ``{"error": "..."}`` with a 5xx status; the specific
error kind goes to the log. Unexpected exceptions are answered the same way
by Starlette's server-error middleware, which sits outside CORS and re-raises
after responding.

Browser pre-flights (``Origin`` plus ``Access-Control-Request-Method``) never
reach the route: CORSMiddleware answers them with 200 and a fixed "OK" body.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import jwt as pyjwt
from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from relief_auth.jwt import CallerRejected, bearer_token, verify_token
from relief_feed_manager.feed import build_feed
from relief_shared.auth_models import Caller
from relief_shared.errors import (
    DecodeError,
    EnrichmentError,
    TransportError,
    UpstreamError,
)
from relief_shared.feed_models import DISASTERS_TABLE, REPORTS_TABLE, Disaster, Report
from relief_shared.http import PAYLOAD_LOG_LIMIT
from relief_shared.settings import PlatformSettings
from relief_shared.social_models import (
    DEFAULT_SEARCH_QUERY,
    SOCIAL_POSTS_TABLE,
    NormalizedPost,
)

from relief_api.services import Services, build_services

logger = logging.getLogger(__name__)

FUNCTION_PATH = "/functions/v1/fetch-twitter-data"
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


class SearchBody(BaseModel):
    query: str | None = None


class LocationBody(BaseModel):
    text: str


class ImageBody(BaseModel):
    image_url: str


def _status_for(exc: EnrichmentError) -> int:
    if isinstance(exc, TransportError | UpstreamError):
        return 502
    return 500


async def enrichment_error_handler(request: Request, exc: EnrichmentError) -> JSONResponse:
    if isinstance(exc, DecodeError):
        logger.error(f"{request.url.path}: DecodeError: {exc} payload={exc.payload[:500]!r}")
    elif isinstance(exc, UpstreamError):
        logger.error(f"{request.url.path}: UpstreamError {exc.status_code}: {exc.body[:500]!r}")
    else:
        logger.error(f"{request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=_status_for(exc), content={"error": str(exc)})


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.url.path}: unhandled {type(exc).__name__}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def get_services(request: Request) -> Services:
    return request.app.state.services


def require_caller(
    request: Request,
    authorization: str | None = Header(default=None),
) -> Caller | None:
    """Verify the bearer token when a JWT secret is configured."""
    secret = get_services(request).settings.jwt_secret
    if not secret:
        return None
    token = bearer_token(authorization)
    if token is None:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    try:
        return verify_token(token, secret)
    except (pyjwt.InvalidTokenError, CallerRejected) as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}") from e


def _parse_records(model: type[BaseModel], records: list[dict], table: str) -> list:
    try:
        return [model.model_validate(r) for r in records]
    except ValueError as e:
        raise DecodeError(
            f"Stored {table} record failed validation: {e}", str(records)[:PAYLOAD_LOG_LIMIT]
        ) from e


def create_app(services: Services | None = None) -> FastAPI:
    """Build the app. Without ``services``, settings load from the environment
    at startup and missing search credentials abort startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = services is None
        app.state.services = services or build_services(PlatformSettings.from_env())
        logger.info("Enrichment services ready")
        try:
            yield
        finally:
            if owned:
                await app.state.services.aclose()

    app = FastAPI(
        title="Relief Enrichment API",
        description="Signed social search and cached generative analysis for the dashboard",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )
    app.add_exception_handler(EnrichmentError, enrichment_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.options(FUNCTION_PATH)
    async def fetch_twitter_data_preflight() -> Response:
        return Response(status_code=204)

    @app.post(FUNCTION_PATH)
    async def fetch_twitter_data(
        body: SearchBody | None = None,
        services: Services = Depends(get_services),
        caller: Caller | None = Depends(require_caller),
    ) -> dict[str, list[dict]]:
        query = (body.query if body else None) or DEFAULT_SEARCH_QUERY
        posts = await services.search.search(query)
        logger.info(f"Function search returned {len(posts)} posts")
        return {"tweets": [p.to_wire() for p in posts]}

    @app.post("/posts/refresh")
    async def refresh_posts(
        body: SearchBody | None = None,
        services: Services = Depends(get_services),
        caller: Caller | None = Depends(require_caller),
    ) -> dict[str, list[dict]]:
        query = (body.query if body else None) or DEFAULT_SEARCH_QUERY
        posts = await services.search.search(query)
        for post in posts:
            await services.store.upsert_record(
                SOCIAL_POSTS_TABLE, post.id, post.to_wire(), post.created_at
            )
        return {"tweets": [p.to_wire() for p in posts]}

    @app.get("/posts")
    async def recent_posts(
        limit: int = Query(default=20, ge=1, le=100),
        services: Services = Depends(get_services),
    ) -> dict[str, list[dict]]:
        records = await services.store.list_recent(SOCIAL_POSTS_TABLE, limit)
        posts = _parse_records(NormalizedPost, records, SOCIAL_POSTS_TABLE)
        return {"posts": [p.to_wire() for p in posts]}

    @app.post("/posts/{post_id}/location")
    async def locate_post(
        post_id: str,
        services: Services = Depends(get_services),
        caller: Caller | None = Depends(require_caller),
    ) -> dict:
        record = await services.store.get_record(SOCIAL_POSTS_TABLE, post_id)
        if record is None:
            raise HTTPException(status_code=404, detail=f"Post {post_id} not found")
        location = await services.analysis.extract_location(record.get("post_content", ""))
        if location is not None:
            record = await services.store.update_record(
                SOCIAL_POSTS_TABLE, post_id, {"location_extracted": location}
            )
        return {"post": record, "location": location}

    @app.post("/analysis/location")
    async def analyze_location(
        body: LocationBody,
        services: Services = Depends(get_services),
        caller: Caller | None = Depends(require_caller),
    ) -> dict[str, str | None]:
        return {"location": await services.analysis.extract_location(body.text)}

    @app.post("/analysis/image-verification")
    async def analyze_image(
        body: ImageBody,
        services: Services = Depends(get_services),
        caller: Caller | None = Depends(require_caller),
    ) -> dict:
        verification = await services.analysis.verify_image(body.image_url)
        return verification.model_dump(by_alias=True)

    @app.get("/feed")
    async def feed(
        limit: int = Query(default=20, ge=1, le=100),
        services: Services = Depends(get_services),
    ) -> dict[str, list[dict]]:
        store = services.store
        reports = _parse_records(Report, await store.list_recent(REPORTS_TABLE, limit), REPORTS_TABLE)
        disasters = _parse_records(
            Disaster, await store.list_recent(DISASTERS_TABLE, limit), DISASTERS_TABLE
        )
        posts = _parse_records(
            NormalizedPost, await store.list_recent(SOCIAL_POSTS_TABLE, limit), SOCIAL_POSTS_TABLE
        )
        items = build_feed(reports, disasters, posts)[:limit]
        return {"items": [item.model_dump(mode="json") for item in items]}

    return app
