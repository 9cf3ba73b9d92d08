import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Callable

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from course_catalog.clients import S3Client
from course_catalog.config import Settings, configure_logging, settings
from course_catalog.exceptions import CatalogError
from course_catalog.routes import courses, subtitles
from course_catalog.services.cache import CatalogCache
from course_catalog.services.catalog import CatalogBuilder, CatalogStore
from course_catalog.services.proxy import SubtitleProxy
from course_catalog.services.signer import SignedUrlIssuer

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    *,
    store: CatalogStore | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> FastAPI:
    """Build the application.

    *store* and *clock* default to the real S3 client and a monotonic clock;
    tests pass fakes for both.
    """
    cfg = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Wire the catalog services, then seed the cache from the snapshot
        or start building it in the background."""
        s3 = store or S3Client.from_settings(cfg)
        signer = SignedUrlIssuer(s3)
        builder = CatalogBuilder(
            s3,
            signer,
            expires_in=cfg.url_expiry_seconds,
            subtitle_base_url=cfg.public_base_url,
        )
        cache = CatalogCache(
            builder,
            signer,
            ttl_seconds=cfg.catalog_ttl_seconds,
            clock=clock,
            snapshot_path=cfg.snapshot_path,
        )
        app.state.settings = cfg
        app.state.signer = signer
        app.state.builder = builder
        app.state.cache = cache
        app.state.proxy = SubtitleProxy(s3)

        logger.info(
            "Serving bucket %s (%s), catalog TTL %ss",
            cfg.s3_bucket_name,
            cfg.aws_region,
            cfg.catalog_ttl_seconds,
        )
        app.state.warmup = None
        if not await cache.load_snapshot() and cfg.warm_on_startup:
            logger.info("No snapshot loaded, building catalog in the background")
            app.state.warmup = cache.start_background_refresh()
        yield

        warmup = app.state.warmup
        if warmup is not None and not warmup.done():
            logger.info("Shutting down mid-build, cancelling catalog warm-up")
            warmup.cancel()
            await asyncio.gather(warmup, return_exceptions=True)

    app = FastAPI(
        title="course-catalog",
        description="Course video catalog over S3 with signed URLs and subtitle proxying",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(_request: Request, exc: CatalogError) -> JSONResponse:
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    app.include_router(courses.router)
    app.include_router(subtitles.router)
    return app


app = create_app()


def run() -> None:
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
