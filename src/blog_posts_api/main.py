"""FastAPI application entrypoint."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from blog_posts_api.config import Settings
from blog_posts_api.database import create_engine, create_tables
from blog_posts_api.errors import install_error_handlers
from blog_posts_api.repository import PostRepository
from blog_posts_api.routes import router as posts_router
from blog_posts_api.telemetry import (
    add_trace_context,
    emit_to_otel_logs,
    init_telemetry,
    instrument_engine,
    shutdown_telemetry,
)

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_trace_context,  # type: ignore[list-item]
        emit_to_otel_logs,  # type: ignore[list-item]
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer(),
    ],
)

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_telemetry()
    settings = Settings()
    app.state.settings = settings

    engine = create_engine(settings)
    instrument_engine(engine)
    if settings.db_create_tables:
        await create_tables(engine)
    app.state.engine = engine
    app.state.repository = PostRepository(engine)

    await log.ainfo("service started", database=engine.url.render_as_string(hide_password=True))
    yield

    await engine.dispose()
    await log.ainfo("service stopped")
    shutdown_telemetry()


app = FastAPI(title="Blog Posts API", lifespan=lifespan)
app.include_router(posts_router)
install_error_handlers(app)
FastAPIInstrumentor.instrument_app(app)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
