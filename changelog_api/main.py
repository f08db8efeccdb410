import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator
import os
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from alembic.config import Config
from alembic import command

from changelog_api.db import init_db, async_session_factory
from changelog_api.core import get_settings
from changelog_api.core.exceptions import WorkflowError
from changelog_api.api.v1 import api_router
from changelog_api.core.middleware import RequestLoggingMiddleware
from changelog_api.logs.server_log import api_logger
from changelog_api.services.status_service import StatusService

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    try:
        alembic_cfg = Config(os.path.join(Path(__file__).parent.parent, "alembic.ini"))
        # env.py starts its own event loop
        await asyncio.to_thread(command.upgrade, alembic_cfg, "head")

        await init_db()

        if settings.SEED_RESERVED_STATUSES:
            async with async_session_factory() as session:
                await StatusService.seed_reserved(session)

        api_logger.info("Database migrations applied and initialized successfully")
    except Exception as e:
        api_logger.error(f"Error applying migrations: {e}")
        raise

    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for changelog status workflow and theme category mapping",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
    max_age=3600,
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    """Translate workflow errors into JSON error responses"""
    api_logger.warning(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/")
async def root(request: Request):
    """Health check endpoint"""
    api_logger.info(f"Received health check request: {request.method} {request.url}")
    return {"message": f"{settings.PROJECT_NAME} is running"}


if __name__ == "__main__":
    import uvicorn

    api_logger.info("Server starting on http://0.0.0.0:8000")

    uvicorn.run(
        "changelog_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
