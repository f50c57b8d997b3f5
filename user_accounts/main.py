# user_accounts/main.py
import os
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
import structlog

from .routers.auth_router import router as auth_router
from .routers.user_router import router as user_router
from .infrastructure.database import init_db
from .middleware.logging import RequestIdMiddleware

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").lower()

def configure_structlog():
    renderer = structlog.dev.ConsoleRenderer() if LOG_FORMAT == "console" else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(LOG_LEVEL)),
        context_class=dict,
    )

configure_structlog()
logger = structlog.get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("app_startup")
    yield
    logger.info("app_shutdown")

def create_app(init_tables: bool = True) -> FastAPI:
    app = FastAPI(title="User Accounts", lifespan=lifespan if init_tables else None)
    app.add_middleware(RequestIdMiddleware)
    app.include_router(auth_router)
    app.include_router(user_router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app

app = create_app()

if __name__ == "__main__":
    uvicorn.run("user_accounts.main:app", host="0.0.0.0", port=int(os.getenv("PORT", 8000)), reload=True)
