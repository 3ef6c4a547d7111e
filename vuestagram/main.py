import os
import sys
import logging
import logging.config
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse
from sqlalchemy import text
from contextlib import asynccontextmanager

from vuestagram.core import config
from vuestagram.db.base import Base
from vuestagram.db import models  # noqa: F401  registers tables on Base.metadata
from vuestagram.db.session import engine, async_session
from vuestagram.api.error_handlers import register_error_handlers
from vuestagram.api.routes import auth, boards, users

# Load logging config if present
if os.path.exists("logging.conf"):
    logging.config.fileConfig("logging.conf", disable_existing_loggers=False)
else:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
logger = logging.getLogger("root")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup logic
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized")

    yield  # App runs here

    await engine.dispose()
    logger.info("Shutting down...")


app = FastAPI(
    title="Vuestagram API",
    version="1.0",
    lifespan=lifespan,
)

if config.ENV == "development":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.DEV_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("CORS allowed for development environment")
elif config.CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info(f"CORS restricted to {config.CORS_ORIGINS}")
else:
    logger.info("Running in production environment - CORS restricted")

os.makedirs(config.UPLOAD_DIR, exist_ok=True)
# Uploaded images, addressed by the relative path stored in boards.img
app.mount("/storage", StaticFiles(directory=config.UPLOAD_DIR), name="storage")

register_error_handlers(app)

# API routes
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(boards.router)


@app.api_route("/api/health", methods=["GET", "HEAD"])
async def health():
    status = {"api": "ok", "database": None}
    http_status = 200

    try:
        async with async_session() as db:
            await db.execute(text("SELECT 1"))
        status["database"] = "connected"
    except Exception as e:
        logger.error(f"Health check database failure: {e}")
        status["database"] = "error"
        http_status = 503

    return JSONResponse(content=status, status_code=http_status)
