"""
FastAPI main application entry point
Jogo do Impostor - ponto de entrada da aplicação
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from impostor import __version__
from impostor.api.v1.api import api_router
from impostor.core.config import settings
from impostor.core.database import close_db, init_db
from impostor.core.exceptions import GameError, InvariantViolation, WordNotReady
from impostor.schemas.common import ErrorResponse
from impostor.core.redis_client import close_redis, init_redis
from impostor.middleware.request_logging import LoggingMiddleware

log_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "logs")
os.makedirs(log_dir, exist_ok=True)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format=settings.LOG_FORMAT,
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler(os.path.join(log_dir, "app.log"), encoding="utf-8"),
    ]
)
logger = logging.getLogger(__name__)

# Quiet noisy libraries
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Impostor game service...")
    await init_db()
    await init_redis()
    logger.info("Application startup completed")

    yield

    logger.info("Shutting down application...")
    try:
        await close_redis()
        await close_db()
        logger.info("Application shutdown completed")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


app = FastAPI(
    title="Impostor",
    description="Jogo do Impostor - descubra quem recebeu a palavra diferente",
    version=__version__,
    lifespan=lifespan,
    redirect_slashes=False
)


@app.exception_handler(GameError)
async def game_error_handler(request: Request, exc: GameError):
    """Map every game error to a short message; internal context stays in the logs"""
    if isinstance(exc, InvariantViolation):
        logger.error(f"Invariant violation on {request.method} {request.url.path}: {exc!r}")
    else:
        logger.info(f"{exc.kind} on {request.method} {request.url.path}: {exc.context}")

    headers = None
    if isinstance(exc, WordNotReady):
        headers = {"Retry-After": str(settings.WORD_RETRY_AFTER_SECONDS)}
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(kind=exc.kind, detail=exc.message).model_dump(),
        headers=headers,
    )


app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {
        "message": "Impostor API",
        "status": "running",
        "version": __version__
    }
