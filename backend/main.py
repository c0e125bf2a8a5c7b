"""
Persona Voice Chat — FastAPI entry point.
"""

import sys
import os

# Ensure backend dir is on path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from models.schemas import HealthResponse
from services.errors import ServiceError
from services.knowledge_service import load_knowledge_base
from middleware.error_handler import (
    global_exception_handler,
    http_error_handler,
    service_error_handler,
    validation_error_handler,
)
from middleware.logging_middleware import logging_middleware

# ── Routes ───────────────────────────────────────────────
from routes.chat import router as chat_router
from routes.tts import router as tts_router
from routes.knowledge import router as knowledge_router

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")

# ── Logging ──────────────────────────────────────────────
logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)


# ── Lifespan ─────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    snippets = load_knowledge_base()
    logger.info(f"Knowledge base ready ({len(snippets)} snippets), model provider: {settings.MODEL_PROVIDER}")
    yield
    logger.info("Shutting down")


# ── App ──────────────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Voice-enabled persona chat API",
    lifespan=lifespan,
)

# ── Error handlers ───────────────────────────────────────
app.add_exception_handler(ServiceError, service_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)

# ── CORS ─────────────────────────────────────────────────
origins = settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Custom Middleware ────────────────────────────────────
app.middleware("http")(global_exception_handler)
app.middleware("http")(logging_middleware)

# ── Register Routers ────────────────────────────────────
app.include_router(chat_router)
app.include_router(tts_router)
app.include_router(knowledge_router)


# ── Health Check ─────────────────────────────────────────
@app.get("/api/health", tags=["health"], response_model=HealthResponse)
async def health():
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


# ── Widget ───────────────────────────────────────────────
@app.get("/", include_in_schema=False)
async def index():
    return FileResponse(os.path.join(STATIC_DIR, "index.html"))


# ── Run ──────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info",
    )
