# spmanager/main.py
import logging
import math
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from spmanager.config import check_startup_settings, settings
from spmanager.core.db import close_db, init_db
from spmanager.core.errors import AppError, RateLimitedError

from spmanager.api.v1.routers import auth, cms, progress

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Refuse to start without a real signing secret
    check_startup_settings(settings)
    await init_db(generate_schemas=settings.generate_schemas)
    logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)
    yield
    await close_db()
    logger.info("[shutdown] database connections closed")


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = None
    if isinstance(exc, RateLimitedError):
        headers = {"Retry-After": str(max(1, math.ceil(exc.retry_after)))}
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are a client error (400), not FastAPI's default 422
    logger.info("[request] validation failed on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": {"code": "BAD_REQUEST", "message": "Malformed request body"}},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # Log the cause, never echo it to the client
    logger.error("[request] unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}},
    )


# REST
app.include_router(auth.router, prefix="/api")
app.include_router(progress.router, prefix="/api")
app.include_router(cms.router, prefix="/api")


@app.get("/healthz")
def healthz():
    return {"ok": True}


def run():
    """Console entry point: serve the API with uvicorn."""
    import uvicorn
    uvicorn.run("spmanager.main:app", host=settings.host, port=settings.port)
