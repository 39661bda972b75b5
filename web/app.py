from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.sessions import SessionMiddleware

from utiltrack.db import initialize_db
from utiltrack.logging import configure_logging, reconfigure
from utiltrack.repositories.base import PersistenceError
from utiltrack.settings import settings
from web.auth import router as auth_router
from web.deps import AuthMiddleware, DBConnectionMiddleware
from web.routes.bill import router as bill_router
from web.routes.property import router as property_router
from web.routes.tariff import router as tariff_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    # Alembic's fileConfig may have overridden the logging setup
    reconfigure()
    logger.info("Application started")
    yield


app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)
app.add_middleware(AuthMiddleware)
app.add_middleware(SessionMiddleware, secret_key=settings.get_secret_key())

app.include_router(auth_router)
app.include_router(property_router)
app.include_router(tariff_router)
app.include_router(bill_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Invalid payload on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"error": "Invalid request"}, status_code=400)


@app.exception_handler(PersistenceError)
async def persistence_exception_handler(request: Request, exc: PersistenceError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": "Storage unavailable"}, status_code=503)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return JSONResponse({"error": "Internal Server Error"}, status_code=500)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
