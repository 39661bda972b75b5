from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from utiltrack.db import get_engine
from utiltrack.models.property import Property
from utiltrack.models.session import UserSession
from utiltrack.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyPropertyRepository,
    SQLAlchemyTariffRepository,
    SQLAlchemyUserRepository,
)
from utiltrack.services.bill_service import BillService
from utiltrack.services.property_service import PropertyService
from utiltrack.services.tariff_service import TariffService
from utiltrack.services.user_service import UserService

logger = logging.getLogger(__name__)

PUBLIC_PREFIX_PATHS = {"/api/auth/"}
PUBLIC_EXACT_PATHS = {"/api/health"}


class AuthMiddleware:
    """Pure ASGI middleware for authentication checks."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        path = request.url.path
        if path in PUBLIC_EXACT_PATHS or any(path.startswith(p) for p in PUBLIC_PREFIX_PATHS):
            await self.app(scope, receive, send)
            return
        if not request.session.get("user_id"):
            logger.info("Auth rejected: %s %s, no session", request.method, path)
            response = JSONResponse({"error": "Unauthorized"}, status_code=401)
            await response(scope, receive, send)
            return
        await self.app(scope, receive, send)


class DBConnectionMiddleware:
    """Pure ASGI middleware, creates a single DB connection per request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


def _get_conn(request: Request):
    """Lazy per-request connection, created on first use and closed by middleware."""
    if request.state.db_conn is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


def get_user_service(request: Request) -> UserService:
    return UserService(SQLAlchemyUserRepository(_get_conn(request)))


def get_property_service(request: Request) -> PropertyService:
    conn = _get_conn(request)
    return PropertyService(SQLAlchemyPropertyRepository(conn), SQLAlchemyTariffRepository(conn))


def get_tariff_service(request: Request) -> TariffService:
    return TariffService(SQLAlchemyTariffRepository(_get_conn(request)))


def get_bill_service(request: Request) -> BillService:
    conn = _get_conn(request)
    return BillService(SQLAlchemyBillRepository(conn), SQLAlchemyTariffRepository(conn))


def get_session(request: Request) -> UserSession:
    """Rebuild the caller's session from the signed cookie."""
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return UserSession(
        user_id=user_id,
        email=request.session.get("email", ""),
        property_id=request.session.get("property_id"),
    )


def get_owned_property(request: Request, property_uuid: str) -> tuple[UserSession, Property]:
    """Resolve a property the signed-in user owns, and make it the current one."""
    session = get_session(request)
    prop = get_property_service(request).get_property_by_uuid(property_uuid)
    if prop is None:
        logger.warning("Property not found: uuid=%s", property_uuid)
        raise HTTPException(status_code=404, detail="Property not found")
    try:
        session.select_property(prop)
    except ValueError:
        logger.warning("Access denied: user=%s property=%s", session.user_id, property_uuid)
        raise HTTPException(status_code=403, detail="Forbidden")
    request.session["property_id"] = prop.id
    return session, prop
