from __future__ import annotations

import logging
import time

from fastapi import APIRouter, HTTPException, Request

from web.deps import get_session, get_user_service
from web.schemas import Credentials

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth")

# Simple in-memory rate limiter for login attempts
_login_attempts: dict[str, list[float]] = {}
_MAX_ATTEMPTS = 5
_LOCKOUT_SECONDS = 60


def _recent_attempts(ip: str) -> list[float]:
    now = time.monotonic()
    attempts = [t for t in _login_attempts.get(ip, []) if now - t < _LOCKOUT_SECONDS]
    _login_attempts[ip] = attempts
    return attempts


def _is_rate_limited(ip: str) -> bool:
    return len(_recent_attempts(ip)) >= _MAX_ATTEMPTS


def _record_failed_attempt(ip: str) -> None:
    _recent_attempts(ip).append(time.monotonic())


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _start_session(request: Request, user_id: int, email: str) -> None:
    request.session.clear()
    request.session["user_id"] = user_id
    request.session["email"] = email


@router.post("/register", status_code=201)
async def register(request: Request, body: Credentials):
    if not body.email.strip() or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")
    service = get_user_service(request)
    try:
        user = service.register_user(body.email, body.password)
    except ValueError as exc:
        logger.info("Registration refused for %s: %s", body.email, exc)
        raise HTTPException(status_code=409, detail=str(exc))
    _start_session(request, user.id, user.email)
    return {"id": user.id, "email": user.email}


@router.post("/login")
async def login(request: Request, body: Credentials):
    ip = _client_ip(request)
    if _is_rate_limited(ip):
        logger.warning("Login rate-limited for ip=%s", ip)
        raise HTTPException(status_code=429, detail="Too many attempts, try again later")

    user = get_user_service(request).authenticate(body.email, body.password)
    if user is None:
        _record_failed_attempt(ip)
        logger.info("Login failed for %s", body.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    _login_attempts.pop(ip, None)
    _start_session(request, user.id, user.email)
    logger.info("User %s logged in", user.email)
    return {"id": user.id, "email": user.email}


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"ok": True}


@router.get("/me")
async def me(request: Request):
    session = get_session(request)
    return session.model_dump()
