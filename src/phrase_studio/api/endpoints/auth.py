"""Password login and session teardown endpoints."""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter

from phrase_studio.api.dependencies import ClientIpDep, HeaderTokenDep, ServicesDep
from phrase_studio.core.errors import InvalidPasswordError, InvalidSessionError
from phrase_studio.schemas.auth import LoginRequest, LoginResponse, LogoutRequest, LogoutResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


def _password_matches(candidate: str, expected: str) -> bool:
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


@router.post("/login", response_model=LoginResponse)
async def login(
    services: ServicesDep,
    client_ip: ClientIpDep,
    payload: LoginRequest | None = None,
) -> LoginResponse:
    """Exchange the shared access password for a premium session token.

    Raises:
        InvalidPasswordError: If the password does not match.
    """
    password = payload.password if payload else None
    if not password or not _password_matches(password, services.settings.access_password):
        logger.warning("Rejected login attempt from %s", client_ip)
        raise InvalidPasswordError()

    token = services.sessions.issue()
    logger.info("Issued session token for %s (%d active)", client_ip, len(services.sessions))
    return LoginResponse(token=token)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    services: ServicesDep,
    header_token: HeaderTokenDep,
    payload: LogoutRequest | None = None,
) -> LogoutResponse:
    """Invalidate the caller's session token.

    Raises:
        InvalidSessionError: If no active token was supplied.
    """
    token = header_token or (payload.token if payload else None)
    if not services.sessions.invalidate(token):
        raise InvalidSessionError()
    return LogoutResponse()
