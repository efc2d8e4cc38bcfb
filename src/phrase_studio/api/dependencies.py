"""Shared API dependencies for caller identification and service access."""

from typing import Annotated, Final

from fastapi import Depends, Header, Request

from phrase_studio.services.container import ServiceContainer

SESSION_HEADER: Final[str] = "x-session-token"
UNKNOWN_CLIENT: Final[str] = "unknown"


def get_services(request: Request) -> ServiceContainer:
    """Return the service container owned by the running application."""
    return request.app.state.services


ServicesDep = Annotated[ServiceContainer, Depends(get_services)]


def get_client_ip(request: Request, services: ServicesDep) -> str:
    """Resolve the caller's IP address.

    The first ``X-Forwarded-For`` hop is honoured only when the deployment
    opts in, since the header is client-controlled otherwise.
    """
    if services.settings.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client is not None and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def get_header_token(
    x_session_token: Annotated[str | None, Header(alias=SESSION_HEADER)] = None,
) -> str | None:
    """Return the session token sent in the ``x-session-token`` header, if any."""
    return x_session_token or None


ClientIpDep = Annotated[str, Depends(get_client_ip)]
HeaderTokenDep = Annotated[str | None, Depends(get_header_token)]
