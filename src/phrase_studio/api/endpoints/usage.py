"""Usage reporting endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from phrase_studio.api.dependencies import ClientIpDep, HeaderTokenDep, ServicesDep
from phrase_studio.schemas.usage import UsageOut

router = APIRouter(tags=["usage"])


@router.get("/usage", response_model=UsageOut)
async def get_usage(
    services: ServicesDep,
    client_ip: ClientIpDep,
    header_token: HeaderTokenDep,
    token: str | None = None,
) -> UsageOut:
    """Return the caller's usage for whichever quota class applies.

    Always succeeds: callers without a valid token see their free usage.
    """
    record = services.gate.usage(client_ip, header_token or token)
    return UsageOut.from_record(record)
