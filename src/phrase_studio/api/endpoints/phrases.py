"""Phrase generation endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from phrase_studio.api.dependencies import ClientIpDep, HeaderTokenDep, ServicesDep
from phrase_studio.core.errors import PromptRequiredError
from phrase_studio.schemas.phrases import GeneratePhrasesRequest, GeneratePhrasesResponse
from phrase_studio.schemas.usage import UsageOut

router = APIRouter(tags=["phrases"])


@router.post("/generate-phrases", response_model=GeneratePhrasesResponse)
async def generate_phrases(
    services: ServicesDep,
    client_ip: ClientIpDep,
    header_token: HeaderTokenDep,
    payload: GeneratePhrasesRequest | None = None,
) -> GeneratePhrasesResponse:
    """Generate candidate thumbnail phrases for the submitted prompt.

    A token that is not active is metered as anonymous rather than rejected.

    Raises:
        PromptRequiredError: If the prompt is missing or blank.
        QuotaExceededError: If the applicable quota is used up.
        UpstreamError: If the generation provider fails; usage is not charged.
    """
    payload = payload or GeneratePhrasesRequest()
    prompt = payload.prompt
    if not prompt or not prompt.strip():
        raise PromptRequiredError()

    outcome = await services.gate.generate(
        client_ip,
        payload.token or header_token,
        prompt,
        services.generation.generate_phrases,
    )
    return GeneratePhrasesResponse(
        phrases=outcome.phrases,
        count=len(outcome.phrases),
        usage=UsageOut.from_record(outcome.usage),
    )
