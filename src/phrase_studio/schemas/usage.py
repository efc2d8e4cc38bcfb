"""Schemas describing quota usage."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from phrase_studio.services.quota import QuotaRecord


class UsageOut(BaseModel):
    """Usage snapshot for the caller's applicable quota class."""

    current: int = Field(..., ge=0, description="Generations consumed in the current epoch")
    limit: int = Field(..., gt=0, description="Generations allowed per epoch")
    remaining: int = Field(..., ge=0, description="Generations left, never negative")
    exceeded: bool = Field(..., description="True once current reaches limit")
    type: Literal["free", "premium"] = Field(..., description="Quota class applied")

    @classmethod
    def from_record(cls, record: QuotaRecord) -> UsageOut:
        return cls.model_validate(record.as_dict())
