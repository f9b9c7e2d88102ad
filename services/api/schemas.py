from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionValidationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    validation_response: str = Field(alias="validationResponse")


class EventResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    event_type: str = Field(alias="eventType")
    kind: str | None = None
    status: Literal["applied", "skipped", "queued", "ignored"]
    path: str | None = None


class EventDeliveryResponse(BaseModel):
    accepted: int = 0
    skipped: int = 0
    results: list[EventResult] = Field(default_factory=list)
