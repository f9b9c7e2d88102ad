from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from core.events.models import EventGridEvent, EventKind
from core.events.normalizer import classify, is_subscription_validation, parse_envelope
from core.exceptions import MalformedPayloadError
from core.mirror import runtime
from core.mirror.dispatcher import MirrorDispatcher, OutcomeStatus, settle
from core.settings import get_settings
from core.storage import SourceReader
from services.api.schemas import EventDeliveryResponse, EventResult, SubscriptionValidationResponse


router = APIRouter(prefix="/v1")


def get_dispatcher() -> MirrorDispatcher:
    return runtime.get_dispatcher()


def get_source() -> SourceReader:
    return runtime.get_source()


def get_dispatch_mode() -> str:
    return get_settings().dispatch.mode


def _enqueue(kind: EventKind, data: dict[str, Any]) -> None:
    from services.worker.app import app as celery_app

    celery_app.send_task(kind.task_name, args=[data])


def _validation_code(event: EventGridEvent) -> str:
    code = event.data.get("validationCode")
    if not isinstance(code, str) or not code:
        raise MalformedPayloadError("Subscription validation event without validationCode", {"id": event.id})
    return code


@router.post("/events", response_model=None)
async def receive_events(
    payload: Any = Body(...),
    dispatcher: MirrorDispatcher = Depends(get_dispatcher),
    source: SourceReader = Depends(get_source),
    mode: str = Depends(get_dispatch_mode),
) -> dict[str, Any]:
    """Receive an Event Grid delivery (an array of events, or a single event)."""
    raw_events = payload if isinstance(payload, list) else [payload]
    events = [parse_envelope(raw) for raw in raw_events]

    for event in events:
        if is_subscription_validation(event):
            logger.info("Answering Event Grid subscription validation", topic=event.topic)
            return SubscriptionValidationResponse(validation_response=_validation_code(event)).model_dump(by_alias=True)

    response = EventDeliveryResponse()
    for event in events:
        kind = classify(event.event_type)
        if kind is None:
            logger.debug("Ignoring event type {event_type}", event_type=event.event_type)
            response.skipped += 1
            response.results.append(EventResult(id=event.id, event_type=event.event_type, status="ignored"))
            continue

        if mode == "queue":
            _enqueue(kind, event.data)
            response.accepted += 1
            response.results.append(
                EventResult(id=event.id, event_type=event.event_type, kind=kind.value, status="queued")
            )
            continue

        outcome = await run_in_threadpool(runtime.run_event, kind, event.data, dispatcher, source)
        with logger.contextualize(event_id=event.id):
            settle(outcome)
        if outcome.status is OutcomeStatus.SKIPPED:
            response.skipped += 1
        else:
            response.accepted += 1
        response.results.append(
            EventResult(
                id=event.id,
                event_type=event.event_type,
                kind=kind.value,
                status=outcome.status.value,
                path=outcome.path,
            )
        )

    return response.model_dump(by_alias=True)
