from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Request, status

from relay.schemas.request_message import RequestAccepted, build_request_message
from relay.worker import dispatch

logger = logging.getLogger("relay.api")

router = APIRouter(tags=["requests"])


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


@router.post("/request", response_model=RequestAccepted)
def receive_request(
    request: Request,
    payload: dict[str, Any] | None = Body(None),
) -> RequestAccepted:
    # A request without a body relays an empty payload.
    message = build_request_message(payload or {}, received_at=_now())

    try:
        dispatch.enqueue_request_message(message, queue=request.app.state.settings.sqs_queue)
    except dispatch.EnqueueError:
        logger.exception(
            "Failed to enqueue request message request_id=%s",
            getattr(request.state, "request_id", None),
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Request could not be queued",
        )

    return RequestAccepted()
