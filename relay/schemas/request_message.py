from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel

DIRECT_HTTP_SOURCE = "direct_http"


class RequestAccepted(BaseModel):
    message: str = "Request received and queued"
    source: str = DIRECT_HTTP_SOURCE


def build_request_message(
    body: dict[str, Any],
    *,
    received_at: datetime,
    source: str = DIRECT_HTTP_SOURCE,
) -> dict[str, Any]:
    """Copy ``body`` and tag it with its provenance.

    ``source`` and ``received_at`` always overwrite keys of the same name in
    the body. ``received_at`` is rendered as ISO-8601 in UTC at second
    precision.
    """

    if received_at.tzinfo is None:
        received_at = received_at.replace(tzinfo=timezone.utc)

    message = dict(body)
    message["source"] = source
    message["received_at"] = received_at.astimezone(timezone.utc).replace(microsecond=0).isoformat()
    return message
