from __future__ import annotations

import logging
from typing import Any

from relay.config import settings

logger = logging.getLogger("relay.dispatch")


class EnqueueError(RuntimeError):
    """The request message could not be handed to the broker."""


def enqueue_request_message(message: dict[str, Any], *, queue: str | None = None) -> str:
    """Enqueue a request message for ``process_request`` and return the job id.

    Only the hand-off to the broker is awaited; the job itself runs later in
    the worker. Any broker/serialization failure is raised as ``EnqueueError``.
    """

    from relay.worker.tasks import process_request

    queue = queue or settings.sqs_queue
    try:
        result = process_request.apply_async(args=[message], queue=queue)
    except Exception as exc:
        raise EnqueueError(f"Failed to enqueue request message on queue {queue!r}") from exc

    logger.info("request message enqueued", extra={"job_id": result.id, "queue": queue})
    return result.id
