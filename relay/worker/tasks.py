from __future__ import annotations

import json
import logging
from typing import Any

from celery import Task

from relay.config import settings
from relay.worker.celery_app import celery_app


logger = logging.getLogger("relay.tasks")


def _queue_name(task: Task) -> str:
    delivery_info = task.request.delivery_info or {}
    return delivery_info.get("routing_key") or task.app.conf.task_default_queue


class RequestTask(Task):
    """Base task that logs a request once its retries are exhausted.

    Retries themselves are driven by ``autoretry_for``; ``on_failure`` only
    fires for the final attempt. Dead-lettering is left to the queue's
    redrive policy.
    """

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        queue = _queue_name(self)
        logger.error(
            "Request processing failed job_id=%s queue=%s",
            task_id,
            queue,
            exc_info=(type(exc), exc, exc.__traceback__),
            extra={"job_id": task_id, "queue": queue},
        )


@celery_app.task(
    name="relay.process_request",
    bind=True,
    base=RequestTask,
    autoretry_for=(Exception,),
    max_retries=settings.worker_tries - 1,
    default_retry_delay=0,
)
def process_request(self, request_data: dict[str, Any]) -> None:
    """Handle one relayed request message.

    Currently this only records what was received; processing that acts on
    the payload belongs here.
    """

    source = request_data.get("source", "unknown")
    received_at = request_data.get("received_at")
    logger.info(
        "Processing request from queue data=%s source=%s received_at=%s",
        json.dumps(request_data),
        source,
        received_at,
        extra={"data": request_data, "source": source, "received_at": received_at},
    )

    job_id, queue = self.request.id, _queue_name(self)
    logger.info(
        "Request processed successfully job_id=%s queue=%s",
        job_id,
        queue,
        extra={"job_id": job_id, "queue": queue},
    )
