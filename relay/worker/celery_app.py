from __future__ import annotations

from urllib.parse import quote

from celery import Celery

from relay.config import Settings, settings

# Grace between the soft time limit (raised inside the task) and the hard
# limit (child process killed).
HARD_TIME_LIMIT_GRACE_SECONDS = 10


def broker_url_for(settings: Settings) -> str:
    if settings.broker_url:
        return settings.broker_url

    if settings.aws_access_key_id and settings.aws_secret_access_key:
        return "sqs://{}:{}@".format(
            quote(settings.aws_access_key_id, safe=""),
            quote(settings.aws_secret_access_key, safe=""),
        )

    # Credentials resolved by boto3's default chain (env, profile, instance role).
    return "sqs://"


def sqs_transport_options(settings: Settings, *, polling_interval: int | None = None) -> dict:
    """kombu SQS transport options for the configured queue.

    When ``sqs_prefix`` is set the queue is addressed by URL
    (``<prefix>/<queue>``) and kombu will not try to list or create queues.
    """

    options: dict = {
        "region": settings.aws_default_region,
        "polling_interval": settings.worker_sleep if polling_interval is None else polling_interval,
        "visibility_timeout": settings.worker_timeout + HARD_TIME_LIMIT_GRACE_SECONDS,
    }
    if settings.sqs_prefix:
        options["predefined_queues"] = {
            settings.sqs_queue: {"url": f"{settings.sqs_prefix.rstrip('/')}/{settings.sqs_queue}"},
        }
    return options


def make_celery(settings: Settings) -> Celery:
    """Create the Celery app for the given settings.

    Note: we keep this in a function so tests can build an app against the
    in-memory broker without touching the module-level instance.
    """

    celery = Celery(
        "relay",
        broker=broker_url_for(settings),
        include=["relay.worker.tasks"],
    )

    celery.conf.update(
        task_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        task_default_queue=settings.sqs_queue,
        task_ignore_result=True,
        # Ack after the handler returns so failures and lost workers redeliver.
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        worker_prefetch_multiplier=1,
        # SQS has no fanout exchange for remote control/events.
        worker_enable_remote_control=False,
        broker_connection_retry_on_startup=True,
    )
    if not settings.broker_url:
        celery.conf.broker_transport_options = sqs_transport_options(settings)

    return celery


celery_app = make_celery(settings)
