from __future__ import annotations

from dataclasses import dataclass

import click
from celery import Celery

from relay.config import Settings, settings
from relay.worker.celery_app import HARD_TIME_LIMIT_GRACE_SECONDS, celery_app, sqs_transport_options


@dataclass(frozen=True)
class WorkerOptions:
    """Options for one consumer run.

    ``max_jobs=0`` means the worker processes jobs until it is terminated.
    """

    tries: int = 3
    timeout: int = 300
    sleep: int = 3
    max_jobs: int = 0
    verbose: bool = True

    @property
    def max_retries(self) -> int:
        # Celery counts retries, not attempts.
        return self.tries - 1

    def to_argv(self, *, queue: str) -> list[str]:
        argv = [
            "worker",
            f"--loglevel={'INFO' if self.verbose else 'WARNING'}",
            f"--queues={queue}",
            # One child process consuming one message at a time; prefork so
            # the time limits below can be enforced.
            "--pool=prefork",
            "--concurrency=1",
            f"--soft-time-limit={self.timeout}",
            f"--time-limit={self.timeout + HARD_TIME_LIMIT_GRACE_SECONDS}",
            "--without-gossip",
            "--without-mingle",
            "--without-heartbeat",
        ]
        if self.max_jobs > 0:
            argv.append(f"--max-tasks-per-child={self.max_jobs}")
        return argv


def run_worker(app: Celery, options: WorkerOptions, *, settings: Settings) -> None:
    """Configure ``app`` for ``options`` and block in the Celery worker loop."""

    from relay.worker.tasks import process_request

    process_request.max_retries = options.max_retries
    if not settings.broker_url:
        app.conf.broker_transport_options = {
            **sqs_transport_options(settings, polling_interval=options.sleep),
            "visibility_timeout": options.timeout + HARD_TIME_LIMIT_GRACE_SECONDS,
        }
    else:
        app.conf.broker_transport_options = {
            **(app.conf.broker_transport_options or {}),
            "polling_interval": options.sleep,
        }

    app.worker_main(options.to_argv(queue=settings.sqs_queue))


@click.command(name="consume-sqs", help="Consume messages from the AWS SQS queue.")
@click.option(
    "--tries",
    type=click.IntRange(min=1),
    default=settings.worker_tries,
    show_default=True,
    help="Number of times to attempt a job before logging it failed.",
)
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=settings.worker_timeout,
    show_default=True,
    help="The number of seconds a child process can run.",
)
@click.option(
    "--sleep",
    type=click.IntRange(min=0),
    default=settings.worker_sleep,
    show_default=True,
    help="Number of seconds to sleep when no job is available.",
)
def consume_sqs(tries: int, timeout: int, sleep: int) -> None:
    click.echo("Starting SQS consumer...")
    click.echo(f"Queue: {settings.sqs_queue}")
    click.echo(f"Region: {settings.aws_default_region}")

    run_worker(
        celery_app,
        WorkerOptions(tries=tries, timeout=timeout, sleep=sleep),
        settings=settings,
    )


def main() -> None:
    consume_sqs()


if __name__ == "__main__":
    main()
