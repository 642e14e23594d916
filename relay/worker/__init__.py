"""Celery wiring: app factory, the request task and the consumer command.

The API imports this package only to *emit* jobs; the worker container runs
``relay-consume-sqs`` (or ``celery -A relay.worker.celery_app worker``).
"""
