import os

# Must be set before relay.config is imported: the module-level settings and
# Celery app are built at import time.
os.environ["BROKER_URL"] = "memory://"
os.environ["SQS_QUEUE"] = "relay-test"
os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from relay.main import create_app  # noqa: E402


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture()
def enqueued(monkeypatch) -> list[dict]:
    """Capture request messages instead of sending them to the broker."""

    from relay.worker import dispatch

    calls: list[dict] = []

    def _fake_enqueue_request_message(message, *, queue=None):
        calls.append({"message": message, "queue": queue})
        return "job-1"

    monkeypatch.setattr(dispatch, "enqueue_request_message", _fake_enqueue_request_message)
    return calls
