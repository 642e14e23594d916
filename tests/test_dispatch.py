import pytest

from relay.worker import dispatch
from relay.worker.tasks import process_request


def test_enqueue_request_message_returns_job_id(monkeypatch):
    sent: dict = {}

    class _Result:
        id = "job-42"

    def _fake_apply_async(*, args, queue):
        sent["args"] = args
        sent["queue"] = queue
        return _Result()

    monkeypatch.setattr(process_request, "apply_async", _fake_apply_async)

    message = {"foo": 1, "source": "direct_http", "received_at": "2024-01-01T00:00:00+00:00"}
    job_id = dispatch.enqueue_request_message(message, queue="orders")

    assert job_id == "job-42"
    assert sent == {"args": [message], "queue": "orders"}


def test_enqueue_request_message_defaults_to_configured_queue(monkeypatch):
    sent: dict = {}

    class _Result:
        id = "job-43"

    def _fake_apply_async(*, args, queue):
        sent["queue"] = queue
        return _Result()

    monkeypatch.setattr(process_request, "apply_async", _fake_apply_async)

    dispatch.enqueue_request_message({})
    assert sent["queue"] == "relay-test"


def test_enqueue_request_message_against_memory_broker():
    job_id = dispatch.enqueue_request_message({"foo": 1})
    assert job_id


def test_broker_failure_is_raised_as_enqueue_error(monkeypatch):
    def _failing_apply_async(*, args, queue):
        raise ConnectionError("broker unavailable")

    monkeypatch.setattr(process_request, "apply_async", _failing_apply_async)

    with pytest.raises(dispatch.EnqueueError) as excinfo:
        dispatch.enqueue_request_message({"foo": 1})

    assert isinstance(excinfo.value.__cause__, ConnectionError)
