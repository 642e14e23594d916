from datetime import datetime, timedelta, timezone

from relay.schemas.request_message import RequestAccepted, build_request_message


def test_build_request_message_does_not_mutate_body():
    body = {"foo": 1}
    message = build_request_message(body, received_at=datetime(2024, 1, 1, tzinfo=timezone.utc))

    assert body == {"foo": 1}
    assert message == {"foo": 1, "source": "direct_http", "received_at": "2024-01-01T00:00:00+00:00"}


def test_received_at_is_normalised_to_utc_seconds():
    cest = timezone(timedelta(hours=2))
    received_at = datetime(2024, 6, 1, 14, 30, 15, 999_999, tzinfo=cest)

    message = build_request_message({}, received_at=received_at)
    assert message["received_at"] == "2024-06-01T12:30:15+00:00"


def test_naive_received_at_is_treated_as_utc():
    message = build_request_message({}, received_at=datetime(2024, 1, 1, 8, 0, 0))
    assert message["received_at"] == "2024-01-01T08:00:00+00:00"


def test_custom_source():
    message = build_request_message({"a": 1}, received_at=datetime(2024, 1, 1, tzinfo=timezone.utc), source="cron")
    assert message["source"] == "cron"


def test_acknowledgement_body():
    assert RequestAccepted().model_dump() == {
        "message": "Request received and queued",
        "source": "direct_http",
    }
