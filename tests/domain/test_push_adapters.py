"""Tests for push adapters and the sink's retrying push."""

from storefront.channel import build_push_adapter
from storefront.channel.disabled_push import DisabledPushAdapter
from storefront.channel.fake_push import FakePushAdapter
from storefront.config import Settings
from storefront.notification.sink import NotificationSink, current_sink, install_sink, reset_sink


class TestFakePushAdapter:
    def test_send_records_push(self):
        adapter = FakePushAdapter()
        result = adapter.send(device_token="tok-1", title="Hi", body="Hello", data={"order_id": "o-1"})

        assert result["status"] == "sent"
        assert adapter.sent_pushes[0]["device_token"] == "tok-1"

    def test_configured_failures_then_success(self):
        adapter = FakePushAdapter()
        adapter.configure(fail_times=1)

        assert adapter.send("tok", "t", "b")["status"] == "failed"
        assert adapter.send("tok", "t", "b")["status"] == "sent"
        assert adapter.attempts == 2


class TestDisabledPushAdapter:
    def test_send_is_skipped(self):
        assert DisabledPushAdapter().send("tok", "t", "b")["status"] == "skipped"


class TestBuildPushAdapter:
    def test_disabled_without_credentials(self):
        assert isinstance(build_push_adapter(Settings()), DisabledPushAdapter)

    def test_disabled_with_partial_credentials(self):
        settings = Settings(firebase_project_id="proj", firebase_client_email="svc@proj.iam")
        assert isinstance(build_push_adapter(settings), DisabledPushAdapter)


class TestSinkPush:
    def test_push_succeeds_first_time(self):
        adapter = FakePushAdapter()
        result = NotificationSink(adapter, max_attempts=3, backoff=0).push("tok", "t", "b")

        assert result["status"] == "sent"
        assert result["attempts"] == 1

    def test_push_retries_until_success(self):
        adapter = FakePushAdapter()
        adapter.configure(fail_times=2)
        result = NotificationSink(adapter, max_attempts=3, backoff=0).push("tok", "t", "b")

        assert result["status"] == "sent"
        assert result["attempts"] == 3

    def test_push_gives_up_after_max_attempts(self):
        adapter = FakePushAdapter()
        adapter.configure(fail_times=5, failure_reason="unavailable")
        result = NotificationSink(adapter, max_attempts=3, backoff=0).push("tok", "t", "b")

        assert result["status"] == "failed"
        assert result["error"] == "unavailable"
        assert adapter.attempts == 3

    def test_push_never_raises(self):
        adapter = FakePushAdapter()
        adapter.configure(fail_times=5, raise_errors=True, failure_reason="connection reset")
        result = NotificationSink(adapter, max_attempts=2, backoff=0).push("tok", "t", "b")

        assert result["status"] == "failed"
        assert result["error"] == "connection reset"

    def test_backoff_grows_linearly(self):
        waits = []
        adapter = FakePushAdapter()
        adapter.configure(fail_times=3)
        NotificationSink(adapter, max_attempts=3, backoff=0.5, sleep=waits.append).push("tok", "t", "b")

        assert waits == [0.5, 1.0]

    def test_skipped_push_is_not_retried(self):
        result = NotificationSink(DisabledPushAdapter(), max_attempts=3, backoff=0).push("tok", "t", "b")
        assert result["status"] == "skipped"
        assert result["attempts"] == 1


class TestSinkRegistry:
    def test_current_sink_falls_back_to_disabled(self):
        reset_sink()
        assert isinstance(current_sink().push_adapter, DisabledPushAdapter)

    def test_install_sink(self):
        sink = NotificationSink(FakePushAdapter(), backoff=0)
        install_sink(sink)
        assert current_sink() is sink
