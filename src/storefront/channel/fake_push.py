"""Fake push adapter: records pushes in memory for test assertions."""

from uuid import uuid4

from storefront.channel.push_port import PushPort


class FakePushAdapter(PushPort):
    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.attempts = 0
        self.failures_remaining = 0
        self.failure_reason = "Push delivery failed"
        self.raise_errors = False

    def configure(self, fail_times: int = 0, failure_reason: str = "Push delivery failed", raise_errors: bool = False):
        """Fail the next ``fail_times`` sends, by result or by raising."""
        self.failures_remaining = fail_times
        self.failure_reason = failure_reason
        self.raise_errors = raise_errors

    def send(
        self,
        device_token: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        self.attempts += 1

        if self.failures_remaining > 0:
            self.failures_remaining -= 1
            if self.raise_errors:
                raise ConnectionError(self.failure_reason)
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append(
            {
                "message_id": message_id,
                "device_token": device_token,
                "title": title,
                "body": body,
                "data": data,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        self.sent_pushes.clear()
        self.attempts = 0
        self.failures_remaining = 0
        self.failure_reason = "Push delivery failed"
        self.raise_errors = False
