"""Push adapter used when no provider credentials are configured."""

from storefront.channel.push_port import PushPort


class DisabledPushAdapter(PushPort):
    def send(self, device_token: str, title: str, body: str, data: dict | None = None) -> dict:
        return {"message_id": None, "status": "skipped", "error": "Push notifications are not configured"}
