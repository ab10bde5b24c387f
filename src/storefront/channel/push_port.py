"""Push notification port: the one capability the storefront needs from a push provider."""

from abc import ABC, abstractmethod


class PushPort(ABC):
    """Abstract interface for push notification adapters."""

    @abstractmethod
    def send(
        self,
        device_token: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        """Send a push notification to one device.

        Returns:
            dict with keys: message_id, status ("sent", "failed" or "skipped"), error (optional)
        """
        ...
