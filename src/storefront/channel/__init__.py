"""Push adapter selection.

Firebase is used when all of its credentials are configured; otherwise push
is disabled and notifications are only stored.
"""

from storefront.channel.disabled_push import DisabledPushAdapter
from storefront.channel.push_port import PushPort
from storefront.config import Settings


def build_push_adapter(settings: Settings) -> PushPort:
    """Return the push adapter the settings call for."""
    if not settings.push_enabled:
        return DisabledPushAdapter()

    from storefront.channel.firebase_push import FirebasePushAdapter

    return FirebasePushAdapter(
        project_id=settings.firebase_project_id,
        client_email=settings.firebase_client_email,
        private_key=settings.firebase_private_key,
        timeout=settings.push_timeout_seconds,
    )
