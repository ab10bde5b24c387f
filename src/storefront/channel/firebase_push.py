"""Firebase Cloud Messaging adapter.

Uses a named firebase-admin app so that tests and multiple settings objects
never collide on the SDK's global default app.
"""

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError

from storefront.channel.push_port import PushPort
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

APP_NAME = "storefront-push"


class FirebasePushAdapter(PushPort):
    def __init__(self, project_id: str, client_email: str, private_key: str, timeout: float = 5.0):
        self.project_id = project_id
        self._app = _initialize_app(project_id, client_email, private_key, timeout)

    def send(
        self,
        device_token: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        message = messaging.Message(
            notification=messaging.Notification(title=title, body=body),
            # FCM data payloads only carry string values
            data={key: str(value) for key, value in (data or {}).items()},
            token=device_token,
        )
        try:
            message_id = messaging.send(message, app=self._app)
        except (FirebaseError, ValueError) as exc:
            logger.warning("fcm_send_failed", error=str(exc))
            return {"message_id": None, "status": "failed", "error": str(exc)}

        return {"message_id": message_id, "status": "sent"}


def _initialize_app(project_id, client_email, private_key, timeout):
    try:
        return firebase_admin.get_app(APP_NAME)
    except ValueError:
        pass

    certificate = credentials.Certificate(
        {
            "type": "service_account",
            "project_id": project_id,
            "client_email": client_email,
            "private_key": private_key,
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    )
    app = firebase_admin.initialize_app(
        certificate,
        options={"projectId": project_id, "httpTimeout": timeout},
        name=APP_NAME,
    )
    logger.info("firebase_initialized", project_id=project_id)
    return app
