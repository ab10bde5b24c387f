"""Application settings read from the environment.

Protean's own settings (databases, brokers, processing mode) live in
domain.toml. These are the knobs the storefront code reads itself.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

NOTE_HARD_LIMIT = 500


@dataclass(frozen=True)
class Settings:
    order_note_max_length: int = 100
    push_max_attempts: int = 3
    push_retry_backoff_seconds: float = 0.5
    push_timeout_seconds: float = 5.0
    firebase_project_id: str | None = None
    firebase_client_email: str | None = None
    firebase_private_key: str | None = None

    @property
    def push_enabled(self) -> bool:
        """Push is only wired to Firebase when every credential is present."""
        return bool(self.firebase_project_id and self.firebase_client_email and self.firebase_private_key)

    @classmethod
    def from_environment(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ

        private_key = env.get("FIREBASE_PRIVATE_KEY")
        if private_key:
            # Keys pasted into .env files carry literal "\n" sequences
            private_key = private_key.replace("\\n", "\n")

        return cls(
            order_note_max_length=min(int(env.get("ORDER_NOTE_MAX_LENGTH", 100)), NOTE_HARD_LIMIT),
            push_max_attempts=max(int(env.get("PUSH_MAX_ATTEMPTS", 3)), 1),
            push_retry_backoff_seconds=float(env.get("PUSH_RETRY_BACKOFF_SECONDS", 0.5)),
            push_timeout_seconds=float(env.get("PUSH_TIMEOUT_SECONDS", 5.0)),
            firebase_project_id=env.get("FIREBASE_PROJECT_ID"),
            firebase_client_email=env.get("FIREBASE_CLIENT_EMAIL"),
            firebase_private_key=private_key,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings.from_environment()
