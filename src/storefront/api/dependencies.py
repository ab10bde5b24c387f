"""Request dependencies shared by the storefront routers."""

from fastapi import Header, HTTPException

from storefront.checkout.workflow import OrderWorkflow


def current_user_id(x_user_id: str = Header(default="")) -> str:
    """The authenticated user, as forwarded by the auth gateway in ``X-User-Id``."""
    if not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id.strip()


def get_workflow() -> OrderWorkflow:
    return OrderWorkflow()
