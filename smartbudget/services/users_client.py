import httpx
from flask import current_app, request
from ..errors import NotFound


def resolve_user_id(email):
    """Look up a user id through the Users API (``GET /api/users?email=``)."""
    config = current_app.config
    base_url = config.get("USERS_API_URL") or request.host_url
    with httpx.Client(
        base_url=base_url,
        timeout=config.get("USERS_API_TIMEOUT", 5),
        transport=config.get("USERS_API_TRANSPORT"),
    ) as client:
        response = client.get("/api/users", params={"email": email})

    if response.is_error:
        current_app.logger.warning("Users API returned %s for %s", response.status_code, email)
        raise NotFound("User not found")
    users = response.json()
    if not users or not users[0].get("id"):
        raise NotFound("User not found")
    return users[0]["id"]
