"""Sign-in handoff for the mobile app.

A browser session asks for a one-time code, the app trades the code for a
signed token and sends it back as ``Authorization: Bearer <token>``.
"""
import secrets
import threading
import time
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from ..errors import ApiError
from ..extensions import db, login_manager
from ..models import User


class CodeStore:
    """In-process one-time codes; each code can be consumed once before it expires."""

    def __init__(self, ttl=60, clock=time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self._codes = {}
        self._lock = threading.Lock()

    def issue(self, user_id, email=None):
        code = secrets.token_urlsafe(24)
        now = self.clock()
        with self._lock:
            # Drop codes nobody came back for
            for stale in [c for c, entry in self._codes.items() if entry["exp"] < now]:
                del self._codes[stale]
            self._codes[code] = {"sub": str(user_id), "email": email, "exp": now + self.ttl}
        return code

    def consume(self, code):
        with self._lock:
            entry = self._codes.pop(code, None)
        if entry is None:
            raise ApiError("invalid code")
        if self.clock() > entry["exp"]:
            raise ApiError("code expired")
        return entry

    def __len__(self):
        return len(self._codes)


def code_store() -> CodeStore:
    return current_app.extensions["mobile_codes"]


def issue_token(sub, email=None):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": sub,
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=current_app.config["MOBILE_TOKEN_DAYS"]),
    }
    return jwt.encode(payload, current_app.config["MOBILE_JWT_SECRET"], algorithm="HS256")


def decode_token(token):
    return jwt.decode(token, current_app.config["MOBILE_JWT_SECRET"], algorithms=["HS256"])


@login_manager.request_loader
def load_user_from_token(req):
    header = req.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    try:
        claims = decode_token(header[len("Bearer "):].strip())
    except jwt.InvalidTokenError as err:
        current_app.logger.info("Rejected mobile token from %s: %s", req.remote_addr, err)
        return None
    return db.session.get(User, int(claims["sub"]))
