# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadData, URLSafeTimedSerializer


@dataclass(frozen=True)
class SessionData:
    user_id: str


class SessionSigner:
    """Issues and verifies signed, stateless session tokens.

    A token carries a single claim, the user id. Nothing is stored server
    side: a token is valid as long as its signature matches the secret and,
    when ``max_age`` is set, it is not older than ``max_age`` seconds.
    """

    def __init__(self, secret: str, *, salt: str = "blogadmin.session.v1", max_age: Optional[int] = None):
        if not secret:
            raise ValueError("Session secret must not be empty")
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=salt)
        self.max_age = max_age or None

    def issue(self, user_id: str) -> str:
        return self._serializer.dumps({"uid": str(user_id)})

    def verify(self, token: str) -> Optional[SessionData]:
        if not token:
            return None
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except BadData:
            return None
        if not isinstance(data, dict):
            return None
        uid = str(data.get("uid") or "").strip()
        if not uid:
            return None
        return SessionData(user_id=uid)
