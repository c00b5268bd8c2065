# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    id: str
    username: str
    password_hash: str
    avatar_path: str

    def public(self) -> Dict[str, Any]:
        """User fields safe to return to a client (no password hash)."""
        return {"id": self.id, "username": self.username, "avatar": self.avatar_path}


@dataclass(frozen=True)
class Post:
    id: str
    title: str
    body: str
    owner_id: str
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id
