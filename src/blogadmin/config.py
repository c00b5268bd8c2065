# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Runtime configuration.

Values come from environment variables (a local .env file is loaded if
present). Settings are built once at startup and passed explicitly to the
components that need them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

DEFAULT_AVATAR_PATH = "/uploads/default_avatar.png"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    secret_key: str
    session_salt: str = "blogadmin.session.v1"
    # 0 disables expiry.
    session_max_age: int = 28800
    cookie_name: str = "token"
    cookie_secure: bool = False
    # None keeps documents in memory only.
    data_path: Optional[Path] = None
    uploads_dir: Path = Path("uploads")
    default_avatar_path: str = DEFAULT_AVATAR_PATH
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        secret = os.getenv("BLOG_SECRET_KEY") or os.getenv("SECRET_KEY")
        if not secret:
            raise RuntimeError("Missing BLOG_SECRET_KEY (or SECRET_KEY) in environment")
        data_path = (os.getenv("BLOG_DATA_PATH") or "").strip()
        return cls(
            secret_key=secret,
            session_salt=os.getenv("BLOG_SESSION_SALT", "blogadmin.session.v1"),
            session_max_age=_env_int("BLOG_SESSION_MAX_AGE", 28800),
            cookie_secure=_env_bool("BLOG_COOKIE_SECURE", False),
            data_path=Path(data_path).resolve() if data_path else None,
            uploads_dir=Path(os.getenv("BLOG_UPLOADS_DIR", "uploads")).resolve(),
            log_level=(os.getenv("BLOG_LOG_LEVEL") or "INFO").upper(),
            host=os.getenv("BLOG_HOST", "0.0.0.0"),
            port=_env_int("BLOG_PORT", 8000),
            reload=_env_bool("BLOG_RELOAD", False),
        )

    def cookie_settings(self) -> dict:
        return {"httponly": True, "samesite": "lax", "secure": self.cookie_secure}
