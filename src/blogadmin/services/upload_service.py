# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Avatar uploads.

Files are written under the configured uploads directory; callers only ever
see the public ``/uploads/<name>`` form, never the server-side location.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from blogadmin.errors import InternalError
from blogadmin.log import logger

PUBLIC_PREFIX = "/uploads"


def stored_filename(original: str, *, now_ms: Optional[int] = None) -> str:
    """``<epoch millis>-<basename>`` so concurrent uploads of one name do not collide."""
    ts = int(time.time() * 1000) if now_ms is None else int(now_ms)
    safe_name = Path(original.replace("\\", "/")).name
    return f"{ts}-{safe_name}"


def public_path(name: str) -> str:
    return f"{PUBLIC_PREFIX}/{name}"


def local_path(public: str, uploads_dir: Path) -> Path:
    return Path(uploads_dir) / Path(public).name


async def save_avatar(file: UploadFile | None, uploads_dir: Path) -> Optional[str]:
    """Store an uploaded avatar and return its public path, or None when nothing was uploaded."""
    if file is None or not file.filename:
        return None

    name = stored_filename(file.filename)
    out_path = Path(uploads_dir) / name
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        content = await file.read()
        out_path.write_bytes(content)
    except OSError as e:
        logger.exception(f"Avatar upload failed for {file.filename!r}")
        raise InternalError() from e
    logger.info(f"Stored avatar {name} ({len(content)} bytes)")
    return public_path(name)


def discard_avatar(public: Optional[str], uploads_dir: Path) -> None:
    """Remove an avatar stored for a registration that did not go through."""
    if not public:
        return
    try:
        local_path(public, uploads_dir).unlink(missing_ok=True)
    except OSError:
        logger.exception(f"Could not remove orphan avatar {public}")
        return
    logger.info(f"Removed orphan avatar {public}")
