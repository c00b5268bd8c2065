# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from blogadmin.auth.session import SessionSigner
from blogadmin.config import Settings
from blogadmin.errors import Unauthorized
from blogadmin.infra.document_store import DocumentStore


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, produced by the auth gate."""

    user_id: str


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_signer(request: Request) -> SessionSigner:
    return request.app.state.signer


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def load_context_from_request(request: Request) -> Optional[AuthContext]:
    token = request.cookies.get(get_settings(request).cookie_name, "")
    if not token:
        return None
    sess = get_signer(request).verify(token)
    if not sess:
        return None
    return AuthContext(user_id=sess.user_id)


def current_user_optional(request: Request) -> Optional[AuthContext]:
    return load_context_from_request(request)


def require_user(request: Request) -> AuthContext:
    """Auth gate: missing or invalid token rejects with 401 before the handler runs."""
    ctx = load_context_from_request(request)
    if ctx is None:
        raise Unauthorized()
    return ctx
