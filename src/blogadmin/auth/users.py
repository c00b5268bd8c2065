# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from blogadmin.auth.passwords import hash_password, verify_password
from blogadmin.config import DEFAULT_AVATAR_PATH
from blogadmin.core.models import User
from blogadmin.errors import BadRequest, Conflict, InternalError, InvalidCredentials
from blogadmin.infra.document_store import DocumentStore, DuplicateKeyError, StoreError
from blogadmin.log import logger


def authenticate(store: DocumentStore, username: str, password: str) -> User:
    """Check credentials by exact username match.

    Unknown user and wrong password raise the same InvalidCredentials so the
    response does not reveal which usernames exist.
    """
    u = store.find_user_by_username(username)
    if u is None:
        logger.info(f"Login failed for {username!r}")
        raise InvalidCredentials()
    if not verify_password(u.password_hash, password):
        logger.info(f"Login failed for {username!r}")
        raise InvalidCredentials()
    logger.info(f"Login ok for {username!r}")
    return u


def register_user(
    store: DocumentStore,
    username: str,
    password: str,
    *,
    avatar_path: Optional[str] = None,
    default_avatar_path: str = DEFAULT_AVATAR_PATH,
) -> User:
    if not (username or "").strip() or not password:
        raise BadRequest("Username and password are required")

    password_hash = hash_password(password)
    try:
        user = store.create_user(
            username=username,
            password_hash=password_hash,
            avatar_path=avatar_path or default_avatar_path,
        )
    except DuplicateKeyError:
        logger.info(f"Registration rejected, username {username!r} taken")
        raise Conflict("Username already exists")
    except StoreError as e:
        logger.exception(f"Registration failed for {username!r}")
        raise InternalError() from e
    logger.info(f"Registered user {username!r} ({user.id})")
    return user
