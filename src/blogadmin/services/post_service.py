# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Post CRUD with ownership enforcement.

Every operation that targets one post checks existence first, then
ownership: a missing id is NotFound for everyone, an existing post owned by
someone else is Forbidden.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta
from typing import List

from blogadmin.core.models import Post, utcnow
from blogadmin.errors import Forbidden, InternalError, NotFound
from blogadmin.infra.document_store import DocumentNotFound, DocumentStore, StoreError
from blogadmin.log import logger
from blogadmin.permissions import AuthContext


def list_posts(store: DocumentStore) -> List[Post]:
    try:
        return store.find_all_posts()
    except StoreError as e:
        logger.exception("Listing posts failed")
        raise InternalError() from e


def create_post(store: DocumentStore, ctx: AuthContext, *, title: str, body: str) -> Post:
    try:
        post = store.create_post(title=title, body=body, owner_id=ctx.user_id)
    except StoreError as e:
        logger.exception(f"Creating post failed for user {ctx.user_id}")
        raise InternalError() from e
    logger.info(f"Post {post.id} created by {ctx.user_id}")
    return post


def _owned_post(store: DocumentStore, ctx: AuthContext, post_id: str, action: str) -> Post:
    try:
        post = store.find_post_by_id(post_id)
    except StoreError as e:
        logger.exception(f"Loading post {post_id} failed")
        raise InternalError() from e
    if post is None:
        raise NotFound("Post not found")
    if not post.is_owned_by(ctx.user_id):
        logger.warning(f"User {ctx.user_id} may not {action} post {post_id} owned by {post.owner_id}")
        raise Forbidden(f"Unauthorized to {action} this post")
    return post


def get_post_for_edit(store: DocumentStore, ctx: AuthContext, post_id: str) -> Post:
    return _owned_post(store, ctx, post_id, "edit")


def update_post(store: DocumentStore, ctx: AuthContext, post_id: str, *, title: str, body: str) -> Post:
    post = _owned_post(store, ctx, post_id, "update")
    now = utcnow()
    if now <= post.updated_at:
        now = post.updated_at + timedelta(microseconds=1)
    try:
        updated = store.update_post(replace(post, title=title, body=body, updated_at=now))
    except DocumentNotFound:
        # Deleted between lookup and write.
        raise NotFound("Post not found")
    except StoreError as e:
        logger.exception(f"Updating post {post_id} failed")
        raise InternalError() from e
    logger.info(f"Post {post_id} updated by {ctx.user_id}")
    return updated


def delete_post(store: DocumentStore, ctx: AuthContext, post_id: str) -> None:
    _owned_post(store, ctx, post_id, "delete")
    try:
        store.delete_post(post_id)
    except DocumentNotFound:
        raise NotFound("Post not found")
    except StoreError as e:
        logger.exception(f"Deleting post {post_id} failed")
        raise InternalError() from e
    logger.info(f"Post {post_id} deleted by {ctx.user_id}")
