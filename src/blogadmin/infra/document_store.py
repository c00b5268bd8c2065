# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from blogadmin.core.models import Post, User, utcnow
from blogadmin.log import logger

USERS = "users"
POSTS = "posts"


class StoreError(Exception):
    """Unexpected storage failure (I/O, corrupt file)."""


class DuplicateKeyError(StoreError):
    def __init__(self, collection: str, key: str, value: str):
        super().__init__(f"Duplicate {key} in {collection}")
        self.collection = collection
        self.key = key
        self.value = value


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"No document {doc_id!r} in {collection}")
        self.collection = collection
        self.doc_id = doc_id


def _new_id() -> str:
    return uuid.uuid4().hex


def _user_to_doc(u: User) -> Dict[str, Any]:
    return {"username": u.username, "password_hash": u.password_hash, "avatar": u.avatar_path}


def _doc_to_user(doc_id: str, d: Dict[str, Any]) -> User:
    return User(
        id=doc_id,
        username=str(d.get("username") or ""),
        password_hash=str(d.get("password_hash") or ""),
        avatar_path=str(d.get("avatar") or ""),
    )


def _post_to_doc(p: Post) -> Dict[str, Any]:
    return {
        "title": p.title,
        "body": p.body,
        "user_id": p.owner_id,
        "created_at": p.created_at.isoformat(),
        "updated_at": p.updated_at.isoformat(),
    }


def _doc_to_post(doc_id: str, d: Dict[str, Any]) -> Post:
    return Post(
        id=doc_id,
        title=str(d.get("title") or ""),
        body=str(d.get("body") or ""),
        owner_id=str(d.get("user_id") or ""),
        created_at=datetime.fromisoformat(str(d["created_at"])),
        updated_at=datetime.fromisoformat(str(d["updated_at"])),
    )


def _empty() -> Dict[str, Dict[str, Dict[str, Any]]]:
    return {USERS: {}, POSTS: {}}


class DocumentStore:
    """Users and posts kept as documents keyed by id.

    With ``path`` set, every mutation is written to a YAML file (temp file +
    rename). The file is reloaded whenever it changed on disk since this
    store last read or wrote it, so writes from other processes on the same
    file (the seeding script, other workers) are seen before any lookup or
    mutation. Without a path, documents live in memory only. A failed write
    leaves the in-memory state unchanged.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self._lock = threading.Lock()
        self._docs: Dict[str, Dict[str, Dict[str, Any]]] = _empty()
        self._seen: Optional[Tuple[int, int, int]] = None
        with self._lock:
            self._refresh()

    # ------------------ persistence ------------------

    @staticmethod
    def _load(path: Path) -> Dict[str, Dict[str, Dict[str, Any]]]:
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise StoreError(f"Cannot read document file {path}") from e
        if not isinstance(raw, dict):
            raise StoreError(f"Document file {path} is not a mapping")
        out = _empty()
        for coll in (USERS, POSTS):
            docs = raw.get(coll) or {}
            out[coll] = {str(k): dict(v) for k, v in docs.items() if isinstance(v, dict)}
        logger.debug(f"Loaded {len(out[USERS])} users and {len(out[POSTS])} posts from {path}")
        return out

    def _file_state(self) -> Optional[Tuple[int, int, int]]:
        # Every write replaces the file, so the inode changes along with mtime/size.
        try:
            st = self.path.stat()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreError(f"Cannot stat document file {self.path}") from e
        return (st.st_mtime_ns, st.st_size, st.st_ino)

    def _refresh(self) -> None:
        """Reload from disk if the file changed since we last saw it. Caller holds the lock."""
        if self.path is None:
            return
        state = self._file_state()
        if state == self._seen:
            return
        self._docs = self._load(self.path) if state is not None else _empty()
        self._seen = state

    def _flush(self, docs: Dict[str, Dict[str, Dict[str, Any]]]) -> None:
        if self.path is None:
            return
        tmp = self.path.with_suffix(self.path.suffix + f".{os.getpid()}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(
                yaml.safe_dump({"version": 1, **docs}, sort_keys=False, allow_unicode=True),
                encoding="utf-8",
            )
            os.replace(tmp, self.path)
        except (OSError, yaml.YAMLError) as e:
            raise StoreError(f"Cannot write document file {self.path}") from e
        self._seen = self._file_state()

    def _commit(self, coll: str, new_docs: Dict[str, Dict[str, Any]]) -> None:
        """Persist a replacement collection, then swap it in. Caller holds the lock."""
        staged = {**self._docs, coll: new_docs}
        self._flush(staged)
        self._docs = staged

    # ------------------ users ------------------

    def find_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            self._refresh()
            for doc_id, d in self._docs[USERS].items():
                if d.get("username") == username:
                    return _doc_to_user(doc_id, d)
        return None

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            self._refresh()
            d = self._docs[USERS].get(user_id)
            return _doc_to_user(user_id, d) if d is not None else None

    def create_user(self, *, username: str, password_hash: str, avatar_path: str) -> User:
        with self._lock:
            self._refresh()
            users = self._docs[USERS]
            if any(d.get("username") == username for d in users.values()):
                raise DuplicateKeyError(USERS, "username", username)
            user = User(id=_new_id(), username=username, password_hash=password_hash, avatar_path=avatar_path)
            self._commit(USERS, {**users, user.id: _user_to_doc(user)})
            return user

    # ------------------ posts ------------------

    def find_post_by_id(self, post_id: str) -> Optional[Post]:
        with self._lock:
            self._refresh()
            d = self._docs[POSTS].get(post_id)
            return _doc_to_post(post_id, d) if d is not None else None

    def find_all_posts(self) -> List[Post]:
        with self._lock:
            self._refresh()
            posts = [_doc_to_post(k, d) for k, d in self._docs[POSTS].items()]
        return sorted(posts, key=lambda p: p.created_at, reverse=True)

    def create_post(self, *, title: str, body: str, owner_id: str) -> Post:
        now = utcnow()
        post = Post(id=_new_id(), title=title, body=body, owner_id=owner_id, created_at=now, updated_at=now)
        with self._lock:
            self._refresh()
            self._commit(POSTS, {**self._docs[POSTS], post.id: _post_to_doc(post)})
        return post

    def update_post(self, post: Post) -> Post:
        with self._lock:
            self._refresh()
            posts = self._docs[POSTS]
            if post.id not in posts:
                raise DocumentNotFound(POSTS, post.id)
            # Owner and creation time are fixed at insert.
            doc = {**_post_to_doc(post), "user_id": posts[post.id]["user_id"], "created_at": posts[post.id]["created_at"]}
            self._commit(POSTS, {**posts, post.id: doc})
        return _doc_to_post(post.id, doc)

    def delete_post(self, post_id: str) -> None:
        with self._lock:
            self._refresh()
            posts = self._docs[POSTS]
            if post_id not in posts:
                raise DocumentNotFound(POSTS, post_id)
            self._commit(POSTS, {k: v for k, v in posts.items() if k != post_id})
