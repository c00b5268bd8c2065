#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from blogadmin.auth.users import register_user
from blogadmin.config import Settings
from blogadmin.errors import AppError
from blogadmin.infra.document_store import DocumentStore
from blogadmin.log import setup_logging


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    if settings.data_path is None:
        raise SystemExit("BLOG_DATA_PATH is not set; users would not be persisted")

    store = DocumentStore(settings.data_path)

    username = input("Username: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        user = register_user(store, username, pw1, default_avatar_path=settings.default_avatar_path)
    except AppError as e:
        raise SystemExit(e.message)
    print(f"OK -> {user.username} ({user.id}) in {settings.data_path}")


if __name__ == "__main__":
    main()
