# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application error taxonomy.

Each error carries the HTTP status it maps to and the message shown to the
caller. The message never contains store or infrastructure detail.
"""

from __future__ import annotations

from http import HTTPStatus


class AppError(Exception):
    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class BadRequest(AppError):
    status = HTTPStatus.BAD_REQUEST
    message = "Bad request"


class Unauthorized(AppError):
    status = HTTPStatus.UNAUTHORIZED
    message = "Unauthorized"


class InvalidCredentials(AppError):
    # Same message for unknown user and wrong password.
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid credentials"


class Forbidden(AppError):
    status = HTTPStatus.FORBIDDEN
    message = "Forbidden"


class NotFound(AppError):
    status = HTTPStatus.NOT_FOUND
    message = "Not found"


class Conflict(AppError):
    status = HTTPStatus.CONFLICT
    message = "Conflict"


class InternalError(AppError):
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "Internal server error"
