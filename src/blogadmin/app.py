# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import time
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from blogadmin.auth.session import SessionSigner
from blogadmin.auth.users import authenticate, register_user
from blogadmin.config import BASE_DIR, Settings
from blogadmin.errors import AppError
from blogadmin.infra.document_store import DocumentStore
from blogadmin.log import logger, setup_logging
from blogadmin.permissions import (
    AuthContext,
    current_user_optional,
    get_settings,
    get_signer,
    get_store,
    require_user,
)
from blogadmin.services import post_service
from blogadmin.services.upload_service import discard_avatar, save_avatar

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

SITE_DESCRIPTION = "Simple blog administration panel."


def _render(request: Request, template_name: str, ctx: dict, status_code: int = 200):
    """TemplateResponse wrapper injecting global UI state."""
    base_ctx = {
        "current_user": current_user_optional(request),
        "description": SITE_DESCRIPTION,
    }
    return templates.TemplateResponse(request, template_name, {**base_ctx, **(ctx or {})}, status_code=status_code)


def _owner_names(store: DocumentStore, posts) -> dict:
    names = {}
    for p in posts:
        if p.owner_id not in names:
            u = store.find_user_by_id(p.owner_id)
            names[p.owner_id] = u.username if u else ""
    return names


def create_app(settings: Optional[Settings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    """Build the application with explicit settings and document store."""
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    app = FastAPI(title="Blog admin")
    app.state.settings = settings
    app.state.store = store if store is not None else DocumentStore(settings.data_path)
    app.state.signer = SessionSigner(
        settings.secret_key,
        salt=settings.session_salt,
        max_age=settings.session_max_age,
    )

    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        t0 = time.perf_counter()
        response = await call_next(request)
        dt = (time.perf_counter() - t0) * 1000.0
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {dt:.1f} ms")
        return response

    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError):
        if int(exc.status) >= 500:
            logger.error(f"{exc.__class__.__name__} on {request.method} {request.url.path}")
        return JSONResponse(exc.to_dict(), status_code=int(exc.status))

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        # Runs outside the request-log middleware, so the status line is logged here.
        logger.opt(exception=exc).error(f"{request.method} {request.url.path} -> 500 unhandled {exc.__class__.__name__}")
        return JSONResponse({"message": "Internal server error"}, status_code=500)

    # ------------------ Public ------------------

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request, store: DocumentStore = Depends(get_store)):
        posts = post_service.list_posts(store)
        return _render(request, "index.html", {"title": "Home", "posts": posts, "owners": _owner_names(store, posts)})

    # ------------------ Session ------------------

    @app.get("/admin", response_class=HTMLResponse)
    def login_get(request: Request):
        if current_user_optional(request):
            return RedirectResponse(url="/dashboard", status_code=303)
        return _render(request, "login.html", {"title": "Admin"})

    @app.post("/admin")
    def login_post(
        username: str = Form(...),
        password: str = Form(...),
        store: DocumentStore = Depends(get_store),
        signer: SessionSigner = Depends(get_signer),
        settings: Settings = Depends(get_settings),
    ):
        u = authenticate(store, username, password)
        resp = RedirectResponse(url="/dashboard", status_code=303)
        resp.set_cookie(
            settings.cookie_name,
            signer.issue(u.id),
            max_age=settings.session_max_age or None,
            **settings.cookie_settings(),
        )
        return resp

    @app.get("/logout")
    def logout(settings: Settings = Depends(get_settings)):
        resp = RedirectResponse(url="/", status_code=303)
        resp.delete_cookie(settings.cookie_name, **settings.cookie_settings())
        return resp

    @app.post("/register", status_code=201)
    async def register(
        username: str = Form(...),
        password: str = Form(...),
        avatar: UploadFile | None = File(None),
        store: DocumentStore = Depends(get_store),
        settings: Settings = Depends(get_settings),
    ):
        avatar_path = await save_avatar(avatar, settings.uploads_dir)
        try:
            user = register_user(
                store,
                username,
                password,
                avatar_path=avatar_path,
                default_avatar_path=settings.default_avatar_path,
            )
        except AppError:
            discard_avatar(avatar_path, settings.uploads_dir)
            raise
        return JSONResponse({"message": "User created", "user": user.public()}, status_code=201)

    # ------------------ Posts ------------------

    @app.get("/dashboard", response_class=HTMLResponse)
    def dashboard(
        request: Request,
        ctx: AuthContext = Depends(require_user),
        store: DocumentStore = Depends(get_store),
    ):
        posts = post_service.list_posts(store)
        return _render(
            request,
            "dashboard.html",
            {"title": "Dashboard", "posts": posts, "owners": _owner_names(store, posts), "user_id": ctx.user_id},
        )

    @app.get("/add-post", response_class=HTMLResponse)
    def add_post_get(request: Request, ctx: AuthContext = Depends(require_user)):
        return _render(request, "add_post.html", {"title": "Add Post"})

    @app.post("/add-post")
    def add_post(
        title: str = Form(...),
        body: str = Form(...),
        ctx: AuthContext = Depends(require_user),
        store: DocumentStore = Depends(get_store),
    ):
        post_service.create_post(store, ctx, title=title, body=body)
        return RedirectResponse(url="/dashboard", status_code=303)

    @app.get("/edit-post/{post_id}", response_class=HTMLResponse)
    def edit_post_get(
        request: Request,
        post_id: str,
        ctx: AuthContext = Depends(require_user),
        store: DocumentStore = Depends(get_store),
    ):
        post = post_service.get_post_for_edit(store, ctx, post_id)
        return _render(request, "edit_post.html", {"title": "Edit Post", "post": post})

    # POST is accepted for HTML forms, which cannot send PUT/DELETE.
    @app.api_route("/edit-post/{post_id}", methods=["PUT", "POST"])
    def edit_post(
        post_id: str,
        title: str = Form(...),
        body: str = Form(...),
        ctx: AuthContext = Depends(require_user),
        store: DocumentStore = Depends(get_store),
    ):
        post_service.update_post(store, ctx, post_id, title=title, body=body)
        return RedirectResponse(url=f"/edit-post/{post_id}", status_code=303)

    @app.api_route("/delete-post/{post_id}", methods=["DELETE", "POST"])
    def delete_post(
        post_id: str,
        ctx: AuthContext = Depends(require_user),
        store: DocumentStore = Depends(get_store),
    ):
        post_service.delete_post(store, ctx, post_id)
        return RedirectResponse(url="/dashboard", status_code=303)

    return app
