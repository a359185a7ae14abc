from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from blog_backend import __version__
from blog_backend.auth import bootstrap_admin_if_needed, get_current_user, require_admin
from blog_backend.auth.crud import create_user, get_user_by_id, list_users, public_user, verify_user_credentials
from blog_backend.auth.security import create_access_token
from blog_backend.config import Config, load_config, validate_config
from blog_backend.content import comments as comments_crud
from blog_backend.content import posts as posts_crud
from blog_backend.db import db_session, init_db
from blog_backend.errors import AuthenticationError, NotFoundError, ValidationError
from blog_backend.seed import seed_demo_data


def _debug(msg: str) -> None:
    print(f"[api] {msg}")


# -----------------------------
# Request bodies
# -----------------------------


class RegisterRequest(BaseModel):
    """Self-serve registration. Fields are checked by the handler so a missing
    field is a 400 with a stable detail code rather than a schema error."""

    model_config = ConfigDict(populate_by_name=True)

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    verified_password: Optional[str] = Field(default=None, alias="verifiedPassword")


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PostCreateRequest(BaseModel):
    title: str
    content: str


class CommentCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    content: str
    post_id: Optional[int] = Field(default=None, alias="postId")


# -----------------------------
# Session cookie
# -----------------------------


def _set_auth_cookie(response: Response, *, token: str, cfg: Config) -> None:
    """Set the httpOnly session cookie. Secure + SameSite=Strict in production."""
    response.set_cookie(
        key=cfg.AUTH_COOKIE_NAME,
        value=str(token),
        httponly=True,
        samesite=cfg.cookie_samesite,
        secure=cfg.cookie_secure,
        max_age=int(cfg.AUTH_TOKEN_EXPIRE_MINUTES) * 60,
        path=cfg.AUTH_COOKIE_PATH,
        domain=cfg.AUTH_COOKIE_DOMAIN,
    )


def _clear_auth_cookie(response: Response, cfg: Config) -> None:
    response.delete_cookie(
        key=cfg.AUTH_COOKIE_NAME,
        path=cfg.AUTH_COOKIE_PATH,
        domain=cfg.AUTH_COOKIE_DOMAIN,
        httponly=True,
        samesite=cfg.cookie_samesite,
        secure=cfg.cookie_secure,
    )


def create_app(cfg: Optional[Config] = None) -> FastAPI:
    """Build the API around an explicit Config.

    Raises ConfigError when the config can't be used safely (e.g. no JWT secret).
    """
    cfg = validate_config(cfg or load_config())

    app = FastAPI(title="Blog Backend", version=__version__)
    # Make config available to auth deps.
    app.state.cfg = cfg

    # CORS is mainly needed for local development (frontend dev server -> API).
    _cors_origins = [o.strip() for o in (cfg.CORS_ALLOW_ORIGINS or "").split(",") if o.strip()]
    if _cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=_cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = [".".join(str(p) for p in e.get("loc", ()) if p != "body") for e in exc.errors()]
        return JSONResponse(status_code=400, content={"detail": "validation_error", "fields": fields})

    @app.on_event("startup")
    def _on_startup() -> None:
        # Ensure schema exists.
        init_db(cfg.DB_DSN)

        boot = bootstrap_admin_if_needed(cfg)
        if boot:
            _debug(f"Bootstrapped initial admin user: user_id={boot.get('user_id')} email={boot.get('email')}")

        if cfg.SEED_DEMO_DATA:
            seed_demo_data(cfg)

        _debug(f"API ready (env={cfg.APP_ENV})")

    # -----------------------------
    # Health
    # -----------------------------

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok"}

    # -----------------------------
    # Auth (public)
    # -----------------------------

    @app.post("/register", status_code=201)
    def register(payload: RegisterRequest) -> Dict[str, Any]:
        if not all(
            (v or "").strip()
            for v in (payload.username, payload.email, payload.password, payload.verified_password)
        ):
            raise ValidationError("missing_fields")
        if payload.password != payload.verified_password:
            raise ValidationError("passwords_do_not_match")

        with db_session(cfg.DB_DSN) as conn:
            u = create_user(
                conn,
                username=str(payload.username),
                email=str(payload.email),
                password=str(payload.password),
            )
        return {"message": "user_registered", "userId": u["user_id"]}

    @app.post("/login")
    def login(payload: LoginRequest, response: Response) -> Dict[str, Any]:
        if not (payload.email or "").strip() or not payload.password:
            raise ValidationError("email_and_password_required")

        with db_session(cfg.DB_DSN) as conn:
            user_row = verify_user_credentials(conn, str(payload.email), payload.password)
        if user_row is None:
            # Same answer for unknown email and wrong password.
            _debug("Login failed: invalid credentials")
            raise AuthenticationError("invalid_credentials")

        token = create_access_token(
            secret=str(cfg.AUTH_JWT_SECRET),
            user_id=int(user_row["user_id"]),
            expires_minutes=int(cfg.AUTH_TOKEN_EXPIRE_MINUTES),
        )
        _set_auth_cookie(response, token=token, cfg=cfg)
        return {"message": "login_ok", "user": public_user(user_row)}

    @app.api_route("/logout", methods=["GET", "POST"])
    def logout(response: Response) -> Dict[str, Any]:
        """Clear the session cookie. The token itself stays valid until it expires."""
        _clear_auth_cookie(response, cfg)
        return {"message": "logout_ok"}

    # -----------------------------
    # Users
    # -----------------------------

    @app.get("/me")
    def me(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        return {"user": user}

    @app.get("/user/{user_id}")
    def get_user(user_id: int, user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if int(user["user_id"]) != user_id and not user.get("is_admin"):
            raise NotFoundError("user_not_found")
        with db_session(cfg.DB_DSN) as conn:
            row = get_user_by_id(conn, user_id)
        if row is None:
            raise NotFoundError("user_not_found")
        return public_user(row)

    @app.get("/users")
    def users(_admin: Dict[str, Any] = Depends(require_admin)) -> List[Dict[str, Any]]:
        with db_session(cfg.DB_DSN) as conn:
            return list_users(conn)

    # -----------------------------
    # Posts
    # -----------------------------

    @app.get("/posts")
    def list_posts(user: Dict[str, Any] = Depends(get_current_user)) -> List[Dict[str, Any]]:
        with db_session(cfg.DB_DSN) as conn:
            return posts_crud.list_posts(conn, user)

    @app.get("/post/{post_id}")
    def get_post(post_id: int, user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        with db_session(cfg.DB_DSN) as conn:
            return posts_crud.read_post(conn, post_id, user)

    @app.post("/post")
    def create_post(
        payload: PostCreateRequest,
        user: Dict[str, Any] = Depends(get_current_user),
    ) -> Dict[str, Any]:
        with db_session(cfg.DB_DSN) as conn:
            return posts_crud.create_post(
                conn,
                user_id=int(user["user_id"]),
                title=payload.title,
                content=payload.content,
            )

    @app.delete("/posts/{post_id}")
    def delete_post(post_id: int, user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        with db_session(cfg.DB_DSN) as conn:
            posts_crud.delete_post(conn, post_id, user)
        return {"message": "post_deleted", "id": post_id}

    # -----------------------------
    # Comments
    # -----------------------------

    @app.post("/posts/{post_id}/commentaire")
    @app.post("/posts/{post_id}/comments")
    def create_comment(
        post_id: int,
        payload: CommentCreateRequest,
        user: Dict[str, Any] = Depends(get_current_user),
    ) -> Dict[str, Any]:
        if payload.post_id is not None and int(payload.post_id) != post_id:
            raise ValidationError("post_id_mismatch")
        with db_session(cfg.DB_DSN) as conn:
            return comments_crud.create_comment(
                conn,
                user_id=int(user["user_id"]),
                post_id=post_id,
                title=payload.title,
                content=payload.content,
            )

    @app.get("/posts/{post_id}/comments")
    def list_post_comments(
        post_id: int,
        user: Dict[str, Any] = Depends(get_current_user),
    ) -> List[Dict[str, Any]]:
        with db_session(cfg.DB_DSN) as conn:
            return comments_crud.list_post_comments(conn, post_id, user)

    @app.get("/comments")
    def list_comments(user: Dict[str, Any] = Depends(get_current_user)) -> List[Dict[str, Any]]:
        with db_session(cfg.DB_DSN) as conn:
            return comments_crud.list_comments(conn, user)

    @app.get("/comment/{comment_id}")
    def get_comment(comment_id: int, user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        with db_session(cfg.DB_DSN) as conn:
            return comments_crud.read_comment(conn, comment_id, user)

    @app.delete("/comments/{comment_id}")
    def delete_comment(comment_id: int, user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        with db_session(cfg.DB_DSN) as conn:
            comments_crud.delete_comment(conn, comment_id, user)
        return {"message": "comment_deleted", "id": comment_id}

    return app
