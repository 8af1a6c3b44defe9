"""Password hashing, bearer tokens and the Flask-Login request loader."""

import logging
from datetime import timedelta

import jwt
from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db, login_manager
from models import User
from utils import json_error, utcnow

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(user: User | None, password: str) -> bool:
    return bool(user and password and check_password_hash(user.password, password))


def create_access_token(user_id: int, username: str, role: str, hours: int | None = None) -> str:
    """Sign a token carrying the requester identity used by protected routes."""
    cfg = current_app.config
    expires = utcnow() + timedelta(hours=hours or cfg["JWT_EXPIRES_HOURS"])
    payload = {"id": user_id, "username": username, "role": role, "exp": expires}
    return jwt.encode(payload, cfg["JWT_SECRET"], algorithm=cfg["JWT_ALGORITHM"])


def token_for(user: User) -> str:
    return create_access_token(user.id, user.username, user.role.value)


def decode_access_token(token: str) -> dict | None:
    cfg = current_app.config
    try:
        return jwt.decode(token, cfg["JWT_SECRET"], algorithms=[cfg["JWT_ALGORITHM"]])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired bearer token")
    except jwt.InvalidTokenError:
        logger.info("Rejected invalid bearer token")
    return None


def bearer_token(headers) -> str | None:
    auth_header = headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


@login_manager.user_loader
def load_user(user_id: str | None) -> User | None:
    if not user_id:
        return None
    return db.session.get(User, int(user_id))


@login_manager.request_loader
def load_user_from_request(request) -> User | None:
    """Resolve ``current_user`` from ``Authorization: Bearer <token>``.

    The row is re-read on every request so a deleted user or a changed role
    takes effect before the token expires.
    """
    token = bearer_token(request.headers)
    if token is None:
        return None
    payload = decode_access_token(token)
    if not payload or "id" not in payload:
        return None
    return db.session.get(User, int(payload["id"]))


@login_manager.unauthorized_handler
def unauthorized():
    return json_error("Token ausente, inválido ou expirado", 401)
