"""HTTP routes for users: public listing and signup, admin-panel creation, deletion."""

import logging

from flask import abort, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy.exc import IntegrityError

from extensions import db
from models import Role, User
from permissions import can_create_admin, role_required
from security import hash_password
from validation import MISSING_FIELDS, missing_fields, validate_password
from utils import json_error

from . import bp

logger = logging.getLogger(__name__)

DUPLICATE_USERNAME = "username já existe"
ADMIN_ONLY_CREATE = "Somente administradores podem criar outros administradores."


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _create(data: dict, role: Role):
    """Persist a user after the caller decided the role. Returns a response tuple."""
    if User.query.filter_by(username=data["username"].strip()).first():
        return json_error(DUPLICATE_USERNAME, 400)

    user = User(
        name=(data.get("name") or "").strip() or None,
        username=data["username"].strip(),
        email=(data.get("email") or "").strip() or None,
        password=hash_password(data["password"]),
        role=role,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # lost a race against a concurrent signup with the same username
        db.session.rollback()
        return json_error(DUPLICATE_USERNAME, 400)

    logger.info("Created user %s with role %s", user.username, role.value)
    return jsonify(user.to_dict()), 201


@bp.route("", methods=["GET"])
def list_users():
    users = User.query.order_by(User.id.asc()).all()
    return jsonify([u.to_dict() for u in users])


@bp.route("/signup", methods=["POST"])
def signup():
    """Public form: any role in the body is ignored, the account is always USER."""
    data = _payload()
    if missing_fields(data):
        return json_error(MISSING_FIELDS, 400)
    error = validate_password(data.get("password"))
    if error:
        return json_error(error, 400)
    return _create(data, Role.USER)


@bp.route("", methods=["POST"])
@login_required
def create_user():
    data = _payload()
    if missing_fields(data):
        return json_error(MISSING_FIELDS, 400)

    requested = Role.parse(data.get("role"))
    if requested is Role.ADMIN and not can_create_admin(current_user):
        logger.warning("User %s tried to create an ADMIN account", current_user.username)
        return json_error(ADMIN_ONLY_CREATE, 403)

    error = validate_password(data.get("password"))
    if error:
        return json_error(error, 400)

    # anything that is not ADMIN (absent, invalid, USER) becomes USER
    role = Role.ADMIN if requested is Role.ADMIN else Role.USER
    return _create(data, role)


@bp.route("/<int:user_id>", methods=["GET"])
@login_required
def get_user(user_id: int):
    user = db.session.get(User, user_id) or abort(404, description="Usuário não encontrado")
    return jsonify(user.to_dict())


@bp.route("/<int:user_id>", methods=["DELETE"])
@role_required(Role.ADMIN, "Somente admin")
def delete_user(user_id: int):
    user = db.session.get(User, user_id) or abort(404, description="Usuário não encontrado")
    db.session.delete(user)
    db.session.commit()
    logger.info("User %s deleted by %s", user.username, current_user.username)
    return jsonify(success=True)
