"""Login endpoint issuing bearer tokens."""

import logging

from flask import jsonify, request
from flask_login import current_user, login_required

from models import User
from security import token_for, verify_password
from utils import json_error

from . import bp

logger = logging.getLogger(__name__)


@bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""

    user = User.query.filter_by(username=username).first() if username else None
    if not verify_password(user, password):
        logger.info("Failed login for %r", username)
        return json_error("Usuário ou senha inválidos", 401)

    return jsonify(token=token_for(user), user=user.to_dict())


@bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify(current_user.to_dict())
