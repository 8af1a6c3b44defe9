# permissions.py
# -*- coding: utf-8 -*-
"""
RBAC for the API.
- role_required(...): route decorator, 401 without a valid token, 403 with ``{"error": ...}``
  when the requester's role is not allowed.
- is_admin(user): the one canonical role comparison; every check goes through it.
- can_* helpers: per-action predicates shared by routes and the client editor.

Roles:
- USER: create activities, finish them, comment, edit/delete own comments
- ADMIN: everything USER does plus pinning, editing/deleting activities, managing users
  and any comment, reports
"""

import logging
from functools import wraps
from typing import Iterable

from flask_login import current_user, login_required

from models import Role
from utils import json_error

logger = logging.getLogger(__name__)

FORBIDDEN_MESSAGE = "Acesso negado"


def role_of(user):
    return Role.parse(getattr(user, "role", None))


def is_admin(user) -> bool:
    return role_of(user) is Role.ADMIN


# ----------------------------- BASE DECORATOR ----------------------------- #
def role_required(allowed_roles: Iterable[Role] | Role, message: str = FORBIDDEN_MESSAGE):
    """
    Restrict a route to the given roles.
    Example:
        @role_required(Role.ADMIN, "Somente admin")
        def view(): ...
    """
    if isinstance(allowed_roles, (Role, str)):
        allowed = {Role.parse(allowed_roles)}
    else:
        allowed = {Role.parse(r) for r in allowed_roles}

    def decorator(view_func):
        @wraps(view_func)
        @login_required
        def wrapped(*args, **kwargs):
            if role_of(current_user) in allowed:
                return view_func(*args, **kwargs)
            logger.warning("User %s denied on %s", current_user.username, view_func.__name__)
            return json_error(message, 403)

        return wrapped
    return decorator


# ================================ ACTIONS =================================== #
def _username(user):
    return getattr(user, "username", None)


def can_create_admin(user) -> bool:  return is_admin(user)
def can_pin(user) -> bool:           return is_admin(user)     # Fixar / Alterar usuário
def can_edit_atividade(user) -> bool:    return is_admin(user)
def can_delete_atividade(user) -> bool:  return is_admin(user)


def can_edit_comment(user, autor: str) -> bool:
    return _username(user) == autor or is_admin(user)


def can_delete_comment(user, autor: str) -> bool:
    return _username(user) == autor or is_admin(user)
