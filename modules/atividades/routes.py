"""HTTP routes for activities and their comments."""

import logging

from flask import abort, jsonify, request
from flask_login import current_user, login_required

from extensions import db
from models import Role, User
from permissions import (
    can_delete_comment,
    can_edit_atividade,
    can_edit_comment,
    can_pin,
    role_required,
)
from utils import json_error

from . import bp
from .models import ALLOWED_STATUSES, STATUS_FINALIZADA, Atividade, Comentario

logger = logging.getLogger(__name__)

STALE_VERSION = "Atividade modificada por outro usuário. Recarregue e tente novamente."
INVALID_ASSIGNEE = "assignedTo deve ser um nome de usuário ou null"


# ---------- helpers ----------
def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _get_atividade(atividade_id: int) -> Atividade:
    return db.session.get(Atividade, atividade_id) or abort(404, description="Atividade não encontrada")


def _get_comentario(atividade: Atividade, comentario_id: int) -> Comentario:
    comentario = db.session.get(Comentario, comentario_id)
    if comentario is None or comentario.atividade_id != atividade.id:
        abort(404, description="Comentário não encontrado")
    return comentario


def _text(data: dict, key: str):
    value = data.get(key)
    return value.strip() if isinstance(value, str) else None


def _resolve_assignee(value):
    """Return (username or None, error message or None) for ``assignedTo``.

    ``None`` clears the pin; anything else must be the username of an existing user.
    """
    if value is None:
        return None, None
    if not isinstance(value, str) or not value.strip():
        return None, INVALID_ASSIGNEE
    username = value.strip()
    if User.query.filter_by(username=username).first() is None:
        return None, f"Usuário '{username}' não encontrado"
    return username, None


# ---------- activities ----------
@bp.route("", methods=["GET"])
@login_required
def list_atividades():
    query = Atividade.query
    status = request.args.get("status")
    if status:
        query = query.filter_by(status=status)
    assigned = request.args.get("assignedTo")
    if assigned:
        query = query.filter_by(assigned_to=assigned)
    items = query.order_by(Atividade.created_at.desc(), Atividade.id.desc()).all()
    return jsonify([a.to_dict() for a in items])


@bp.route("/<int:atividade_id>", methods=["GET"])
@login_required
def get_atividade(atividade_id: int):
    return jsonify(_get_atividade(atividade_id).to_dict())


@bp.route("", methods=["POST"])
@login_required
def create_atividade():
    data = _payload()
    title = _text(data, "title")
    if not title:
        return json_error("title obrigatório", 400)

    assigned_to = None
    if data.get("assignedTo") is not None:
        if not can_pin(current_user):
            return json_error("Somente administradores podem fixar atividades.", 403)
        assigned_to, error = _resolve_assignee(data["assignedTo"])
        if error:
            return json_error(error, 400)

    atividade = Atividade(
        title=title,
        description=_text(data, "description"),
        assigned_to=assigned_to,
        created_by=current_user.username,
    )
    db.session.add(atividade)
    db.session.commit()
    logger.info("Atividade %s created by %s", atividade.id, current_user.username)
    return jsonify(atividade.to_dict()), 201


@bp.route("/<int:atividade_id>", methods=["PATCH", "PUT"])
@login_required
def update_atividade(atividade_id: int):
    """
    Partial update.
    - status: only ``finalizada`` on a pending activity; the completer is the requester,
      whatever ``concluidoPor`` the body carries.
    - title / description: ADMIN only.
    - version: when sent, must match the stored one.
    Comments are not accepted here, they have their own endpoints.
    """
    atividade = _get_atividade(atividade_id)
    data = _payload()

    if "comentarios" in data:
        return json_error("Use /atividades/<id>/comentarios para alterar comentários", 400)

    if data.get("version") is not None:
        try:
            expected = int(data["version"])
        except (TypeError, ValueError):
            return json_error("version inválida", 400)
        if expected != atividade.version:
            return json_error(STALE_VERSION, 409)

    if ("title" in data or "description" in data) and not can_edit_atividade(current_user):
        return json_error("Somente administradores podem editar atividades.", 403)

    title = _text(data, "title")
    if "title" in data and not title:
        return json_error("title obrigatório", 400)

    finalizar = False
    if "status" in data:
        status = data.get("status")
        if status not in ALLOWED_STATUSES:
            return json_error(f"status inválido: {status}", 400)
        if atividade.is_finalizada:
            if status == STATUS_FINALIZADA:
                return json_error("Atividade já finalizada.", 400)
            return json_error("Uma atividade finalizada não pode ser reaberta.", 400)
        finalizar = status == STATUS_FINALIZADA

    # everything validated, apply
    if "title" in data:
        atividade.title = title
    if "description" in data:
        atividade.description = _text(data, "description")
    if finalizar:
        atividade.concluir(current_user.username)
        logger.info("Atividade %s finished by %s", atividade.id, current_user.username)

    db.session.commit()
    return jsonify(atividade.to_dict())


@bp.route("/<int:atividade_id>/fixar", methods=["PUT", "POST"])
@role_required(Role.ADMIN, "Somente administradores podem fixar atividades.")
def fixar_atividade(atividade_id: int):
    """Pin the activity to a user (``assignedTo``) or unpin it with ``null``."""
    atividade = _get_atividade(atividade_id)
    data = _payload()
    if "assignedTo" not in data:
        return json_error("assignedTo obrigatório (null para desafixar)", 400)
    assigned_to, error = _resolve_assignee(data["assignedTo"])
    if error:
        return json_error(error, 400)
    atividade.assigned_to = assigned_to
    db.session.commit()
    logger.info("Atividade %s pinned to %s by %s", atividade.id, assigned_to, current_user.username)
    return jsonify(atividade.to_dict())


@bp.route("/<int:atividade_id>", methods=["DELETE"])
@role_required(Role.ADMIN, "Somente admin")
def delete_atividade(atividade_id: int):
    atividade = _get_atividade(atividade_id)
    db.session.delete(atividade)
    db.session.commit()
    logger.info("Atividade %s deleted by %s", atividade_id, current_user.username)
    return jsonify(success=True)


# ---------- comments ----------
@bp.route("/<int:atividade_id>/comentarios", methods=["POST"])
@login_required
def add_comentario(atividade_id: int):
    atividade = _get_atividade(atividade_id)
    texto = _text(_payload(), "texto")
    if not texto:
        return json_error("texto obrigatório", 400)

    comentario = Comentario(atividade_id=atividade.id, autor=current_user.username, texto=texto)
    db.session.add(comentario)
    db.session.commit()
    return jsonify(comentario.to_dict()), 201


@bp.route("/<int:atividade_id>/comentarios/<int:comentario_id>", methods=["PATCH", "PUT"])
@login_required
def update_comentario(atividade_id: int, comentario_id: int):
    atividade = _get_atividade(atividade_id)
    comentario = _get_comentario(atividade, comentario_id)
    if not can_edit_comment(current_user, comentario.autor):
        return json_error("Somente o autor ou um administrador pode editar este comentário.", 403)

    texto = _text(_payload(), "texto")
    if not texto:
        return json_error("texto obrigatório", 400)
    comentario.texto = texto
    db.session.commit()
    return jsonify(comentario.to_dict())


@bp.route("/<int:atividade_id>/comentarios/<int:comentario_id>", methods=["DELETE"])
@login_required
def delete_comentario(atividade_id: int, comentario_id: int):
    atividade = _get_atividade(atividade_id)
    comentario = _get_comentario(atividade, comentario_id)
    if not can_delete_comment(current_user, comentario.autor):
        return json_error("Somente o autor ou um administrador pode excluir este comentário.", 403)

    db.session.delete(comentario)
    db.session.commit()
    return jsonify(success=True)
