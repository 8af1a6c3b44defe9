# ui_routes.py: support endpoints for the SPA shell: role menu and dashboard KPIs
from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from extensions import db
from modules.atividades.models import STATUS_FINALIZADA, STATUS_PENDENTE, Atividade
from navigation import layout_prefix, menu_for_role

ui = Blueprint("ui", __name__, url_prefix="/ui")


@ui.route("/menu")
@login_required
def menu():
    return jsonify(
        layout=layout_prefix(current_user.role),
        items=[item.to_dict() for item in menu_for_role(current_user.role)],
    )


@ui.route("/dashboard")
@login_required
def dashboard():
    query = db.session.query(Atividade)
    return jsonify(
        total=query.count(),
        pendentes=query.filter(Atividade.status == STATUS_PENDENTE).count(),
        finalizadas=query.filter(Atividade.status == STATUS_FINALIZADA).count(),
        fixadas_para_mim=query.filter(Atividade.assigned_to == current_user.username,
                                      Atividade.status == STATUS_PENDENTE).count(),
        concluidas_por_mim=query.filter(Atividade.concluido_por == current_user.username).count(),
    )
