"""HTTP routes for activity reports and their server-side exports."""

from flask import abort, jsonify, make_response

from models import Role
from reports import EXPORTERS, export_report
from permissions import role_required
from utils import utcnow

from . import bp
from .grouping import REPORTS

REPORT_FORBIDDEN = "Somente administradores podem ver relatórios."


def _build(mode: str) -> dict:
    builder = REPORTS.get(mode) or abort(404, description=f"Relatório desconhecido: {mode}")
    return builder()


@bp.route("/<string:mode>")
@role_required(Role.ADMIN, REPORT_FORBIDDEN)
def report(mode: str):
    return jsonify(_build(mode))


@bp.route("/<string:mode>/export.<string:fmt>")
@role_required(Role.ADMIN, REPORT_FORBIDDEN)
def export(mode: str, fmt: str):
    if fmt not in EXPORTERS:
        abort(404, description=f"Formato desconhecido: {fmt}")
    body, content_type = export_report(_build(mode), fmt, mode)
    resp = make_response(body)
    resp.headers["Content-Type"] = content_type
    resp.headers["Content-Disposition"] = \
        f"attachment; filename=relatorio-{mode}_{utcnow():%Y%m%d_%H%M%S}.{fmt}"
    return resp
