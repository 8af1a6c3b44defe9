"""Reports: grouping modes, admin-only access and server-side exports."""

import csv
import io
from datetime import datetime

import pytest
from openpyxl import load_workbook
from reportlab.platypus import Paragraph

from extensions import db
from modules.atividades.models import STATUS_FINALIZADA, Atividade
from reports import (
    PDF_COL_WIDTHS,
    REPORT_HEADER,
    flatten_report,
    pdf_table,
    pdf_table_data,
    report_csv,
    report_pdf,
)


def _finished(title, user, when):
    return Atividade(title=title, status=STATUS_FINALIZADA, concluido_por=user, completed_at=when)


@pytest.fixture()
def atividades(app):
    with app.app_context():
        db.session.add_all([
            _finished("Backup", "maria", datetime(2024, 3, 4, 9, 0)),
            _finished("Restore", "maria", datetime(2024, 3, 5, 10, 30)),
            _finished("Firewall", "joao", datetime(2024, 3, 11, 15, 0)),
            Atividade(title="Pendente fixada", assigned_to="joao"),
            Atividade(title="Solta"),
        ])
        db.session.commit()


def test_reports_are_admin_only(client, user_headers, admin_headers, atividades) -> None:
    response = client.get("/relatorios/concluidas-por-usuario", headers=user_headers)
    assert response.status_code == 403
    assert client.get("/relatorios/concluidas-por-usuario").status_code == 401
    assert client.get("/relatorios/concluidas-por-usuario/export.csv", headers=user_headers).status_code == 403
    assert client.get("/relatorios/concluidas-por-usuario", headers=admin_headers).status_code == 200


def test_concluidas_por_usuario(client, admin_headers, atividades) -> None:
    body = client.get("/relatorios/concluidas-por-usuario", headers=admin_headers).get_json()

    assert sorted(body) == ["joao", "maria"]
    assert [a["title"] for a in body["maria"]] == ["Backup", "Restore"]
    assert [a["title"] for a in body["joao"]] == ["Firewall"]


def test_concluidas_por_dia(client, admin_headers, atividades) -> None:
    body = client.get("/relatorios/concluidas-por-dia", headers=admin_headers).get_json()
    assert sorted(body["maria"]) == ["2024-03-04", "2024-03-05"]
    assert list(body["joao"]) == ["2024-03-11"]


def test_concluidas_por_semana(client, admin_headers, atividades) -> None:
    body = client.get("/relatorios/concluidas-por-semana", headers=admin_headers).get_json()
    assert list(body["maria"]) == ["2024-W10"]
    assert len(body["maria"]["2024-W10"]) == 2
    assert list(body["joao"]) == ["2024-W11"]


def test_fixadas_por_usuario(client, admin_headers, atividades) -> None:
    body = client.get("/relatorios/fixadas-por-usuario", headers=admin_headers).get_json()
    assert list(body) == ["joao"]
    assert [a["title"] for a in body["joao"]] == ["Pendente fixada"]


def test_unknown_mode_is_404(client, admin_headers) -> None:
    assert client.get("/relatorios/por-humor", headers=admin_headers).status_code == 404


def test_csv_export(client, admin_headers, atividades) -> None:
    response = client.get("/relatorios/concluidas-por-usuario/export.csv", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["Content-Type"].startswith("text/csv")
    assert "relatorio-concluidas-por-usuario_" in response.headers["Content-Disposition"]
    text = response.get_data().decode("utf-8-sig")
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == REPORT_HEADER
    assert [r[2] for r in rows[1:]] == ["Firewall", "Backup", "Restore"]


def test_pdf_export(client, admin_headers, atividades) -> None:
    response = client.get("/relatorios/concluidas-por-dia/export.pdf", headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "application/pdf"
    assert response.get_data().startswith(b"%PDF")


def test_xlsx_export(client, admin_headers, atividades) -> None:
    response = client.get("/relatorios/fixadas-por-usuario/export.xlsx", headers=admin_headers)
    assert response.status_code == 200

    ws = load_workbook(io.BytesIO(response.get_data())).active
    values = [list(r) for r in ws.iter_rows(values_only=True)]
    assert values[0] == REPORT_HEADER
    assert values[1][:3] == ["joao", "-", "Pendente fixada"]


def test_unknown_format_is_404(client, admin_headers) -> None:
    response = client.get("/relatorios/concluidas-por-usuario/export.doc", headers=admin_headers)
    assert response.status_code == 404


# ---------- flattening ----------
SAMPLE = {
    "ana": {"2024-03-04": [{"title": "A", "status": "finalizada"}],
            "2024-03-05": [{"title": None, "status": "finalizada"}]},
    "bia": {"2024-03-04": [{"title": "C", "status": "finalizada", "completedAt": "2024-03-04T08:15:00"}]},
}


def test_flatten_visits_every_activity_once() -> None:
    rows = flatten_report(SAMPLE)
    assert [(r[0], r[1], r[2]) for r in rows] == [
        ("ana", "2024-03-04", "A"),
        ("ana", "2024-03-05", "(sem título)"),
        ("bia", "2024-03-04", "C"),
    ]
    assert rows[2][5] == "04/03/2024 08:15"


def test_flatten_empty_report() -> None:
    assert flatten_report({}) == []
    assert flatten_report(None) == []


def test_csv_and_pdf_list_the_same_rows() -> None:
    rows = flatten_report(SAMPLE)
    text = report_csv(rows).decode("utf-8-sig")
    assert list(csv.reader(io.StringIO(text))) == pdf_table_data(rows)


def test_pdf_cells_wrap_inside_the_page() -> None:
    long_title = " ".join(["Migração do servidor de arquivos do setor financeiro"] * 6)
    rows = flatten_report({"ana": [{"title": long_title, "status": "finalizada",
                                     "createdAt": "2024-03-04T08:15:00"}]})

    table = pdf_table(rows)
    width, height = table.wrap(sum(PDF_COL_WIDTHS), 10_000)

    assert all(isinstance(cell, Paragraph) for row in table._cellvalues for cell in row)
    assert width <= sum(PDF_COL_WIDTHS)
    assert height > 2 * 20
    assert report_pdf(rows, "longo").startswith(b"%PDF")
