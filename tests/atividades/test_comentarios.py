import pytest

from extensions import db
from modules.atividades.models import Atividade, Comentario


def _new_atividade(app, title):
    with app.app_context():
        item = Atividade(title=title)
        db.session.add(item)
        db.session.commit()
        return item.id


@pytest.fixture()
def atividade_id(app):
    return _new_atividade(app, "Revisar contrato")


@pytest.fixture()
def stored_comment(app):
    def get(comentario_id):
        with app.app_context():
            return db.session.get(Comentario, comentario_id)
    return get


def _comment(client, headers, atividade_id, texto):
    response = client.post(f"/atividades/{atividade_id}/comentarios", headers=headers, json={"texto": texto})
    assert response.status_code == 201
    return response.get_json()


def test_comment_author_is_requester(client, user_headers, atividade_id) -> None:
    body = _comment(client, user_headers, atividade_id, "  Em andamento  ")
    assert body["autor"] == "maria"
    assert body["texto"] == "Em andamento"

    listed = client.get(f"/atividades/{atividade_id}", headers=user_headers).get_json()
    assert [c["texto"] for c in listed["comentarios"]] == ["Em andamento"]


def test_empty_comment_is_400(client, user_headers, atividade_id) -> None:
    response = client.post(f"/atividades/{atividade_id}/comentarios", headers=user_headers, json={"texto": "  "})
    assert response.status_code == 400


def test_comment_ids_survive_deleting_an_earlier_comment(client, user_headers, atividade_id) -> None:
    first = _comment(client, user_headers, atividade_id, "primeiro")
    second = _comment(client, user_headers, atividade_id, "segundo")

    client.delete(f"/atividades/{atividade_id}/comentarios/{first['id']}", headers=user_headers)
    edited = client.patch(f"/atividades/{atividade_id}/comentarios/{second['id']}",
                          headers=user_headers, json={"texto": "segundo (editado)"})

    assert edited.status_code == 200
    comentarios = client.get(f"/atividades/{atividade_id}", headers=user_headers).get_json()["comentarios"]
    assert comentarios == [edited.get_json()]


def test_other_user_cannot_edit_or_delete(client, user_headers, auth_headers, other_user,
                                          atividade_id, stored_comment) -> None:
    comentario = _comment(client, user_headers, atividade_id, "meu comentário")
    url = f"/atividades/{atividade_id}/comentarios/{comentario['id']}"
    joao = auth_headers(other_user)

    assert client.patch(url, headers=joao, json={"texto": "invadido"}).status_code == 403
    assert client.delete(url, headers=joao).status_code == 403
    assert stored_comment(comentario["id"]).texto == "meu comentário"


def test_admin_can_edit_and_delete_another_users_comment(client, user_headers, admin_headers,
                                                        atividade_id, stored_comment) -> None:
    comentario = _comment(client, user_headers, atividade_id, "texto com erro")
    url = f"/atividades/{atividade_id}/comentarios/{comentario['id']}"

    edited = client.patch(url, headers=admin_headers, json={"texto": "texto corrigido"})
    assert edited.status_code == 200
    assert edited.get_json()["autor"] == "maria"
    assert stored_comment(comentario["id"]).texto == "texto corrigido"

    assert client.delete(url, headers=admin_headers).status_code == 200
    assert stored_comment(comentario["id"]) is None


def test_comment_of_another_atividade_is_404(app, client, user_headers, atividade_id) -> None:
    other_id = _new_atividade(app, "Outra")
    comentario = _comment(client, user_headers, atividade_id, "aqui")

    response = client.delete(f"/atividades/{other_id}/comentarios/{comentario['id']}", headers=user_headers)
    assert response.status_code == 404


def test_comments_do_not_bump_atividade_version(client, user_headers, atividade_id) -> None:
    _comment(client, user_headers, atividade_id, "um")
    _comment(client, user_headers, atividade_id, "dois")

    response = client.patch(f"/atividades/{atividade_id}", headers=user_headers,
                            json={"status": "finalizada", "version": 1})
    assert response.status_code == 200


def test_deleting_atividade_removes_comments(client, user_headers, admin_headers, atividade_id,
                                             stored_comment) -> None:
    comentario = _comment(client, user_headers, atividade_id, "some junto")
    assert client.delete(f"/atividades/{atividade_id}", headers=admin_headers).status_code == 200
    assert stored_comment(comentario["id"]) is None
