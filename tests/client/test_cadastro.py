import pytest

from ativix_client import CadastroUsuarioForm
from models import Role, User


@pytest.fixture()
def find_user(app):
    def find(username):
        with app.app_context():
            return User.query.filter_by(username=username).first()
    return find


def _fill(form, login="novo", senha="abcdef", confirmar=None, nome="Novo Usuário"):
    form.nome = nome
    form.login = login
    form.senha = senha
    form.confirmar_senha = senha if confirmar is None else confirmar


def test_missing_fields(api, regular_user) -> None:
    api.login("maria", "secret123")
    form = CadastroUsuarioForm(api)
    _fill(form, nome="")

    assert form.submit() is False
    assert form.error == "Por favor, preencha todos os campos."


def test_password_mismatch_sends_nothing(api, regular_user, find_user) -> None:
    api.login("maria", "secret123")
    form = CadastroUsuarioForm(api)
    _fill(form, confirmar="abcdeg")

    assert form.submit() is False
    assert form.error
    assert find_user("novo") is None


def test_short_password(api, regular_user) -> None:
    api.login("maria", "secret123")
    form = CadastroUsuarioForm(api)
    _fill(form, senha="abc")

    assert form.submit() is False
    assert "6" in form.error


def test_success_resets_form(api, regular_user, find_user) -> None:
    api.login("maria", "secret123")
    form = CadastroUsuarioForm(api)
    _fill(form)

    assert form.submit() is True
    assert form.success == "Usuário cadastrado com sucesso!"
    assert form.login == ""
    assert find_user("novo").role is Role.USER


def test_admin_option_hidden_for_users(api, regular_user) -> None:
    api.login("maria", "secret123")
    form = CadastroUsuarioForm(api)
    form.is_admin = True

    assert form.mostra_opcao_admin is False
    assert form.role_to_send() == "USER"


def test_admin_creates_admin(api, admin_user, find_user) -> None:
    api.login("admin", "secret123")
    form = CadastroUsuarioForm(api)
    _fill(form, login="chefe")
    form.is_admin = True

    assert form.mostra_opcao_admin is True
    assert form.submit() is True
    assert find_user("chefe").role is Role.ADMIN


def test_duplicate_shows_server_message(api, regular_user) -> None:
    api.login("maria", "secret123")
    form = CadastroUsuarioForm(api)
    _fill(form, login="maria")

    assert form.submit() is False
    assert form.error == "username já existe"
