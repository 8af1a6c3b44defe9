"""User registration form (Cadastro de Usuário)."""

import logging

import requests

from models import Role
from validation import FORM_REQUIRED, validate_registration

from .api import ApiClient, ApiError
from .session import SessionStore

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Usuário cadastrado com sucesso!"
FALLBACK_ERROR = "Erro ao cadastrar usuário. Tente novamente."


class CadastroUsuarioForm:
    def __init__(self, api: ApiClient, session: SessionStore | None = None):
        self.api = api
        self.session = session or api.store
        self.error = ""
        self.success = ""
        self.reset()

    def reset(self) -> None:
        self.nome = ""
        self.login = ""
        self.senha = ""
        self.confirmar_senha = ""
        self.is_admin = False

    @property
    def mostra_opcao_admin(self) -> bool:
        """The "create as administrator" checkbox is only offered to admins."""
        user = self.session.current_user()
        return bool(user and user.is_admin)

    def role_to_send(self) -> str:
        return Role.ADMIN.value if self.mostra_opcao_admin and self.is_admin else Role.USER.value

    def validate(self) -> str | None:
        data = {"name": self.nome, "username": self.login, "password": self.senha}
        return validate_registration(data, required=FORM_REQUIRED, confirmation=self.confirmar_senha)

    def submit(self) -> bool:
        self.error = ""
        self.success = ""

        error = self.validate()
        if error:
            self.error = error
            return False

        try:
            self.api.create_user({
                "name": self.nome.strip(),
                "username": self.login.strip(),
                "password": self.senha,
                "email": "",
                "role": self.role_to_send(),
            })
        except ApiError as err:
            logger.error("Cadastro de %s falhou: %s", self.login, err)
            self.error = err.message or FALLBACK_ERROR
            return False
        except requests.RequestException as err:
            logger.error("Cadastro de %s falhou: %s", self.login, err)
            self.error = FALLBACK_ERROR
            return False

        self.success = SUCCESS_MESSAGE
        self.reset()
        return True
