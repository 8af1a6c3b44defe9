"""Python client for the Ativix API: session, HTTP client and screen logic."""

from .api import ApiClient, ApiError
from .atividades import AtividadeCard, AtividadesBoard
from .cadastro import CadastroUsuarioForm
from .events import RefreshBus
from .navigation import NavigationShell
from .relatorios import RelatoriosView
from .session import CurrentUser, SessionStore

__all__ = [
    "ApiClient",
    "ApiError",
    "AtividadeCard",
    "AtividadesBoard",
    "CadastroUsuarioForm",
    "CurrentUser",
    "NavigationShell",
    "RefreshBus",
    "RelatoriosView",
    "SessionStore",
]
