"""Activity editor (card) and the board that owns the activity list."""

import logging

import requests

from models import Role
from permissions import (
    can_delete_atividade,
    can_delete_comment,
    can_edit_comment,
    can_pin,
)

from .api import ApiClient, ApiError
from .events import RefreshBus
from .session import CurrentUser, SessionStore

logger = logging.getLogger(__name__)

STATUS_PENDENTE = "pendente"
STATUS_FINALIZADA = "finalizada"

ANONYMOUS = CurrentUser(id=None, username="Desconhecido", role=Role.USER)


def ask(message: str) -> bool:
    return input(f"{message} [s/N] ").strip().lower() in ("s", "sim", "y", "yes")


class AtividadeCard:
    """
    Editing operations on one activity.

    Every operation catches API and network errors, logs them and shows ``alert``;
    it returns True on success. After a successful mutation the card publishes on the
    board's ``RefreshBus`` so the owner re-fetches.
    """

    def __init__(self, api: ApiClient, atividade: dict, bus: RefreshBus | None = None,
                 session: SessionStore | None = None, alert=print, confirm=ask):
        self.api = api
        self.atividade = atividade
        self.bus = bus or RefreshBus()
        self.session = session or api.store
        self.alert = alert
        self.confirm = confirm
        self.loading = False
        self.deleting = False

    # ---------- state ----------
    @property
    def id(self) -> int:
        return self.atividade["id"]

    @property
    def user(self) -> CurrentUser:
        return self.session.current_user() or ANONYMOUS

    @property
    def comentarios(self) -> list:
        return self.atividade.get("comentarios") or []

    @property
    def pendente(self) -> bool:
        return self.atividade.get("status") == STATUS_PENDENTE

    # ---------- what the UI shows ----------
    def pode_concluir(self) -> bool:
        return self.pendente

    def pode_fixar(self) -> bool:
        return can_pin(self.user) and self.pendente

    def pode_alterar_usuario(self) -> bool:
        return can_pin(self.user) and bool(self.atividade.get("assignedTo"))

    def pode_excluir(self) -> bool:
        return can_delete_atividade(self.user)

    def pode_editar_comentario(self, index: int) -> bool:
        comentario = self._comentario(index)
        return comentario is not None and can_edit_comment(self.user, comentario.get("autor"))

    def pode_excluir_comentario(self, index: int) -> bool:
        comentario = self._comentario(index)
        return comentario is not None and can_delete_comment(self.user, comentario.get("autor"))

    # ---------- helpers ----------
    def _failed(self, err: Exception, fallback: str) -> bool:
        logger.error("%s (atividade %s): %s", fallback, self.id, err)
        message = err.message if isinstance(err, ApiError) and err.message else fallback
        self.alert(message)
        return False

    def _notify(self, event: str) -> None:
        self.bus.publish(event, atividade_id=self.id)

    def _comentario(self, index: int) -> dict | None:
        if not 0 <= index < len(self.comentarios):
            return None
        return self.comentarios[index]

    def _comentario_id(self, index: int):
        comentario = self._comentario(index)
        return comentario.get("id") if comentario is not None else None

    # ---------- operations ----------
    def concluir(self) -> bool:
        if self.loading:
            return False
        self.loading = True
        try:
            self.atividade = self.api.update_atividade(self.id, {
                "status": STATUS_FINALIZADA,
                "version": self.atividade.get("version"),
            })
        except (ApiError, requests.RequestException) as err:
            return self._failed(err, "Erro ao concluir a atividade.")
        finally:
            self.loading = False
        self._notify("concluida")
        return True

    def excluir(self) -> bool:
        if self.deleting:
            return False
        if not self.confirm("Tem certeza que deseja excluir esta atividade?"):
            return False
        self.deleting = True
        try:
            self.api.delete_atividade(self.id)
        except (ApiError, requests.RequestException) as err:
            return self._failed(err, "Erro ao deletar atividade.")
        finally:
            self.deleting = False
        self._notify("excluida")
        return True

    def fixar(self, username: str | None) -> bool:
        """Pin to ``username`` (Fixar) or change/clear the pinned user."""
        try:
            self.atividade = self.api.fixar_atividade(self.id, username)
        except (ApiError, requests.RequestException) as err:
            return self._failed(err, "Erro ao fixar atividade.")
        self._notify("fixada")
        return True

    def adicionar_comentario(self, texto: str) -> bool:
        if not texto or not texto.strip():
            return False
        try:
            comentario = self.api.add_comentario(self.id, texto.strip())
        except (ApiError, requests.RequestException) as err:
            return self._failed(err, "Erro ao adicionar comentário.")
        self.atividade["comentarios"] = self.comentarios + [comentario]
        self._notify("comentario")
        return True

    def editar_comentario(self, index: int, texto: str) -> bool:
        """Edit the comment shown at ``index``; the request targets its stable id."""
        if not texto or not texto.strip():
            return False
        comentario_id = self._comentario_id(index)
        if comentario_id is None:
            self.alert("Comentário não encontrado.")
            return False
        try:
            updated = self.api.update_comentario(self.id, comentario_id, texto.strip())
        except (ApiError, requests.RequestException) as err:
            return self._failed(err, "Erro ao atualizar comentário.")
        self.atividade["comentarios"] = [updated if c.get("id") == comentario_id else c
                                         for c in self.comentarios]
        self._notify("comentario")
        return True

    def excluir_comentario(self, index: int) -> bool:
        comentario_id = self._comentario_id(index)
        if comentario_id is None:
            self.alert("Comentário não encontrado.")
            return False
        try:
            self.api.delete_comentario(self.id, comentario_id)
        except (ApiError, requests.RequestException) as err:
            return self._failed(err, "Erro ao deletar comentário.")
        self.atividade["comentarios"] = [c for c in self.comentarios if c.get("id") != comentario_id]
        self._notify("comentario")
        return True


class AtividadesBoard:
    """Owns the activity list and re-fetches it whenever a card publishes."""

    def __init__(self, api: ApiClient, session: SessionStore | None = None,
                 alert=print, confirm=ask, status: str | None = None):
        self.api = api
        self.session = session or api.store
        self.alert = alert
        self.confirm = confirm
        self.status = status
        self.atividades: list[dict] = []
        self.error = ""
        self.bus = RefreshBus()
        self.bus.subscribe(self._on_change)

    def _on_change(self, event: str, **payload) -> None:
        logger.debug("Reloading board after %s %s", event, payload)
        self.reload()

    def reload(self) -> list[dict]:
        """Re-fetch the list; on failure the previous list stays and ``error`` is set."""
        try:
            atividades = self.api.list_atividades(status=self.status)
        except (ApiError, requests.RequestException) as err:
            logger.error("Erro ao carregar atividades: %s", err)
            self.error = err.message if isinstance(err, ApiError) and err.message \
                else "Erro ao carregar atividades."
            self.alert(self.error)
            return self.atividades
        self.error = ""
        self.atividades = atividades
        return self.atividades

    def cards(self) -> list[AtividadeCard]:
        return [AtividadeCard(self.api, a, self.bus, self.session, self.alert, self.confirm)
                for a in self.atividades]

    def card(self, atividade_id: int) -> AtividadeCard:
        for a in self.atividades:
            if a["id"] == atividade_id:
                return AtividadeCard(self.api, a, self.bus, self.session, self.alert, self.confirm)
        raise KeyError(atividade_id)

    def criar(self, title: str, description: str = "", assigned_to: str | None = None) -> dict | None:
        payload = {"title": title, "description": description}
        if assigned_to:
            payload["assignedTo"] = assigned_to
        try:
            atividade = self.api.create_atividade(payload)
        except (ApiError, requests.RequestException) as err:
            logger.error("Erro ao criar atividade: %s", err)
            self.alert(err.message if isinstance(err, ApiError) else "Erro ao criar atividade.")
            return None
        self.bus.publish("criada", atividade_id=atividade["id"])
        return atividade
