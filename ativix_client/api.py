"""
Thin HTTP client for the Ativix API.

Each method issues one request and returns the parsed JSON body, or raises
``ApiError`` carrying the server's ``error`` message when there is one.
No retry and no batching; a timeout is only applied when one is given.
"""

import logging
import os

import requests

from .session import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000"
GENERIC_ERROR = "Erro ao comunicar com o servidor."

REPORT_PATHS = {
    "usuarios": "concluidas-por-usuario",
    "dia": "concluidas-por-dia",
    "semana": "concluidas-por-semana",
    "fixadas": "fixadas-por-usuario",
}


class ApiError(Exception):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class ApiClient:
    def __init__(self, base_url: str | None = None, session_store: SessionStore | None = None,
                 timeout: float | None = None):
        self.base_url = (base_url or os.getenv("ATIVIX_API_URL") or DEFAULT_API_URL).rstrip("/")
        self.store = session_store or SessionStore()
        self.timeout = timeout
        self.http = requests.Session()

    # ---------- transport ----------
    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        token = self.store.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(self, method: str, path: str, json=None, params=None):
        url = self.base_url + path
        resp = self.http.request(method, url, json=json, params=params,
                                 headers=self._headers(), timeout=self.timeout)
        if not resp.ok:
            raise ApiError(self._error_message(resp), resp.status_code)
        if not resp.content:
            return None
        return resp.json()

    def download(self, path: str) -> bytes:
        resp = self.http.get(self.base_url + path, headers=self._headers(), timeout=self.timeout)
        if not resp.ok:
            raise ApiError(self._error_message(resp), resp.status_code)
        return resp.content

    @staticmethod
    def _error_message(resp) -> str:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return body["error"]
        return f"{GENERIC_ERROR} (HTTP {resp.status_code})"

    # ---------- auth ----------
    def login(self, username: str, password: str) -> dict:
        body = self.request("POST", "/auth/login", json={"username": username, "password": password})
        self.store.save_login(body["user"], body["token"])
        logger.info("Logged in as %s", username)
        return body["user"]

    def me(self) -> dict:
        return self.request("GET", "/auth/me")

    # ---------- users ----------
    def signup(self, payload: dict) -> dict:
        return self.request("POST", "/users/signup", json=payload)

    def list_users(self) -> list:
        return self.request("GET", "/users")

    def create_user(self, payload: dict) -> dict:
        return self.request("POST", "/users", json=payload)

    def delete_user(self, user_id: int) -> dict:
        return self.request("DELETE", f"/users/{user_id}")

    # ---------- activities ----------
    def list_atividades(self, status: str | None = None, assigned_to: str | None = None) -> list:
        params = {k: v for k, v in {"status": status, "assignedTo": assigned_to}.items() if v}
        return self.request("GET", "/atividades", params=params or None)

    def get_atividade(self, atividade_id: int) -> dict:
        return self.request("GET", f"/atividades/{atividade_id}")

    def create_atividade(self, payload: dict) -> dict:
        return self.request("POST", "/atividades", json=payload)

    def update_atividade(self, atividade_id: int, payload: dict) -> dict:
        return self.request("PATCH", f"/atividades/{atividade_id}", json=payload)

    def fixar_atividade(self, atividade_id: int, username: str | None) -> dict:
        return self.request("PUT", f"/atividades/{atividade_id}/fixar", json={"assignedTo": username})

    def delete_atividade(self, atividade_id: int) -> dict:
        return self.request("DELETE", f"/atividades/{atividade_id}")

    def add_comentario(self, atividade_id: int, texto: str) -> dict:
        return self.request("POST", f"/atividades/{atividade_id}/comentarios", json={"texto": texto})

    def update_comentario(self, atividade_id: int, comentario_id: int, texto: str) -> dict:
        return self.request("PATCH", f"/atividades/{atividade_id}/comentarios/{comentario_id}",
                            json={"texto": texto})

    def delete_comentario(self, atividade_id: int, comentario_id: int) -> dict:
        return self.request("DELETE", f"/atividades/{atividade_id}/comentarios/{comentario_id}")

    # ---------- reports ----------
    def relatorio(self, mode: str) -> dict:
        try:
            path = REPORT_PATHS[mode]
        except KeyError:
            raise ValueError(f"unknown report mode: {mode}") from None
        return self.request("GET", f"/relatorios/{path}")

    def export_relatorio(self, mode: str, fmt: str) -> bytes:
        """Server-rendered export (csv, pdf or xlsx) of a report."""
        if mode not in REPORT_PATHS:
            raise ValueError(f"unknown report mode: {mode}")
        return self.download(f"/relatorios/{REPORT_PATHS[mode]}/export.{fmt}")

    def relatorio_concluidas_por_usuario(self) -> dict:
        return self.relatorio("usuarios")

    def relatorio_concluidas_por_dia(self) -> dict:
        return self.relatorio("dia")

    def relatorio_concluidas_por_semana(self) -> dict:
        return self.relatorio("semana")

    def relatorio_fixadas_por_usuario(self) -> dict:
        return self.relatorio("fixadas")
