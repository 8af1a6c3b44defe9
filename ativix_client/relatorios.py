"""Report screen: one of four modes, chart series, detail rows and file exports."""

import logging
from pathlib import Path

import requests

from reports import chart_series, flatten_report, report_csv, report_pdf, report_xlsx

from .api import REPORT_PATHS, ApiClient, ApiError

logger = logging.getLogger(__name__)

LOAD_ERROR = "Erro ao carregar relatório."

MODES = {
    "usuarios": "Concluídas por Usuário",
    "dia": "Concluídas por Dia",
    "semana": "Concluídas por Semana",
    "fixadas": "Fixadas por Usuário",
}


class RelatoriosView:
    def __init__(self, api: ApiClient, mode: str = "usuarios", alert=print):
        self.api = api
        self.mode = mode
        self.alert = alert
        self.data: dict | None = None
        self.error = ""

    def load(self, mode: str | None = None) -> dict | None:
        """Fetch ``mode``; on an API or network error ``error`` is set and None returned."""
        mode = mode or self.mode
        if mode not in MODES:
            raise ValueError(f"unknown report mode: {mode}")
        self.mode = mode
        self.data = None
        self.error = ""
        try:
            self.data = self.api.relatorio(mode)
        except (ApiError, requests.RequestException) as err:
            logger.error("%s (%s): %s", LOAD_ERROR, mode, err)
            self.error = err.message if isinstance(err, ApiError) and err.message else LOAD_ERROR
            self.alert(self.error)
            return None
        logger.info("Loaded report %s (%s)", mode, REPORT_PATHS[mode])
        return self.data

    def chart_data(self) -> list[dict]:
        return [{"name": name, "count": count} for name, count in chart_series(self.data)]

    def rows(self) -> list[list[str]]:
        return flatten_report(self.data)

    def details(self) -> dict:
        """Nested view (user → key → titles) for the on-screen list."""
        details = {}
        for user, key, title, *_ in self.rows():
            details.setdefault(user, {}).setdefault(key, []).append(title)
        return details

    # ---------- exports ----------
    def _write(self, directory, ext: str, body: bytes) -> Path | None:
        if self.data is None:
            return None
        path = Path(directory) / f"relatorio-{self.mode}.{ext}"
        path.write_bytes(body)
        logger.info("Exported %s", path)
        return path

    def export_csv(self, directory=".") -> Path | None:
        return self._write(directory, "csv", report_csv(self.rows()))

    def export_xlsx(self, directory=".") -> Path | None:
        return self._write(directory, "xlsx", report_xlsx(self.rows(), self.mode))

    def export_pdf(self, directory=".") -> Path | None:
        return self._write(directory, "pdf", report_pdf(self.rows(), self.mode, chart_series(self.data)))
