"""Activities (atividades) module package."""

from flask import Blueprint

bp = Blueprint("atividades", __name__, url_prefix="/atividades")

from . import models  # noqa: E402  pylint: disable=wrong-import-position
from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "models", "routes"]
