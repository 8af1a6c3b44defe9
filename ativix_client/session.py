"""Locally persisted session: the logged user, their token and the dark-mode flag."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from models import Role

logger = logging.getLogger(__name__)

USER_KEY = "user"
TOKEN_KEY = "token"
DARK_MODE_KEY = "darkMode"


def default_session_path() -> Path:
    home = os.getenv("ATIVIX_HOME") or Path.home() / ".ativix"
    return Path(home) / "session.json"


@dataclass(frozen=True)
class CurrentUser:
    id: int | None
    username: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class SessionStore:
    """JSON file standing in for the browser's local storage."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else default_session_path()

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable session file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    # ---- identity ----
    def current_user(self) -> CurrentUser | None:
        user = self._read().get(USER_KEY)
        if not isinstance(user, dict) or not user.get("username"):
            return None
        return CurrentUser(
            id=user.get("id"),
            username=user["username"],
            role=Role.parse(user.get("role")) or Role.USER,
        )

    @property
    def token(self) -> str | None:
        return self._read().get(TOKEN_KEY)

    def save_login(self, user: dict, token: str) -> None:
        data = self._read()
        data[USER_KEY] = {k: user.get(k) for k in ("id", "name", "username", "role")}
        data[TOKEN_KEY] = token
        self._write(data)

    def clear(self) -> None:
        """Forget user and token; UI preferences stay."""
        data = self._read()
        data.pop(USER_KEY, None)
        data.pop(TOKEN_KEY, None)
        self._write(data)

    # ---- preferences ----
    @property
    def dark_mode(self) -> bool:
        return self._read().get(DARK_MODE_KEY) is True

    @dark_mode.setter
    def dark_mode(self, enabled: bool) -> None:
        data = self._read()
        data[DARK_MODE_KEY] = bool(enabled)
        self._write(data)
