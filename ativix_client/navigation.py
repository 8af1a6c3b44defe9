"""Sidebar / layout shell state: open flag, theme, role menu, logout."""

from navigation import MenuItem, layout_prefix, menu_for_role

from .session import SessionStore

DESKTOP_MIN_WIDTH = 768
LOGOUT_QUESTION = "Tem certeza que deseja sair?"


class NavigationShell:
    def __init__(self, session: SessionStore):
        self.session = session
        self.sidebar_open = False

    # ---- sidebar ----
    def open(self) -> None:
        self.sidebar_open = True

    def close(self) -> None:
        self.sidebar_open = False

    def toggle(self) -> None:
        self.sidebar_open = not self.sidebar_open

    def handle_resize(self, width: int) -> None:
        # the sidebar is always docked on desktop widths
        if width >= DESKTOP_MIN_WIDTH:
            self.sidebar_open = False

    # ---- theme ----
    @property
    def dark_mode(self) -> bool:
        return self.session.dark_mode

    def toggle_dark_mode(self) -> bool:
        self.session.dark_mode = not self.session.dark_mode
        return self.session.dark_mode

    # ---- menu ----
    def _role(self):
        user = self.session.current_user()
        return user.role if user else None

    @property
    def layout_prefix(self) -> str:
        return layout_prefix(self._role())

    def menu(self) -> list[MenuItem]:
        return menu_for_role(self._role())

    def logout(self, confirm) -> str | None:
        """Clear the session after confirmation; returns the route to go to."""
        if not confirm(LOGOUT_QUESTION):
            return None
        self.session.clear()
        self.sidebar_open = False
        return "/"
