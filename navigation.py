"""Sidebar menu: a static function of the role, shared by /ui/menu and the client shell."""

from dataclasses import dataclass

from models import Role


@dataclass(frozen=True)
class MenuItem:
    label: str
    path: str

    def to_dict(self) -> dict:
        return {"label": self.label, "path": self.path}


def layout_prefix(role) -> str:
    return "/admin" if Role.parse(role) is Role.ADMIN else "/user"


def menu_for_role(role) -> list[MenuItem]:
    prefix = layout_prefix(role)
    items = [
        MenuItem("Dashboard", f"{prefix}/dashboard"),
        MenuItem("Projetos", f"{prefix}/projetos"),
        MenuItem("Atividades", f"{prefix}/atividades"),
    ]
    if Role.parse(role) is Role.ADMIN:
        items += [
            MenuItem("Cadastro Usuário", "/admin/cadastro-usuario"),
            MenuItem("Relatórios", "/admin/relatorios"),
        ]
    return items
