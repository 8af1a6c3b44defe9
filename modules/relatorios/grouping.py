"""Grouped report payloads over activities."""

from modules.atividades.models import STATUS_FINALIZADA, Atividade

SEM_USUARIO = "(sem usuário)"


def _finalizadas():
    return (Atividade.query
            .filter_by(status=STATUS_FINALIZADA)
            .order_by(Atividade.concluido_por.asc(), Atividade.completed_at.asc(), Atividade.id.asc())
            .all())


def _group(atividades, user_of, key_of=None) -> dict:
    data = {}
    for a in atividades:
        user = user_of(a) or SEM_USUARIO
        if key_of is None:
            data.setdefault(user, []).append(a.to_dict())
        else:
            data.setdefault(user, {}).setdefault(key_of(a), []).append(a.to_dict())
    # same key order as the JSON body, which is serialised with sorted keys
    return {
        user: group if isinstance(group, list) else dict(sorted(group.items()))
        for user, group in sorted(data.items())
    }


def _dia(a: Atividade) -> str:
    return a.completed_at.date().isoformat() if a.completed_at else "-"


def _semana(a: Atividade) -> str:
    if not a.completed_at:
        return "-"
    year, week, _ = a.completed_at.isocalendar()
    return f"{year}-W{week:02d}"


def concluidas_por_usuario() -> dict:
    return _group(_finalizadas(), lambda a: a.concluido_por)


def concluidas_por_dia() -> dict:
    return _group(_finalizadas(), lambda a: a.concluido_por, _dia)


def concluidas_por_semana() -> dict:
    return _group(_finalizadas(), lambda a: a.concluido_por, _semana)


def fixadas_por_usuario() -> dict:
    atividades = (Atividade.query
                  .filter(Atividade.assigned_to.isnot(None))
                  .order_by(Atividade.assigned_to.asc(), Atividade.created_at.asc(), Atividade.id.asc())
                  .all())
    return _group(atividades, lambda a: a.assigned_to)


REPORTS = {
    "concluidas-por-usuario": concluidas_por_usuario,
    "concluidas-por-dia": concluidas_por_dia,
    "concluidas-por-semana": concluidas_por_semana,
    "fixadas-por-usuario": fixadas_por_usuario,
}
