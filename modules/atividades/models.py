# -*- coding: utf-8 -*-
"""
Activity (Atividade) models.

Tables:
- Atividade  : the ticket: title, description, status, who it is pinned to (Fixar)
                and who finished it (Concluir).
- Comentario : one row per comment with a stable id, ordered by creation.

Status only moves pendente → finalizada. ``version`` is SQLAlchemy's version counter:
every UPDATE checks it, so two writers on the same row cannot silently overwrite each other.
"""

from extensions import db
from utils import iso, utcnow

STATUS_PENDENTE = "pendente"
STATUS_FINALIZADA = "finalizada"
ALLOWED_STATUSES = [STATUS_PENDENTE, STATUS_FINALIZADA]


class Atividade(db.Model):
    __tablename__ = "atividades"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDENTE)
    assigned_to = db.Column(db.String(150), index=True)    # username, plain field
    concluido_por = db.Column(db.String(150), index=True)  # username, plain field
    created_by = db.Column(db.String(150))
    created_at = db.Column(db.DateTime, default=utcnow)
    completed_at = db.Column(db.DateTime)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    version = db.Column(db.Integer, nullable=False)

    comentarios = db.relationship(
        "Comentario",
        back_populates="atividade",
        order_by="Comentario.id",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_finalizada(self) -> bool:
        return self.status == STATUS_FINALIZADA

    def concluir(self, username: str) -> None:
        """Mark as finished by ``username``. Caller checks the transition first."""
        self.status = STATUS_FINALIZADA
        self.concluido_por = username
        self.completed_at = utcnow()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "assignedTo": self.assigned_to,
            "concluidoPor": self.concluido_por,
            "createdBy": self.created_by,
            "comentarios": [c.to_dict() for c in self.comentarios],
            "createdAt": iso(self.created_at),
            "completedAt": iso(self.completed_at),
            "updatedAt": iso(self.updated_at),
            "version": self.version,
        }

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Atividade {self.id}: {self.title}>"


class Comentario(db.Model):
    __tablename__ = "comentarios"

    id = db.Column(db.Integer, primary_key=True)
    atividade_id = db.Column(db.Integer, db.ForeignKey("atividades.id"), nullable=False, index=True)
    autor = db.Column(db.String(150), nullable=False)
    texto = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    atividade = db.relationship("Atividade", back_populates="comentarios")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "autor": self.autor,
            "texto": self.texto,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
