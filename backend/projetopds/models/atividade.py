import enum
import uuid
from datetime import date, datetime, time, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Time,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projetopds.database import Base
from projetopds.models.modalidade import Modalidade
from projetopds.models.usuario import Usuario


class StatusAtividade(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    CANCELED = "CANCELED"


atividade_participantes = Table(
    "atividade_participantes",
    Base.metadata,
    Column("atividade_id", Uuid, ForeignKey("atividades.id", ondelete="CASCADE"), primary_key=True),
    Column("usuario_id", Uuid, ForeignKey("usuarios.id", ondelete="CASCADE"), primary_key=True),
)


class Atividade(Base):
    __tablename__ = "atividades"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    criador_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("usuarios.id"), nullable=False)
    modalidade_id: Mapped[int] = mapped_column(Integer, ForeignKey("modalidades.id"), nullable=False)
    titulo: Mapped[str] = mapped_column(String(50), nullable=False)
    observacoes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    data: Mapped[date] = mapped_column(Date, nullable=False)
    horario: Mapped[time] = mapped_column(Time, nullable=False)
    cep: Mapped[str] = mapped_column(String(9), nullable=False)
    uf: Mapped[str] = mapped_column(String(2), nullable=False)
    rua: Mapped[str] = mapped_column(String(120), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    capacidade: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sem_limite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=StatusAtividade.OPEN.value
    )  # OPEN | CLOSED | CANCELED
    criado_em: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    atualizado_em: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    criador: Mapped[Usuario] = relationship(lazy="selectin")
    modalidade: Mapped[Modalidade] = relationship(lazy="selectin")
    participantes: Mapped[list[Usuario]] = relationship(secondary=atividade_participantes, lazy="selectin")

    def is_participante(self, usuario_id: uuid.UUID) -> bool:
        return any(p.id == usuario_id for p in self.participantes)

    @property
    def lotada(self) -> bool:
        return not self.sem_limite and len(self.participantes) >= (self.capacidade or 0)
