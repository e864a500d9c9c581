import enum
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from projetopds.database import Base
from projetopds.models.modalidade import Modalidade


class Genero(str, enum.Enum):
    MASCULINO = "MASCULINO"
    FEMININO = "FEMININO"
    NAO_INFORMAR = "NAO_INFORMAR"
    OUTRO = "OUTRO"


usuario_modalidade = Table(
    "usuario_modalidade",
    Base.metadata,
    Column("usuario_id", Uuid, ForeignKey("usuarios.id", ondelete="CASCADE"), primary_key=True),
    Column("modalidade_id", Integer, ForeignKey("modalidades.id", ondelete="CASCADE"), primary_key=True),
)


class Usuario(Base):
    __tablename__ = "usuarios"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    nome: Mapped[str] = mapped_column(String(100), nullable=False)
    genero: Mapped[str | None] = mapped_column(String(20), nullable=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    data_nascimento: Mapped[date] = mapped_column(Date, nullable=False)
    senha_hash: Mapped[str] = mapped_column(String(200), nullable=False)
    telefone: Mapped[str] = mapped_column(String(30), nullable=False)
    cep: Mapped[str] = mapped_column(String(9), nullable=False)
    uf: Mapped[str] = mapped_column(String(2), nullable=False)
    rua: Mapped[str] = mapped_column(String(120), nullable=False)
    data_cadastro: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    modalidades: Mapped[list[Modalidade]] = relationship(
        secondary=usuario_modalidade, lazy="selectin", order_by=Modalidade.nome
    )

    @property
    def modalidades_nomes(self) -> list[str]:
        return [m.nome for m in self.modalidades]
