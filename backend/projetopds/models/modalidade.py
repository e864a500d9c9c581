from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from projetopds.database import Base

MODALIDADES_PADRAO = [
    "BASQUETE",
    "BOXE",
    "CICLISMO",
    "CORRIDA",
    "FUTEBOL",
    "MUSCULACAO",
    "NATACAO",
    "TENIS",
    "VOLEI",
]


class Modalidade(Base):
    __tablename__ = "modalidades"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
