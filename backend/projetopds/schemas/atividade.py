import uuid
from datetime import date, datetime, time

from pydantic import BaseModel, Field, field_validator, model_validator

from projetopds.models.atividade import Atividade, StatusAtividade
from projetopds.schemas.validacao import Cep, Uf


def _nao_passada(data: date | None) -> date | None:
    if data is not None and data < date.today():
        raise ValueError("nao pode ser uma data passada")
    return data


# ── Request schemas ───────────────────────────────────────────


class AtividadeCreate(BaseModel):
    titulo: str = Field(min_length=2, max_length=50)
    observacoes: str | None = Field(default=None, max_length=500)
    data: date
    horario: time
    cep: Cep
    uf: Uf
    rua: str = Field(min_length=2, max_length=120)
    capacidade: int | None = None
    modalidade: str = Field(min_length=1)
    sem_limite: bool = False

    @field_validator("data")
    @classmethod
    def validar_data(cls, data: date) -> date:
        return _nao_passada(data)

    @model_validator(mode="after")
    def validar_capacidade(self) -> "AtividadeCreate":
        # o criador ja ocupa uma vaga
        if not self.sem_limite and (self.capacidade is None or self.capacidade < 2):
            raise ValueError("capacidade deve ser no minimo 2 quando a atividade tem limite")
        return self


class AtividadeUpdate(BaseModel):
    """Todos os campos opcionais; ausentes ou nulos mantem o valor atual."""

    titulo: str | None = Field(default=None, min_length=2, max_length=50)
    observacoes: str | None = Field(default=None, max_length=500)
    data: date | None = None
    horario: time | None = None
    cep: Cep | None = None
    uf: Uf | None = None
    rua: str | None = Field(default=None, min_length=2, max_length=120)
    capacidade: int | None = Field(default=None, ge=2)
    sem_limite: bool | None = None
    status: StatusAtividade | None = None

    @field_validator("data")
    @classmethod
    def validar_data(cls, data: date | None) -> date | None:
        return _nao_passada(data)

    def campos_alterados(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


# ── Response schemas ──────────────────────────────────────────


class AtividadeResponse(BaseModel):
    id: uuid.UUID
    titulo: str
    observacoes: str | None
    data: date
    horario: time
    cep: str
    uf: str
    rua: str
    latitude: float
    longitude: float
    status: str
    capacidade: int | None
    sem_limite: bool
    criador_id: uuid.UUID
    criador_nome: str | None = None
    modalidade_nome: str | None = None
    participantes_count: int
    criado_em: datetime | None = None
    atualizado_em: datetime | None = None

    @classmethod
    def from_atividade(cls, atividade: Atividade, **extra) -> "AtividadeResponse":
        return cls(
            id=atividade.id,
            titulo=atividade.titulo,
            observacoes=atividade.observacoes,
            data=atividade.data,
            horario=atividade.horario,
            cep=atividade.cep,
            uf=atividade.uf,
            rua=atividade.rua,
            latitude=atividade.latitude,
            longitude=atividade.longitude,
            status=atividade.status,
            capacidade=atividade.capacidade,
            sem_limite=atividade.sem_limite,
            criador_id=atividade.criador_id,
            criador_nome=atividade.criador.nome if atividade.criador else None,
            modalidade_nome=atividade.modalidade.nome if atividade.modalidade else None,
            participantes_count=len(atividade.participantes),
            criado_em=atividade.criado_em,
            atualizado_em=atividade.atualizado_em,
            **extra,
        )


class AtividadeProximaResponse(AtividadeResponse):
    distancia_km: float


class AtividadesPaginadas(BaseModel):
    items: list[AtividadeResponse]
    total: int
    page: int
    size: int
    total_pages: int


class AtividadesProximasPaginadas(BaseModel):
    items: list[AtividadeProximaResponse]
    total: int
    page: int
    size: int
    total_pages: int
