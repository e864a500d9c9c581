import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, PastDate, field_validator

from projetopds.models.usuario import Genero, Usuario
from projetopds.schemas.validacao import Cep, Uf, validar_nao_vazio


def _validar_modalidades(nomes: list[str]) -> list[str]:
    nomes = [validar_nao_vazio(n) for n in nomes]
    if len({n.upper() for n in nomes}) != len(nomes):
        raise ValueError("A lista não pode conter modalidades duplicadas.")
    return nomes


# ── Request schemas ───────────────────────────────────────────


class UsuarioCreate(BaseModel):
    nome: str = Field(min_length=2, max_length=100)
    genero: Genero
    username: str = Field(min_length=2, max_length=50, pattern=r"^[^\s@]+$")
    email: EmailStr
    data_nascimento: PastDate
    senha: str = Field(min_length=8)
    telefone: str = Field(min_length=1, max_length=30)
    cep: Cep
    uf: Uf
    rua: str = Field(min_length=2, max_length=120)
    modalidades_nomes: list[str] = Field(min_length=1)

    @field_validator("modalidades_nomes")
    @classmethod
    def validar_modalidades_nomes(cls, nomes: list[str]) -> list[str]:
        return _validar_modalidades(nomes)


class UsuarioUpdate(BaseModel):
    """Atualizacao parcial: campos ausentes ou nulos nao sao alterados.

    Excecao: ``modalidades_nomes`` presente (mesmo vazio) substitui a lista inteira.
    """

    nome: str | None = Field(default=None, min_length=2, max_length=100)
    genero: Genero | None = None
    username: str | None = Field(default=None, min_length=2, max_length=50, pattern=r"^[^\s@]+$")
    email: EmailStr | None = None
    data_nascimento: PastDate | None = None
    senha: str | None = None
    telefone: str | None = Field(default=None, min_length=1, max_length=30)
    cep: Cep | None = None
    uf: Uf | None = None
    rua: str | None = Field(default=None, min_length=2, max_length=120)
    modalidades_nomes: list[str] | None = None

    @field_validator("senha")
    @classmethod
    def validar_senha(cls, senha: str | None) -> str | None:
        # senha em branco equivale a "nao alterar"
        if senha is not None and senha.strip() and len(senha) < 8:
            raise ValueError("A senha deve ter no mínimo 8 caracteres")
        return senha

    @field_validator("modalidades_nomes")
    @classmethod
    def validar_modalidades_nomes(cls, nomes: list[str] | None) -> list[str] | None:
        return _validar_modalidades(nomes) if nomes is not None else None

    def campos_alterados(self) -> dict:
        """Campos simples a mesclar (presentes e nao nulos), sem senha e modalidades."""
        dados = self.model_dump(exclude_unset=True, exclude_none=True)
        dados.pop("senha", None)
        dados.pop("modalidades_nomes", None)
        return dados

    @property
    def nova_senha(self) -> str | None:
        if self.senha and self.senha.strip():
            return self.senha
        return None

    @property
    def substitui_modalidades(self) -> bool:
        return "modalidades_nomes" in self.model_fields_set and self.modalidades_nomes is not None


# ── Response schemas ──────────────────────────────────────────


class UsuarioResponse(BaseModel):
    id: uuid.UUID
    nome: str
    email: str
    username: str
    genero: str | None
    telefone: str
    cep: str
    uf: str
    rua: str
    modalidades: list[str]
    data_cadastro: datetime | None = None

    @classmethod
    def from_usuario(cls, usuario: Usuario) -> "UsuarioResponse":
        return cls(
            id=usuario.id,
            nome=usuario.nome,
            email=usuario.email,
            username=usuario.username,
            genero=usuario.genero,
            telefone=usuario.telefone,
            cep=usuario.cep,
            uf=usuario.uf,
            rua=usuario.rua,
            modalidades=usuario.modalidades_nomes,
            data_cadastro=usuario.data_cadastro,
        )


class UsuariosPaginados(BaseModel):
    items: list[UsuarioResponse]
    total: int
    page: int
    size: int
    total_pages: int
