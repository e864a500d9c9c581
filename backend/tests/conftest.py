"""Fixtures de teste.

Cada teste recebe um banco SQLite (aiosqlite) proprio, com as modalidades
padrao ja cadastradas. O geocoding real e substituido por um dicionario
CEP -> coordenadas.
"""

from __future__ import annotations

import base64
import math
import os
from collections.abc import AsyncIterator
from datetime import date, time, timedelta
from pathlib import Path

# Configuracao precisa existir antes do primeiro import de projetopds
os.environ["JWT_SECRET_KEY"] = base64.b64encode(b"chave-de-teste-projetopds-0123456789").decode()
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["GEOCODING_OPENCAGE_API_KEY"] = ""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from main import app
from projetopds.database import Base, get_db
from projetopds.schemas.atividade import AtividadeCreate
from projetopds.schemas.usuario import UsuarioCreate
from projetopds.seed import seed_modalidades
from projetopds.services.atividade_service import AtividadeService
from projetopds.schemas.validacao import limpar_cep
from projetopds.services.geocoding import Coordenadas, get_geocoder
from projetopds.services.usuario_service import UsuarioService

# Praca da Se (SP); ~2 km e ~15 km ao norte
PONTO_CENTRAL = Coordenadas(latitude=-23.5505, longitude=-46.6333)
CEP_CENTRAL = "01001000"
CEP_2KM = "01002000"
CEP_15KM = "02015000"
CEP_INEXISTENTE = "99999999"

COORDENADAS_TESTE = {
    CEP_CENTRAL: PONTO_CENTRAL,
    CEP_2KM: Coordenadas(latitude=-23.5505 + 0.018, longitude=-46.6333),
    CEP_15KM: Coordenadas(latitude=-23.5505 + 0.135, longitude=-46.6333),
}


class FakeGeocoder:
    def __init__(self, coordenadas: dict[str, Coordenadas]):
        self.coordenadas = dict(coordenadas)
        self.consultas: list[str] = []

    async def obter_coordenadas(self, cep: str) -> Coordenadas | None:
        self.consultas.append(cep)
        return self.coordenadas.get(limpar_cep(cep))


def _registrar_funcoes_sql(dbapi_conn, _connection_record) -> None:
    """SQLite nao tem trigonometria/least/greatest em todas as builds."""
    dbapi_conn.create_function("radians", 1, math.radians)
    dbapi_conn.create_function("cos", 1, math.cos)
    dbapi_conn.create_function("sin", 1, math.sin)
    dbapi_conn.create_function("acos", 1, math.acos)
    dbapi_conn.create_function("least", -1, min)
    dbapi_conn.create_function("greatest", -1, max)


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    event.listen(engine.sync_engine, "connect", _registrar_funcoes_sql)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        await seed_modalidades(session)
        await session.commit()

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder(COORDENADAS_TESTE)


@pytest.fixture
def usuario_service(db: AsyncSession) -> UsuarioService:
    return UsuarioService(db)


@pytest.fixture
def atividade_service(db: AsyncSession, geocoder: FakeGeocoder) -> AtividadeService:
    return AtividadeService(db, geocoder)


@pytest_asyncio.fixture
async def client(session_factory, geocoder: FakeGeocoder) -> AsyncIterator[AsyncClient]:
    async def _get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


# ── Fabricas de payload ──────────────────────────────────────


def dados_usuario(username: str, **overrides) -> UsuarioCreate:
    dados = {
        "nome": f"Usuario {username}",
        "genero": "NAO_INFORMAR",
        "username": username,
        "email": f"{username}@email.com",
        "data_nascimento": date(1990, 5, 20),
        "senha": "senha-segura-123",
        "telefone": "11988887777",
        "cep": "01001-000",
        "uf": "sp",
        "rua": "Praça da Sé",
        "modalidades_nomes": ["FUTEBOL"],
    }
    dados.update(overrides)
    return UsuarioCreate(**dados)


def dados_atividade(**overrides) -> AtividadeCreate:
    dados = {
        "titulo": "Pelada de domingo",
        "observacoes": "Levar chuteira",
        "data": date.today() + timedelta(days=7),
        "horario": time(9, 30),
        "cep": CEP_CENTRAL,
        "uf": "SP",
        "rua": "Praça da Sé",
        "capacidade": 10,
        "modalidade": "futebol",
        "sem_limite": False,
    }
    dados.update(overrides)
    return AtividadeCreate(**dados)


def payload_usuario(username: str, **overrides) -> dict:
    return dados_usuario(username, **overrides).model_dump(mode="json")


def payload_atividade(**overrides) -> dict:
    return dados_atividade(**overrides).model_dump(mode="json")
