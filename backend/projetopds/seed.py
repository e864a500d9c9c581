"""Seed script — popula as modalidades padrao e um usuario de demonstracao.

Run: python -m projetopds.seed  (from backend/ directory)

Senha do usuario demo: definir via variavel de ambiente ou sera gerada automaticamente.
  SEED_DEMO_PASSWORD=...  python -m projetopds.seed
"""

import asyncio
import os
import secrets
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projetopds.database import async_session
from projetopds.models.modalidade import MODALIDADES_PADRAO, Modalidade
from projetopds.models.usuario import Genero, Usuario
from projetopds.security import hash_password


def _get_password(env_var: str, user_label: str) -> str:
    """Retorna senha da env var ou gera uma aleatoria."""
    pwd = os.environ.get(env_var)
    if pwd:
        return pwd
    pwd = secrets.token_urlsafe(16)
    print(f"  [!] {env_var} nao definida — senha gerada para {user_label}: {pwd}")
    return pwd


DEMO_USER = {
    "nome": "Usuario Demo",
    "username": "demo",
    "email": "demo@projetopds.com.br",
    "genero": Genero.NAO_INFORMAR.value,
    "data_nascimento": date(1995, 1, 1),
    "telefone": "11999999999",
    "cep": "01001000",
    "uf": "SP",
    "rua": "Praça da Sé",
}


async def seed_modalidades(session: AsyncSession) -> list[Modalidade]:
    """Insere as modalidades que faltam; idempotente."""
    result = await session.execute(select(Modalidade))
    existentes = {m.nome: m for m in result.scalars().all()}
    for nome in MODALIDADES_PADRAO:
        if nome not in existentes:
            modalidade = Modalidade(nome=nome)
            session.add(modalidade)
            existentes[nome] = modalidade
            print(f"  [+] Modalidade criada: {nome}")
    await session.flush()
    return [existentes[nome] for nome in MODALIDADES_PADRAO]


async def seed():
    async with async_session() as session:
        modalidades = await seed_modalidades(session)

        result = await session.execute(select(Usuario).where(Usuario.email == DEMO_USER["email"]))
        if result.scalar_one_or_none() is None:
            senha = _get_password("SEED_DEMO_PASSWORD", DEMO_USER["email"])
            usuario = Usuario(**DEMO_USER, senha_hash=hash_password(senha))
            usuario.modalidades = [m for m in modalidades if m.nome in ("CORRIDA", "FUTEBOL")]
            session.add(usuario)
            print(f"  [+] Usuário criado: {DEMO_USER['email']}")
        else:
            print(f"  [=] Usuário já existe: {DEMO_USER['email']}")

        await session.commit()
        print("\nSeed concluido!")


if __name__ == "__main__":
    asyncio.run(seed())
