from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from projetopds.models.modalidade import Modalidade


class ModalidadeRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def listar(self) -> list[Modalidade]:
        result = await self.db.execute(select(Modalidade).order_by(Modalidade.nome))
        return list(result.scalars().all())

    async def obter_por_nome(self, nome: str) -> Modalidade | None:
        result = await self.db.execute(select(Modalidade).where(Modalidade.nome == nome))
        return result.scalar_one_or_none()

    async def listar_por_nomes(self, nomes: list[str]) -> list[Modalidade]:
        if not nomes:
            return []
        result = await self.db.execute(
            select(Modalidade).where(Modalidade.nome.in_(nomes)).order_by(Modalidade.nome)
        )
        return list(result.scalars().all())
