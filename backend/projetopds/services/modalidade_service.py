from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from projetopds.database import get_db
from projetopds.models.modalidade import Modalidade
from projetopds.repositories.modalidade_repository import ModalidadeRepository


class ModalidadeService:
    def __init__(self, db: AsyncSession):
        self.modalidades = ModalidadeRepository(db)

    async def listar(self) -> list[Modalidade]:
        return await self.modalidades.listar()


def get_modalidade_service(db: AsyncSession = Depends(get_db)) -> ModalidadeService:
    return ModalidadeService(db)
