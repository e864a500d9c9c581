import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from projetopds.models.atividade import atividade_participantes
from projetopds.models.usuario import Usuario
from projetopds.paginacao import Pagina, Paginacao


class UsuarioRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def obter(self, usuario_id: uuid.UUID) -> Usuario | None:
        result = await self.db.execute(select(Usuario).where(Usuario.id == usuario_id))
        return result.scalar_one_or_none()

    async def obter_por_email(self, email: str) -> Usuario | None:
        result = await self.db.execute(
            select(Usuario).where(func.lower(Usuario.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def obter_por_username(self, username: str) -> Usuario | None:
        result = await self.db.execute(
            select(Usuario).where(func.lower(Usuario.username) == username.strip().lower())
        )
        return result.scalar_one_or_none()

    async def listar(self, paginacao: Paginacao) -> Pagina[Usuario]:
        total_result = await self.db.execute(select(func.count()).select_from(Usuario))
        total = total_result.scalar() or 0

        query = (
            select(Usuario)
            .order_by(Usuario.data_cadastro.desc(), Usuario.id)
            .offset(paginacao.offset)
            .limit(paginacao.size)
        )
        result = await self.db.execute(query)
        return Pagina(
            items=list(result.scalars().all()),
            total=total,
            page=paginacao.page,
            size=paginacao.size,
        )

    def adicionar(self, usuario: Usuario) -> None:
        self.db.add(usuario)

    async def remover(self, usuario: Usuario) -> None:
        """Remove o usuario e suas inscricoes em atividades de terceiros."""
        await self.db.execute(
            delete(atividade_participantes).where(atividade_participantes.c.usuario_id == usuario.id)
        )
        await self.db.delete(usuario)
