import uuid

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from projetopds.models.atividade import Atividade
from projetopds.paginacao import Pagina, Paginacao

RAIO_TERRA_KM = 6371.0


def distancia_km(latitude: float, longitude: float) -> ColumnElement[float]:
    """Distancia (lei dos cossenos esferica) entre o ponto e cada atividade.

    O argumento do acos e limitado a [-1, 1]; erros de arredondamento em
    pontos coincidentes passariam de 1.0.
    """
    lat1 = func.radians(latitude)
    lat2 = func.radians(Atividade.latitude)
    delta_lon = func.radians(Atividade.longitude) - func.radians(longitude)
    cosseno = func.cos(lat1) * func.cos(lat2) * func.cos(delta_lon) + func.sin(lat1) * func.sin(lat2)
    return RAIO_TERRA_KM * func.acos(func.least(1.0, func.greatest(-1.0, cosseno)))


class AtividadeRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def obter(self, atividade_id: uuid.UUID) -> Atividade | None:
        result = await self.db.execute(select(Atividade).where(Atividade.id == atividade_id))
        return result.scalar_one_or_none()

    async def obter_para_atualizacao(self, atividade_id: uuid.UUID) -> Atividade | None:
        """Carrega a atividade com lock de linha (SELECT ... FOR UPDATE)."""
        query = (
            select(Atividade)
            .where(Atividade.id == atividade_id)
            .with_for_update(of=Atividade)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def listar_por_criador(self, criador_id: uuid.UUID) -> list[Atividade]:
        result = await self.db.execute(select(Atividade).where(Atividade.criador_id == criador_id))
        return list(result.scalars().all())

    async def listar(self, paginacao: Paginacao) -> Pagina[Atividade]:
        total_result = await self.db.execute(select(func.count()).select_from(Atividade))
        total = total_result.scalar() or 0

        query = (
            select(Atividade)
            .order_by(Atividade.criado_em.desc(), Atividade.id)
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

    async def buscar_proximas(
        self,
        latitude: float,
        longitude: float,
        raio_km: float,
        paginacao: Paginacao,
    ) -> Pagina[tuple[Atividade, float]]:
        """Atividades dentro do raio, da mais proxima para a mais distante.

        Contagem e pagina usam o mesmo predicado.
        """
        distancia = distancia_km(latitude, longitude)
        filtro = distancia < raio_km

        count_query = select(func.count()).select_from(Atividade).where(filtro)
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        query = (
            select(Atividade, distancia.label("distancia_km"))
            .where(filtro)
            .order_by(distancia, Atividade.id)
            .offset(paginacao.offset)
            .limit(paginacao.size)
        )
        result = await self.db.execute(query)
        items = [(row[0], float(row[1])) for row in result.all()]
        return Pagina(items=items, total=total, page=paginacao.page, size=paginacao.size)

    def adicionar(self, atividade: Atividade) -> None:
        self.db.add(atividade)

    async def remover(self, atividade: Atividade) -> None:
        await self.db.delete(atividade)
