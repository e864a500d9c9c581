"""
Ciclo de vida das atividades: criacao, edicao pelo criador, inscricao com
controle de capacidade e busca por proximidade.

Transicoes de status:
  OPEN -> CLOSED    somente via inscricao que preenche a ultima vaga
  OPEN -> CANCELED  somente via atualizacao feita pelo criador
"""

import logging
import uuid

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from projetopds.database import get_db
from projetopds.exceptions import EntradaInvalida, EstadoInvalido, NaoEncontrado, PermissaoNegada
from projetopds.models.atividade import Atividade, StatusAtividade
from projetopds.paginacao import Pagina, Paginacao
from projetopds.repositories.atividade_repository import AtividadeRepository
from projetopds.repositories.modalidade_repository import ModalidadeRepository
from projetopds.repositories.usuario_repository import UsuarioRepository
from projetopds.schemas.atividade import AtividadeCreate, AtividadeUpdate
from projetopds.schemas.validacao import limpar_cep
from projetopds.services.audit import registrar_audit
from projetopds.services.geocoding import Geocoder, get_geocoder

logger = logging.getLogger(__name__)

MSG_NAO_ABERTA = "Esta atividade não está aberta para inscrições."
MSG_JA_INSCRITO = "Você já está inscrito nesta atividade."
MSG_LOTADA = "Esta atividade já atingiu a capacidade máxima de participantes."
MSG_SEM_COORDENADAS = "Não foi possível obter as coordenadas para o CEP informado."
MSG_SEM_PERMISSAO = "Acesso negado. Você não tem permissão para realizar esta ação."


class AtividadeService:
    def __init__(self, db: AsyncSession, geocoder: Geocoder):
        self.db = db
        self.geocoder = geocoder
        self.atividades = AtividadeRepository(db)
        self.usuarios = UsuarioRepository(db)
        self.modalidades = ModalidadeRepository(db)

    # ── Consultas ────────────────────────────────────────────

    async def obter(self, atividade_id: uuid.UUID) -> Atividade:
        atividade = await self.atividades.obter(atividade_id)
        if atividade is None:
            raise NaoEncontrado(f"Atividade não encontrada: {atividade_id}")
        return atividade

    async def listar(self, paginacao: Paginacao) -> Pagina[Atividade]:
        return await self.atividades.listar(paginacao)

    async def buscar_proximas(
        self, cep: str, raio_km: float, paginacao: Paginacao
    ) -> Pagina[tuple[Atividade, float]]:
        coords = await self.geocoder.obter_coordenadas(cep)
        if coords is None:
            raise NaoEncontrado(MSG_SEM_COORDENADAS, code="CEP_NAO_ENCONTRADO")

        return await self.atividades.buscar_proximas(
            coords.latitude, coords.longitude, raio_km, paginacao
        )

    # ── Escrita ──────────────────────────────────────────────

    async def criar(self, dados: AtividadeCreate, criador_id: uuid.UUID) -> Atividade:
        criador = await self.usuarios.obter(criador_id)
        if criador is None:
            raise NaoEncontrado(f"Usuário não encontrado: {criador_id}")

        nome_modalidade = dados.modalidade.strip().upper()
        modalidade = await self.modalidades.obter_por_nome(nome_modalidade)
        if modalidade is None:
            raise NaoEncontrado(
                f"Modalidade não encontrada: {nome_modalidade}", code="MODALIDADE_INVALIDA"
            )

        # geocoding antes de qualquer escrita: sem coordenadas nada e persistido
        coords = await self.geocoder.obter_coordenadas(dados.cep)
        if coords is None:
            raise EntradaInvalida(MSG_SEM_COORDENADAS, code="COORDENADAS_INDISPONIVEIS")

        atividade = Atividade(
            criador_id=criador.id,
            modalidade_id=modalidade.id,
            titulo=dados.titulo.strip(),
            observacoes=dados.observacoes,
            data=dados.data,
            horario=dados.horario,
            cep=limpar_cep(dados.cep),
            uf=dados.uf.upper(),
            rua=dados.rua.strip(),
            latitude=coords.latitude,
            longitude=coords.longitude,
            capacidade=None if dados.sem_limite else dados.capacidade,
            sem_limite=dados.sem_limite,
            status=StatusAtividade.OPEN.value,
        )
        atividade.criador = criador
        atividade.modalidade = modalidade
        atividade.participantes = [criador]
        self.atividades.adicionar(atividade)
        await self.db.flush()

        await registrar_audit(
            self.db, acao="criar_atividade", usuario_id=criador.id,
            entidade="atividade", entidade_id=str(atividade.id),
            detalhes={"titulo": atividade.titulo, "modalidade": modalidade.nome},
        )
        await self.db.commit()
        logger.info("Atividade %s criada por %s", atividade.id, criador.username)
        return atividade

    async def atualizar(
        self, atividade_id: uuid.UUID, dados: AtividadeUpdate, ator_id: uuid.UUID
    ) -> Atividade:
        atividade = await self.obter(atividade_id)
        if atividade.criador_id != ator_id:
            raise PermissaoNegada(MSG_SEM_PERMISSAO)

        campos = dados.campos_alterados()

        if "status" in campos:
            if campos["status"] != StatusAtividade.CANCELED:
                raise EntradaInvalida("O status só pode ser alterado para CANCELED.")
            campos["status"] = StatusAtividade.CANCELED.value
        if "cep" in campos:
            campos["cep"] = limpar_cep(campos["cep"])
        if "uf" in campos:
            campos["uf"] = campos["uf"].upper()

        status = campos.get("status", atividade.status)
        sem_limite = campos.get("sem_limite", atividade.sem_limite)
        capacidade = None if sem_limite else campos.get("capacidade", atividade.capacidade)
        inscritos = len(atividade.participantes)

        if status == StatusAtividade.CLOSED.value:
            # lotada: limite fica igual ao numero de inscritos
            if sem_limite or capacidade != inscritos:
                raise EntradaInvalida("A capacidade de uma atividade lotada não pode ser alterada.")
        elif not sem_limite:
            minimo = max(inscritos, 2)
            # aberta precisa de vaga livre: so a inscricao leva a CLOSED
            if status == StatusAtividade.OPEN.value:
                minimo = max(inscritos + 1, 2)
            if capacidade is None or capacidade < minimo:
                raise EntradaInvalida(
                    f"A capacidade deve ser no mínimo {minimo} "
                    f"({inscritos} participantes inscritos)."
                )

        if sem_limite:
            campos["capacidade"] = None

        # latitude/longitude ficam como na criacao, mesmo com novo CEP
        for field, value in campos.items():
            setattr(atividade, field, value)

        await registrar_audit(
            self.db, acao="atualizar_atividade", usuario_id=ator_id,
            entidade="atividade", entidade_id=str(atividade.id),
            detalhes={"campos": sorted(campos)},
        )
        await self.db.commit()
        return atividade

    async def inscrever(self, atividade_id: uuid.UUID, ator_id: uuid.UUID) -> None:
        atividade = await self.atividades.obter_para_atualizacao(atividade_id)
        if atividade is None:
            raise NaoEncontrado(f"Atividade não encontrada: {atividade_id}")

        usuario = await self.usuarios.obter(ator_id)
        if usuario is None:
            raise NaoEncontrado(f"Usuário não encontrado: {ator_id}")

        if atividade.status != StatusAtividade.OPEN.value:
            raise EstadoInvalido(MSG_NAO_ABERTA, code="ATIVIDADE_NAO_ABERTA")
        if atividade.is_participante(usuario.id):
            raise EstadoInvalido(MSG_JA_INSCRITO, code="JA_INSCRITO")
        if atividade.lotada:
            raise EstadoInvalido(MSG_LOTADA, code="CAPACIDADE_ATINGIDA")

        atividade.participantes.append(usuario)
        if atividade.lotada:
            atividade.status = StatusAtividade.CLOSED.value
            logger.info("Atividade %s lotada (%d vagas)", atividade.id, atividade.capacidade)

        await registrar_audit(
            self.db, acao="inscrever", usuario_id=usuario.id,
            entidade="atividade", entidade_id=str(atividade.id),
            detalhes={"status": atividade.status},
        )
        await self.db.commit()

    async def excluir(self, atividade_id: uuid.UUID, ator_id: uuid.UUID) -> None:
        atividade = await self.obter(atividade_id)
        if atividade.criador_id != ator_id:
            raise PermissaoNegada(MSG_SEM_PERMISSAO)

        await self.atividades.remover(atividade)
        await registrar_audit(
            self.db, acao="excluir_atividade", usuario_id=ator_id,
            entidade="atividade", entidade_id=str(atividade_id),
            detalhes={"titulo": atividade.titulo},
        )
        await self.db.commit()
        logger.info("Atividade %s excluida", atividade_id)


def get_atividade_service(
    db: AsyncSession = Depends(get_db),
    geocoder: Geocoder = Depends(get_geocoder),
) -> AtividadeService:
    return AtividadeService(db, geocoder)
