import uuid

from fastapi import APIRouter, Depends, Query, Response, status

from projetopds.paginacao import Paginacao
from projetopds.schemas.atividade import (
    AtividadeCreate,
    AtividadeProximaResponse,
    AtividadeResponse,
    AtividadesPaginadas,
    AtividadesProximasPaginadas,
    AtividadeUpdate,
)
from projetopds.security import Principal, get_current_user
from projetopds.services.atividade_service import AtividadeService, get_atividade_service

router = APIRouter(prefix="/atividades", tags=["atividades"])


@router.post("", response_model=AtividadeResponse, status_code=status.HTTP_201_CREATED)
async def create_atividade(
    body: AtividadeCreate,
    response: Response,
    service: AtividadeService = Depends(get_atividade_service),
    principal: Principal = Depends(get_current_user),
):
    atividade = await service.criar(body, principal.id)
    response.headers["Location"] = f"/atividades/{atividade.id}"
    return AtividadeResponse.from_atividade(atividade)


@router.get("", response_model=AtividadesPaginadas)
async def list_atividades(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    service: AtividadeService = Depends(get_atividade_service),
    _principal: Principal = Depends(get_current_user),
):
    pagina = await service.listar(Paginacao(page=page, size=size))
    return AtividadesPaginadas(
        items=[AtividadeResponse.from_atividade(a) for a in pagina.items],
        total=pagina.total,
        page=pagina.page,
        size=pagina.size,
        total_pages=pagina.total_pages,
    )


# Declarada antes de /{atividade_id} para nao ser capturada como id
@router.get("/proximas", response_model=AtividadesProximasPaginadas)
async def list_atividades_proximas(
    cep: str = Query(..., min_length=8, max_length=9),
    distancia: float = Query(10.0, gt=0, description="Raio em km"),
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    service: AtividadeService = Depends(get_atividade_service),
    _principal: Principal = Depends(get_current_user),
):
    pagina = await service.buscar_proximas(cep, distancia, Paginacao(page=page, size=size))
    return AtividadesProximasPaginadas(
        items=[
            AtividadeProximaResponse.from_atividade(a, distancia_km=round(d, 3))
            for a, d in pagina.items
        ],
        total=pagina.total,
        page=pagina.page,
        size=pagina.size,
        total_pages=pagina.total_pages,
    )


@router.get("/{atividade_id}", response_model=AtividadeResponse)
async def get_atividade(
    atividade_id: uuid.UUID,
    service: AtividadeService = Depends(get_atividade_service),
    _principal: Principal = Depends(get_current_user),
):
    atividade = await service.obter(atividade_id)
    return AtividadeResponse.from_atividade(atividade)


@router.put("/{atividade_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_atividade(
    atividade_id: uuid.UUID,
    body: AtividadeUpdate,
    service: AtividadeService = Depends(get_atividade_service),
    principal: Principal = Depends(get_current_user),
):
    await service.atualizar(atividade_id, body, principal.id)


@router.delete("/{atividade_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_atividade(
    atividade_id: uuid.UUID,
    service: AtividadeService = Depends(get_atividade_service),
    principal: Principal = Depends(get_current_user),
):
    await service.excluir(atividade_id, principal.id)


@router.post("/{atividade_id}/inscrever", status_code=status.HTTP_204_NO_CONTENT)
async def inscrever(
    atividade_id: uuid.UUID,
    service: AtividadeService = Depends(get_atividade_service),
    principal: Principal = Depends(get_current_user),
):
    await service.inscrever(atividade_id, principal.id)
