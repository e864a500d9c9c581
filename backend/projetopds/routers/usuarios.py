from fastapi import APIRouter, Depends, Query, Response, status

from projetopds.paginacao import Paginacao
from projetopds.schemas.usuario import (
    UsuarioCreate,
    UsuarioResponse,
    UsuariosPaginados,
    UsuarioUpdate,
)
from projetopds.security import Principal, get_current_user
from projetopds.services.usuario_service import UsuarioService, get_usuario_service

router = APIRouter(prefix="/users", tags=["usuarios"])


@router.post("/register", response_model=UsuarioResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: UsuarioCreate,
    response: Response,
    service: UsuarioService = Depends(get_usuario_service),
):
    usuario = await service.registrar(body)
    response.headers["Location"] = f"/users/{usuario.id}"
    return UsuarioResponse.from_usuario(usuario)


@router.get("", response_model=UsuariosPaginados)
async def list_usuarios(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    service: UsuarioService = Depends(get_usuario_service),
    _principal: Principal = Depends(get_current_user),
):
    pagina = await service.listar(Paginacao(page=page, size=size))
    return UsuariosPaginados(
        items=[UsuarioResponse.from_usuario(u) for u in pagina.items],
        total=pagina.total,
        page=pagina.page,
        size=pagina.size,
        total_pages=pagina.total_pages,
    )


@router.get("/{username}", response_model=UsuarioResponse)
async def get_usuario(
    username: str,
    service: UsuarioService = Depends(get_usuario_service),
    _principal: Principal = Depends(get_current_user),
):
    usuario = await service.obter_por_username(username)
    return UsuarioResponse.from_usuario(usuario)


@router.put("", response_model=UsuarioResponse)
async def update_usuario(
    body: UsuarioUpdate,
    service: UsuarioService = Depends(get_usuario_service),
    principal: Principal = Depends(get_current_user),
):
    usuario = await service.atualizar(principal.id, body)
    return UsuarioResponse.from_usuario(usuario)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    service: UsuarioService = Depends(get_usuario_service),
    principal: Principal = Depends(get_current_user),
):
    await service.excluir_proprio(principal.id)
