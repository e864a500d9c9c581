from fastapi import APIRouter, Depends

from projetopds.schemas.auth import LoginRequest, LoginResponse
from projetopds.schemas.usuario import UsuarioResponse
from projetopds.security import Principal, get_current_user, get_token_service
from projetopds.services.token_service import TokenService
from projetopds.services.usuario_service import UsuarioService, get_usuario_service

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    service: UsuarioService = Depends(get_usuario_service),
    token_service: TokenService = Depends(get_token_service),
):
    usuario = await service.autenticar(body.username, body.senha)
    return LoginResponse(
        token=token_service.emitir(usuario),
        usuario=UsuarioResponse.from_usuario(usuario),
    )


@router.get("/me", response_model=UsuarioResponse)
async def me(
    principal: Principal = Depends(get_current_user),
    service: UsuarioService = Depends(get_usuario_service),
):
    usuario = await service.obter(principal.id)
    return UsuarioResponse.from_usuario(usuario)
