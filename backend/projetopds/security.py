import logging
import uuid
from dataclasses import dataclass, field
from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from projetopds.config import settings
from projetopds.database import get_db
from projetopds.exceptions import NaoAutenticado
from projetopds.models.usuario import Usuario
from projetopds.repositories.usuario_repository import UsuarioRepository
from projetopds.services.token_service import TokenService

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)
# Sem auto_error: ausencia de token nao e erro aqui, so nas rotas protegidas
security_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


@dataclass(frozen=True)
class Principal:
    """Credencial do usuario autenticado, desacoplada da entidade Usuario."""

    id: uuid.UUID
    email: str
    senha_hash: str
    authorities: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_usuario(cls, usuario: Usuario) -> "Principal":
        return cls(id=usuario.id, email=usuario.email, senha_hash=usuario.senha_hash)


@lru_cache
def get_token_service() -> TokenService:
    return TokenService.from_settings(settings)


async def get_optional_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
    db: AsyncSession = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> Principal | None:
    """Resolve o principal do bearer token; token ausente ou invalido vira None."""
    if credentials is None or not credentials.credentials.strip():
        return None

    subject = token_service.verificar(credentials.credentials)
    if subject is None:
        logger.debug("Token invalido ou expirado")
        return None

    user = await UsuarioRepository(db).obter_por_email(subject)
    if user is None:
        logger.debug("Usuario do token nao encontrado: %s", subject)
        return None
    return Principal.from_usuario(user)


async def get_current_user(
    principal: Principal | None = Depends(get_optional_principal),
) -> Principal:
    if principal is None:
        raise NaoAutenticado("Token inválido ou expirado")
    return principal
