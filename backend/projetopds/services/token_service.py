"""
TokenService — emissao e verificacao de JWT (HS256) sem estado no servidor.

O subject do token e o email do usuario. A verificacao nunca lanca excecao:
qualquer token malformado, com assinatura errada ou expirado vira ``None``.
"""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from projetopds.config import JWT_MIN_KEY_BYTES, Settings
from projetopds.models.usuario import Usuario

logger = logging.getLogger(__name__)


class TokenService:
    def __init__(
        self,
        chave: bytes,
        algoritmo: str = "HS256",
        expiracao: timedelta = timedelta(hours=8),
        tolerancia: timedelta = timedelta(seconds=60),
    ):
        if len(chave) < JWT_MIN_KEY_BYTES:
            raise ValueError(f"Chave JWT precisa de pelo menos {JWT_MIN_KEY_BYTES} bytes")
        self._chave = chave
        self._algoritmo = algoritmo
        self._expiracao = expiracao
        self._tolerancia = tolerancia

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            chave=settings.jwt_signing_key,
            algoritmo=settings.JWT_ALGORITHM,
            expiracao=timedelta(hours=settings.JWT_EXPIRATION_HOURS),
            tolerancia=timedelta(seconds=settings.JWT_CLOCK_SKEW_SECONDS),
        )

    def emitir(self, usuario: Usuario, agora: datetime | None = None) -> str:
        agora = agora or datetime.now(timezone.utc)
        claims = {
            "sub": usuario.email,
            "iat": int(agora.timestamp()),
            "exp": int((agora + self._expiracao).timestamp()),
        }
        return jwt.encode(claims, self._chave, algorithm=self._algoritmo)

    def verificar(self, token: str, agora: datetime | None = None) -> str | None:
        """Retorna o subject (email) ou None se o token for invalido/expirado."""
        if not token:
            return None
        try:
            # Expiracao validada abaixo, contra o relogio recebido
            claims = jwt.decode(
                token,
                self._chave,
                algorithms=[self._algoritmo],
                options={"verify_exp": False},
            )
        except (JWTError, ValueError) as e:
            logger.debug("JWT rejeitado: %s", e)
            return None

        exp = claims.get("exp")
        sub = claims.get("sub")
        if not isinstance(exp, (int, float)) or not isinstance(sub, str) or not sub:
            return None

        agora = agora or datetime.now(timezone.utc)
        try:
            limite = datetime.fromtimestamp(exp, tz=timezone.utc) + self._tolerancia
        except (OverflowError, OSError, ValueError):
            return None
        if agora >= limite:
            logger.debug("JWT expirado para %s", sub)
            return None
        return sub
