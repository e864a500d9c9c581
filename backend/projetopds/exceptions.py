"""
Erros de dominio — cada classe carrega o status HTTP, um codigo legivel
para o front e uma mensagem para humanos.
"""

from fastapi import status


class DomainError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "ERRO"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class NaoEncontrado(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NAO_ENCONTRADO"


class Conflito(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_code = "CONFLITO"


class EntradaInvalida(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "ENTRADA_INVALIDA"


class EstadoInvalido(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "ESTADO_INVALIDO"


class PermissaoNegada(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_code = "PERMISSAO_NEGADA"


class NaoAutenticado(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "NAO_AUTENTICADO"
