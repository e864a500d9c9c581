"""Regras de formato compartilhadas entre os schemas de usuario e atividade."""

import re
from typing import Annotated

from pydantic import AfterValidator

UFS = {
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO", "MA", "MT", "MS", "MG", "PA",
    "PB", "PR", "PE", "PI", "RJ", "RN", "RS", "RO", "RR", "SC", "SP", "SE", "TO",
}

_CEP_RE = re.compile(r"^\d{5}-?\d{3}$")


def validar_cep(cep: str) -> str:
    cep = cep.strip()
    if not _CEP_RE.match(cep):
        raise ValueError("CEP deve estar no formato 00000-000")
    return cep


def limpar_cep(cep: str) -> str:
    """Somente os digitos do CEP."""
    return re.sub(r"\D", "", cep or "")


def validar_uf(uf: str) -> str:
    uf = uf.strip()
    if uf.upper() not in UFS:
        raise ValueError("UF inválida")
    return uf


def validar_nao_vazio(valor: str) -> str:
    if not valor.strip():
        raise ValueError("campo obrigatorio")
    return valor.strip()


Cep = Annotated[str, AfterValidator(validar_cep)]
Uf = Annotated[str, AfterValidator(validar_uf)]
