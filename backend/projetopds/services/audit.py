"""
Servico de Audit Logging — registra acoes de negocio no banco para rastreabilidade.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from projetopds.models.audit_log import AuditLog


async def registrar_audit(
    db: AsyncSession,
    acao: str,
    usuario_id: uuid.UUID | None = None,
    entidade: str | None = None,
    entidade_id: str | None = None,
    detalhes: dict | None = None,
) -> None:
    """Registra uma entrada no audit_log (gravada no commit da requisicao)."""
    log = AuditLog(
        usuario_id=usuario_id,
        acao=acao,
        entidade=entidade,
        entidade_id=entidade_id,
        detalhes=detalhes,
    )
    db.add(log)
