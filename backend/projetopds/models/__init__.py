from projetopds.models.atividade import Atividade, StatusAtividade, atividade_participantes
from projetopds.models.audit_log import AuditLog
from projetopds.models.modalidade import MODALIDADES_PADRAO, Modalidade
from projetopds.models.usuario import Genero, Usuario, usuario_modalidade

__all__ = [
    "Atividade",
    "AuditLog",
    "Genero",
    "MODALIDADES_PADRAO",
    "Modalidade",
    "StatusAtividade",
    "Usuario",
    "atividade_participantes",
    "usuario_modalidade",
]
