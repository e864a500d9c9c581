"""Initial schema - usuarios, modalidades, atividades e audit_log

Revision ID: 001_initial
Revises:
Create Date: 2026-10-12
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Enable uuid-ossp extension
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # === modalidades ===
    op.create_table(
        "modalidades",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("nome", sa.String(50), unique=True, nullable=False),
    )

    # === usuarios ===
    op.create_table(
        "usuarios",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("uuid_generate_v4()")),
        sa.Column("nome", sa.String(100), nullable=False),
        sa.Column("genero", sa.String(20), nullable=True),
        sa.Column("username", sa.String(50), unique=True, nullable=False),
        sa.Column("email", sa.String(200), unique=True, nullable=False),
        sa.Column("data_nascimento", sa.Date(), nullable=False),
        sa.Column("senha_hash", sa.String(200), nullable=False),
        sa.Column("telefone", sa.String(30), nullable=False),
        sa.Column("cep", sa.String(9), nullable=False),
        sa.Column("uf", sa.String(2), nullable=False),
        sa.Column("rua", sa.String(120), nullable=False),
        sa.Column("data_cadastro", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    # unicidade case-insensitive
    op.create_index("ux_usuarios_email_lower", "usuarios", [sa.text("lower(email)")], unique=True)
    op.create_index("ux_usuarios_username_lower", "usuarios", [sa.text("lower(username)")], unique=True)

    op.create_table(
        "usuario_modalidade",
        sa.Column("usuario_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("usuarios.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("modalidade_id", sa.Integer(), sa.ForeignKey("modalidades.id", ondelete="CASCADE"), primary_key=True),
    )

    # === atividades ===
    op.create_table(
        "atividades",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("uuid_generate_v4()")),
        sa.Column("criador_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("usuarios.id"), nullable=False),
        sa.Column("modalidade_id", sa.Integer(), sa.ForeignKey("modalidades.id"), nullable=False),
        sa.Column("titulo", sa.String(50), nullable=False),
        sa.Column("observacoes", sa.String(500), nullable=True),
        sa.Column("data", sa.Date(), nullable=False),
        sa.Column("horario", sa.Time(), nullable=False),
        sa.Column("cep", sa.String(9), nullable=False),
        sa.Column("uf", sa.String(2), nullable=False),
        sa.Column("rua", sa.String(120), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("capacidade", sa.Integer(), nullable=True),
        sa.Column("sem_limite", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("status", sa.String(20), nullable=False, server_default="OPEN"),
        sa.Column("criado_em", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("atualizado_em", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_atividades_criador_id", "atividades", ["criador_id"])
    op.create_index("ix_atividades_criado_em", "atividades", ["criado_em"])

    op.create_table(
        "atividade_participantes",
        sa.Column("atividade_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("atividades.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("usuario_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("usuarios.id", ondelete="CASCADE"), primary_key=True),
    )

    # === audit_log ===
    op.create_table(
        "audit_log",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("usuario_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True),
        sa.Column("acao", sa.String(100), nullable=False),
        sa.Column("entidade", sa.String(100), nullable=True),
        sa.Column("entidade_id", sa.String(100), nullable=True),
        sa.Column("detalhes", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("atividade_participantes")
    op.drop_table("atividades")
    op.drop_table("usuario_modalidade")
    op.drop_table("usuarios")
    op.drop_table("modalidades")
    op.execute('DROP EXTENSION IF EXISTS "uuid-ossp"')
