"""Seed modalidades padrao

Revision ID: 002_seed_modalidades
Revises: 001_initial
Create Date: 2026-10-12
"""

from alembic import op
import sqlalchemy as sa

revision = "002_seed_modalidades"
down_revision = "001_initial"
branch_labels = None
depends_on = None

MODALIDADES = [
    "BASQUETE",
    "BOXE",
    "CICLISMO",
    "CORRIDA",
    "FUTEBOL",
    "MUSCULACAO",
    "NATACAO",
    "TENIS",
    "VOLEI",
]


def upgrade() -> None:
    modalidades = sa.table("modalidades", sa.column("nome", sa.String))
    op.bulk_insert(modalidades, [{"nome": nome} for nome in MODALIDADES])


def downgrade() -> None:
    op.execute(
        sa.text("DELETE FROM modalidades WHERE nome IN :nomes").bindparams(
            sa.bindparam("nomes", expanding=True, value=MODALIDADES)
        )
    )
