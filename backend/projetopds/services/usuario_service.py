"""
Cadastro, autenticacao e perfil de usuarios.

Email e username sao guardados em minusculas; toda comparacao e
case-insensitive. A senha so e persistida como hash bcrypt.
"""

import logging
import uuid

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from projetopds.database import get_db
from projetopds.exceptions import Conflito, EntradaInvalida, NaoAutenticado, NaoEncontrado
from projetopds.models.modalidade import Modalidade
from projetopds.models.usuario import Usuario
from projetopds.paginacao import Pagina, Paginacao
from projetopds.repositories.atividade_repository import AtividadeRepository
from projetopds.repositories.modalidade_repository import ModalidadeRepository
from projetopds.repositories.usuario_repository import UsuarioRepository
from projetopds.schemas.usuario import UsuarioCreate, UsuarioUpdate
from projetopds.schemas.validacao import limpar_cep
from projetopds.security import hash_password, verify_password
from projetopds.services.audit import registrar_audit

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "EMAIL_TAKEN"
USERNAME_TAKEN = "USERNAME_TAKEN"
MODALIDADE_INVALIDA = "MODALIDADE_INVALIDA"


class UsuarioService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.usuarios = UsuarioRepository(db)
        self.modalidades = ModalidadeRepository(db)
        self.atividades = AtividadeRepository(db)

    # ── Consultas ────────────────────────────────────────────

    async def obter(self, usuario_id: uuid.UUID) -> Usuario:
        usuario = await self.usuarios.obter(usuario_id)
        if usuario is None:
            raise NaoEncontrado(f"Usuário não encontrado: {usuario_id}")
        return usuario

    async def obter_por_username(self, username: str) -> Usuario:
        usuario = await self.usuarios.obter_por_username(username)
        if usuario is None:
            raise NaoEncontrado(f"Usuario não encontrado com username: {username}")
        return usuario

    async def listar(self, paginacao: Paginacao) -> Pagina[Usuario]:
        return await self.usuarios.listar(paginacao)

    # ── Autenticacao ─────────────────────────────────────────

    async def autenticar(self, login: str, senha: str) -> Usuario:
        """Valida credenciais; ``login`` pode ser email ou username."""
        if "@" in login:
            usuario = await self.usuarios.obter_por_email(login)
        else:
            usuario = await self.usuarios.obter_por_username(login)

        if usuario is None or not verify_password(senha, usuario.senha_hash):
            raise NaoAutenticado("Usuário ou senha inválidos", code="CREDENCIAIS_INVALIDAS")

        await registrar_audit(
            self.db, acao="login", usuario_id=usuario.id,
            entidade="usuario", entidade_id=str(usuario.id),
        )
        await self.db.commit()
        return usuario

    # ── Cadastro ─────────────────────────────────────────────

    async def registrar(self, dados: UsuarioCreate) -> Usuario:
        email = dados.email.lower()
        username = dados.username.strip().lower()

        # email antes de username, ambos antes de qualquer escrita
        if await self.usuarios.obter_por_email(email) is not None:
            raise Conflito("E-mail já cadastrado", code=EMAIL_TAKEN)
        if await self.usuarios.obter_por_username(username) is not None:
            raise Conflito("Este username já está em uso", code=USERNAME_TAKEN)

        modalidades = await self._resolver_modalidades(dados.modalidades_nomes)

        usuario = Usuario(
            nome=dados.nome.strip(),
            genero=dados.genero.value,
            username=username,
            email=email,
            data_nascimento=dados.data_nascimento,
            senha_hash=hash_password(dados.senha),
            telefone=dados.telefone.strip(),
            cep=limpar_cep(dados.cep),
            uf=dados.uf.upper(),
            rua=dados.rua.strip(),
        )
        usuario.modalidades = modalidades
        self.usuarios.adicionar(usuario)
        await self._flush_unico(None, email, username)

        await registrar_audit(
            self.db, acao="registrar_usuario", usuario_id=usuario.id,
            entidade="usuario", entidade_id=str(usuario.id),
            detalhes={"username": username},
        )
        await self.db.commit()
        logger.info("Usuario registrado: %s", username)
        return usuario

    # ── Perfil ───────────────────────────────────────────────

    async def atualizar(self, usuario_id: uuid.UUID, dados: UsuarioUpdate) -> Usuario:
        usuario = await self.obter(usuario_id)
        campos = dados.campos_alterados()

        if "email" in campos:
            campos["email"] = campos["email"].lower()
            if campos["email"] != usuario.email:
                existente = await self.usuarios.obter_por_email(campos["email"])
                if existente is not None and existente.id != usuario.id:
                    raise Conflito("E-mail já cadastrado", code=EMAIL_TAKEN)

        if "username" in campos:
            campos["username"] = campos["username"].strip().lower()
            if campos["username"] != usuario.username:
                existente = await self.usuarios.obter_por_username(campos["username"])
                if existente is not None and existente.id != usuario.id:
                    raise Conflito("Este username já está em uso", code=USERNAME_TAKEN)

        if "cep" in campos:
            campos["cep"] = limpar_cep(campos["cep"])
        if "uf" in campos:
            campos["uf"] = campos["uf"].upper()
        if "genero" in campos:
            campos["genero"] = dados.genero.value

        modalidades = None
        if dados.substitui_modalidades:
            modalidades = await self._resolver_modalidades(dados.modalidades_nomes)

        for field, value in campos.items():
            setattr(usuario, field, value)

        if dados.nova_senha is not None:
            usuario.senha_hash = hash_password(dados.nova_senha)

        # lista de modalidades informada substitui a anterior por completo
        if modalidades is not None:
            usuario.modalidades = modalidades
        await self._flush_unico(usuario_id, usuario.email, usuario.username)

        await registrar_audit(
            self.db, acao="atualizar_usuario", usuario_id=usuario.id,
            entidade="usuario", entidade_id=str(usuario.id),
            detalhes={"campos": sorted(campos) + (["senha"] if dados.nova_senha else [])},
        )
        await self.db.commit()
        return usuario

    async def excluir_proprio(self, usuario_id: uuid.UUID) -> None:
        usuario = await self.obter(usuario_id)

        # atividades criadas saem primeiro (FK criador_id)
        criadas = await self.atividades.listar_por_criador(usuario.id)
        for atividade in criadas:
            await self.atividades.remover(atividade)
        await self.db.flush()

        await self.usuarios.remover(usuario)
        await registrar_audit(
            self.db, acao="excluir_usuario", entidade="usuario",
            entidade_id=str(usuario_id),
            detalhes={"username": usuario.username, "atividades_removidas": len(criadas)},
        )
        await self.db.commit()
        logger.info("Usuario %s excluido (%d atividades removidas)", usuario.username, len(criadas))

    # ── Helpers ──────────────────────────────────────────────

    async def _flush_unico(self, usuario_id: uuid.UUID | None, email: str, username: str) -> None:
        """Flush que traduz violacao de unicidade (cadastro concorrente) em 409.

        A linha concorrente ja esta gravada; apos o rollback as mesmas
        consultas da validacao dizem qual campo colidiu.
        """
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            existente = await self.usuarios.obter_por_email(email)
            if existente is not None and existente.id != usuario_id:
                raise Conflito("E-mail já cadastrado", code=EMAIL_TAKEN)
            existente = await self.usuarios.obter_por_username(username)
            if existente is not None and existente.id != usuario_id:
                raise Conflito("Este username já está em uso", code=USERNAME_TAKEN)
            raise

    async def _resolver_modalidades(self, nomes: list[str]) -> list[Modalidade]:
        """Resolve nomes (maiusculos) exigindo que todos existam."""
        normalizados = [n.strip().upper() for n in nomes]
        encontradas = await self.modalidades.listar_por_nomes(normalizados)
        if len(encontradas) != len(normalizados):
            raise EntradaInvalida("Uma ou mais modalidades não existem.", code=MODALIDADE_INVALIDA)
        return encontradas


def get_usuario_service(db: AsyncSession = Depends(get_db)) -> UsuarioService:
    return UsuarioService(db)
