import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from conftest import dados_atividade, dados_usuario
from projetopds.exceptions import Conflito, EntradaInvalida, NaoAutenticado, NaoEncontrado
from projetopds.models.atividade import Atividade
from projetopds.models.audit_log import AuditLog
from projetopds.models.usuario import Usuario
from projetopds.paginacao import Paginacao
from projetopds.schemas.usuario import UsuarioUpdate
from projetopds.security import verify_password


@pytest.mark.asyncio
async def test_registrar_normaliza_cep_e_uf(usuario_service):
    usuario = await usuario_service.registrar(dados_usuario("ana", cep="01001-000", uf="sp"))

    assert usuario.cep == "01001000"
    assert usuario.uf == "SP"
    assert usuario.modalidades_nomes == ["FUTEBOL"]
    assert usuario.senha_hash != "senha-segura-123"
    assert verify_password("senha-segura-123", usuario.senha_hash)


@pytest.mark.asyncio
async def test_registrar_email_e_username_em_minusculas(usuario_service):
    usuario = await usuario_service.registrar(
        dados_usuario("Ana.Silva", email="Ana.Silva@Email.com")
    )
    assert usuario.username == "ana.silva"
    assert usuario.email == "ana.silva@email.com"


@pytest.mark.asyncio
async def test_registrar_modalidade_inexistente(usuario_service, db):
    with pytest.raises(EntradaInvalida) as exc:
        await usuario_service.registrar(dados_usuario("ana", modalidades_nomes=["FUTEBOL", "XADREZ"]))

    assert exc.value.code == "MODALIDADE_INVALIDA"
    total = (await db.execute(select(func.count()).select_from(Usuario))).scalar()
    assert total == 0


@pytest.mark.asyncio
async def test_registrar_modalidades_case_insensitive(usuario_service):
    usuario = await usuario_service.registrar(
        dados_usuario("ana", modalidades_nomes=["corrida", "Futebol"])
    )
    assert usuario.modalidades_nomes == ["CORRIDA", "FUTEBOL"]


@pytest.mark.asyncio
async def test_email_duplicado_ignora_caixa(usuario_service):
    await usuario_service.registrar(dados_usuario("ana", email="ana@email.com"))

    with pytest.raises(Conflito) as exc:
        await usuario_service.registrar(dados_usuario("outra", email="ANA@Email.com"))
    assert exc.value.code == "EMAIL_TAKEN"

    novo = await usuario_service.registrar(dados_usuario("bia"))
    assert novo.email == "bia@email.com"


@pytest.mark.asyncio
async def test_email_verificado_antes_do_username(usuario_service):
    await usuario_service.registrar(dados_usuario("ana"))

    with pytest.raises(Conflito) as exc:
        await usuario_service.registrar(dados_usuario("ANA", email="ana@email.com"))
    assert exc.value.code == "EMAIL_TAKEN"

    with pytest.raises(Conflito) as exc:
        await usuario_service.registrar(dados_usuario("ANA", email="nova@email.com"))
    assert exc.value.code == "USERNAME_TAKEN"


@pytest.mark.asyncio
async def test_autenticar_por_email_ou_username(usuario_service):
    usuario = await usuario_service.registrar(dados_usuario("ana"))

    assert (await usuario_service.autenticar("ANA", "senha-segura-123")).id == usuario.id
    assert (await usuario_service.autenticar("Ana@Email.com", "senha-segura-123")).id == usuario.id

    with pytest.raises(NaoAutenticado):
        await usuario_service.autenticar("ana", "senha-errada")
    with pytest.raises(NaoAutenticado):
        await usuario_service.autenticar("ninguem", "senha-segura-123")


@pytest.mark.asyncio
async def test_atualizar_parcial(usuario_service):
    usuario = await usuario_service.registrar(dados_usuario("ana"))
    hash_antigo = usuario.senha_hash

    atualizado = await usuario_service.atualizar(
        usuario.id, UsuarioUpdate(nome="Ana Maria", uf="rj", senha="  ")
    )

    assert atualizado.nome == "Ana Maria"
    assert atualizado.uf == "RJ"
    assert atualizado.email == "ana@email.com"
    assert atualizado.cep == "01001000"
    assert atualizado.modalidades_nomes == ["FUTEBOL"]
    assert atualizado.senha_hash == hash_antigo


@pytest.mark.asyncio
async def test_atualizar_senha(usuario_service):
    usuario = await usuario_service.registrar(dados_usuario("ana"))
    await usuario_service.atualizar(usuario.id, UsuarioUpdate(senha="nova-senha-456"))

    assert (await usuario_service.autenticar("ana", "nova-senha-456")).id == usuario.id
    with pytest.raises(NaoAutenticado):
        await usuario_service.autenticar("ana", "senha-segura-123")


@pytest.mark.asyncio
async def test_atualizar_modalidades_substitui_lista(usuario_service):
    usuario = await usuario_service.registrar(dados_usuario("ana", modalidades_nomes=["FUTEBOL", "VOLEI"]))

    atualizado = await usuario_service.atualizar(usuario.id, UsuarioUpdate(modalidades_nomes=["natacao"]))
    assert atualizado.modalidades_nomes == ["NATACAO"]

    atualizado = await usuario_service.atualizar(usuario.id, UsuarioUpdate(modalidades_nomes=[]))
    assert atualizado.modalidades_nomes == []


@pytest.mark.asyncio
async def test_atualizar_modalidade_inexistente(usuario_service):
    usuario = await usuario_service.registrar(dados_usuario("ana"))

    with pytest.raises(EntradaInvalida) as exc:
        await usuario_service.atualizar(usuario.id, UsuarioUpdate(modalidades_nomes=["XADREZ"]))
    assert exc.value.code == "MODALIDADE_INVALIDA"


@pytest.mark.asyncio
async def test_atualizar_email_ja_usado(usuario_service):
    await usuario_service.registrar(dados_usuario("ana"))
    bia = await usuario_service.registrar(dados_usuario("bia"))

    with pytest.raises(Conflito) as exc:
        await usuario_service.atualizar(bia.id, UsuarioUpdate(email="ANA@email.com"))
    assert exc.value.code == "EMAIL_TAKEN"

    with pytest.raises(Conflito) as exc:
        await usuario_service.atualizar(bia.id, UsuarioUpdate(username="Ana"))
    assert exc.value.code == "USERNAME_TAKEN"


@pytest.mark.asyncio
async def test_atualizar_mantendo_proprio_email(usuario_service):
    ana = await usuario_service.registrar(dados_usuario("ana"))
    atualizado = await usuario_service.atualizar(ana.id, UsuarioUpdate(email="ANA@email.com", username="ana"))
    assert atualizado.email == "ana@email.com"


@pytest.mark.asyncio
async def test_obter_por_username(usuario_service):
    ana = await usuario_service.registrar(dados_usuario("ana"))
    assert (await usuario_service.obter_por_username("ANA")).id == ana.id

    with pytest.raises(NaoEncontrado):
        await usuario_service.obter_por_username("ninguem")


@pytest.mark.asyncio
async def test_listar_paginado(usuario_service):
    for nome in ("ana", "bia", "caio"):
        await usuario_service.registrar(dados_usuario(nome))

    pagina = await usuario_service.listar(Paginacao(page=1, size=2))
    assert pagina.total == 3
    assert pagina.total_pages == 2
    assert len(pagina.items) == 1


@pytest.mark.asyncio
async def test_excluir_proprio_remove_atividades_e_inscricoes(usuario_service, atividade_service, db):
    ana = await usuario_service.registrar(dados_usuario("ana"))
    bia = await usuario_service.registrar(dados_usuario("bia"))

    da_ana = await atividade_service.criar(dados_atividade(titulo="Da Ana"), ana.id)
    da_bia = await atividade_service.criar(dados_atividade(titulo="Da Bia"), bia.id)
    await atividade_service.inscrever(da_bia.id, ana.id)
    await atividade_service.inscrever(da_ana.id, bia.id)

    await usuario_service.excluir_proprio(ana.id)

    db.expunge_all()
    assert await db.get(Usuario, ana.id) is None
    assert await db.get(Atividade, da_ana.id) is None

    restante = await db.get(Atividade, da_bia.id)
    assert [p.username for p in restante.participantes] == ["bia"]

    log = (
        await db.execute(select(AuditLog).where(AuditLog.acao == "excluir_usuario"))
    ).scalar_one()
    assert log.entidade_id == str(ana.id)
    assert log.detalhes["atividades_removidas"] == 1


def _primeira_consulta_nao_encontra(monkeypatch, repo, metodo: str) -> None:
    """Simula cadastro concorrente: a verificacao previa nao enxerga a outra linha."""
    original = getattr(repo, metodo)
    chamadas = []

    async def consulta(valor):
        chamadas.append(valor)
        if len(chamadas) == 1:
            return None
        return await original(valor)

    monkeypatch.setattr(repo, metodo, consulta)


@pytest.mark.asyncio
async def test_registro_concorrente_mesmo_email_vira_conflito(usuario_service, monkeypatch):
    await usuario_service.registrar(dados_usuario("ana"))
    _primeira_consulta_nao_encontra(monkeypatch, usuario_service.usuarios, "obter_por_email")

    with pytest.raises(Conflito) as exc:
        await usuario_service.registrar(dados_usuario("outra", email="ana@email.com"))
    assert exc.value.code == "EMAIL_TAKEN"


@pytest.mark.asyncio
async def test_registro_concorrente_mesmo_username_vira_conflito(usuario_service, monkeypatch):
    await usuario_service.registrar(dados_usuario("ana"))
    _primeira_consulta_nao_encontra(monkeypatch, usuario_service.usuarios, "obter_por_username")

    with pytest.raises(Conflito) as exc:
        await usuario_service.registrar(dados_usuario("ana", email="nova@email.com"))
    assert exc.value.code == "USERNAME_TAKEN"


def test_username_nao_aceita_arroba():
    with pytest.raises(ValidationError):
        dados_usuario("joao@casa")
    with pytest.raises(ValidationError):
        UsuarioUpdate(username="joao@casa")


@pytest.mark.asyncio
async def test_username_sem_arroba_loga_por_username(usuario_service):
    usuario = await usuario_service.registrar(dados_usuario("joao.casa"))
    assert (await usuario_service.autenticar("joao.casa", "senha-segura-123")).id == usuario.id
