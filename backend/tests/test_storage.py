import sqlite3
from datetime import datetime, timedelta

import pytest

from fakes import AGORA, ENDERECO
from vollmed.db import Database
from vollmed.domain import AgendaDeConsultas, Consulta, DadosAgendamentoConsulta, Especialidade, Medico, Paciente
from vollmed.domain.exceptions import NotFoundError, SchedulingError, ValidationError
from vollmed.storage import RepositorioClinica

DATA = datetime(2026, 10, 28, 10, 0)


@pytest.fixture
def store(tmp_path) -> RepositorioClinica:
    return RepositorioClinica(Database(str(tmp_path / "clinica.db")))


def _medico(nome, crm, especialidade=Especialidade.CARDIOLOGIA):
    return Medico.novo(nome, f"{crm}@voll.med", "61999990000", crm, especialidade, ENDERECO)


def _paciente(nome, cpf):
    return Paciente.novo(nome, f"{cpf}@email.com", "61988887777", cpf, ENDERECO)


@pytest.fixture
def cadastros(store):
    with store.transacao() as sessao:
        ana = sessao.salvar_medico(_medico("Ana Cardoso", "1001"))
        bia = sessao.salvar_medico(_medico("Beatriz Rocha", "1002"))
        caio = sessao.salvar_medico(_medico("Caio Prado", "1003", Especialidade.ORTOPEDIA))
        joao = sessao.salvar_paciente(_paciente("João da Silva", "12345678901"))
    return ana, bia, caio, joao


def test_salvar_e_obter_medico(store, cadastros):
    ana = cadastros[0]
    with store.transacao() as sessao:
        lido = sessao.obter_medico(ana.id)
    assert lido.nome == "Ana Cardoso"
    assert lido.especialidade == Especialidade.CARDIOLOGIA
    assert lido.endereco == ENDERECO
    assert lido.ativo


def test_obter_inexistente(store):
    with store.transacao() as sessao:
        with pytest.raises(NotFoundError):
            sessao.obter_medico(999)
        with pytest.raises(NotFoundError):
            sessao.obter_paciente(999)
        assert not sessao.medico_existe(999)
        assert not sessao.paciente_existe(999)


def test_crm_duplicado(store, cadastros):
    with pytest.raises(ValidationError, match="CRM"):
        with store.transacao() as sessao:
            sessao.salvar_medico(_medico("Outra Ana", "1001"))


def test_listagem_paginada_ignora_excluidos(store, cadastros):
    ana, bia, caio, _ = cadastros
    with store.transacao() as sessao:
        bia.excluir()
        sessao.salvar_medico(bia)
        assert not sessao.medico_esta_ativo(bia.id)

        primeira, total = sessao.listar_medicos_ativos(0, 1)
        segunda, _ = sessao.listar_medicos_ativos(1, 1)

    assert total == 2
    assert [m.nome for m in primeira + segunda] == ["Ana Cardoso", "Caio Prado"]


def test_sorteio_respeita_especialidade_atividade_e_agenda(store, cadastros):
    ana, bia, caio, joao = cadastros
    with store.transacao() as sessao:
        sorteados = {
            sessao.escolher_medico_aleatorio_livre_na_data(Especialidade.CARDIOLOGIA, DATA).id for _ in range(200)
        }
        assert sorteados == {ana.id, bia.id}

        sessao.salvar_consulta(Consulta(id=None, medico=ana, paciente=joao, data=DATA))
        assert sessao.escolher_medico_aleatorio_livre_na_data(Especialidade.CARDIOLOGIA, DATA).id == bia.id

        bia.excluir()
        sessao.salvar_medico(bia)
        assert sessao.escolher_medico_aleatorio_livre_na_data(Especialidade.CARDIOLOGIA, DATA) is None
        assert sessao.escolher_medico_aleatorio_livre_na_data(Especialidade.DERMATOLOGIA, DATA) is None
        # outro horário do mesmo dia continua livre
        outro = DATA + timedelta(hours=1)
        assert sessao.escolher_medico_aleatorio_livre_na_data(Especialidade.CARDIOLOGIA, outro).id == ana.id


def test_conflito_de_horario_no_insert(store, cadastros):
    ana, _, _, joao = cadastros
    with store.transacao() as sessao:
        salva = sessao.salvar_consulta(Consulta(id=None, medico=ana, paciente=joao, data=DATA))
    assert salva.id is not None

    with pytest.raises(SchedulingError):
        with store.transacao() as sessao:
            sessao.salvar_consulta(Consulta(id=None, medico=ana, paciente=joao, data=DATA))

    with store.transacao() as sessao:
        assert sessao.contar_consultas() == 1


def test_transacao_desfeita_em_erro(store, cadastros):
    ana, _, _, joao = cadastros
    with pytest.raises(RuntimeError):
        with store.transacao() as sessao:
            sessao.salvar_consulta(Consulta(id=None, medico=ana, paciente=joao, data=DATA))
            raise RuntimeError("falha no meio")

    with store.transacao() as sessao:
        assert sessao.contar_consultas() == 0


def test_transacao_segura_escrita_concorrente_ate_o_commit(store, cadastros):
    ana, _, _, joao = cadastros
    with store.transacao() as sessao:
        assert sessao.medico_esta_ativo(ana.id)

        outra = sqlite3.connect(store.db.path, timeout=0.1)
        try:
            with pytest.raises(sqlite3.OperationalError, match="locked"):
                outra.execute("UPDATE medicos SET ativo = 0 WHERE id = ?", (ana.id,))
        finally:
            outra.close()

        sessao.salvar_consulta(Consulta(id=None, medico=ana, paciente=joao, data=DATA))

    with store.transacao() as sessao:
        assert sessao.contar_consultas() == 1
        assert sessao.medico_esta_ativo(ana.id)


def test_agenda_sobre_sqlite(store, cadastros):
    ana, _, caio, joao = cadastros
    agenda = AgendaDeConsultas(store, relogio=lambda: AGORA)

    detalhe = agenda.agendar(DadosAgendamentoConsulta(id_paciente=joao.id, id_medico=ana.id, data=DATA))
    assert detalhe.id_medico == ana.id
    assert detalhe.nome_paciente == "João da Silva"

    sorteado = agenda.agendar(
        DadosAgendamentoConsulta(id_paciente=joao.id, especialidade=Especialidade.ORTOPEDIA, data=DATA)
    )
    assert sorteado.id_medico == caio.id
    assert sorteado.id != detalhe.id

    with pytest.raises(SchedulingError):
        agenda.agendar(DadosAgendamentoConsulta(id_paciente=joao.id, id_medico=ana.id, data=DATA))


def test_autenticacao(store):
    store.seed("admin@voll.med", "admin123")
    store.seed("outro@voll.med", "outra")  # só cria se não houver usuários

    assert store.autenticar("admin@voll.med", "admin123").login == "admin@voll.med"
    assert store.autenticar("admin@voll.med", "errada") is None
    assert store.autenticar("outro@voll.med", "outra") is None
    assert store.usuario_por_login("admin@voll.med").senha != "admin123"


def test_custo_do_bcrypt_vem_da_configuracao(tmp_path):
    store = RepositorioClinica(Database(str(tmp_path / "custo.db")), bcrypt_rounds=5)
    store.cadastrar_usuario("bia@voll.med", "segredo")

    assert store.usuario_por_login("bia@voll.med").senha.startswith("$2b$05$")
    assert store.autenticar("bia@voll.med", "segredo") is not None
