import pytest

from fakes import ENDERECO, novo_medico, novo_paciente
from vollmed.domain import Especialidade, Pessoa
from vollmed.domain.exceptions import ValidationError


@pytest.mark.parametrize(
    "pessoa",
    [novo_medico(2, "Dra. Ana Cardoso", Especialidade.CARDIOLOGIA), novo_paciente(1, "João da Silva")],
    ids=["medico", "paciente"],
)
def test_regras_comuns_de_cadastro(pessoa):
    assert isinstance(pessoa, Pessoa)
    assert pessoa.ativo

    pessoa.atualizar_informacoes(nome="  Maria Souza ", telefone=" 61900001111", endereco={"numero": "99"})
    assert pessoa.nome == "Maria Souza"
    assert pessoa.telefone == "61900001111"
    assert pessoa.endereco.numero == "99"
    assert pessoa.endereco.logradouro == ENDERECO.logradouro

    with pytest.raises(ValidationError, match="Nome inválido"):
        pessoa.atualizar_informacoes(nome="Al")
    assert pessoa.nome == "Maria Souza"

    pessoa.excluir()
    assert not pessoa.ativo


def test_campos_none_nao_alteram_cadastro():
    medico = novo_medico(3, "Dr. Bruno Silva", Especialidade.ORTOPEDIA)
    medico.atualizar_informacoes()
    assert medico.nome == "Dr. Bruno Silva"
    assert medico.endereco == ENDERECO
    assert medico.crm == "000003"
