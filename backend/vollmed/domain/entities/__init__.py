from .endereco import Endereco
from .pessoa import Pessoa
from .medico import Medico
from .paciente import Paciente
from .usuario import Usuario
from .consulta import Consulta, DadosAgendamentoConsulta, DadosDetalhamentoConsulta

__all__ = [
    "Endereco",
    "Pessoa",
    "Medico",
    "Paciente",
    "Usuario",
    "Consulta",
    "DadosAgendamentoConsulta",
    "DadosDetalhamentoConsulta",
]
