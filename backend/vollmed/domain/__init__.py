"""Camada de domínio da clínica: cadastros e agendamento de consultas."""

from .enums import Especialidade
from .entities import (
    Consulta,
    DadosAgendamentoConsulta,
    DadosDetalhamentoConsulta,
    Endereco,
    Medico,
    Paciente,
    Pessoa,
    Usuario,
)
from .services import VALIDADORES, AgendaDeConsultas, CadeiaDeValidacoes, SeletorDeMedico
from .exceptions import AuthenticationError, DomainError, NotFoundError, SchedulingError, ValidationError

__all__ = [
    "Especialidade",
    "Consulta",
    "DadosAgendamentoConsulta",
    "DadosDetalhamentoConsulta",
    "Endereco",
    "Medico",
    "Paciente",
    "Pessoa",
    "Usuario",
    "AgendaDeConsultas",
    "CadeiaDeValidacoes",
    "SeletorDeMedico",
    "VALIDADORES",
    "AuthenticationError",
    "DomainError",
    "NotFoundError",
    "SchedulingError",
    "ValidationError",
]
