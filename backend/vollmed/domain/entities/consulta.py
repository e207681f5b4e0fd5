from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..enums import Especialidade
from .medico import Medico
from .paciente import Paciente


@dataclass(frozen=True)
class DadosAgendamentoConsulta:
    """Pedido de agendamento. Sem médico escolhido, a especialidade define a escolha."""

    id_paciente: int
    data: datetime
    id_medico: Optional[int] = None
    especialidade: Optional[Especialidade] = None


@dataclass(frozen=True)
class Consulta:
    id: Optional[int]
    medico: Medico
    paciente: Paciente
    data: datetime


@dataclass(frozen=True)
class DadosDetalhamentoConsulta:
    id: int
    id_medico: int
    nome_medico: str
    id_paciente: int
    nome_paciente: str
    data: datetime

    @staticmethod
    def de(consulta: Consulta) -> "DadosDetalhamentoConsulta":
        return DadosDetalhamentoConsulta(
            id=consulta.id,
            id_medico=consulta.medico.id,
            nome_medico=consulta.medico.nome,
            id_paciente=consulta.paciente.id,
            nome_paciente=consulta.paciente.nome,
            data=consulta.data,
        )
