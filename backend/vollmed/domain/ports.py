"""Portas de acesso à agenda usadas pelo núcleo de agendamento."""

from __future__ import annotations
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Optional, Protocol

from .entities import Consulta, Medico, Paciente
from .enums import Especialidade


class RepositorioLeitura(Protocol):
    def paciente_existe(self, id_paciente: int) -> bool: ...

    def medico_existe(self, id_medico: int) -> bool: ...

    def obter_medico(self, id_medico: int) -> Medico: ...

    def obter_paciente(self, id_paciente: int) -> Paciente: ...

    def medico_esta_ativo(self, id_medico: int) -> bool: ...

    def escolher_medico_aleatorio_livre_na_data(
        self, especialidade: Especialidade, data: datetime
    ) -> Optional[Medico]:
        """Médico ativo da especialidade, sorteado entre os que não têm consulta em `data`."""


class RepositorioEscrita(Protocol):
    def salvar_consulta(self, consulta: Consulta) -> Consulta:
        """Persiste e devolve a consulta com id; conflito de horário levanta SchedulingError."""


class RepositorioConsultas(RepositorioLeitura, RepositorioEscrita, Protocol):
    pass


class RepositorioTransacional(Protocol):
    def transacao(self) -> AbstractContextManager[RepositorioConsultas]:
        """Escopo atômico: confirma ao sair normalmente, desfaz se uma exceção escapar."""
