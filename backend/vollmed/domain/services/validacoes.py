"""Regras de negócio checadas antes de qualquer agendamento.

Cada validador recebe o pedido, a porta de leitura da agenda e o instante
atual, e levanta ``ValidationError`` quando a regra não é atendida. A cadeia
para no primeiro erro; apenas essa mensagem chega ao chamador.
"""

from __future__ import annotations
from datetime import datetime, timedelta
from typing import Callable, Iterable, Tuple

from ..entities import DadosAgendamentoConsulta
from ..exceptions import ValidationError
from ..ports import RepositorioLeitura

ANTECEDENCIA_MINIMA = timedelta(minutes=30)
DOMINGO = 6
ABERTURA_CLINICA = 7
ENCERRAMENTO_CLINICA = 18

ValidadorAgendamento = Callable[[DadosAgendamentoConsulta, RepositorioLeitura, datetime], None]


def validar_horario_antecedencia(
    dados: DadosAgendamentoConsulta, repositorio: RepositorioLeitura, agora: datetime
) -> None:
    if dados.data - agora < ANTECEDENCIA_MINIMA:
        raise ValidationError("Consulta deve ser agendada com antecedência mínima de 30 minutos!")


def validar_horario_funcionamento_clinica(
    dados: DadosAgendamentoConsulta, repositorio: RepositorioLeitura, agora: datetime
) -> None:
    # 18:59 ainda passa: só a hora cheia é comparada
    domingo = dados.data.weekday() == DOMINGO
    antes_da_abertura = dados.data.hour < ABERTURA_CLINICA
    depois_do_encerramento = dados.data.hour > ENCERRAMENTO_CLINICA
    if domingo or antes_da_abertura or depois_do_encerramento:
        raise ValidationError("Consulta fora do horário de funcionamento da clínica")


def validar_medico_ativo(
    dados: DadosAgendamentoConsulta, repositorio: RepositorioLeitura, agora: datetime
) -> None:
    # médico opcional: o seletor só devolve médicos ativos
    if dados.id_medico is None:
        return
    if not repositorio.medico_esta_ativo(dados.id_medico):
        raise ValidationError("Consulta não pode ser agendada com médico excluído!")


VALIDADORES: Tuple[ValidadorAgendamento, ...] = (
    validar_horario_antecedencia,
    validar_horario_funcionamento_clinica,
    validar_medico_ativo,
)


class CadeiaDeValidacoes:
    def __init__(self, validadores: Iterable[ValidadorAgendamento] = VALIDADORES) -> None:
        self.validadores = tuple(validadores)

    def validar(self, dados: DadosAgendamentoConsulta, repositorio: RepositorioLeitura, agora: datetime) -> None:
        for validador in self.validadores:
            validador(dados, repositorio, agora)
