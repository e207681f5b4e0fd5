from __future__ import annotations

from ..entities import DadosAgendamentoConsulta, Medico
from ..exceptions import SchedulingError, ValidationError
from ..ports import RepositorioLeitura


class SeletorDeMedico:
    """Resolve o médico da consulta: o escolhido pelo paciente ou um livre da especialidade."""

    def escolher(self, dados: DadosAgendamentoConsulta, repositorio: RepositorioLeitura) -> Medico:
        if dados.id_medico is not None:
            return repositorio.obter_medico(dados.id_medico)

        if dados.especialidade is None:
            raise ValidationError("Especialidade é obrigatória quando o médico não for escolhido!")

        medico = repositorio.escolher_medico_aleatorio_livre_na_data(dados.especialidade, dados.data)
        if medico is None:
            raise SchedulingError("Nenhum médico disponível para a especialidade nesta data.")
        return medico
