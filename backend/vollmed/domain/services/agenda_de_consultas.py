from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, Optional

from ..entities import Consulta, DadosAgendamentoConsulta, DadosDetalhamentoConsulta
from ..exceptions import NotFoundError, ValidationError
from ..ports import RepositorioTransacional
from .seletor_medico import SeletorDeMedico
from .validacoes import CadeiaDeValidacoes

logger = logging.getLogger(__name__)


class AgendaDeConsultas:
    """Agendamento de consultas: existência, regras de negócio, escolha do médico e gravação.

    Todo o fluxo roda dentro de uma única transação do repositório; qualquer
    erro levantado no caminho desfaz o que já tiver sido escrito.
    """

    def __init__(
        self,
        repositorio: RepositorioTransacional,
        validacoes: Optional[CadeiaDeValidacoes] = None,
        seletor: Optional[SeletorDeMedico] = None,
        relogio: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repositorio = repositorio
        self.validacoes = validacoes or CadeiaDeValidacoes()
        self.seletor = seletor or SeletorDeMedico()
        self.relogio = relogio

    def agendar(self, dados: DadosAgendamentoConsulta) -> DadosDetalhamentoConsulta:
        with self.repositorio.transacao() as repo:
            if not repo.paciente_existe(dados.id_paciente):
                raise NotFoundError("Id do paciente não existe!")

            if dados.id_medico is not None and not repo.medico_existe(dados.id_medico):
                raise NotFoundError("Id do médico não existe!")

            try:
                self.validacoes.validar(dados, repo, self.relogio())
                medico = self.seletor.escolher(dados, repo)
                paciente = repo.obter_paciente(dados.id_paciente)
                consulta = repo.salvar_consulta(Consulta(id=None, medico=medico, paciente=paciente, data=dados.data))
            except ValidationError as err:
                logger.info("Agendamento recusado para paciente %s: %s", dados.id_paciente, err)
                raise

        logger.info(
            "Consulta %s agendada: médico %s, paciente %s, %s",
            consulta.id,
            medico.id,
            paciente.id,
            consulta.data.isoformat(),
        )
        return DadosDetalhamentoConsulta.de(consulta)
