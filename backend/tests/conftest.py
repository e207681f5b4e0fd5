# -*- coding: utf-8 -*-
import os
import tempfile

# Configura BD temporário e bcrypt barato antes de carregar a app
os.environ.setdefault("VOLLMED_DATABASE_PATH", os.path.join(tempfile.gettempdir(), "vollmed_test.db"))
os.environ.setdefault("VOLLMED_BCRYPT_ROUNDS", "4")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402

from fakes import AGORA, RepositorioEmMemoria, novo_medico, novo_paciente  # noqa: E402
from vollmed.domain import AgendaDeConsultas, Especialidade  # noqa: E402


@pytest.fixture
def repositorio() -> RepositorioEmMemoria:
    repo = RepositorioEmMemoria()
    repo.adicionar_paciente(novo_paciente(1, "João da Silva"))
    repo.adicionar_medico(novo_medico(2, "Dra. Ana Cardoso", Especialidade.CARDIOLOGIA))
    repo.adicionar_medico(novo_medico(3, "Dr. Bruno Silva", Especialidade.ORTOPEDIA))
    repo.adicionar_medico(novo_medico(4, "Dr. Carlos Lima", Especialidade.CARDIOLOGIA, ativo=False))
    return repo


@pytest.fixture
def agora() -> datetime:
    return AGORA


@pytest.fixture
def agenda(repositorio: RepositorioEmMemoria, agora: datetime) -> AgendaDeConsultas:
    return AgendaDeConsultas(repositorio, relogio=lambda: agora)
