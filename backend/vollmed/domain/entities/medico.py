from __future__ import annotations
from dataclasses import dataclass

from ..enums import Especialidade
from .endereco import Endereco
from .pessoa import Pessoa


@dataclass
class Medico(Pessoa):
    crm: str
    especialidade: Especialidade

    @staticmethod
    def novo(
        nome: str,
        email: str,
        telefone: str,
        crm: str,
        especialidade: Especialidade,
        endereco: Endereco,
    ) -> "Medico":
        return Medico(
            id=None,
            _nome=nome.strip(),
            email=email.lower().strip(),
            telefone=telefone.strip(),
            crm=crm.strip(),
            especialidade=especialidade,
            endereco=endereco,
        )
