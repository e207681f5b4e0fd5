from __future__ import annotations
from dataclasses import dataclass

from .endereco import Endereco
from .pessoa import Pessoa


@dataclass
class Paciente(Pessoa):
    cpf: str

    @staticmethod
    def novo(nome: str, email: str, telefone: str, cpf: str, endereco: Endereco) -> "Paciente":
        return Paciente(
            id=None,
            _nome=nome.strip(),
            email=email.lower().strip(),
            telefone=telefone.strip(),
            cpf=cpf.strip(),
            endereco=endereco,
        )
