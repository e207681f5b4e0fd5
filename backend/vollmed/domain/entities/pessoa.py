from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from ..exceptions import ValidationError
from .endereco import Endereco


@dataclass
class Pessoa:
    """Dados e regras comuns a médicos e pacientes."""

    id: Optional[int]
    _nome: str
    email: str
    telefone: str
    endereco: Endereco
    _ativo: bool = field(default=True, kw_only=True)

    @property
    def nome(self) -> str:
        return self._nome

    @nome.setter
    def nome(self, novo: str) -> None:
        if not novo or len(novo.strip()) < 3:
            raise ValidationError("Nome inválido.")
        self._nome = novo.strip()

    @property
    def ativo(self) -> bool:
        return self._ativo

    def atualizar_informacoes(
        self,
        nome: Optional[str] = None,
        telefone: Optional[str] = None,
        endereco: Optional[dict] = None,
    ) -> None:
        if nome is not None:
            self.nome = nome
        if telefone is not None:
            self.telefone = telefone.strip()
        if endereco:
            self.endereco = self.endereco.atualizado(**endereco)

    def excluir(self) -> None:
        # exclusão lógica
        self._ativo = False
