from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class Endereco:
    logradouro: str
    bairro: str
    cep: str
    cidade: str
    uf: str
    numero: Optional[str] = None
    complemento: Optional[str] = None

    def atualizado(self, **campos) -> "Endereco":
        """Copia o endereço trocando apenas os campos informados (valores None são ignorados)."""
        return replace(self, **{k: v for k, v in campos.items() if v is not None})
