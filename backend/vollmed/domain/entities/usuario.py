from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass
class Usuario:
    id: Optional[int]
    login: str
    senha: str  # hash bcrypt, nunca a senha em texto puro
