from enum import Enum


class Especialidade(str, Enum):
    ORTOPEDIA = "ORTOPEDIA"
    CARDIOLOGIA = "CARDIOLOGIA"
    GINECOLOGIA = "GINECOLOGIA"
    DERMATOLOGIA = "DERMATOLOGIA"
