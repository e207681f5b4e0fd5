from .agenda_de_consultas import AgendaDeConsultas
from .seletor_medico import SeletorDeMedico
from .validacoes import VALIDADORES, CadeiaDeValidacoes

__all__ = ["AgendaDeConsultas", "SeletorDeMedico", "CadeiaDeValidacoes", "VALIDADORES"]
