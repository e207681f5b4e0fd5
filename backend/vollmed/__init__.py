"""API da clínica Voll.med: cadastro de médicos e pacientes e agendamento de consultas."""

__version__ = "1.0.0"
