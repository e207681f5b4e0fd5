class DomainError(Exception):
    """Erro genérico da camada de domínio."""


class NotFoundError(DomainError):
    """Paciente ou médico referenciado não existe."""


class ValidationError(DomainError):
    """Regra de negócio violada."""


class SchedulingError(ValidationError):
    """Agendamento recusado pela agenda (sem médico livre ou horário já ocupado)."""


class AuthenticationError(DomainError):
    """Credenciais inválidas."""
