from datetime import datetime
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

from .domain import Especialidade

T = TypeVar("T")

NaoVazio = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class DadosEndereco(BaseModel):
    logradouro: NaoVazio
    bairro: NaoVazio
    cep: str = Field(pattern=r"^\d{8}$")
    cidade: NaoVazio
    uf: str = Field(min_length=2, max_length=2)
    numero: Optional[str] = None
    complemento: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DadosAtualizacaoEndereco(BaseModel):
    logradouro: Optional[str] = None
    bairro: Optional[str] = None
    cep: Optional[str] = Field(default=None, pattern=r"^\d{8}$")
    cidade: Optional[str] = None
    uf: Optional[str] = Field(default=None, min_length=2, max_length=2)
    numero: Optional[str] = None
    complemento: Optional[str] = None


class DadosCadastroMedico(BaseModel):
    nome: NaoVazio
    email: EmailStr
    telefone: NaoVazio
    crm: str = Field(pattern=r"^\d{4,6}$")
    especialidade: Especialidade
    endereco: DadosEndereco


class DadosAtualizacaoMedico(BaseModel):
    id: int
    nome: Optional[str] = None
    telefone: Optional[str] = None
    endereco: Optional[DadosAtualizacaoEndereco] = None


class DadosListagemMedico(BaseModel):
    id: int
    nome: str
    email: str
    crm: str
    especialidade: Especialidade

    model_config = ConfigDict(from_attributes=True)


class DadosDetalhamentoMedico(DadosListagemMedico):
    telefone: str
    ativo: bool
    endereco: DadosEndereco


class DadosCadastroPaciente(BaseModel):
    nome: NaoVazio
    email: EmailStr
    telefone: NaoVazio
    cpf: str = Field(pattern=r"^\d{3}\.?\d{3}\.?\d{3}-?\d{2}$")
    endereco: DadosEndereco


class DadosAtualizacaoPaciente(BaseModel):
    id: int
    nome: Optional[str] = None
    telefone: Optional[str] = None
    endereco: Optional[DadosAtualizacaoEndereco] = None


class DadosListagemPaciente(BaseModel):
    id: int
    nome: str
    email: str
    cpf: str

    model_config = ConfigDict(from_attributes=True)


class DadosDetalhamentoPaciente(DadosListagemPaciente):
    telefone: str
    ativo: bool
    endereco: DadosEndereco


class AgendamentoRequest(BaseModel):
    id_paciente: int
    id_medico: Optional[int] = None
    especialidade: Optional[Especialidade] = None
    data: datetime

    @field_validator("data")
    @classmethod
    def hora_local(cls, data: datetime) -> datetime:
        # horário de funcionamento é avaliado no horário local da clínica
        if data.tzinfo is not None:
            return data.astimezone().replace(tzinfo=None)
        return data


class ConsultaOut(BaseModel):
    id: int
    id_medico: int
    nome_medico: str
    id_paciente: int
    nome_paciente: str
    data: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    login: str
    senha: str


class DadosTokenJWT(BaseModel):
    token: str
    token_type: str = "bearer"


class Pagina(BaseModel, Generic[T]):
    content: List[T]
    total_elements: int
    total_pages: int
    number: int
    size: int

    @classmethod
    def de(cls, itens: List[T], total: int, number: int, size: int) -> "Pagina[T]":
        total_pages = (total + size - 1) // size if size else 0
        return cls(content=itens, total_elements=total, total_pages=total_pages, number=number, size=size)
