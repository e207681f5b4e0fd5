import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings, settings as default_settings
from .db import Database
from .domain import AgendaDeConsultas, DadosAgendamentoConsulta, Endereco, Medico, Paciente, Usuario
from .domain.exceptions import AuthenticationError, DomainError, NotFoundError
from .schemas import (
    AgendamentoRequest,
    ConsultaOut,
    DadosAtualizacaoMedico,
    DadosAtualizacaoPaciente,
    DadosCadastroMedico,
    DadosCadastroPaciente,
    DadosDetalhamentoMedico,
    DadosDetalhamentoPaciente,
    DadosListagemMedico,
    DadosListagemPaciente,
    DadosTokenJWT,
    LoginRequest,
    Pagina,
)
from .security import create_access_token, decode_access_token
from .storage import RepositorioClinica

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)

# prefixos de `loc` que indicam só de onde veio o campo
_ORIGENS_DE_CAMPO = ("body", "query", "path")


def _configurar_logging(settings: Settings) -> None:
    if not settings.production:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(
            level=logging.INFO,
            format='{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}',
        )


# --- dependências ---
def get_repositorio(request: Request) -> RepositorioClinica:
    return request.app.state.repositorio


def get_agenda(request: Request, repositorio: RepositorioClinica = Depends(get_repositorio)) -> AgendaDeConsultas:
    return AgendaDeConsultas(repositorio, relogio=request.app.state.relogio)


def get_usuario(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    repositorio: RepositorioClinica = Depends(get_repositorio),
) -> Usuario:
    falha = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Falha na autenticação",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not credentials or credentials.scheme.lower() != "bearer":
        raise falha
    login = decode_access_token(credentials.credentials, request.app.state.settings)
    if not login:
        raise falha
    usuario = repositorio.usuario_por_login(login)
    if not usuario:
        raise falha
    return usuario


def _paginacao(request: Request, page: int, size: Optional[int]) -> tuple[int, int]:
    return page, size or request.app.state.settings.page_size


# --- tratamento de erros ---
async def _erro_nao_encontrado(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def _erro_autenticacao(request: Request, exc: AuthenticationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": "Credenciais inválidas"})


async def _erro_regra_de_negocio(request: Request, exc: DomainError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


async def _erro_validacao_campos(request: Request, exc: RequestValidationError) -> JSONResponse:
    erros = [
        {"campo": ".".join(str(p) for p in err["loc"] if p not in _ORIGENS_DE_CAMPO), "mensagem": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=erros)


async def _erro_inesperado(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Erro não tratado: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Erro: {exc}"},
    )


def criar_app(
    settings: Settings = default_settings,
    relogio: Callable[[], datetime] = datetime.now,
) -> FastAPI:
    _configurar_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.repositorio.seed(settings.admin_login, settings.admin_senha)
        yield

    app = FastAPI(title="Voll.med API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.relogio = relogio
    app.state.repositorio = RepositorioClinica(Database(settings.database_path), bcrypt_rounds=settings.bcrypt_rounds)
    logger.info("Banco de dados em %s", settings.database_path)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NotFoundError, _erro_nao_encontrado)
    app.add_exception_handler(AuthenticationError, _erro_autenticacao)
    app.add_exception_handler(DomainError, _erro_regra_de_negocio)
    app.add_exception_handler(RequestValidationError, _erro_validacao_campos)
    app.add_exception_handler(Exception, _erro_inesperado)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.post("/login", response_model=DadosTokenJWT)
    def login(payload: LoginRequest, repositorio: RepositorioClinica = Depends(get_repositorio)):
        usuario = repositorio.autenticar(payload.login, payload.senha)
        if not usuario:
            raise AuthenticationError("Credenciais inválidas")
        return DadosTokenJWT(token=create_access_token(usuario.login, settings))

    # --- médicos ---
    @app.post("/medicos", response_model=DadosDetalhamentoMedico, status_code=status.HTTP_201_CREATED)
    def cadastrar_medico(
        payload: DadosCadastroMedico,
        response: Response,
        repositorio: RepositorioClinica = Depends(get_repositorio),
        _usuario: Usuario = Depends(get_usuario),
    ):
        medico = Medico.novo(
            payload.nome,
            payload.email,
            payload.telefone,
            payload.crm,
            payload.especialidade,
            Endereco(**payload.endereco.model_dump()),
        )
        with repositorio.transacao() as sessao:
            medico = sessao.salvar_medico(medico)
        response.headers["Location"] = f"/medicos/{medico.id}"
        return medico

    @app.get("/medicos", response_model=Pagina[DadosListagemMedico])
    def listar_medicos(
        request: Request,
        page: int = Query(default=0, ge=0),
        size: Optional[int] = Query(default=None, ge=1, le=100),
        repositorio: RepositorioClinica = Depends(get_repositorio),
        _usuario: Usuario = Depends(get_usuario),
    ):
        pagina, tamanho = _paginacao(request, page, size)
        with repositorio.transacao() as sessao:
            medicos, total = sessao.listar_medicos_ativos(pagina, tamanho)
        itens = [DadosListagemMedico.model_validate(m) for m in medicos]
        return Pagina[DadosListagemMedico].de(itens, total, pagina, tamanho)

    @app.get("/medicos/{id_medico}", response_model=DadosDetalhamentoMedico)
    def detalhar_medico(
        id_medico: int,
        repositorio: RepositorioClinica = Depends(get_repositorio),
        _usuario: Usuario = Depends(get_usuario),
    ):
        with repositorio.transacao() as sessao:
            return sessao.obter_medico(id_medico)

    @app.put("/medicos", response_model=DadosDetalhamentoMedico)
    def atualizar_medico(
        payload: DadosAtualizacaoMedico,
        repositorio: RepositorioClinica = Depends(get_repositorio),
        _usuario: Usuario = Depends(get_usuario),
    ):
        with repositorio.transacao() as sessao:
            medico = sessao.obter_medico(payload.id)
            medico.atualizar_informacoes(
                nome=payload.nome,
                telefone=payload.telefone,
                endereco=payload.endereco.model_dump(exclude_none=True) if payload.endereco else None,
            )
            return sessao.salvar_medico(medico)

    @app.delete("/medicos/{id_medico}", status_code=status.HTTP_204_NO_CONTENT)
    def excluir_medico(
        id_medico: int,
        repositorio: RepositorioClinica = Depends(get_repositorio),
        _usuario: Usuario = Depends(get_usuario),
    ):
        with repositorio.transacao() as sessao:
            medico = sessao.obter_medico(id_medico)
            medico.excluir()
            sessao.salvar_medico(medico)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # --- pacientes ---
    @app.post("/pacientes", response_model=DadosDetalhamentoPaciente, status_code=status.HTTP_201_CREATED)
    def cadastrar_paciente(
        payload: DadosCadastroPaciente,
        response: Response,
        repositorio: RepositorioClinica = Depends(get_repositorio),
        _usuario: Usuario = Depends(get_usuario),
    ):
        paciente = Paciente.novo(
            payload.nome,
            payload.email,
            payload.telefone,
            payload.cpf,
            Endereco(**payload.endereco.model_dump()),
        )
        with repositorio.transacao() as sessao:
            paciente = sessao.salvar_paciente(paciente)
        response.headers["Location"] = f"/pacientes/{paciente.id}"
        return paciente

    @app.get("/pacientes", response_model=Pagina[DadosListagemPaciente])
    def listar_pacientes(
        request: Request,
        page: int = Query(default=0, ge=0),
        size: Optional[int] = Query(default=None, ge=1, le=100),
        repositorio: RepositorioClinica = Depends(get_repositorio),
        _usuario: Usuario = Depends(get_usuario),
    ):
        pagina, tamanho = _paginacao(request, page, size)
        with repositorio.transacao() as sessao:
            pacientes, total = sessao.listar_pacientes_ativos(pagina, tamanho)
        itens = [DadosListagemPaciente.model_validate(p) for p in pacientes]
        return Pagina[DadosListagemPaciente].de(itens, total, pagina, tamanho)

    @app.get("/pacientes/{id_paciente}", response_model=DadosDetalhamentoPaciente)
    def detalhar_paciente(
        id_paciente: int,
        repositorio: RepositorioClinica = Depends(get_repositorio),
        _usuario: Usuario = Depends(get_usuario),
    ):
        with repositorio.transacao() as sessao:
            return sessao.obter_paciente(id_paciente)

    @app.put("/pacientes", response_model=DadosDetalhamentoPaciente)
    def atualizar_paciente(
        payload: DadosAtualizacaoPaciente,
        repositorio: RepositorioClinica = Depends(get_repositorio),
        _usuario: Usuario = Depends(get_usuario),
    ):
        with repositorio.transacao() as sessao:
            paciente = sessao.obter_paciente(payload.id)
            paciente.atualizar_informacoes(
                nome=payload.nome,
                telefone=payload.telefone,
                endereco=payload.endereco.model_dump(exclude_none=True) if payload.endereco else None,
            )
            return sessao.salvar_paciente(paciente)

    @app.delete("/pacientes/{id_paciente}", status_code=status.HTTP_204_NO_CONTENT)
    def excluir_paciente(
        id_paciente: int,
        repositorio: RepositorioClinica = Depends(get_repositorio),
        _usuario: Usuario = Depends(get_usuario),
    ):
        with repositorio.transacao() as sessao:
            paciente = sessao.obter_paciente(id_paciente)
            paciente.excluir()
            sessao.salvar_paciente(paciente)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # --- consultas ---
    @app.post("/consultas", response_model=ConsultaOut)
    def agendar(
        payload: AgendamentoRequest,
        agenda: AgendaDeConsultas = Depends(get_agenda),
        _usuario: Usuario = Depends(get_usuario),
    ):
        dados = DadosAgendamentoConsulta(
            id_paciente=payload.id_paciente,
            id_medico=payload.id_medico,
            especialidade=payload.especialidade,
            data=payload.data,
        )
        return agenda.agendar(dados)

    return app


app = criar_app()
