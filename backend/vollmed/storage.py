from __future__ import annotations
import json
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import asdict, replace
from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from .db import Database
from .domain import Consulta, Endereco, Especialidade, Medico, Paciente, Usuario
from .domain.exceptions import NotFoundError, SchedulingError, ValidationError
from .security import hash_password, verify_password

logger = logging.getLogger(__name__)


def _data_para_texto(data: datetime) -> str:
    return data.isoformat(sep=" ")


def _endereco(texto: str) -> Endereco:
    return Endereco(**json.loads(texto))


def _medico(row: sqlite3.Row) -> Medico:
    return Medico(
        id=row["id"],
        _nome=row["nome"],
        email=row["email"],
        telefone=row["telefone"],
        crm=row["crm"],
        especialidade=Especialidade(row["especialidade"]),
        endereco=_endereco(row["endereco"]),
        _ativo=bool(row["ativo"]),
    )


def _paciente(row: sqlite3.Row) -> Paciente:
    return Paciente(
        id=row["id"],
        _nome=row["nome"],
        email=row["email"],
        telefone=row["telefone"],
        cpf=row["cpf"],
        endereco=_endereco(row["endereco"]),
        _ativo=bool(row["ativo"]),
    )


class SessaoClinica:
    """Consultas e gravações da clínica sobre uma única conexão (uma transação)."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    # --- usuários ---
    def obter_usuario_por_login(self, login: str) -> Optional[Usuario]:
        row = self.conn.execute("SELECT * FROM usuarios WHERE login = ?", (login,)).fetchone()
        if not row:
            return None
        return Usuario(id=row["id"], login=row["login"], senha=row["senha"])

    def salvar_usuario(self, usuario: Usuario) -> Usuario:
        cur = self.conn.execute(
            "INSERT INTO usuarios (login, senha) VALUES (?, ?)",
            (usuario.login, usuario.senha),
        )
        return replace(usuario, id=cur.lastrowid)

    def contar_usuarios(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM usuarios").fetchone()[0]

    # --- médicos ---
    def salvar_medico(self, medico: Medico) -> Medico:
        valores = (
            medico.nome,
            medico.email,
            medico.telefone,
            medico.crm,
            medico.especialidade.value,
            json.dumps(asdict(medico.endereco)),
            int(medico.ativo),
        )
        try:
            if medico.id is None:
                cur = self.conn.execute(
                    """
                    INSERT INTO medicos (nome, email, telefone, crm, especialidade, endereco, ativo)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    valores,
                )
                medico.id = cur.lastrowid
            else:
                self.conn.execute(
                    """
                    UPDATE medicos SET nome = ?, email = ?, telefone = ?, crm = ?,
                        especialidade = ?, endereco = ?, ativo = ?
                    WHERE id = ?
                    """,
                    valores + (medico.id,),
                )
        except sqlite3.IntegrityError as err:
            raise ValidationError("Já existe médico cadastrado com este e-mail ou CRM.") from err
        return medico

    def medico_existe(self, id_medico: int) -> bool:
        return self.conn.execute("SELECT 1 FROM medicos WHERE id = ?", (id_medico,)).fetchone() is not None

    def medico_esta_ativo(self, id_medico: int) -> bool:
        row = self.conn.execute("SELECT ativo FROM medicos WHERE id = ?", (id_medico,)).fetchone()
        return bool(row and row["ativo"])

    def obter_medico(self, id_medico: int) -> Medico:
        row = self.conn.execute("SELECT * FROM medicos WHERE id = ?", (id_medico,)).fetchone()
        if not row:
            raise NotFoundError("Médico não encontrado.")
        return _medico(row)

    def listar_medicos_ativos(self, pagina: int, tamanho: int) -> Tuple[List[Medico], int]:
        total = self.conn.execute("SELECT COUNT(*) FROM medicos WHERE ativo = 1").fetchone()[0]
        rows = self.conn.execute(
            "SELECT * FROM medicos WHERE ativo = 1 ORDER BY nome LIMIT ? OFFSET ?",
            (tamanho, pagina * tamanho),
        ).fetchall()
        return [_medico(r) for r in rows], total

    def escolher_medico_aleatorio_livre_na_data(
        self, especialidade: Especialidade, data: datetime
    ) -> Optional[Medico]:
        row = self.conn.execute(
            """
            SELECT * FROM medicos
            WHERE ativo = 1
              AND especialidade = ?
              AND id NOT IN (SELECT medico_id FROM consultas WHERE data = ?)
            ORDER BY RANDOM()
            LIMIT 1
            """,
            (especialidade.value, _data_para_texto(data)),
        ).fetchone()
        return _medico(row) if row else None

    # --- pacientes ---
    def salvar_paciente(self, paciente: Paciente) -> Paciente:
        valores = (
            paciente.nome,
            paciente.email,
            paciente.telefone,
            paciente.cpf,
            json.dumps(asdict(paciente.endereco)),
            int(paciente.ativo),
        )
        try:
            if paciente.id is None:
                cur = self.conn.execute(
                    """
                    INSERT INTO pacientes (nome, email, telefone, cpf, endereco, ativo)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    valores,
                )
                paciente.id = cur.lastrowid
            else:
                self.conn.execute(
                    """
                    UPDATE pacientes SET nome = ?, email = ?, telefone = ?, cpf = ?, endereco = ?, ativo = ?
                    WHERE id = ?
                    """,
                    valores + (paciente.id,),
                )
        except sqlite3.IntegrityError as err:
            raise ValidationError("Já existe paciente cadastrado com este e-mail ou CPF.") from err
        return paciente

    def paciente_existe(self, id_paciente: int) -> bool:
        return self.conn.execute("SELECT 1 FROM pacientes WHERE id = ?", (id_paciente,)).fetchone() is not None

    def obter_paciente(self, id_paciente: int) -> Paciente:
        row = self.conn.execute("SELECT * FROM pacientes WHERE id = ?", (id_paciente,)).fetchone()
        if not row:
            raise NotFoundError("Paciente não encontrado.")
        return _paciente(row)

    def listar_pacientes_ativos(self, pagina: int, tamanho: int) -> Tuple[List[Paciente], int]:
        total = self.conn.execute("SELECT COUNT(*) FROM pacientes WHERE ativo = 1").fetchone()[0]
        rows = self.conn.execute(
            "SELECT * FROM pacientes WHERE ativo = 1 ORDER BY nome LIMIT ? OFFSET ?",
            (tamanho, pagina * tamanho),
        ).fetchall()
        return [_paciente(r) for r in rows], total

    # --- consultas ---
    def salvar_consulta(self, consulta: Consulta) -> Consulta:
        try:
            cur = self.conn.execute(
                "INSERT INTO consultas (medico_id, paciente_id, data) VALUES (?, ?, ?)",
                (consulta.medico.id, consulta.paciente.id, _data_para_texto(consulta.data)),
            )
        except sqlite3.IntegrityError as err:
            # índice único (medico_id, data): outra requisição levou o horário
            raise SchedulingError("Médico já possui outra consulta agendada nesse horário.") from err
        return replace(consulta, id=cur.lastrowid)

    def contar_consultas(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM consultas").fetchone()[0]


class RepositorioClinica:
    """Abre sessões transacionais sobre o banco SQLite da clínica."""

    def __init__(self, db: Database, bcrypt_rounds: Optional[int] = None) -> None:
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    @contextmanager
    def transacao(self) -> Iterator[SessaoClinica]:
        with self.db.transacao() as conn:
            yield SessaoClinica(conn)

    def autenticar(self, login: str, senha: str) -> Optional[Usuario]:
        with self.transacao() as sessao:
            usuario = sessao.obter_usuario_por_login(login.strip())
        if usuario and verify_password(senha, usuario.senha):
            return usuario
        return None

    def usuario_por_login(self, login: str) -> Optional[Usuario]:
        with self.transacao() as sessao:
            return sessao.obter_usuario_por_login(login)

    def cadastrar_usuario(self, login: str, senha: str) -> Usuario:
        with self.transacao() as sessao:
            try:
                usuario = Usuario(id=None, login=login.strip(), senha=hash_password(senha, self.bcrypt_rounds))
                return sessao.salvar_usuario(usuario)
            except sqlite3.IntegrityError as err:
                raise ValidationError("Login já cadastrado.") from err

    # --- dados iniciais ---
    def seed(self, admin_login: str, admin_senha: str) -> None:
        with self.transacao() as sessao:
            if sessao.contar_usuarios():
                return
        self.cadastrar_usuario(admin_login, admin_senha)
        logger.info("Usuário inicial %s criado", admin_login)
