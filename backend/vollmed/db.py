import sqlite3
from contextlib import contextmanager
from typing import Iterator

SCHEMA = """
CREATE TABLE IF NOT EXISTS usuarios (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    login TEXT UNIQUE NOT NULL,
    senha TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS medicos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    nome TEXT NOT NULL,
    email TEXT UNIQUE NOT NULL,
    telefone TEXT NOT NULL,
    crm TEXT UNIQUE NOT NULL,
    especialidade TEXT NOT NULL,
    endereco TEXT NOT NULL,
    ativo INTEGER NOT NULL DEFAULT 1
);

CREATE TABLE IF NOT EXISTS pacientes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    nome TEXT NOT NULL,
    email TEXT UNIQUE NOT NULL,
    telefone TEXT NOT NULL,
    cpf TEXT UNIQUE NOT NULL,
    endereco TEXT NOT NULL,
    ativo INTEGER NOT NULL DEFAULT 1
);

CREATE TABLE IF NOT EXISTS consultas (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    medico_id INTEGER NOT NULL REFERENCES medicos(id),
    paciente_id INTEGER NOT NULL REFERENCES pacientes(id),
    data TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS ux_consultas_medico_data ON consultas (medico_id, data);
"""


class Database:
    def __init__(self, path: str) -> None:
        self.path = path
        self._ensure()

    def _connect(self) -> sqlite3.Connection:
        # autocommit no driver: as transações são abertas explicitamente em `transacao`
        conn = sqlite3.connect(self.path, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _ensure(self) -> None:
        conn = self._connect()
        conn.executescript(SCHEMA)
        conn.close()

    @contextmanager
    def transacao(self) -> Iterator[sqlite3.Connection]:
        """Uma conexão por transação: commit ao sair, rollback se algo falhar.

        `BEGIN IMMEDIATE` reserva a escrita já na abertura, então as leituras
        feitas dentro da transação continuam valendo até o commit.
        """
        conn = self._connect()
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
