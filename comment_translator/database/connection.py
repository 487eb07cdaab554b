"""
Database Connection Manager
===========================
SQLite storage for the phrase dictionary.

Every thread talks to the file through its own connection. Connections run
in autocommit mode; writes go through ``transaction()``, which takes the
database write lock up front with ``BEGIN IMMEDIATE`` so two merges can
never interleave their read-modify-write.
"""
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from comment_translator.config import config
from comment_translator.utils.logging import get_logger

SCHEMA_VERSION = 1

SCHEMA = """
CREATE TABLE IF NOT EXISTS phrase_dictionary (
    language TEXT NOT NULL,
    phrase TEXT NOT NULL,
    replacement TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (language, phrase)
);
CREATE INDEX IF NOT EXISTS idx_dictionary_language ON phrase_dictionary(language);
"""


class Database:
    """One sqlite file, one connection per thread."""

    _instance: Optional['Database'] = None
    _lock = threading.Lock()

    def __init__(self, db_path: Path = None):
        self.db_path = Path(db_path or config.paths.dictionary_db_path)
        self.logger = get_logger().db_logger
        self._local = threading.local()
        self._opened: List[sqlite3.Connection] = []
        self._opened_lock = threading.Lock()
        self._schema_ready = False

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @classmethod
    def get_instance(cls, db_path: Path = None) -> 'Database':
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls(db_path)
            return cls._instance

    @property
    def connection(self) -> sqlite3.Connection:
        conn = getattr(self._local, 'connection', None)
        if conn is None:
            conn = sqlite3.connect(
                str(self.db_path),
                timeout=config.security.db_timeout,
                isolation_level=None,
                check_same_thread=False
            )
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            self._local.connection = conn
            with self._opened_lock:
                self._opened.append(conn)
        return conn

    def initialize(self) -> None:
        """Create the dictionary table if it is missing."""
        if self._schema_ready:
            return

        with self._lock:
            if self._schema_ready:
                return
            conn = self.connection
            version = conn.execute("PRAGMA user_version").fetchone()[0]
            conn.executescript(SCHEMA)
            if version < SCHEMA_VERSION:
                conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            self._schema_ready = True

        self.logger.info(f"Dictionary store ready: {self.db_path}")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Hold the write lock for the duration of the block."""
        conn = self.connection
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except Exception as e:
            conn.execute("ROLLBACK")
            self.logger.error(f"Transaction rolled back: {e}")
            raise
        conn.execute("COMMIT")

    def query(self, sql: str, params: Sequence = ()) -> List[sqlite3.Row]:
        try:
            return self.connection.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            self.logger.error(f"Query failed: {e}")
            raise

    def close(self) -> None:
        """Close the connections opened by every thread."""
        with self._opened_lock:
            opened, self._opened = self._opened, []
        for conn in opened:
            conn.close()
        self._local = threading.local()


_database: Optional[Database] = None


def get_database() -> Database:
    """Process-wide database at the configured path."""
    global _database
    if _database is None:
        _database = Database.get_instance()
        _database.initialize()
    return _database


def reset_database() -> None:
    """Forget the process-wide database (tests point it at a new path)."""
    global _database
    if _database:
        _database.close()
    _database = None
    Database._instance = None
