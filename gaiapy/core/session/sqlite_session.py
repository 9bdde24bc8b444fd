"""
SQLite session storage implementation.

Persists the hub session as a JSON record in a key/value table.
"""
import json
import sqlite3
import threading
from pathlib import Path
from datetime import datetime
from typing import Optional, Union
from contextlib import contextmanager

from .protocols import SessionStorage
from .models import Session

GAIA_HUB_CONFIG_KEY = 'gaia-hub-config'


class SQLiteSession(SessionStorage):
    """
    SQLite-based session storage.

    Thread-safe; the record lives under ``config_key`` so several
    identities can share one database file with different keys.

    Example:
        >>> storage = SQLiteSession("my_app")
        >>> # Creates my_app.session file
        >>> storage.save(session)
        >>> loaded = storage.load()
    """

    EXTENSION = '.session'
    SCHEMA_VERSION = 1

    def __init__(
        self,
        session_name: Union[str, Path],
        base_path: Optional[Path] = None,
        config_key: str = GAIA_HUB_CONFIG_KEY
    ):
        """
        Initialize SQLite session storage.

        Args:
            session_name: Session name (without extension) or full path
            base_path: Optional base directory for session files
            config_key: Key the session record is stored under
        """
        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None
        self._key = config_key

        if isinstance(session_name, Path) or session_name.endswith(self.EXTENSION):
            self._path = Path(session_name)
        else:
            if base_path:
                self._path = base_path / f"{session_name}{self.EXTENSION}"
            else:
                self._path = Path(f"{session_name}{self.EXTENSION}")

        self._path.parent.mkdir(parents=True, exist_ok=True)

        self._init_db()

    @property
    def path(self) -> Path:
        """Get session file path."""
        return self._path

    @property
    def config_key(self) -> str:
        return self._key

    @contextmanager
    def _get_connection(self):
        """Get thread-safe database connection."""
        with self._lock:
            if self._conn is None:
                self._conn = sqlite3.connect(
                    str(self._path),
                    check_same_thread=False
                )
                self._conn.row_factory = sqlite3.Row
            yield self._conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS version (
                    version INTEGER PRIMARY KEY
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS config (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            ''')

            cursor.execute('SELECT version FROM version LIMIT 1')
            row = cursor.fetchone()
            if row is None:
                cursor.execute(
                    'INSERT INTO version (version) VALUES (?)',
                    (self.SCHEMA_VERSION,)
                )

            conn.commit()

    def load(self) -> Optional[Session]:
        """
        Load session from database.

        Returns:
            Session if a decodable record exists, None otherwise
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                'SELECT value FROM config WHERE key = ?',
                (self._key,)
            )
            row = cursor.fetchone()
            if row is None:
                return None
            try:
                return Session.from_dict(json.loads(row['value']))
            except (json.JSONDecodeError, TypeError, AttributeError):
                return None

    def save(self, session: Session) -> None:
        """
        Save session to database, replacing the stored record.

        Args:
            session: Session to save
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT OR REPLACE INTO config (key, value, updated_at)
                VALUES (?, ?, ?)
            ''', (self._key, session.to_json(), datetime.now().isoformat()))
            conn.commit()

    def delete(self) -> None:
        """Delete the session record."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('DELETE FROM config WHERE key = ?', (self._key,))
            conn.commit()

    def exists(self) -> bool:
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                'SELECT COUNT(*) FROM config WHERE key = ?',
                (self._key,)
            )
            return cursor.fetchone()[0] > 0

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> 'SQLiteSession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __del__(self):
        try:
            self.close()
        except Exception:
            pass
