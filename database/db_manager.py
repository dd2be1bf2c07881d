import sqlite3
import os
from utils.constants import DB_FILE
from utils.logging_setup import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._seed_defaults(conn)
        conn.commit()
        logger.debug("Database ready at %s", self.db_path)

    def _create_schema(self, conn: sqlite3.Connection):
        # Amounts are stored as decimal strings so balances stay exact
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS transactions (
                id          INTEGER PRIMARY KEY,
                date        TEXT NOT NULL,
                description TEXT NOT NULL,
                amount      TEXT NOT NULL CHECK(CAST(amount AS REAL) != 0),
                recurrence  TEXT NOT NULL DEFAULT 'none'
                            CHECK(recurrence IN ('none','weekly','biweekly',
                                                 'monthly','quarterly','annually'))
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_date ON transactions(date);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("appearance_mode", "system"),
            ("currency_symbol", "$"),
            ("date_format", "MM/DD/YYYY"),
            ("next_transaction_id", "1"),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str, commit: bool = True):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        if commit:
            conn.commit()

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the app database.

        db_folder: if provided, the DB file is stored in that directory instead of CWD.
        """
        path = os.path.join(db_folder, DB_FILE) if db_folder else DB_FILE
        db = DatabaseManager(path)
        db.initialize()
        logger.info("Opened database %s", path)
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
