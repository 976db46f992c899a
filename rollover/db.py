import sqlite3
from contextlib import contextmanager
from pathlib import Path

from fncli import cli

from . import config
from .lib.errors import echo

MIGRATIONS_TABLE = "_migrations"

Migration = tuple[str, str]


@contextmanager
def get_db(db_path: Path | None = None):
    db_path = db_path if db_path else config.DB_PATH
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA journal_mode=WAL")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def load_migrations() -> list[Migration]:
    migrations_dir = Path(__file__).parent / "migrations"
    if not migrations_dir.exists():
        return []
    return [(f.stem, f.read_text()) for f in sorted(migrations_dir.glob("*.sql"))]


def _apply_migrations(conn: sqlite3.Connection) -> list[str]:
    conn.execute(
        f"CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} "
        "(id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL UNIQUE, applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
    )
    conn.commit()

    applied = {row[0] for row in conn.execute(f"SELECT name FROM {MIGRATIONS_TABLE}").fetchall()}  # noqa: S608
    pending = [(n, sql) for n, sql in load_migrations() if n not in applied]

    for name, sql in pending:
        try:
            conn.executescript(sql)
            conn.execute(f"INSERT OR IGNORE INTO {MIGRATIONS_TABLE} (name) VALUES (?)", (name,))  # noqa: S608
            conn.commit()
        except Exception:
            conn.rollback()
            raise
    return [name for name, _ in pending]


def init(db_path: Path | None = None) -> list[str]:
    db_path = db_path if db_path else config.DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA journal_mode=WAL")
    try:
        return _apply_migrations(conn)
    finally:
        conn.close()


@cli("rollover db", name="migrate")
def db_migrate():
    """Run pending run-log migrations"""
    applied = init()
    echo(f"migrations applied: {len(applied)}")
