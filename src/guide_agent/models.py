"""SQLite schema, migrations, and data access helpers for the usage audit log."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Dict, List

from .utils import utc_now_iso

MIGRATIONS: list[tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version INTEGER PRIMARY KEY,
            applied_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS usage_records (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            actor_id TEXT,
            provider TEXT NOT NULL DEFAULT '',
            model TEXT NOT NULL,
            prompt_tokens INTEGER NOT NULL DEFAULT 0,
            completion_tokens INTEGER NOT NULL DEFAULT 0,
            status TEXT NOT NULL CHECK (status IN ('success', 'timeout', 'error')),
            error_message TEXT,
            latency_ms INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_usage_records_status_created ON usage_records(status, created_at);
        """,
    ),
    (
        2,
        """
        ALTER TABLE usage_records ADD COLUMN cost_usd REAL NOT NULL DEFAULT 0;
        CREATE INDEX IF NOT EXISTS idx_usage_records_actor ON usage_records(actor_id);
        """,
    ),
]


def get_connection(db_path: str) -> sqlite3.Connection:
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def apply_migrations(db_path: str) -> None:
    with get_connection(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                version INTEGER PRIMARY KEY,
                applied_at TEXT NOT NULL
            )
            """
        )
        applied = {
            row["version"]
            for row in conn.execute("SELECT version FROM schema_migrations").fetchall()
        }
        for version, sql in MIGRATIONS:
            if version in applied:
                continue
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_migrations(version, applied_at) VALUES (?, ?)",
                (version, utc_now_iso()),
            )
        conn.commit()


def insert_usage_record(
    conn: sqlite3.Connection,
    model: str,
    status: str,
    prompt_tokens: int = 0,
    completion_tokens: int = 0,
    latency_ms: int = 0,
    error_message: str | None = None,
    provider: str = "",
    actor_id: str | None = None,
    cost_usd: float = 0.0,
    created_at: str | None = None,
) -> Dict[str, Any]:
    cur = conn.execute(
        """
        INSERT INTO usage_records(
            actor_id, provider, model, prompt_tokens, completion_tokens,
            status, error_message, latency_ms, cost_usd, created_at
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            actor_id,
            provider,
            model,
            prompt_tokens,
            completion_tokens,
            status,
            error_message,
            latency_ms,
            cost_usd,
            created_at or utc_now_iso(),
        ),
    )
    conn.commit()
    row = conn.execute("SELECT * FROM usage_records WHERE id = ?", (cur.lastrowid,)).fetchone()
    return dict(row)


def list_usage_records(conn: sqlite3.Connection, limit: int = 20) -> List[Dict[str, Any]]:
    rows = conn.execute(
        "SELECT * FROM usage_records ORDER BY id DESC LIMIT ?",
        (limit,),
    ).fetchall()
    return [dict(row) for row in rows]


def get_usage_summary(conn: sqlite3.Connection) -> Dict[str, Any]:
    row = conn.execute(
        """
        SELECT
          COUNT(*) AS calls,
          COALESCE(SUM(CASE WHEN status = 'success' THEN 1 ELSE 0 END), 0) AS success,
          COALESCE(SUM(CASE WHEN status = 'timeout' THEN 1 ELSE 0 END), 0) AS timeout,
          COALESCE(SUM(CASE WHEN status = 'error' THEN 1 ELSE 0 END), 0) AS error,
          COALESCE(SUM(prompt_tokens), 0) AS prompt_tokens,
          COALESCE(SUM(completion_tokens), 0) AS completion_tokens,
          COALESCE(SUM(cost_usd), 0) AS cost_usd,
          COALESCE(AVG(latency_ms), 0) AS avg_latency_ms
        FROM usage_records
        """
    ).fetchone()
    return dict(row)
