"""
database.py — SQLite application history store.
One connection per call, so concurrent runs for different users only share
the file itself (WAL mode handles concurrent appends).
"""

import sqlite3
from datetime import datetime
from typing import Optional

from config import DB_PATH
from models import ApplicationHistoryRecord


def get_connection() -> sqlite3.Connection:
    """Get a database connection, creating the DB file if needed."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(DB_PATH), timeout=30)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_db():
    """Create all tables if they don't exist."""
    conn = get_connection()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS application_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            owner TEXT NOT NULL,
            job_title TEXT NOT NULL,
            company_name TEXT,
            job_url TEXT NOT NULL,
            status TEXT NOT NULL,
            match_score REAL,
            match_reason TEXT,
            applied_at TEXT NOT NULL,
            resume_id TEXT
        );

        CREATE INDEX IF NOT EXISTS idx_history_owner ON application_history(owner);
    """)
    conn.commit()
    conn.close()


def store_history_record(record: ApplicationHistoryRecord) -> int:
    """Store one history record. Returns the inserted row ID."""
    return store_history_batch([record])[0]


def store_history_batch(records: list[ApplicationHistoryRecord]) -> list[int]:
    """Store several records in one transaction. Returns their row IDs in order."""
    if not records:
        return []
    conn = get_connection()
    ids = []
    try:
        with conn:
            for record in records:
                cursor = conn.execute(
                    """INSERT INTO application_history
                       (owner, job_title, company_name, job_url, status, match_score,
                        match_reason, applied_at, resume_id)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        record.owner, record.job_title, record.company_name, record.job_url,
                        record.status, record.match_score, record.match_reason,
                        record.applied_at.isoformat(), record.resume_id,
                    )
                )
                ids.append(cursor.lastrowid)
    finally:
        conn.close()
    return ids


def get_history_for_owner(owner: str, newest_first: bool = True) -> list[ApplicationHistoryRecord]:
    """Return every record owned by `owner`, newest first or in insertion order."""
    order = "DESC" if newest_first else "ASC"
    conn = get_connection()
    try:
        rows = conn.execute(
            f"SELECT * FROM application_history WHERE owner = ? ORDER BY id {order}",
            (owner,)
        ).fetchall()
    finally:
        conn.close()
    return [_row_to_record(row) for row in rows]


def get_history_record(record_id: int) -> Optional[ApplicationHistoryRecord]:
    conn = get_connection()
    try:
        row = conn.execute("SELECT * FROM application_history WHERE id = ?", (record_id,)).fetchone()
    finally:
        conn.close()
    return _row_to_record(row) if row else None


def _row_to_record(row: sqlite3.Row) -> ApplicationHistoryRecord:
    return ApplicationHistoryRecord(
        id=row["id"],
        owner=row["owner"],
        job_title=row["job_title"],
        company_name=row["company_name"],
        job_url=row["job_url"],
        status=row["status"],
        match_score=row["match_score"],
        match_reason=row["match_reason"] or "",
        applied_at=datetime.fromisoformat(row["applied_at"]),
        resume_id=row["resume_id"],
    )
