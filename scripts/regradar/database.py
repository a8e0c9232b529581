"""
Database management for RegulatorRadar.

Handles SQLite storage of analyzed regulations. Each regulation is stored once
per id; storing it again replaces the analysis and keeps the original
creation time.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator, List, Optional

from .models import FeedItem, RegulationAnalysis, StoredRegulation

logger = logging.getLogger(__name__)


class RegulationStore:
    """SQLite-backed store for analyzed regulations."""

    def __init__(self, db_path: Path) -> None:
        """
        Initialize the store.

        Args:
            db_path: Path to the database file. Created if missing.
        """
        self.db_path = Path(db_path)
        self._ensure_directory()
        self._init_schema()

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database connections.

        Yields:
            SQLite connection with row factory set to sqlite3.Row.
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize the database schema."""
        with self.connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS regulations (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    severity_score INTEGER NOT NULL,
                    regulation_type TEXT NOT NULL,
                    original_json TEXT NOT NULL,
                    analysis_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_regulations_severity ON regulations(severity_score)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_regulations_created ON regulations(created_at)"
            )

    def upsert(self, original: FeedItem, analysis: RegulationAnalysis) -> bool:
        """
        Store a regulation, replacing any existing one with the same id.

        Returns:
            True if stored, False if the database rejected the write.
        """
        now = datetime.now().isoformat()
        try:
            with self.connection() as conn:
                conn.execute(
                    """
                    INSERT INTO regulations (
                        id, title, severity_score, regulation_type,
                        original_json, analysis_json, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        title = excluded.title,
                        severity_score = excluded.severity_score,
                        regulation_type = excluded.regulation_type,
                        original_json = excluded.original_json,
                        analysis_json = excluded.analysis_json,
                        updated_at = excluded.updated_at
                    """,
                    (
                        analysis.id,
                        analysis.title,
                        analysis.severity_score,
                        analysis.regulation_type.value,
                        json.dumps(original.to_dict()),
                        json.dumps(analysis.to_dict()),
                        now,
                        now,
                    ),
                )
            return True
        except sqlite3.Error as e:
            logger.error("Failed to store regulation %s: %s", analysis.id, e)
            return False

    def get(self, regulation_id: str) -> Optional[StoredRegulation]:
        """Get a stored regulation by id."""
        with self.connection() as conn:
            row = conn.execute("SELECT * FROM regulations WHERE id = ?", (regulation_id,)).fetchone()
        return self._row_to_regulation(row) if row else None

    def get_all(
        self, min_severity: Optional[int] = None, since: Optional[datetime] = None
    ) -> List[StoredRegulation]:
        """
        List stored regulations, most severe first, then most recent.

        Args:
            min_severity: Only include regulations at or above this score.
            since: Only include regulations first stored at or after this time.
        """
        query = "SELECT * FROM regulations WHERE 1=1"
        params: list = []

        if min_severity is not None:
            query += " AND severity_score >= ?"
            params.append(min_severity)
        if since is not None:
            query += " AND created_at >= ?"
            params.append(since.isoformat())

        query += " ORDER BY severity_score DESC, created_at DESC"

        with self.connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_regulation(row) for row in rows]

    def delete_older_than(self, days: int) -> int:
        """
        Delete regulations first stored more than `days` days ago.

        Returns:
            Number of regulations removed.
        """
        cutoff = (datetime.now() - timedelta(days=days)).isoformat()
        with self.connection() as conn:
            cursor = conn.execute("DELETE FROM regulations WHERE created_at < ?", (cutoff,))
            removed = cursor.rowcount

        if removed:
            logger.info("Cleaned up %d old regulations (older than %d days)", removed, days)
        return removed

    def count(self) -> int:
        with self.connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM regulations").fetchone()[0]

    @staticmethod
    def _row_to_regulation(row: sqlite3.Row) -> StoredRegulation:
        return StoredRegulation(
            id=row["id"],
            title=row["title"],
            original=FeedItem.from_dict(json.loads(row["original_json"])),
            analysis=RegulationAnalysis.from_dict(json.loads(row["analysis_json"])),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
