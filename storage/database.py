"""
Database management for Cardwise.
Handles SQLite operations and schema management.
"""

import sqlite3
import json
from pathlib import Path
from typing import Optional, List, Dict, Any, Tuple

from config import Config
from core.dto import QuestionRecord, StudySet, now_ms
from core.study_config import StudySettings


class SetNotFoundError(LookupError):
    """Raised when a study set id is unknown."""

    def __init__(self, set_id: str):
        super().__init__(f"Set not found: {set_id}")
        self.set_id = set_id


class Database:
    """Manages SQLite database operations for Cardwise."""

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Uses Config.DB_PATH if not provided.
        """
        self.db_path = db_path or Config.DB_PATH
        self.conn: Optional[sqlite3.Connection] = None

    def connect(self):
        """Establish database connection."""
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row  # Enable dict-like access
        # Enable foreign keys
        self.conn.execute("PRAGMA foreign_keys = ON")

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        if self.conn:
            if exc_type is None:
                self.conn.commit()
            else:
                self.conn.rollback()
            self.close()

    def initialize(self):
        """Create all tables and indexes."""
        if not self.conn:
            self.connect()

        self._create_tables()
        self._create_indexes()
        self.conn.commit()

    def _create_tables(self):
        """Create all database tables."""

        # Study sets table
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS study_sets (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                created_at INTEGER NOT NULL,
                updated_at INTEGER NOT NULL
            )
        """)

        # Questions table (ordered by position within a set)
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS questions (
                set_id TEXT NOT NULL,
                id TEXT NOT NULL,
                position INTEGER NOT NULL,
                question_text TEXT NOT NULL,
                correct_answer TEXT NOT NULL,
                PRIMARY KEY (set_id, id),
                FOREIGN KEY (set_id) REFERENCES study_sets(id) ON DELETE CASCADE
            )
        """)

        # Study settings (key -> JSON value)
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)

        # Last question range used per set
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS last_ranges (
                set_id TEXT PRIMARY KEY,
                range_start INTEGER NOT NULL,
                range_end INTEGER NOT NULL,
                FOREIGN KEY (set_id) REFERENCES study_sets(id) ON DELETE CASCADE
            )
        """)

        # Saved session snapshots (learn / quiz)
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS study_progress (
                set_id TEXT NOT NULL,
                mode TEXT NOT NULL,
                payload TEXT NOT NULL,
                updated_at INTEGER NOT NULL,
                PRIMARY KEY (set_id, mode),
                FOREIGN KEY (set_id) REFERENCES study_sets(id) ON DELETE CASCADE
            )
        """)

    def _create_indexes(self):
        """Create database indexes for performance."""
        indexes = [
            "CREATE INDEX IF NOT EXISTS idx_questions_set ON questions(set_id, position)",
            "CREATE INDEX IF NOT EXISTS idx_sets_updated ON study_sets(updated_at)",
        ]

        for index_sql in indexes:
            self.conn.execute(index_sql)

    # Study set operations
    def add_set(self, study_set: StudySet) -> str:
        """Add a new study set with its questions.

        Returns:
            Set ID
        """
        self.conn.execute("""
            INSERT INTO study_sets (id, title, created_at, updated_at)
            VALUES (?, ?, ?, ?)
        """, (study_set.id, study_set.title, study_set.created_at, study_set.updated_at))
        self._insert_questions(study_set.id, study_set.questions)
        return study_set.id

    def update_set(self, study_set: StudySet) -> StudySet:
        """Replace a set's title and questions wholesale.

        Returns:
            The stored set with a fresh updated_at

        Raises:
            SetNotFoundError: No set with this id
        """
        updated_at = now_ms()
        cursor = self.conn.execute("""
            UPDATE study_sets SET title = ?, updated_at = ?
            WHERE id = ?
        """, (study_set.title, updated_at, study_set.id))
        if cursor.rowcount == 0:
            raise SetNotFoundError(study_set.id)

        self.conn.execute("DELETE FROM questions WHERE set_id = ?", (study_set.id,))
        self._insert_questions(study_set.id, study_set.questions)
        study_set.updated_at = updated_at
        return study_set

    def _insert_questions(self, set_id: str, questions: List[QuestionRecord]):
        self.conn.executemany("""
            INSERT INTO questions (set_id, id, position, question_text, correct_answer)
            VALUES (?, ?, ?, ?, ?)
        """, [
            (set_id, q.id, position, q.question_text, q.correct_answer)
            for position, q in enumerate(questions)
        ])

    def get_set(self, set_id: str) -> StudySet:
        """Get a study set with its questions.

        Raises:
            SetNotFoundError: No set with this id
        """
        row = self.conn.execute(
            "SELECT * FROM study_sets WHERE id = ?", (set_id,)
        ).fetchone()
        if not row:
            raise SetNotFoundError(set_id)

        cursor = self.conn.execute("""
            SELECT id, question_text, correct_answer FROM questions
            WHERE set_id = ?
            ORDER BY position
        """, (set_id,))
        questions = [
            QuestionRecord(
                id=q['id'],
                question_text=q['question_text'],
                correct_answer=q['correct_answer'],
            )
            for q in cursor.fetchall()
        ]
        return StudySet(
            id=row['id'],
            title=row['title'],
            questions=questions,
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    def get_all_sets(self) -> List[Dict[str, Any]]:
        """Get summaries of all sets, most recently updated first."""
        cursor = self.conn.execute("""
            SELECT s.id, s.title, s.created_at, s.updated_at,
                   COUNT(q.id) AS question_count
            FROM study_sets s
            LEFT JOIN questions q ON q.set_id = s.id
            GROUP BY s.id
            ORDER BY s.updated_at DESC, s.id
        """)
        return [dict(row) for row in cursor.fetchall()]

    def delete_set(self, set_id: str):
        """Delete a set, its questions and its saved progress.

        Raises:
            SetNotFoundError: No set with this id
        """
        cursor = self.conn.execute("DELETE FROM study_sets WHERE id = ?", (set_id,))
        if cursor.rowcount == 0:
            raise SetNotFoundError(set_id)

    # Settings operations
    def get_settings(self) -> StudySettings:
        """Get study settings merged over the defaults."""
        cursor = self.conn.execute("SELECT key, value FROM settings")
        stored = {row['key']: json.loads(row['value']) for row in cursor.fetchall()}
        return StudySettings.from_dict(stored)

    def save_settings(self, settings: StudySettings):
        """Persist every study setting."""
        self.conn.executemany("""
            INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)
        """, [(key, json.dumps(value)) for key, value in settings.to_dict().items()])

    def reset_settings(self):
        """Drop stored settings so the defaults apply again."""
        self.conn.execute("DELETE FROM settings")

    # Range operations
    def get_last_range(self, set_id: str) -> Optional[Tuple[int, int]]:
        """Get the question range last studied for a set."""
        row = self.conn.execute(
            "SELECT range_start, range_end FROM last_ranges WHERE set_id = ?", (set_id,)
        ).fetchone()
        return (row['range_start'], row['range_end']) if row else None

    def save_last_range(self, set_id: str, start: int, end: int):
        """Remember the question range studied for a set."""
        self.conn.execute("""
            INSERT OR REPLACE INTO last_ranges (set_id, range_start, range_end)
            VALUES (?, ?, ?)
        """, (set_id, start, end))

    # Progress operations
    def save_progress(self, set_id: str, mode: str, payload: Dict[str, Any]):
        """Save a session snapshot for a set and study mode."""
        self.conn.execute("""
            INSERT OR REPLACE INTO study_progress (set_id, mode, payload, updated_at)
            VALUES (?, ?, ?, ?)
        """, (set_id, mode, json.dumps(payload), now_ms()))

    def get_progress(self, set_id: str, mode: str) -> Optional[Dict[str, Any]]:
        """Get the saved session snapshot for a set and study mode."""
        row = self.conn.execute(
            "SELECT payload FROM study_progress WHERE set_id = ? AND mode = ?",
            (set_id, mode)
        ).fetchone()
        return json.loads(row['payload']) if row else None

    def clear_progress(self, set_id: Optional[str] = None, mode: Optional[str] = None) -> int:
        """Delete saved snapshots (all of them when no filter is given).

        Returns:
            Number of snapshots deleted
        """
        query = "DELETE FROM study_progress WHERE 1 = 1"
        params: List[Any] = []
        if set_id is not None:
            query += " AND set_id = ?"
            params.append(set_id)
        if mode is not None:
            query += " AND mode = ?"
            params.append(mode)
        return self.conn.execute(query, params).rowcount

    def clear_last_ranges(self) -> int:
        """Forget every remembered question range."""
        return self.conn.execute("DELETE FROM last_ranges").rowcount
