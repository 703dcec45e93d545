# src/folio/database.py
"""Lead store abstraction supporting local SQLite and remote Turso backends."""

import json
import sqlite3
from abc import ABC, abstractmethod
from collections import Counter
from datetime import date, datetime
from typing import Optional, List, Dict, Any
import logging

from folio.config import settings
from folio.constants import (
    LEAD_STATUSES,
    QUALIFIED_STATUSES,
    TOP_SOURCES_LIMIT,
    TREND_MONTHS,
)
from folio.models import ContactSubmission

logger = logging.getLogger(__name__)

# SQL schema shared between backends
CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS contact_submissions (
    id TEXT PRIMARY KEY,
    form_id TEXT NOT NULL,

    -- Contact
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    phone TEXT,
    company TEXT,

    -- Project
    project_type TEXT,
    budget TEXT,
    timeline TEXT,
    message TEXT NOT NULL,

    -- Pipeline
    status TEXT NOT NULL DEFAULT 'new',
    priority TEXT NOT NULL DEFAULT 'low',
    source TEXT,
    lead_score INTEGER NOT NULL DEFAULT 0,
    submitted_at TIMESTAMP NOT NULL,
    last_contacted_at TIMESTAMP,

    -- JSON-encoded lists
    notes TEXT NOT NULL DEFAULT '[]',
    tags TEXT NOT NULL DEFAULT '[]'
);
"""

COLUMNS = (
    "id", "form_id", "name", "email", "phone", "company", "project_type",
    "budget", "timeline", "message", "status", "priority", "source",
    "lead_score", "submitted_at", "last_contacted_at", "notes", "tags",
)


def _to_row(submission: ContactSubmission) -> tuple:
    """Flatten a submission into column values."""
    return (
        submission.id,
        submission.form_id,
        submission.name,
        submission.email,
        submission.phone,
        submission.company,
        submission.project_type,
        submission.budget,
        submission.timeline,
        submission.message,
        submission.status,
        submission.priority,
        submission.source,
        submission.lead_score,
        submission.submitted_at.isoformat(),
        submission.last_contacted_at.isoformat() if submission.last_contacted_at else None,
        json.dumps(submission.notes),
        json.dumps(submission.tags),
    )


def _from_row(row: Dict[str, Any]) -> ContactSubmission:
    """Rebuild a submission from a result row."""
    last_contacted = row.get("last_contacted_at")
    return ContactSubmission(
        id=row["id"],
        form_id=row["form_id"],
        name=row["name"],
        email=row["email"],
        phone=row.get("phone") or "",
        company=row.get("company") or "",
        project_type=row.get("project_type") or "",
        budget=row.get("budget") or "",
        timeline=row.get("timeline") or "",
        message=row["message"],
        status=row["status"],
        priority=row["priority"],
        source=row.get("source") or "",
        lead_score=row["lead_score"],
        submitted_at=datetime.fromisoformat(row["submitted_at"]),
        last_contacted_at=datetime.fromisoformat(last_contacted) if last_contacted else None,
        notes=json.loads(row.get("notes") or "[]"),
        tags=json.loads(row.get("tags") or "[]"),
    )


def _percentage(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total > 0 else 0.0


def _like_pattern(search: str) -> str:
    """Build a lowercase substring LIKE pattern with wildcards escaped (ESCAPE '\\')."""
    escaped = (
        search.lower()
        .replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
    return f"%{escaped}%"


def _top_sources(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Most frequent submission sources; ties keep first-seen order."""
    counts = Counter(row["source"] or "" for row in rows)
    return [
        {"source": source, "count": count}
        for source, count in counts.most_common(TOP_SOURCES_LIMIT)
    ]


def _project_type_breakdown(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Count and average lead score per project type, most common first."""
    totals: Dict[str, List[int]] = {}
    for row in rows:
        project_type = row["project_type"]
        if not project_type:
            continue
        count_and_score = totals.setdefault(project_type, [0, 0])
        count_and_score[0] += 1
        count_and_score[1] += row["lead_score"]

    breakdown = [
        {"type": project_type, "count": count, "avg_score": round(score / count, 1)}
        for project_type, (count, score) in totals.items()
    ]
    return sorted(breakdown, key=lambda item: item["count"], reverse=True)


def _monthly_trends(rows: List[Dict[str, Any]], today: date) -> List[Dict[str, Any]]:
    """Submissions and qualified leads for the last TREND_MONTHS months, oldest first."""
    submitted = [
        (datetime.fromisoformat(row["submitted_at"]), row["status"]) for row in rows
    ]
    current = today.year * 12 + today.month - 1

    trends = []
    for offset in range(TREND_MONTHS - 1, -1, -1):
        year, month = divmod(current - offset, 12)
        month += 1
        in_month = [
            status for when, status in submitted
            if when.year == year and when.month == month
        ]
        trends.append({
            "month": date(year, month, 1).strftime("%b %Y"),
            "submissions": len(in_month),
            "qualified": sum(1 for status in in_month if status in QUALIFIED_STATUSES),
        })
    return trends


class AbstractLeadStore(ABC):
    """Abstract base class defining the lead store interface.

    Backends supply connection handling and the two SQL primitives; the
    submission operations are shared.
    """

    @abstractmethod
    def connect(self) -> None:
        """Establish database connection."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close database connection."""
        pass

    @abstractmethod
    def create_schema(self) -> None:
        """Create the necessary database tables."""
        pass

    @abstractmethod
    def _execute(self, sql: str, params: tuple = ()) -> None:
        """Run a write statement."""
        pass

    @abstractmethod
    def _query(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Run a query and return rows as dictionaries."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def save_submission(self, submission: ContactSubmission) -> str:
        """Insert or replace a submission.

        Args:
            submission: Submission to store

        Returns:
            The submission id
        """
        columns = ", ".join(COLUMNS)
        placeholders = ", ".join("?" for _ in COLUMNS)
        self._execute(
            f"INSERT OR REPLACE INTO contact_submissions ({columns}) VALUES ({placeholders})",
            _to_row(submission),
        )
        logger.debug(f"Saved submission {submission.id} (score {submission.lead_score})")
        return submission.id

    def get_submission(self, submission_id: str) -> ContactSubmission:
        """Fetch a single submission.

        Raises:
            KeyError: If no submission has that id
        """
        rows = self._query("SELECT * FROM contact_submissions WHERE id = ?", (submission_id,))
        if not rows:
            raise KeyError(submission_id)
        return _from_row(rows[0])

    def list_submissions(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[ContactSubmission]:
        """List submissions, newest first.

        Args:
            status: Only this pipeline status
            priority: Only this priority
            search: Case-insensitive match on name, email or company

        Returns:
            Matching submissions
        """
        clauses = []
        params: list = []

        if status:
            clauses.append("status = ?")
            params.append(status)
        if priority:
            clauses.append("priority = ?")
            params.append(priority)
        if search:
            term = _like_pattern(search)
            clauses.append(
                "(LOWER(name) LIKE ? ESCAPE '\\' "
                "OR LOWER(email) LIKE ? ESCAPE '\\' "
                "OR LOWER(company) LIKE ? ESCAPE '\\')"
            )
            params.extend([term, term, term])

        sql = "SELECT * FROM contact_submissions"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY submitted_at DESC"

        return [_from_row(row) for row in self._query(sql, tuple(params))]

    def update_status(
        self, submission_id: str, status: str, now: Optional[datetime] = None
    ) -> ContactSubmission:
        """Move a submission through the pipeline and stamp the contact time.

        Raises:
            ValueError: If the status is unknown
            KeyError: If no submission has that id
        """
        if status not in LEAD_STATUSES:
            raise ValueError(
                f"Unknown lead status: '{status}'. "
                f"Supported statuses: {', '.join(LEAD_STATUSES)}"
            )

        submission = self.get_submission(submission_id)
        submission.status = status
        submission.last_contacted_at = now or datetime.now()

        self._execute(
            "UPDATE contact_submissions SET status = ?, last_contacted_at = ? WHERE id = ?",
            (status, submission.last_contacted_at.isoformat(), submission_id),
        )
        logger.info(f"Submission {submission_id} moved to '{status}'")
        return submission

    def add_note(
        self, submission_id: str, note: str, now: Optional[datetime] = None
    ) -> ContactSubmission:
        """Append a timestamped note to a submission.

        Raises:
            KeyError: If no submission has that id
        """
        submission = self.get_submission(submission_id)
        timestamp = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
        submission.notes.append(f"{timestamp}: {note}")

        self._execute(
            "UPDATE contact_submissions SET notes = ? WHERE id = ?",
            (json.dumps(submission.notes), submission_id),
        )
        return submission

    def get_conversion_stats(self, today: Optional[date] = None) -> Dict[str, Any]:
        """Summarize the pipeline.

        Args:
            today: Last month of the monthly trends (defaults to today)

        Returns:
            Dict with total_submissions, won_deals, qualified_leads,
            conversion/qualification rates as percentages (one decimal),
            avg_lead_score, top_sources, project_type_breakdown and
            monthly_trends
        """
        rows = self._query(
            "SELECT status, lead_score, source, project_type, submitted_at "
            "FROM contact_submissions ORDER BY submitted_at DESC"
        )

        total = len(rows)
        won = sum(1 for row in rows if row["status"] == "won")
        qualified = sum(1 for row in rows if row["status"] in QUALIFIED_STATUSES)
        total_score = sum(row["lead_score"] for row in rows)

        return {
            "total_submissions": total,
            "won_deals": won,
            "qualified_leads": qualified,
            "conversion_rate": _percentage(won, total),
            "qualification_rate": _percentage(qualified, total),
            "avg_lead_score": round(total_score / total, 1) if total > 0 else 0.0,
            "top_sources": _top_sources(rows),
            "project_type_breakdown": _project_type_breakdown(rows),
            "monthly_trends": _monthly_trends(rows, today or date.today()),
        }


class LocalSqliteLeadStore(AbstractLeadStore):
    """SQLite lead store for local storage."""

    def __init__(self, db_url: Optional[str] = None):
        """Initialize local SQLite store.

        Args:
            db_url: Database URL (sqlite:///path/to/db.db). Defaults to settings.DATABASE_URL.
        """
        self.db_url = db_url or settings.DATABASE_URL
        self.db_path = self.db_url.replace("sqlite:///", "")
        self.conn: Optional[sqlite3.Connection] = None
        self.connect()
        self.create_schema()

    def connect(self) -> None:
        """Establish SQLite connection."""
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row
        logger.debug(f"Connected to local SQLite database: {self.db_path}")

    def close(self) -> None:
        """Close SQLite connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.debug("Closed local SQLite connection")

    def create_schema(self) -> None:
        """Create the submissions table if it doesn't exist."""
        with self.conn:
            self.conn.execute(CREATE_TABLE_SQL)
        logger.debug("Schema verified/created for local SQLite")

    def _execute(self, sql: str, params: tuple = ()) -> None:
        with self.conn:
            self.conn.execute(sql, params)

    def _query(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        cursor = self.conn.cursor()
        cursor.execute(sql, params)
        return [dict(row) for row in cursor.fetchall()]


class TursoLeadStore(AbstractLeadStore):
    """Turso (libSQL) lead store for hosted storage."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        auth_token: Optional[str] = None,
    ):
        """Initialize Turso connection.

        Args:
            database_url: Turso database URL (libsql://...). Defaults to settings.TURSO_DATABASE_URL.
            auth_token: Turso auth token. Defaults to settings.TURSO_AUTH_TOKEN.
        """
        self.database_url = database_url or settings.TURSO_DATABASE_URL
        self.auth_token = auth_token or settings.TURSO_AUTH_TOKEN
        self.client = None

        if not self.database_url:
            raise ValueError("TURSO_DATABASE_URL is required for Turso backend")
        if not self.auth_token:
            raise ValueError("TURSO_AUTH_TOKEN is required for Turso backend")

        self.connect()
        self.create_schema()

    def connect(self) -> None:
        """Establish Turso connection using libsql-client."""
        try:
            import libsql_client
        except ImportError:
            raise ImportError(
                "libsql-client is required for Turso backend. "
                "Install it with: pip install 'folio-toolkit[turso]'"
            )
        self.client = libsql_client.create_client_sync(
            url=self.database_url,
            auth_token=self.auth_token,
        )
        logger.info(f"Connected to Turso database: {self.database_url}")

    def close(self) -> None:
        """Close Turso connection."""
        if self.client:
            self.client.close()
            self.client = None
            logger.debug("Closed Turso connection")

    def create_schema(self) -> None:
        """Create the submissions table in Turso if it doesn't exist."""
        self.client.execute(CREATE_TABLE_SQL)
        logger.debug("Schema verified/created for Turso database")

    def _execute(self, sql: str, params: tuple = ()) -> None:
        self.client.execute(sql, list(params))

    def _query(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        result = self.client.execute(sql, list(params))
        return [
            {column: row[i] for i, column in enumerate(result.columns)}
            for row in result.rows
        ]


def get_db_client(
    backend: Optional[str] = None,
    **kwargs,
) -> AbstractLeadStore:
    """Factory function to create the appropriate lead store.

    Args:
        backend: Store backend ('local' or 'turso'). Defaults to settings.DB_BACKEND.
        **kwargs: Additional arguments passed to the store constructor.

    Returns:
        An instance of AbstractLeadStore (either LocalSqliteLeadStore or TursoLeadStore).

    Raises:
        ValueError: If an unknown backend is specified.
    """
    backend = backend or settings.DB_BACKEND

    if backend == "local":
        logger.info("Using local SQLite lead store")
        return LocalSqliteLeadStore(**kwargs)
    elif backend == "turso":
        logger.info("Using Turso lead store")
        return TursoLeadStore(**kwargs)
    else:
        raise ValueError(
            f"Unknown database backend: '{backend}'. "
            "Supported backends: 'local', 'turso'"
        )
