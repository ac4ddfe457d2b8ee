"""SQLite schema management (code-first approach)."""

import logging
from dataclasses import dataclass

from src.core import db_client
from src.domain.swap import ACTIVE_STATUSES


logger = logging.getLogger(__name__)


# Central list of all collections in the schema
COLLECTIONS = [
    "users",
    "skills",
    "user_skills",
    "swap_requests",
    "feedback",
    "admin_actions",
]


@dataclass(frozen=True)
class UniqueKey:
    """A unique index, optionally partial over a set of status values."""

    name: str
    collection: str
    fields: tuple[str, ...]
    partial_statuses: tuple[str, ...] = ()

    def to_sql(self) -> str:
        """Render the CREATE UNIQUE INDEX statement."""
        sql = f"CREATE UNIQUE INDEX IF NOT EXISTS {self.name} ON {self.collection} ({', '.join(self.fields)})"
        if self.partial_statuses:
            statuses = ", ".join(f"'{status}'" for status in self.partial_statuses)
            sql += f" WHERE status IN ({statuses})"
        return sql


UNIQUE_KEYS: list[UniqueKey] = [
    UniqueKey(name="idx_users_email", collection="users", fields=("email",)),
    UniqueKey(name="idx_user_skills_unique", collection="user_skills", fields=("user_id", "skill_id", "type")),
    # One active request per (requester, requestee, offered, wanted) tuple
    UniqueKey(
        name="idx_swap_active_tuple",
        collection="swap_requests",
        fields=(
            "requester_id",
            "requestee_id",
            "offered_skill_kind",
            "offered_skill",
            "wanted_skill_kind",
            "wanted_skill",
        ),
        partial_statuses=tuple(sorted(ACTIVE_STATUSES)),
    ),
    # One review per reviewer per swap
    UniqueKey(name="idx_feedback_reviewer_swap", collection="feedback", fields=("swap_request_id", "reviewer_id")),
]


_TABLES: dict[str, str] = {
    "users": """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'admin')),
            is_active INTEGER NOT NULL DEFAULT 1,
            is_banned INTEGER NOT NULL DEFAULT 0,
            ban_reason TEXT,
            created TEXT NOT NULL,
            updated TEXT NOT NULL
        )
    """,
    "skills": """
        CREATE TABLE IF NOT EXISTS skills (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            category TEXT NOT NULL,
            description TEXT,
            status TEXT NOT NULL DEFAULT 'approved' CHECK (status IN ('approved', 'pending', 'rejected')),
            created_by TEXT NOT NULL,
            created TEXT NOT NULL,
            updated TEXT NOT NULL
        )
    """,
    "user_skills": """
        CREATE TABLE IF NOT EXISTS user_skills (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            skill_id TEXT NOT NULL,
            type TEXT NOT NULL CHECK (type IN ('offered', 'wanted')),
            proficiency_level TEXT NOT NULL DEFAULT 'intermediate',
            notes TEXT,
            is_active INTEGER NOT NULL DEFAULT 1,
            created TEXT NOT NULL,
            updated TEXT NOT NULL
        )
    """,
    "swap_requests": """
        CREATE TABLE IF NOT EXISTS swap_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            requester_id TEXT NOT NULL,
            requestee_id TEXT NOT NULL CHECK (requestee_id != requester_id),
            offered_skill_kind TEXT NOT NULL CHECK (offered_skill_kind IN ('structured', 'free_text')),
            offered_skill TEXT NOT NULL,
            wanted_skill_kind TEXT NOT NULL CHECK (wanted_skill_kind IN ('structured', 'free_text')),
            wanted_skill TEXT NOT NULL,
            message TEXT,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'accepted', 'rejected', 'cancelled', 'completed')),
            response_message TEXT,
            created_at TEXT NOT NULL,
            responded_at TEXT,
            accepted_at TEXT,
            rejected_at TEXT,
            completed_at TEXT,
            cancelled_at TEXT,
            created TEXT NOT NULL,
            updated TEXT NOT NULL
        )
    """,
    "feedback": """
        CREATE TABLE IF NOT EXISTS feedback (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            swap_request_id TEXT NOT NULL,
            reviewer_id TEXT NOT NULL,
            reviewee_id TEXT NOT NULL CHECK (reviewee_id != reviewer_id),
            rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
            skill_rating INTEGER CHECK (skill_rating BETWEEN 1 AND 5),
            communication_rating INTEGER CHECK (communication_rating BETWEEN 1 AND 5),
            comment TEXT,
            recommends_user INTEGER NOT NULL DEFAULT 1,
            is_public INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            created TEXT NOT NULL,
            updated TEXT NOT NULL
        )
    """,
    "admin_actions": """
        CREATE TABLE IF NOT EXISTS admin_actions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            admin_id TEXT NOT NULL,
            target_user_id TEXT,
            target_skill_id TEXT,
            action_type TEXT NOT NULL,
            reason TEXT NOT NULL,
            details TEXT,
            created_at TEXT NOT NULL,
            created TEXT NOT NULL,
            updated TEXT NOT NULL
        )
    """,
}

# Lookup indexes by participant and by status
_INDEXES: list[str] = [
    "CREATE INDEX IF NOT EXISTS idx_swap_requester_status ON swap_requests (requester_id, status)",
    "CREATE INDEX IF NOT EXISTS idx_swap_requestee_status ON swap_requests (requestee_id, status)",
    "CREATE INDEX IF NOT EXISTS idx_swap_status ON swap_requests (status)",
    "CREATE INDEX IF NOT EXISTS idx_swap_created_at ON swap_requests (created_at)",
    "CREATE INDEX IF NOT EXISTS idx_feedback_reviewee_public ON feedback (reviewee_id, is_public)",
    "CREATE INDEX IF NOT EXISTS idx_feedback_reviewer ON feedback (reviewer_id)",
    "CREATE INDEX IF NOT EXISTS idx_feedback_swap ON feedback (swap_request_id)",
    "CREATE INDEX IF NOT EXISTS idx_user_skills_user_type ON user_skills (user_id, type)",
    "CREATE INDEX IF NOT EXISTS idx_admin_actions_target ON admin_actions (target_user_id)",
    "CREATE INDEX IF NOT EXISTS idx_admin_actions_type ON admin_actions (action_type)",
]


def schema_statements() -> list[str]:
    """Return every DDL statement in creation order."""
    statements = [_TABLES[name] for name in COLLECTIONS]
    statements.extend(key.to_sql() for key in UNIQUE_KEYS)
    statements.extend(_INDEXES)
    return statements


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables and indexes (idempotent)."""
    logger.info("Starting SQLite schema sync...")

    conn = await db_client.get_connection(db_path=db_path)
    for statement in schema_statements():
        await conn.execute(statement)
    await conn.commit()

    logger.info("SQLite schema sync complete", extra={"collections": COLLECTIONS})
