"""Persisted layout shared by every adapter.

Each entity kind maps to one table (SQLite), one collection (key-value) or
one table (Supabase).  Column order and types below drive the SQLite DDL;
``json_columns`` are list-valued and ``bool_columns`` are flags, which the
relational adapter must encode as text and integers respectively.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from jobtracker.models.enums import EntityKind


@dataclass(frozen=True)
class TableSpec:
    """Column layout and indexes of one entity kind."""

    name: str
    columns: dict[str, str]
    json_columns: frozenset[str] = frozenset()
    bool_columns: frozenset[str] = frozenset()
    indexes: tuple[str, ...] = ()
    unique: tuple[str, ...] = ()
    field_names: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "field_names", frozenset(self.columns))

    def ddl(self) -> list[str]:
        """Return idempotent CREATE statements for the table and its indexes."""
        cols = ",\n  ".join(
            f'"{name}" {sql_type}' for name, sql_type in self.columns.items()
        )
        statements = [f"CREATE TABLE IF NOT EXISTS {self.name} (\n  {cols}\n)"]
        for column in self.indexes:
            statements.append(
                f"CREATE INDEX IF NOT EXISTS idx_{self.name}_{column} "
                f'ON {self.name}("{column}")'
            )
        for column in self.unique:
            statements.append(
                f"CREATE UNIQUE INDEX IF NOT EXISTS uq_{self.name}_{column} "
                f'ON {self.name}("{column}")'
            )
        return statements


_TIMESTAMPS = {
    "created_at": "TEXT NOT NULL",
    "updated_at": "TEXT NOT NULL",
}

TABLES: dict[EntityKind, TableSpec] = {
    EntityKind.users: TableSpec(
        name=EntityKind.users.value,
        columns={
            "id": "TEXT PRIMARY KEY NOT NULL",
            "name": "TEXT NOT NULL",
            "email": "TEXT NOT NULL",
            "password_hash": "TEXT NOT NULL",
            "role": "TEXT NOT NULL",
            "phone": "TEXT",
            "address": "TEXT",
            "skills": "TEXT",
            "experience": "TEXT",
            "education": "TEXT",
            "linkedin_url": "TEXT",
            "company_name": "TEXT",
            "company_sector": "TEXT",
            "company_website": "TEXT",
            "company_size": "TEXT",
            **_TIMESTAMPS,
        },
        json_columns=frozenset({"skills"}),
        unique=("email",),
    ),
    EntityKind.jobs: TableSpec(
        name=EntityKind.jobs.value,
        columns={
            "id": "TEXT PRIMARY KEY NOT NULL",
            "title": "TEXT NOT NULL",
            "company": "TEXT NOT NULL",
            "location": "TEXT NOT NULL",
            "type": "TEXT NOT NULL",
            "description": "TEXT",
            "salary": "TEXT",
            "job_url": "TEXT",
            "posted_date": "TEXT NOT NULL",
            "source": "TEXT",
            "remote": "INTEGER NOT NULL DEFAULT 0",
            "requirements": "TEXT",
            "recruiter_id": "TEXT NOT NULL",
            "archived": "INTEGER NOT NULL DEFAULT 0",
            **_TIMESTAMPS,
        },
        json_columns=frozenset({"requirements"}),
        bool_columns=frozenset({"remote", "archived"}),
        indexes=("recruiter_id", "posted_date"),
    ),
    EntityKind.applications: TableSpec(
        name=EntityKind.applications.value,
        columns={
            "id": "TEXT PRIMARY KEY NOT NULL",
            "title": "TEXT NOT NULL",
            "company": "TEXT NOT NULL",
            "location": "TEXT NOT NULL",
            "job_url": "TEXT",
            "job_id": "TEXT",
            "recruiter_id": "TEXT",
            "contract_type": "TEXT NOT NULL",
            "application_date": "TEXT NOT NULL",
            "status": "TEXT NOT NULL",
            "notes": "TEXT",
            "documents": "TEXT",
            "user_id": "TEXT NOT NULL",
            "last_follow_up_at": "TEXT",
            "follow_up_count": "INTEGER NOT NULL DEFAULT 0",
            **_TIMESTAMPS,
        },
        json_columns=frozenset({"documents"}),
        indexes=("user_id", "status", "application_date", "job_id", "recruiter_id"),
    ),
    EntityKind.application_history: TableSpec(
        name=EntityKind.application_history.value,
        columns={
            "id": "TEXT PRIMARY KEY NOT NULL",
            "application_id": "TEXT NOT NULL",
            "old_status": "TEXT",
            "new_status": "TEXT NOT NULL",
            "changed_by": "TEXT NOT NULL",
            "changed_at": "TEXT NOT NULL",
            "notes": "TEXT",
            **_TIMESTAMPS,
        },
        indexes=("application_id",),
    ),
    EntityKind.messages: TableSpec(
        name=EntityKind.messages.value,
        columns={
            "id": "TEXT PRIMARY KEY NOT NULL",
            "application_id": "TEXT NOT NULL",
            "sender_id": "TEXT NOT NULL",
            "sender_role": "TEXT NOT NULL",
            "body": "TEXT NOT NULL",
            "read": "INTEGER NOT NULL DEFAULT 0",
            **_TIMESTAMPS,
        },
        bool_columns=frozenset({"read"}),
        indexes=("application_id",),
    ),
}


def table_for(kind: EntityKind) -> TableSpec:
    """Return the table spec of *kind*."""
    return TABLES[EntityKind(kind)]
