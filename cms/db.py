"""
Database abstraction for Postgres and an in-memory test implementation.

Records cross this boundary as the same camelCase dictionaries the JSON
documents hold, so callers never see ORM rows.
"""

from __future__ import annotations

import copy
from typing import Dict, Iterable, Optional, Protocol, Type

from sqlalchemy import JSON, Boolean, Column, Integer, String, create_engine, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from cms.errors import ConflictError, NotFoundError, ValidationFailed
from content.json_utils import snake_to_camel

TABLE_KINDS = ("team", "events", "achievements", "clubs")

# Columns that must be unique across records of a kind, besides the id.
UNIQUE_FIELDS = {"team": ("email",)}


class DbClient(Protocol):
    """Interface for database access."""

    def supports(self, kind: str) -> bool:
        ...

    def list_records(self, kind: str) -> list[dict]:
        ...

    def get_record(self, kind: str, record_id: str) -> Optional[dict]:
        ...

    def insert_record(self, kind: str, record: dict) -> dict:
        ...

    def update_record(self, kind: str, record_id: str, changes: dict) -> dict:
        ...

    def delete_record(self, kind: str, record_id: str) -> None:
        ...

    def replace_all(self, kind: str, records: Iterable[dict]) -> None:
        ...


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.tables: Dict[str, Dict[str, dict]] = {kind: {} for kind in TABLE_KINDS}

    def supports(self, kind: str) -> bool:
        return kind in self.tables

    def _table(self, kind: str) -> Dict[str, dict]:
        if kind not in self.tables:
            raise ValueError(f"Unsupported record kind: {kind}")
        return self.tables[kind]

    def _check_unique(self, kind: str, record: dict, ignore_id: Optional[str] = None) -> None:
        for field_name in UNIQUE_FIELDS.get(kind, ()):
            value = record.get(field_name)
            for other_id, other in self._table(kind).items():
                if other_id != ignore_id and value is not None and other.get(field_name) == value:
                    raise ConflictError(f"A record with this {field_name} already exists")

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        for table in self.tables.values():
            table.clear()

    def list_records(self, kind: str) -> list[dict]:
        return [copy.deepcopy(r) for r in self._table(kind).values()]

    def get_record(self, kind: str, record_id: str) -> Optional[dict]:
        record = self._table(kind).get(record_id)
        return copy.deepcopy(record) if record else None

    def insert_record(self, kind: str, record: dict) -> dict:
        table = self._table(kind)
        if record["id"] in table:
            raise ConflictError(f"Record {record['id']} already exists")
        self._check_unique(kind, record)
        table[record["id"]] = copy.deepcopy(record)
        return copy.deepcopy(record)

    def update_record(self, kind: str, record_id: str, changes: dict) -> dict:
        table = self._table(kind)
        if record_id not in table:
            raise NotFoundError(f"Record {record_id} not found")
        merged = {**table[record_id], **copy.deepcopy(changes), "id": record_id}
        self._check_unique(kind, merged, ignore_id=record_id)
        table[record_id] = merged
        return copy.deepcopy(merged)

    def delete_record(self, kind: str, record_id: str) -> None:
        table = self._table(kind)
        if record_id not in table:
            raise NotFoundError(f"Record {record_id} not found")
        del table[record_id]

    def replace_all(self, kind: str, records: Iterable[dict]) -> None:
        table = self._table(kind)
        table.clear()
        for record in records:
            table[record["id"]] = copy.deepcopy(record)


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def supports(self, kind: str) -> bool:
        return kind in ROW_TYPES

    @staticmethod
    def _row_type(kind: str) -> Type["Base"]:
        if kind not in ROW_TYPES:
            raise ValueError(f"Unsupported record kind: {kind}")
        return ROW_TYPES[kind]

    @staticmethod
    def _to_record(row) -> dict:
        return {
            snake_to_camel(column.key): copy.deepcopy(getattr(row, column.key))
            for column in row.__table__.columns
        }

    @staticmethod
    def _apply(row, record: dict) -> None:
        for column in row.__table__.columns:
            key = snake_to_camel(column.key)
            if key in record:
                setattr(row, column.key, copy.deepcopy(record[key]))

    def list_records(self, kind: str) -> list[dict]:
        row_type = self._row_type(kind)
        with self.Session() as session:
            rows = session.execute(
                select(row_type).order_by(row_type.created_at.asc())
            ).scalars()
            return [self._to_record(row) for row in rows]

    def get_record(self, kind: str, record_id: str) -> Optional[dict]:
        with self.Session() as session:
            row = session.get(self._row_type(kind), record_id)
            return self._to_record(row) if row else None

    def insert_record(self, kind: str, record: dict) -> dict:
        row = self._row_type(kind)()
        self._apply(row, record)
        with self.Session() as session:
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ConflictError(f"Record {record.get('id')} conflicts with an existing record") from exc
            session.refresh(row)
            return self._to_record(row)

    def update_record(self, kind: str, record_id: str, changes: dict) -> dict:
        with self.Session() as session:
            row = session.get(self._row_type(kind), record_id)
            if not row:
                raise NotFoundError(f"Record {record_id} not found")
            self._apply(row, {k: v for k, v in changes.items() if k != "id"})
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ConflictError(f"Update of {record_id} conflicts with an existing record") from exc
            session.refresh(row)
            return self._to_record(row)

    def delete_record(self, kind: str, record_id: str) -> None:
        with self.Session() as session:
            row = session.get(self._row_type(kind), record_id)
            if not row:
                raise NotFoundError(f"Record {record_id} not found")
            session.delete(row)
            session.commit()

    def replace_all(self, kind: str, records: Iterable[dict]) -> None:
        row_type = self._row_type(kind)
        with self.Session() as session:
            session.execute(delete(row_type))
            for record in records:
                row = row_type()
                self._apply(row, record)
                session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ValidationFailed(f"Records for {kind} could not be stored: {exc.orig}") from exc


Base = declarative_base()


class TeamMemberRow(Base):
    __tablename__ = "team_members"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    position = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    initials = Column(String, nullable=False)
    gradient_from = Column(String, nullable=False)
    gradient_to = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    photo_path = Column(String, nullable=True)
    is_secretary = Column(Boolean, nullable=False, default=False)
    is_coordinator = Column(Boolean, nullable=False, default=False)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)


class EventRow(Base):
    __tablename__ = "events"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    date = Column(String, nullable=False)
    location = Column(String, nullable=False)
    duration = Column(String, nullable=False)
    participants = Column(String, nullable=False)
    organizer = Column(String, nullable=False)
    category = Column(String, nullable=False)
    highlights = Column(JSON, nullable=False, default=list)
    gallery = Column(JSON, nullable=False, default=list)
    draft = Column(Boolean, default=False)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)


class InterIITAchievementRow(Base):
    __tablename__ = "inter_iit_achievements"

    id = Column(String, primary_key=True)
    achievement_type = Column(String, nullable=False)
    competition_name = Column(String, nullable=False)
    inter_iit_edition = Column(String, nullable=False)
    year = Column(String, nullable=False)
    host_iit = Column(String, nullable=False)
    location = Column(String, nullable=False)
    ranking = Column(Integer, nullable=True)
    achievement_description = Column(String, nullable=False)
    significance = Column(String, nullable=False)
    competition_category = Column(String, nullable=False)
    achievement_date = Column(String, nullable=False)
    points = Column(Integer, nullable=True)
    status = Column(String, nullable=False)
    team_members = Column(JSON, nullable=False, default=list)
    supporting_documents = Column(JSON, nullable=False, default=list)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)


class ClubRow(Base):
    __tablename__ = "clubs"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False)
    long_description = Column(String, nullable=False)
    type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    members = Column(String, nullable=True)
    established = Column(String, nullable=True)
    email = Column(String, nullable=False)
    achievements = Column(JSON, nullable=False, default=list)
    projects = Column(JSON, nullable=False, default=list)
    team = Column(JSON, nullable=False, default=list)
    logo_path = Column(String, nullable=True)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)


ROW_TYPES = {
    "team": TeamMemberRow,
    "events": EventRow,
    "achievements": InterIITAchievementRow,
    "clubs": ClubRow,
}
