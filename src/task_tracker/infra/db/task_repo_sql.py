from __future__ import annotations
import logging
from datetime import date, datetime, timezone
from typing import Any, Optional, List

from sqlalchemy import Date, DateTime, Integer, String, Text, CheckConstraint, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from task_tracker.domain.errors import StoreUnavailable
from task_tracker.domain.task_models import Task, TaskCreate, TaskStatus, next_updated_at, utcnow

logger = logging.getLogger("tracker.store")

# ids are SERIAL (int4); anything outside this range cannot exist
_MAX_ID = 2**31 - 1


class Base(DeclarativeBase):
    pass


class TaskRow(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'in-progress', 'completed')",
            name="ck_tasks_status",
        ),
        # SQLite: never hand out an id twice, even after deletes
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_domain(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            description=self.description,
            due_date=self.due_date,
            status=TaskStatus(self.status),
            created_at=_as_utc(self.created_at),
            updated_at=_as_utc(self.updated_at),
        )


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they were stored as UTC
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _storable_id(task_id: int) -> bool:
    return 1 <= task_id <= _MAX_ID


def _store_failure(operation: str, exc: SQLAlchemyError) -> StoreUnavailable:
    logger.error(
        "store.unavailable",
        extra={"category": "store", "event": "store.unavailable", "operation": operation, "error": str(exc)},
    )
    return StoreUnavailable(operation)


class SQLTaskRepo:
    """
    Task storage on any SQLAlchemy async engine (SQLite or PostgreSQL).
    One session and one transaction per call.
    """
    def __init__(self, sessionmaker):
        self.sessionmaker = sessionmaker

    async def create(self, data: TaskCreate) -> Task:
        now = utcnow()
        row = TaskRow(
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            status=data.status.value,
            created_at=now,
            updated_at=now,
        )
        try:
            async with self.sessionmaker() as session:
                session.add(row)
                await session.commit()
                return row.to_domain()
        except SQLAlchemyError as exc:
            raise _store_failure("create task", exc) from exc

    async def get(self, task_id: int) -> Optional[Task]:
        if not _storable_id(task_id):
            return None
        try:
            async with self.sessionmaker() as session:
                row = await session.get(TaskRow, task_id)
                return row.to_domain() if row else None
        except SQLAlchemyError as exc:
            raise _store_failure("fetch task", exc) from exc

    async def list(self) -> List[Task]:
        try:
            async with self.sessionmaker() as session:
                res = await session.execute(
                    select(TaskRow).order_by(TaskRow.created_at.desc(), TaskRow.id.desc())
                )
                rows = res.scalars().all()
                return [r.to_domain() for r in rows]
        except SQLAlchemyError as exc:
            raise _store_failure("list tasks", exc) from exc

    async def update(self, task_id: int, changes: dict[str, Any]) -> Optional[Task]:
        if not _storable_id(task_id):
            return None
        try:
            async with self.sessionmaker() as session:
                async with session.begin():
                    # row lock on engines that support it; SQLite serializes writers anyway
                    row = await session.get(TaskRow, task_id, with_for_update=True)
                    if row is None:
                        return None
                    for field, value in changes.items():
                        setattr(row, field, value.value if isinstance(value, TaskStatus) else value)
                    row.updated_at = next_updated_at(_as_utc(row.updated_at))
                return row.to_domain()
        except SQLAlchemyError as exc:
            raise _store_failure("update task", exc) from exc

    async def delete(self, task_id: int) -> bool:
        if not _storable_id(task_id):
            return False
        try:
            async with self.sessionmaker() as session:
                async with session.begin():
                    row = await session.get(TaskRow, task_id)
                    if row is None:
                        return False
                    await session.delete(row)
                return True
        except SQLAlchemyError as exc:
            raise _store_failure("delete task", exc) from exc


async def create_schema(engine) -> None:
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as exc:
        raise _store_failure("create schema", exc) from exc
