"""
Base model with the query patterns every table shares.

Conventions:
- UUID primary key, timezone-aware created/updated stamps
- List queries are bounded and default to newest first
- Deletes are hard deletes; append-only tables simply never call them
"""

import uuid
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, TypeVar
from sqlalchemy import DateTime, select, desc, asc
from sqlalchemy.orm import Mapped, mapped_column, DeclarativeBase
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T", bound="BaseModel")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models"""

    pass


class BaseModel(Base):
    """
    Abstract base model with common fields and CRUD helpers.
    """

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    # CREATE OPERATIONS

    @classmethod
    async def create(
        cls: type[T], db: AsyncSession, commit: bool = True, **kwargs
    ) -> T:
        """
        Create new instance and optionally commit.
        """
        instance = cls(**kwargs)
        db.add(instance)

        if commit:
            await db.commit()
            await db.refresh(instance)

        return instance

    # READ OPERATIONS

    @classmethod
    async def get_by_id(cls: type[T], db: AsyncSession, id: Any) -> Optional[T]:
        """
        Get single record by primary key.
        """
        return await db.get(cls, id)

    @classmethod
    async def find_one(
        cls: type[T],
        db: AsyncSession,
        filters: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> Optional[T]:
        """
        Get first matching record.
        """
        query = select(cls)
        if filters:
            query = query.filter_by(**filters)
        if kwargs:
            query = query.filter_by(**kwargs)
        result = await db.execute(query)
        return result.scalars().first()

    @classmethod
    async def find_many(
        cls: type[T],
        db: AsyncSession,
        limit: int = 1000,
        offset: int = 0,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        order_desc: bool = False,
        **kwargs,
    ) -> List[T]:
        """
        Get a bounded list of records, newest first unless `order_by` is given.
        """
        limit = min(limit, 10_000)
        query = select(cls).offset(offset).limit(limit)

        if filters:
            query = query.filter_by(**filters)
        if kwargs:
            query = query.filter_by(**kwargs)

        if order_by and hasattr(cls, order_by):
            column = getattr(cls, order_by)
            query = query.order_by(desc(column) if order_desc else asc(column), asc(cls.id))
        else:
            query = query.order_by(desc(cls.created_at), desc(cls.id))

        result = await db.execute(query)
        return list(result.scalars().all())

    @classmethod
    async def exists(
        cls: type[T],
        db: AsyncSession,
        filters: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> bool:
        """
        Check if matching record exists.
        """
        query = select(cls.id)
        if filters:
            query = query.filter_by(**filters)
        if kwargs:
            query = query.filter_by(**kwargs)
        result = await db.execute(select(query.exists()))
        return bool(result.scalar())

    # UPDATE OPERATIONS

    async def save(self: T, db: AsyncSession, commit: bool = True) -> T:
        """
        Save changes to existing instance.
        """
        self.updated_at = utcnow()
        db.add(self)

        if commit:
            await db.commit()
            await db.refresh(self)

        return self

    # DELETE OPERATIONS

    async def delete(self, db: AsyncSession, commit: bool = True) -> None:
        """
        Delete this instance.
        """
        await db.delete(self)

        if commit:
            await db.commit()

    @classmethod
    async def delete_many(
        cls: type[T], db: AsyncSession, filters: Optional[Dict[str, Any]] = None, commit: bool = True
    ) -> int:
        """
        Delete every matching record (all records when no filters are given).
        """
        query = select(cls)
        if filters:
            query = query.filter_by(**filters)

        result = await db.execute(query)
        instances = result.scalars().all()

        for instance in instances:
            await db.delete(instance)

        if commit:
            await db.commit()

        return len(instances)
