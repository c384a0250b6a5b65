"""Document-database store on top of SQLAlchemy async sessions."""

import logging
from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from userlink.db.base import Base
from userlink.db.gateway import AnyOf, Collection, DocumentStore, Predicate, Record
from userlink.db.models import Document
from userlink.db.session import create_session_factory
from userlink.errors import StorageError

logger = logging.getLogger(__name__)


def _json_field(field: str, expected: Any):
    """JSON accessor typed after the value it is compared with."""
    element = Document.data[field]
    # bool first: it is a subclass of int
    if isinstance(expected, bool):
        return element.as_boolean()
    if isinstance(expected, int):
        return element.as_integer()
    if isinstance(expected, float):
        return element.as_float()
    return element.as_string()


def _where(collection: Collection, predicate: Predicate) -> list:
    """Translate a backend-neutral predicate into SQL clauses."""
    clauses = [Document.collection == Collection(collection).value]
    for field, expected in predicate.items():
        if field == "id":
            column = Document.id
        else:
            column = _json_field(field, expected)

        if isinstance(expected, AnyOf):
            clauses.append(column.in_(sorted(expected.values)))
        elif expected is None:
            clauses.append(column.is_(None))
        else:
            clauses.append(column == expected)
    return clauses


class SqlDocumentStore(DocumentStore):
    """DocumentStore backed by the ``documents`` table."""

    def __init__(self, engine: AsyncEngine, *, auto_create: bool = True):
        self.engine = engine
        self.auto_create = auto_create
        self._session_factory = create_session_factory(engine)

    async def init(self) -> None:
        if not self.auto_create:
            return
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Failed to initialise documents table: {e}") from e
        logger.info("Using document database at %s", self.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        """Transactional session; backend failures surface as StorageError."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except IntegrityError as e:
            raise StorageError(f"Integrity error: {e.orig}") from e
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def insert(self, collection: Collection, record: Record) -> Record:
        if not record.get("id"):
            raise StorageError("Records must carry a caller-assigned id")
        async with self._session() as session:
            session.add(
                Document(
                    collection=Collection(collection).value,
                    id=str(record["id"]),
                    data=dict(record),
                )
            )
        return dict(record)

    async def find_one(self, collection: Collection, predicate: Predicate) -> Record | None:
        stmt = select(Document).where(*_where(collection, predicate)).order_by(Document.seq).limit(1)
        async with self._session() as session:
            result = await session.execute(stmt)
            document = result.scalar_one_or_none()
            return dict(document.data) if document else None

    async def find_many(self, collection: Collection, predicate: Predicate) -> list[Record]:
        stmt = select(Document).where(*_where(collection, predicate)).order_by(Document.seq)
        async with self._session() as session:
            result = await session.execute(stmt)
            return [dict(document.data) for document in result.scalars()]

    async def update_one(
        self, collection: Collection, predicate: Predicate, patch: Mapping[str, Any]
    ) -> Record | None:
        stmt = select(Document).where(*_where(collection, predicate)).order_by(Document.seq).limit(1)
        async with self._session() as session:
            result = await session.execute(stmt)
            document = result.scalar_one_or_none()
            if document is None:
                return None
            # Assign a fresh dict so the JSON column is flagged as modified
            document.data = {**document.data, **{k: v for k, v in patch.items() if k != "id"}}
            return dict(document.data)

    async def remove_many(self, collection: Collection, predicate: Predicate) -> int:
        stmt = (
            delete(Document)
            .where(*_where(collection, predicate))
            .execution_options(synchronize_session=False)
        )
        async with self._session() as session:
            result = await session.execute(stmt)
            return result.rowcount or 0
