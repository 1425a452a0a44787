"""MySQL implementation of ContactRepository (SQLAlchemy Core over a bounded pool).

All callers share one QueuePool of fixed size. max_overflow=0 caps the number
of connections and pool_timeout=None makes a checkout wait for a free
connection instead of failing. The contacts table is created on first use.
Timestamps are native DATETIME(6) columns holding UTC.
"""

import logging
import threading
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    event,
    func,
    or_,
    select,
    update,
)
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from phonebook.domain import Contact, utcnow
from phonebook.errors import StorageFailure
from phonebook.infrastructure.records import (
    FIELD_TO_COLUMN,
    as_utc,
    fold_case,
    from_document,
    new_id,
)

logger = logging.getLogger(__name__)

DEFAULT_POOL_SIZE = 10

_DATETIME = DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")

metadata = MetaData()

contacts = Table(
    "contacts",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("firstName", String(100), nullable=False),
    Column("lastName", String(100), nullable=False),
    Column("phoneNumber", String(20), nullable=False),
    Column("email", String(100)),
    Column("address", Text),
    Column("notes", Text),
    Column("createdAt", _DATETIME, nullable=False),
    Column("updatedAt", _DATETIME, nullable=False),
    Index("idx_phone", "phoneNumber"),
    Index("idx_name", "firstName", "lastName"),
    mysql_engine="InnoDB",
    mysql_charset="utf8mb4",
    mysql_collate="utf8mb4_unicode_ci",
)

_SEARCHABLE = (
    contacts.c.firstName,
    contacts.c.lastName,
    contacts.c.phoneNumber,
    contacts.c.email,
)


def _naive_utc(dt: datetime) -> datetime:
    return as_utc(dt).replace(tzinfo=None)


def _to_row(contact: Contact) -> dict:
    return {
        "id": contact.id,
        "firstName": contact.first_name,
        "lastName": contact.last_name,
        "phoneNumber": contact.phone_number,
        "email": contact.email,
        "address": contact.address,
        "notes": contact.notes,
        "createdAt": _naive_utc(contact.created_at),
        "updatedAt": _naive_utc(contact.updated_at),
    }


def _register_fold_case(dbapi_connection, connection_record) -> None:
    dbapi_connection.create_function("lower", 1, fold_case, deterministic=True)


@contextmanager
def _sql_errors() -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageFailure(f"Database operation failed: {exc}") from exc


def create_mysql_engine(
    host: str,
    port: int,
    user: str,
    password: str,
    database: str,
    *,
    pool_size: int = DEFAULT_POOL_SIZE,
) -> Engine:
    """Engine with a fixed-size pool; checkouts queue without a timeout when it is exhausted."""
    if pool_size < 1:
        raise ValueError(f"pool_size must be at least 1, got {pool_size}")
    url = URL.create(
        "mysql+pymysql",
        username=user,
        password=password,
        host=host,
        port=port,
        database=database,
        query={"charset": "utf8mb4"},
    )
    return create_engine(
        url,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=None,
        pool_pre_ping=True,
    )


class MysqlContactRepository:
    """Stores contacts in a relational database through a pooled SQLAlchemy engine.
    Built for MySQL; any engine whose dialect supports the schema works (tests use SQLite).
    """

    def __init__(
        self,
        engine: Engine,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._engine = engine
        self._clock = clock
        self._schema_ready = False
        self._schema_lock = threading.Lock()
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _register_fold_case)

    @classmethod
    def from_settings(
        cls,
        host: str,
        port: int,
        user: str,
        password: str,
        database: str,
        *,
        pool_size: int = DEFAULT_POOL_SIZE,
        clock: Callable[[], datetime] = utcnow,
    ) -> "MysqlContactRepository":
        engine = create_mysql_engine(
            host, port, user, password, database, pool_size=pool_size
        )
        logger.info(
            "MySQL pool for %s@%s:%s/%s (size %d)", user, host, port, database, pool_size
        )
        return cls(engine, clock=clock)

    @property
    def engine(self) -> Engine:
        return self._engine

    def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        with self._schema_lock:
            if self._schema_ready:
                return
            with _sql_errors():
                metadata.create_all(self._engine, checkfirst=True)
            self._schema_ready = True
        logger.info("contacts table ready on %s", self._engine.url.render_as_string())

    def _folded(self, column):
        """lower(column), compared code point by code point on MySQL."""
        expression = func.lower(column, type_=String)
        if self._engine.dialect.name == "mysql":
            expression = expression.collate("utf8mb4_bin")
        return expression

    def _order_by(self) -> tuple:
        return (
            self._folded(contacts.c.firstName),
            self._folded(contacts.c.lastName),
            contacts.c.createdAt,
            contacts.c.id,
        )

    def _fetch_all(self, statement) -> list[Contact]:
        self._ensure_schema()
        with _sql_errors(), self._engine.connect() as conn:
            rows = conn.execute(statement).all()
        return [from_document(row._mapping) for row in rows]

    def _fetch_one(self, statement) -> Contact | None:
        self._ensure_schema()
        with _sql_errors(), self._engine.connect() as conn:
            row = conn.execute(statement).first()
        return from_document(row._mapping) if row is not None else None

    def find_all(self) -> list[Contact]:
        return self._fetch_all(select(contacts).order_by(*self._order_by()))

    def find_by_id(self, contact_id: str) -> Contact | None:
        return self._fetch_one(select(contacts).where(contacts.c.id == contact_id))

    def find_by_phone_number(self, phone_number: str) -> Contact | None:
        return self._fetch_one(
            select(contacts).where(contacts.c.phoneNumber == phone_number).limit(1)
        )

    def search(self, query: str) -> list[Contact]:
        needle = fold_case(query)
        condition = or_(
            *(
                self._folded(column).contains(needle, autoescape=True)
                for column in _SEARCHABLE
            )
        )
        return self._fetch_all(
            select(contacts).where(condition).order_by(*self._order_by())
        )

    def save(self, contact: Contact) -> Contact:
        stored = contact if contact.id else replace(contact, id=new_id())
        self._ensure_schema()
        with _sql_errors(), self._engine.begin() as conn:
            conn.execute(contacts.insert().values(**_to_row(stored)))
        return self.find_by_id(stored.id)

    def update(
        self, contact_id: str, changes: Mapping[str, str | None]
    ) -> Contact | None:
        existing = self.find_by_id(contact_id)
        if existing is None:
            return None
        updated = existing.with_updates(changes, self._clock())
        row = _to_row(updated)
        values = {column: row[column] for column in FIELD_TO_COLUMN.values()}
        values["updatedAt"] = row["updatedAt"]
        with _sql_errors(), self._engine.begin() as conn:
            conn.execute(update(contacts).where(contacts.c.id == contact_id).values(**values))
        return self.find_by_id(contact_id)

    def delete(self, contact_id: str) -> bool:
        self._ensure_schema()
        with _sql_errors(), self._engine.begin() as conn:
            result = conn.execute(delete(contacts).where(contacts.c.id == contact_id))
        return result.rowcount > 0

    def count(self) -> int:
        self._ensure_schema()
        with _sql_errors(), self._engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(contacts)).scalar_one()

    def close(self) -> None:
        self._engine.dispose()
