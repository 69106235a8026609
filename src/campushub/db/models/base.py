"""Base models for SQLAlchemy."""

from datetime import datetime
from ipaddress import ip_address

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import INET, TSVECTOR
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class PortableTSVector(TypeDecorator):
    """tsvector on PostgreSQL, plain text elsewhere.

    The column is maintained by the database (trigger or generated column);
    the application never writes it.
    """

    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(TSVECTOR())
        return dialect.type_descriptor(Text())


class PortableINET(TypeDecorator):
    """INET on PostgreSQL and String elsewhere."""

    impl = String(45)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(INET())
        return dialect.type_descriptor(String(45))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        # Raises ValueError for anything that is not an IPv4/IPv6 address
        return str(ip_address(str(value)))

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return str(value)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class CreatedAtMixin:
    """Mixin for an immutable created_at timestamp."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
