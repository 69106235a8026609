"""Read-side models for shared resources and their owners.

The tables are owned and migrated by the main CampusHub site. Search only
reads them; view and download counters are incremented elsewhere.
"""

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CreatedAtMixin, PortableTSVector


class User(Base):
    """Registered site user (resource author)."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    student_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="student")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"


class Course(Base):
    """Course a resource is filed under."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    teacher: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, name={self.name})>"


class Resource(CreatedAtMixin, Base):
    """A shared document: title + body with a download link."""

    __tablename__ = "resources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content_detail: Mapped[str] = mapped_column(Text, nullable=False, default="")
    resource_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # to_tsvector(title || ' ' || content_detail), maintained by the database
    tsv_content: Mapped[str | None] = mapped_column(PortableTSVector(), nullable=True)

    course: Mapped[Course] = relationship(lazy="raise")
    author: Mapped[User] = relationship(lazy="raise")

    __table_args__ = (
        Index("idx_resources_course", "course_id"),
        Index("idx_resources_user", "user_id"),
        Index("idx_resources_views", "view_count"),
        Index(
            "idx_resources_tsv",
            "tsv_content",
            postgresql_using="gin",
        ),
    )

    def __repr__(self) -> str:
        return f"<Resource(id={self.id}, title={self.title!r})>"
