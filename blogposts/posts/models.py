"""
Blog post database model.

Posts are stored as documents: the author is kept as a JSON sub-document
(JSONB on PostgreSQL) and only ever leaves the service through serialize().
"""
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import TypeDecorator

from blogposts.shared.database import Base


def new_post_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """DateTime that always comes back timezone-aware in UTC.

    SQLite drops the offset on storage, so naive values read back are UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class BlogPost(Base):
    """
    A single blog post.

    - id: opaque identifier assigned at creation
    - author: {"firstName": ..., "lastName": ...}, both optional
    - title: required, never empty
    - content: optional body text
    - created: set once at creation
    """
    __tablename__ = "blog_posts"
    __table_args__ = (
        CheckConstraint("length(title) > 0", name="ck_blog_posts_title_not_empty"),
    )

    id = Column(String(32), primary_key=True, default=new_post_id)
    author = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict)
    title = Column(Text, nullable=False)
    content = Column(Text)
    created = Column(UTCDateTime(), nullable=False, default=utcnow)

    @property
    def author_name(self) -> str:
        """First and last name joined by a space, trimmed."""
        author = self.author or {}
        first_name = author.get("firstName") or ""
        last_name = author.get("lastName") or ""
        return f"{first_name} {last_name}".strip()

    def serialize(self) -> dict:
        """Public view of the post for API responses."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "author": self.author_name,
            "created": self.created,
        }

    def __repr__(self) -> str:
        return f"<BlogPost id={self.id!r} title={self.title!r}>"
