"""
Persistence gateway for blog posts.

All access to the blog_posts table goes through PostGateway. Every method
makes a single round trip to the store and reports failures as StoreError;
a missing post is reported as PostNotFound.
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blogposts.posts.models import BlogPost
from blogposts.shared.errors import StoreError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "author", "content")


class PostNotFound(StoreError):
    """No post exists with the requested id."""

    def __init__(self, post_id: str):
        super().__init__(f"Blog post {post_id!r} not found")
        self.post_id = post_id


class PostGateway:
    """Create/read/update/delete access to blog posts for one session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _store_call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Failed to {operation}") from exc

    def list_posts(self) -> list[BlogPost]:
        with self._store_call("list posts"):
            return self.db.query(BlogPost).order_by(BlogPost.created.asc()).all()

    def get_post(self, post_id: str) -> BlogPost:
        with self._store_call(f"fetch post {post_id}"):
            post = self.db.get(BlogPost, post_id)
        if post is None:
            raise PostNotFound(post_id)
        return post

    def create_post(
        self,
        title: str,
        author: Optional[dict[str, Any]] = None,
        content: Optional[str] = None,
    ) -> BlogPost:
        post = BlogPost(title=title, author=author or {}, content=content)
        with self._store_call("create post"):
            self.db.add(post)
            self.db.commit()
        logger.info("Created blog post %s", post.id)
        return post

    def update_post(self, post_id: str, changes: dict[str, Any]) -> bool:
        """
        Set the given fields on one post, leaving every other field as stored.

        Returns whether a post matched. An unknown id is not an error.

        Raises:
            ValueError: if changes names a field that cannot be updated
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        if not changes:
            return False

        stmt = (
            update(BlogPost)
            .where(BlogPost.id == post_id)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        with self._store_call(f"update post {post_id}"):
            result = self.db.execute(stmt)
            self.db.commit()
        if result.rowcount == 0:
            logger.info("Update requested for unknown blog post %s", post_id)
            return False
        logger.info("Updated blog post %s (%s)", post_id, ", ".join(sorted(changes)))
        return True

    def delete_post(self, post_id: str) -> bool:
        """Remove a post. Returns False if there was nothing to remove."""
        stmt = (
            delete(BlogPost)
            .where(BlogPost.id == post_id)
            .execution_options(synchronize_session=False)
        )
        with self._store_call(f"delete post {post_id}"):
            result = self.db.execute(stmt)
            self.db.commit()
        return result.rowcount > 0
