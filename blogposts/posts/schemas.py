"""
Pydantic schemas for the Blog Posts API.

Field names follow the JSON wire format (firstName/lastName).
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthorIn(BaseModel):
    """Author sub-document as sent by clients."""
    firstName: Optional[str] = None
    lastName: Optional[str] = None


class PostCreate(BaseModel):
    """Body of POST /posts. All three keys must be present, author may be null."""
    title: str = Field(..., min_length=1)
    author: Optional[AuthorIn]
    content: Optional[str]


class PostUpdate(BaseModel):
    """Body of PUT /posts/{id}. Only the fields sent are changed."""
    id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1)
    author: Optional[AuthorIn] = None
    content: Optional[str] = None

    @field_validator("title", "author")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict:
        """The subset of title/author/content present in the request body."""
        data = self.model_dump(exclude_unset=True, exclude={"id"})
        if self.author is not None and "author" in data:
            data["author"] = self.author.model_dump(exclude_none=True)
        return data


class PostResponse(BaseModel):
    """Serialized view of a post."""
    id: str
    title: str
    content: Optional[str] = None
    author: str
    created: datetime

    model_config = ConfigDict(from_attributes=True)
