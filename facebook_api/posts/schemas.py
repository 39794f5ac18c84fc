"""
Post entity and request body schemas.

JSON uses camelCase field names (`postContent`, `createdDate`, ...); Python
code uses the snake_case attribute names. Both spellings are accepted on input.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Post(BaseModel):
    """
    A stored post. `id` is None until storage assigns one.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    author: str | None = None
    post_content: str | None = Field(default=None, alias="postContent")
    image_url: str | None = Field(default=None, alias="imageUrl")
    created_date: datetime | None = Field(default=None, alias="createdDate")
    modified_date: datetime | None = Field(default=None, alias="modifiedDate")

    def on_create(self, now: datetime) -> None:
        """
        Stamp a post on its first persistence.
        """
        self.created_date = now
        self.modified_date = now

    def on_update(self, now: datetime) -> None:
        """
        Refresh `modified_date` on every later persistence.

        `created_date` is left alone and the new value never moves backwards.
        """
        floor = [d for d in (self.created_date, self.modified_date) if d is not None]
        self.modified_date = max([now, *floor])


class PostPayload(BaseModel):
    """
    Body of create/update requests. Server-managed fields are ignored.
    """

    model_config = ConfigDict(populate_by_name=True)

    author: str | None = None
    post_content: str | None = Field(default=None, alias="postContent")
    image_url: str | None = Field(default=None, alias="imageUrl")
