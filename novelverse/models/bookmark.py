"""
Bookmark Model

Junction table for the many-to-many relationship between users and novels.
Bookmarked novels make up the user's bookshelf.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import PrimaryKeyConstraint

from novelverse.models.base import BaseModel


class Bookmark(BaseModel):
    __tablename__ = "bookmarks"
    __table_args__ = (
        PrimaryKeyConstraint("user_id", "novel_id", name="pk_bookmarks"),
    )

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    novel_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("novels.id", ondelete="CASCADE"),
        nullable=False,
    )

    # created_at, updated_at inherited from BaseModel's TimestampMixin
