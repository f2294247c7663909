from sqlmodel import SQLModel, Field, UniqueConstraint
from typing import Optional
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LibraryEntry(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("title", "site", name="uq_libraryentry_title_site"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    site: str
    last_chapter: str
    chapter_url: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def __repr__(self):
        return f"LibraryEntry(id={self.id}, title={self.title!r}, site={self.site!r})"
