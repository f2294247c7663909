from pydantic import BaseModel
from datetime import datetime

class LibraryEntryOut(BaseModel):
    id: int
    title: str
    site: str
    last_chapter: str
    chapter_url: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class LibraryEntryIn(BaseModel):
    title: str
    site: str
    chapter_url: str

class ChapterUpdate(BaseModel):
    chapter_url: str

class ImagesResponse(BaseModel):
    url: str
    site: str
    status: str
    strategy: str | None = None
    images: list[str]
    next_url: str | None = None
    prev_url: str | None = None
    error: str | None = None
