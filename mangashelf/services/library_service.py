import logging
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from mangashelf.db.session import get_session
from mangashelf.models import LibraryEntry

logger = logging.getLogger(__name__)


def get_library() -> list[LibraryEntry]:
    with get_session() as session:
        rows = session.exec(
            select(LibraryEntry).order_by(func.lower(LibraryEntry.title), LibraryEntry.site)
        ).all()
        return list(rows)

def get_entry(entry_id: int) -> Optional[LibraryEntry]:
    with get_session() as session:
        return session.get(LibraryEntry, entry_id)

def find_entry(title: str, site: str) -> Optional[LibraryEntry]:
    with get_session() as session:
        return session.exec(
            select(LibraryEntry).where(
                LibraryEntry.title == title,
                LibraryEntry.site == site,
            )
        ).first()

def is_in_library(title: str, site: str) -> bool:
    return find_entry((title or "").strip(), (site or "").strip()) is not None


def add_entry(title: str, site: str, chapter_url: str) -> tuple[LibraryEntry, bool]:
    title = (title or "").strip()
    site = (site or "").strip()
    chapter_url = (chapter_url or "").strip()
    if not (title and site and chapter_url):
        raise ValueError("title, site and chapter url are required")

    existing = find_entry(title, site)
    if existing:
        logger.info("%r on %r is already in the library", title, site)
        return existing, False

    entry = LibraryEntry(
        title=title,
        site=site,
        last_chapter=chapter_url,
        chapter_url=chapter_url,
    )
    with get_session() as session:
        session.add(entry)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            logger.info("%r on %r was added concurrently", title, site)
            return find_entry(title, site), False
        session.refresh(entry)

    logger.info("added %r", entry)
    return entry, True


def remove_entry(entry_id: int) -> bool:
    with get_session() as session:
        entry = session.get(LibraryEntry, entry_id)
        if not entry:
            return False

        session.delete(entry)
        session.commit()
        return True


def update_last_chapter(entry_id: int, chapter_url: str) -> Optional[LibraryEntry]:
    chapter_url = (chapter_url or "").strip()
    if not chapter_url:
        raise ValueError("chapter url is required")

    with get_session() as session:
        entry = session.get(LibraryEntry, entry_id)
        if not entry:
            return None

        entry.last_chapter = chapter_url
        entry.chapter_url = chapter_url
        entry.updated_at = datetime.now(timezone.utc)
        session.add(entry)
        session.commit()
        session.refresh(entry)
        return entry
