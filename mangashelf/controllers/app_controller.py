from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from mangashelf.models import ExtractionResult, ExtractionStatus, LibraryEntry
from mangashelf.services import library_service
from mangashelf.services.extractor import ChapterImageExtractor, get_extractor

logger = logging.getLogger(__name__)

DUPLICATE_ERROR = "This manga already exists in your library."
MISSING_FIELDS_ERROR = "Title, source site and chapter URL are required."
EMPTY_LIBRARY = "No manga in your library yet. Add one above!"
LOAD_FAILED = "Failed to load images. (Possible CORS/network error)"
NO_IMAGES = "No images found or site not supported yet."
UNSUPPORTED = "This site is not supported yet."
NO_NEXT = "No next chapter link was found on this page."
NO_PREV = "No previous chapter link was found on this page."


@dataclass(frozen=True)
class AddManga:
    title: str
    site: str
    chapter_url: str

@dataclass(frozen=True)
class RemoveManga:
    entry_id: int

@dataclass(frozen=True)
class UpdateChapter:
    entry_id: int
    chapter_url: str

@dataclass(frozen=True)
class OpenReader:
    entry_id: int

@dataclass(frozen=True)
class BackToLibrary:
    pass

@dataclass(frozen=True)
class NextChapter:
    pass

@dataclass(frozen=True)
class PrevChapter:
    pass

Action = Union[AddManga, RemoveManga, UpdateChapter, OpenReader, BackToLibrary, NextChapter, PrevChapter]


@dataclass(frozen=True)
class LibraryItemView:
    entry_id: int
    title: str
    site: str
    last_chapter: str

@dataclass(frozen=True)
class LibraryView:
    items: list[LibraryItemView]
    error: Optional[str] = None

    @property
    def empty_message(self) -> Optional[str]:
        return None if self.items else EMPTY_LIBRARY

@dataclass(frozen=True)
class ReaderView:
    entry_id: int
    title: str
    site: str
    chapter_url: str
    images: list[str]
    message: Optional[str] = None
    error: Optional[str] = None
    has_next: bool = False
    has_prev: bool = False

View = Union[LibraryView, ReaderView]


@dataclass
class AppState:
    library: list[LibraryEntry] = field(default_factory=list)
    current_entry_id: Optional[int] = None
    current_chapter: Optional[str] = None
    last_result: Optional[ExtractionResult] = None
    error: Optional[str] = None

    @property
    def current_entry(self) -> Optional[LibraryEntry]:
        if self.current_entry_id is None:
            return None
        return next((e for e in self.library if e.id == self.current_entry_id), None)

    @property
    def in_reader(self) -> bool:
        return self.current_entry_id is not None


class AppController:
    """Owns the application state and maps user actions onto it.

    Every `dispatch` returns the view to show next: the library list, or
    the reader for the open chapter.
    """

    def __init__(self, extractor: Optional[ChapterImageExtractor] = None, state: Optional[AppState] = None):
        self.extractor = extractor or get_extractor()
        self.state = state or AppState()

    def load(self) -> LibraryView:
        self._reload_library()
        return self.render_library()

    async def dispatch(self, action: Action) -> View:
        logger.debug("dispatch %r", action)
        if isinstance(action, AddManga):
            return self._add(action)
        if isinstance(action, RemoveManga):
            return self._remove(action)
        if isinstance(action, UpdateChapter):
            return self._update_chapter(action)
        if isinstance(action, OpenReader):
            return await self._open_reader(action.entry_id)
        if isinstance(action, BackToLibrary):
            return self._back_to_library()
        if isinstance(action, NextChapter):
            return await self._follow(next_chapter=True)
        if isinstance(action, PrevChapter):
            return await self._follow(next_chapter=False)
        raise TypeError(f"Unknown action: {action!r}")

    def render_library(self) -> LibraryView:
        items = [
            LibraryItemView(entry_id=e.id, title=e.title, site=e.site, last_chapter=e.last_chapter or "")
            for e in self.state.library
        ]
        return LibraryView(items=items, error=self.state.error)

    def render_reader(self, error: Optional[str] = None) -> ReaderView:
        entry = self.state.current_entry
        if entry is None:
            raise RuntimeError("No manga is open in the reader")

        result = self.state.last_result
        images = list(result.images) if result else []
        message = None
        if not images:
            if result is not None and result.status is ExtractionStatus.UNSUPPORTED:
                message = UNSUPPORTED
            else:
                message = NO_IMAGES
            if error is None and result is not None and result.status is ExtractionStatus.FAILED:
                error = LOAD_FAILED

        return ReaderView(
            entry_id=entry.id,
            title=entry.title,
            site=entry.site,
            chapter_url=self.state.current_chapter or "",
            images=images,
            message=message,
            error=error,
            has_next=bool(result and result.next_url),
            has_prev=bool(result and result.prev_url),
        )

    def _reload_library(self):
        self.state.library = library_service.get_library()

    def _add(self, action: AddManga) -> LibraryView:
        try:
            _, created = library_service.add_entry(action.title, action.site, action.chapter_url)
        except ValueError:
            self.state.error = MISSING_FIELDS_ERROR
            return self.render_library()

        self.state.error = None if created else DUPLICATE_ERROR
        if created:
            self._reload_library()
        return self.render_library()

    def _remove(self, action: RemoveManga) -> LibraryView:
        library_service.remove_entry(action.entry_id)
        if action.entry_id == self.state.current_entry_id:
            self._close_reader()
        self.state.error = None
        self._reload_library()
        return self.render_library()

    def _update_chapter(self, action: UpdateChapter) -> LibraryView:
        try:
            library_service.update_last_chapter(action.entry_id, action.chapter_url)
        except ValueError:
            self.state.error = MISSING_FIELDS_ERROR
            return self.render_library()
        self.state.error = None
        self._reload_library()
        return self.render_library()

    async def _open_reader(self, entry_id: int) -> View:
        self._reload_library()
        self.state.current_entry_id = entry_id
        entry = self.state.current_entry
        if entry is None:
            self.state.current_entry_id = None
            self.state.error = f"Manga {entry_id} is not in your library."
            return self.render_library()

        self.state.error = None
        return await self._load_chapter(entry.chapter_url)

    async def _load_chapter(self, chapter_url: str) -> View:
        entry = self.state.current_entry
        if entry is None:
            return self._back_to_library()
        self.state.current_chapter = chapter_url
        self.state.last_result = await self.extractor.extract(chapter_url, entry.site)
        return self.render_reader()

    def _close_reader(self):
        self.state.current_entry_id = None
        self.state.current_chapter = None
        self.state.last_result = None

    def _back_to_library(self) -> LibraryView:
        self._close_reader()
        self._reload_library()
        return self.render_library()

    async def _follow(self, next_chapter: bool) -> View:
        if not self.state.in_reader:
            return self.render_library()
        self._reload_library()
        if self.state.current_entry is None:
            return self._back_to_library()

        result = self.state.last_result
        target = None
        if result is not None:
            target = result.next_url if next_chapter else result.prev_url
        if not target:
            return self.render_reader(error=NO_NEXT if next_chapter else NO_PREV)

        if library_service.update_last_chapter(self.state.current_entry_id, target) is None:
            return self._back_to_library()
        self._reload_library()
        return await self._load_chapter(target)
