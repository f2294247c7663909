import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from mangashelf.core.config import BLOCKLIST_PATTERN, MIN_IMAGE_SIZE

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
LAZY_SRC_ATTRS = ("data-src", "data-lazy-src", "data-original")
NAV_WORDS = (("next_url", ("next",)), ("prev_url", ("prev", "previous")))


@dataclass
class FilterRules:
    min_width: int = MIN_IMAGE_SIZE
    min_height: int = MIN_IMAGE_SIZE
    blocklist: re.Pattern = field(default_factory=lambda: re.compile(BLOCKLIST_PATTERN, re.IGNORECASE))

    def is_blocked(self, url: str) -> bool:
        return bool(self.blocklist.search(url))

    def is_large_enough(self, img: Tag) -> bool:
        return (
            parse_dimension(img.get("width")) > self.min_width
            and parse_dimension(img.get("height")) > self.min_height
        )


@dataclass
class ChapterLinks:
    next_url: Optional[str] = None
    prev_url: Optional[str] = None


def parse_dimension(value) -> int:
    """Leading integer of a width/height attribute ("800px" -> 800), 0 when absent."""
    if value is None:
        return 0
    m = _LEADING_INT.match(str(value))
    return int(m.group(1)) if m else 0


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def resolve_url(page_url: str, src: str) -> str:
    return urljoin(page_url, src.strip())


def image_source(img: Tag, page_url: str) -> Optional[str]:
    src = (img.get("src") or "").strip()
    if not src or src.startswith("data:"):
        for attr in LAZY_SRC_ATTRS:
            lazy = (img.get(attr) or "").strip()
            if lazy:
                src = lazy
                break
    if not src or src.startswith("data:"):
        return None
    return resolve_url(page_url, src)


def collect_images(root: Tag, page_url: str, rules: FilterRules, check_size: bool) -> list[str]:
    out = []
    for img in root.find_all("img"):
        src = image_source(img, page_url)
        if not src:
            continue
        if check_size and not rules.is_large_enough(img):
            continue
        if rules.is_blocked(src):
            continue
        out.append(src)
    return out


def _rel_link(soup: BeautifulSoup, rels: tuple[str, ...]) -> Optional[Tag]:
    for name in ("a", "link"):
        for tag in soup.find_all(name, href=True):
            values = [v.lower() for v in (tag.get("rel") or [])]
            if any(rel in values for rel in rels):
                return tag
    return None


def _is_nav_class(token: str, words: tuple[str, ...]) -> bool:
    # whole class token, or a suffix after "-" / "_" (navi-change-chapter-btn-next)
    token = token.lower()
    return any(token == w or token.endswith(("-" + w, "_" + w)) for w in words)


def _class_link(soup: BeautifulSoup, words: tuple[str, ...]) -> Optional[Tag]:
    for tag in soup.find_all("a", href=True):
        if any(_is_nav_class(c, words) for c in (tag.get("class") or [])):
            return tag
    return None


def find_chapter_links(soup: BeautifulSoup, page_url: str) -> ChapterLinks:
    links = ChapterLinks()
    for attr, words in NAV_WORDS:
        tag = _rel_link(soup, words) or _class_link(soup, words)
        if tag is None:
            continue
        href = tag["href"].strip()
        if href and not href.startswith(("#", "javascript:")):
            setattr(links, attr, resolve_url(page_url, href))
    return links


class ChapterStrategy(ABC):
    """Turns the HTML of one chapter page into its ordered page image URLs."""

    markers: tuple[str, ...] = ()

    def __init__(self, rules: Optional[FilterRules] = None):
        self.rules = rules or FilterRules()

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def extract(self, html: str, page_url: str) -> list[str]:
        pass

    def matches_host(self, url: str) -> bool:
        host = urlparse(url).netloc.lower()
        return bool(host) and _contains_any(host, self.markers)

    def matches_site(self, site: str) -> bool:
        return _contains_any((site or "").strip().lower(), self.markers)


def _contains_any(text: str, markers: Iterable[str]) -> bool:
    return bool(text) and any(m in text for m in markers)
