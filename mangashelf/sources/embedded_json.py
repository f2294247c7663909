import json
import logging
from typing import Any, Optional

from .base import ChapterStrategy, collect_images, make_soup, resolve_url

logger = logging.getLogger(__name__)

NEXT_DATA_ID = "__NEXT_DATA__"
NEXT_DATA_PATH = ("props", "pageProps", "chapter", "images")
NEXT_DATA_FIELDS = ("url", "src", "image", "imageUrl")

GLOBAL_MARKER = "window.__DATA__"
GLOBAL_FIELDS = ("url", "src", "image")


def dig(data: Any, path: tuple[str, ...]) -> Any:
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def page_urls(pages: Any, fields: tuple[str, ...], page_url: str) -> list[str]:
    if not isinstance(pages, list):
        return []
    out = []
    for page in pages:
        if isinstance(page, str):
            value = page
        elif isinstance(page, dict):
            value = next((page[f] for f in fields if isinstance(page.get(f), str) and page[f].strip()), "")
        else:
            continue
        if value.strip():
            out.append(resolve_url(page_url, value))
    return out


def extract_assigned_object(raw_html: str, marker: str) -> Optional[dict]:
    """Decode the object literal assigned to `marker` somewhere in the page.

    Raises json.JSONDecodeError when the literal is not valid JSON.
    """
    pos = raw_html.find(marker)
    if pos < 0:
        return None
    eq = raw_html.find("=", pos + len(marker))
    if eq < 0:
        return None
    start = raw_html.find("{", eq)
    if start < 0:
        return None
    obj, _ = json.JSONDecoder().raw_decode(raw_html, start)
    return obj if isinstance(obj, dict) else None


class EmbeddedJsonStrategy(ChapterStrategy):
    markers = ("comick",)

    @property
    def name(self) -> str:
        return "embedded_json"

    def extract(self, html: str, page_url: str) -> list[str]:
        soup = make_soup(html)

        images = self._from_next_data(soup, page_url)
        if images:
            return images

        images = self._from_global(html, page_url)
        if images:
            return images

        logger.debug("no embedded page list on %s, falling back to DOM", page_url)
        return collect_images(soup, page_url, self.rules, check_size=False)

    def _from_next_data(self, soup, page_url: str) -> list[str]:
        script = soup.find("script", id=NEXT_DATA_ID)
        if script is None:
            return []
        try:
            data = json.loads(script.string or script.get_text())
        except ValueError as e:
            logger.warning("unparsable %s on %s: %s", NEXT_DATA_ID, page_url, e)
            return []
        return page_urls(dig(data, NEXT_DATA_PATH), NEXT_DATA_FIELDS, page_url)

    def _from_global(self, html: str, page_url: str) -> list[str]:
        try:
            data = extract_assigned_object(html, GLOBAL_MARKER)
        except ValueError as e:
            logger.warning("unparsable %s on %s: %s", GLOBAL_MARKER, page_url, e)
            return []
        if not data:
            return []

        entries = data.get("data")
        if not isinstance(entries, list):
            return []
        for entry in entries:
            if isinstance(entry, dict) and isinstance(entry.get("pages"), list):
                return page_urls(entry["pages"], GLOBAL_FIELDS, page_url)
        return []
