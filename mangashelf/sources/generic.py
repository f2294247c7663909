from .base import ChapterStrategy, collect_images, make_soup


class GenericStrategy(ChapterStrategy):
    """Fallback for sites without a dedicated strategy.

    Keeps every <img> whose declared width and height both exceed the
    configured minimum and whose resolved URL is not blocklisted.
    """

    @property
    def name(self) -> str:
        return "generic"

    def extract(self, html: str, page_url: str) -> list[str]:
        soup = make_soup(html)
        return collect_images(soup, page_url, self.rules, check_size=True)
