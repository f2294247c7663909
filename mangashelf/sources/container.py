import logging

from .base import ChapterStrategy, collect_images, make_soup

logger = logging.getLogger(__name__)

CONTAINER_SELECTORS = (
    ".container-chapter-reader",
    "#vungdoc",
    ".vung-doc",
    ".reading-content",
)


class ContainerStrategy(ChapterStrategy):
    markers = ("manganato", "mangakakalot", "natomanga")
    selectors = CONTAINER_SELECTORS

    @property
    def name(self) -> str:
        return "container"

    def extract(self, html: str, page_url: str) -> list[str]:
        soup = make_soup(html)
        container = None
        for selector in self.selectors:
            container = soup.select_one(selector)
            if container is not None:
                logger.debug("reader container matched %s", selector)
                break

        if container is None:
            logger.debug("no reader container on %s, using whole document", page_url)
            container = soup.body or soup

        return collect_images(container, page_url, self.rules, check_size=False)
