import logging
from typing import Optional, Protocol

from mangashelf.core.config import FALLBACK_TO_GENERIC
from mangashelf.models import ExtractionRequest, ExtractionResult, ExtractionStatus
from mangashelf.sources.base import ChapterLinks, ChapterStrategy, find_chapter_links, make_soup
from mangashelf.sources.container import ContainerStrategy
from mangashelf.sources.embedded_json import EmbeddedJsonStrategy
from mangashelf.sources.generic import GenericStrategy
from mangashelf.sources.proxy import ProxyClient

logger = logging.getLogger(__name__)

GENERIC_SITE_LABELS = {"generic", "default"}


class Fetcher(Protocol):
    async def fetch_text(self, url: str) -> str: ...


class ChapterImageExtractor:
    """Finds the page images of a chapter on a third-party manga site.

    Site-specific strategies are tried by domain marker, then by site
    label; anything else goes to the generic strategy, or is reported as
    unsupported when generic fallback is turned off. `extract` never
    raises: network and parse failures come back as an empty result with
    a FAILED or EMPTY status.
    """

    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        strategies: Optional[list[ChapterStrategy]] = None,
        default: Optional[ChapterStrategy] = None,
        fallback_to_generic: bool = FALLBACK_TO_GENERIC,
    ):
        self.fetcher = fetcher or ProxyClient()
        self.strategies = strategies if strategies is not None else [ContainerStrategy(), EmbeddedJsonStrategy()]
        self.default = default or GenericStrategy()
        self.fallback_to_generic = fallback_to_generic

    def resolve(self, url: str, site: str = "") -> Optional[ChapterStrategy]:
        for strategy in self.strategies:
            if strategy.matches_host(url):
                return strategy
        for strategy in self.strategies:
            if strategy.matches_site(site):
                return strategy
        if self.fallback_to_generic or (site or "").strip().lower() in GENERIC_SITE_LABELS:
            return self.default
        return None

    async def extract(self, url: str, site: str = "") -> ExtractionResult:
        request = ExtractionRequest(url=url, site=site)
        try:
            return await self._extract(request)
        except Exception as e:
            logger.exception("extraction of %s crashed", url)
            return ExtractionResult(request=request, status=ExtractionStatus.EMPTY, error=str(e))

    async def extract_images(self, url: str, site: str = "") -> list[str]:
        result = await self.extract(url, site)
        return result.images

    async def _extract(self, request: ExtractionRequest) -> ExtractionResult:
        strategy = self.resolve(request.url, request.site)
        if strategy is None:
            logger.info("no strategy for %s (site=%r)", request.url, request.site)
            return ExtractionResult(request=request, status=ExtractionStatus.UNSUPPORTED)

        try:
            html = await self.fetcher.fetch_text(request.url)
        except Exception as e:
            logger.warning("fetch failed for %s: %s", request.url, e)
            return ExtractionResult(
                request=request,
                status=ExtractionStatus.FAILED,
                strategy=strategy.name,
                error=str(e),
            )

        try:
            images = strategy.extract(html, request.url)
            links = find_chapter_links(make_soup(html), request.url)
        except Exception as e:
            logger.warning("%s strategy could not parse %s: %s", strategy.name, request.url, e)
            images, links = [], ChapterLinks()

        status = ExtractionStatus.EXTRACTED if images else ExtractionStatus.EMPTY
        logger.info("%s strategy found %d images on %s", strategy.name, len(images), request.url)
        return ExtractionResult(
            request=request,
            status=status,
            strategy=strategy.name,
            images=images,
            next_url=links.next_url,
            prev_url=links.prev_url,
        )

    async def close(self):
        close = getattr(self.fetcher, "close", None)
        if close is not None:
            await close()


_global_extractor: Optional[ChapterImageExtractor] = None

def get_extractor() -> ChapterImageExtractor:
    global _global_extractor
    if _global_extractor is None:
        _global_extractor = ChapterImageExtractor()
    return _global_extractor
