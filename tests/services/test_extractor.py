"""
Tests for ChapterImageExtractor - strategy dispatch and failure handling.
"""

import asyncio
import json

import pytest

from mangashelf.models import ExtractionStatus
from mangashelf.services.extractor import ChapterImageExtractor
from mangashelf.sources.base import ChapterStrategy
from mangashelf.sources.proxy import ProxyError

GENERIC_URL = "https://www.example.com/manga/one-piece/chapter-1"
CONTAINER_URL = "https://chapmanganato.to/manga-ab123/chapter-7"
JSON_URL = "https://comick.io/comic/frieren/chapter-12"

GENERIC_HTML = """
<body>
  <img src="https://cdn.example.com/ch1/01.jpg" width="800" height="1200">
  <img src="https://cdn.example.com/ch1/tiny.jpg" width="20" height="20">
  <a rel="next" href="/manga/one-piece/chapter-2">Next</a>
</body>
"""


def run(coro):
    return asyncio.run(coro)


class ExplodingStrategy(ChapterStrategy):
    markers = ("boom",)

    @property
    def name(self):
        return "exploding"

    def extract(self, html, page_url):
        raise RuntimeError("parser blew up")


@pytest.mark.parametrize(
    "url, site, expected",
    [
        (CONTAINER_URL, "", "container"),
        (JSON_URL, "", "embedded_json"),
        (JSON_URL, "Manganato", "embedded_json"),
        ("https://mirror.example.com/read/7", "Comick", "embedded_json"),
        ("https://mirror.example.com/read/7", "manganato", "container"),
        (GENERIC_URL, "Some Site", "generic"),
    ],
)
def test_resolve_picks_strategy_by_domain_then_site_label(make_fetcher, url, site, expected):
    extractor = ChapterImageExtractor(fetcher=make_fetcher())

    assert extractor.resolve(url, site).name == expected


def test_resolve_without_generic_fallback(make_fetcher):
    extractor = ChapterImageExtractor(fetcher=make_fetcher(), fallback_to_generic=False)

    assert extractor.resolve(GENERIC_URL, "Some Site") is None
    assert extractor.resolve(GENERIC_URL, "generic").name == "generic"
    assert extractor.resolve(CONTAINER_URL, "").name == "container"


def test_generic_extraction_with_navigation_links(make_fetcher):
    fetcher = make_fetcher({GENERIC_URL: GENERIC_HTML})
    extractor = ChapterImageExtractor(fetcher=fetcher)

    result = run(extractor.extract(GENERIC_URL, "Some Site"))

    assert result.status is ExtractionStatus.EXTRACTED
    assert result.strategy == "generic"
    assert result.images == ["https://cdn.example.com/ch1/01.jpg"]
    assert result.next_url == "https://www.example.com/manga/one-piece/chapter-2"
    assert result.prev_url is None
    assert fetcher.calls == [GENERIC_URL]


def test_embedded_json_end_to_end(make_fetcher):
    blob = json.dumps({"props": {"pageProps": {"chapter": {"images": [
        {"url": "https://img.example.com/1.webp"},
        {"url": "https://img.example.com/2.webp"},
        {"url": "https://img.example.com/3.webp"},
    ]}}}})
    html = f'<script id="__NEXT_DATA__">{blob}</script>'
    extractor = ChapterImageExtractor(fetcher=make_fetcher({JSON_URL: html}))

    images = run(extractor.extract_images(JSON_URL, "comick"))

    assert images == [
        "https://img.example.com/1.webp",
        "https://img.example.com/2.webp",
        "https://img.example.com/3.webp",
    ]


def test_unsupported_site_issues_no_request(make_fetcher):
    fetcher = make_fetcher({GENERIC_URL: GENERIC_HTML})
    extractor = ChapterImageExtractor(fetcher=fetcher, fallback_to_generic=False)

    result = run(extractor.extract(GENERIC_URL, "Some Site"))

    assert result.status is ExtractionStatus.UNSUPPORTED
    assert result.images == []
    assert result.strategy is None
    assert fetcher.calls == []


@pytest.mark.parametrize(
    "error",
    [ProxyError("proxy returned 502", 502), ConnectionError("refused"), asyncio.TimeoutError()],
)
def test_network_failure_yields_empty_failed_result(make_fetcher, error):
    extractor = ChapterImageExtractor(fetcher=make_fetcher(error=error))

    result = run(extractor.extract(CONTAINER_URL, "manganato"))

    assert result.status is ExtractionStatus.FAILED
    assert result.images == []
    assert result.strategy == "container"


def test_network_failure_never_raises_from_extract_images(make_fetcher):
    extractor = ChapterImageExtractor(fetcher=make_fetcher(error=ProxyError("down")))

    assert run(extractor.extract_images(GENERIC_URL)) == []


def test_page_without_matches_is_empty_not_failed(make_fetcher):
    extractor = ChapterImageExtractor(fetcher=make_fetcher({GENERIC_URL: "<p>nothing here</p>"}))

    result = run(extractor.extract(GENERIC_URL))

    assert result.status is ExtractionStatus.EMPTY
    assert result.images == []
    assert result.error is None


def test_crashing_strategy_is_contained(make_fetcher):
    url = "https://boom.example.com/chapter-1"
    extractor = ChapterImageExtractor(
        fetcher=make_fetcher({url: "<html></html>"}),
        strategies=[ExplodingStrategy()],
    )

    result = run(extractor.extract(url))

    assert result.status is ExtractionStatus.EMPTY
    assert result.strategy == "exploding"
    assert result.images == []


def test_result_serialises_for_callers(make_fetcher):
    extractor = ChapterImageExtractor(fetcher=make_fetcher({GENERIC_URL: GENERIC_HTML}))

    data = run(extractor.extract(GENERIC_URL, "x")).to_dict()

    assert data["status"] == "extracted"
    assert data["url"] == GENERIC_URL
    assert data["site"] == "x"
    assert data["images"] == ["https://cdn.example.com/ch1/01.jpg"]
