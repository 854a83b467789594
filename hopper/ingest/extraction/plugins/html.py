# hopper/ingest/extraction/plugins/html.py
"""
HTML main-content extraction.

Shared by the website crawler and the `html` file extractor: boilerplate
elements are dropped, the main region is preferred over the full body,
and links are collected from that same cleaned region.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from bs4 import BeautifulSoup

from hopper.exceptions import ExtractionError
from hopper.ingest.extraction.base import ExtractOptions, decode_text

BOILERPLATE_SELECTORS = (
    "script, style, nav, footer, header, iframe, noscript, svg, .ad, .ads, .advertisement"
)
UNTITLED = "Untitled Document"


@dataclass(frozen=True)
class ParsedPage:
    title: str
    text: str
    links: List[str]


def parse_page(html: str) -> ParsedPage:
    """Clean an HTML document and return its title, main text and raw hrefs."""
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if title_tag else ""

    for element in soup.select(BOILERPLATE_SELECTORS):
        element.decompose()

    main = soup.find("main") or soup.find("article") or soup.body or soup
    text = " ".join(main.get_text(" ").split())
    links = [a["href"].strip() for a in main.find_all("a", href=True) if a["href"].strip()]

    return ParsedPage(title=title or UNTITLED, text=text, links=links)


@dataclass
class HtmlExtractor:
    plugin_name: str = field(default="html", repr=False)
    file_types: tuple[str, ...] = ("html", "htm", "xhtml")

    def extract(self, data: bytes, options: ExtractOptions) -> str:
        text = parse_page(decode_text(data)).text
        if not text:
            raise ExtractionError("HTML document has no readable content")
        return text


__all__ = ["HtmlExtractor", "ParsedPage", "parse_page"]
