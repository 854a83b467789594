# tests/test_extraction.py
"""
Tests for hopper.ingest.extraction.

Each format gets a happy path and its failure mode; the registry is
tested for dispatch by extension and MIME type.
"""

import io

import pytest
from docx import Document

from hopper.exceptions import ExtractionError
from hopper.ingest.extraction import (
    ExtractOptions,
    ExtractorRegistry,
    normalize_type_hint,
    parse_page,
)

from conftest import make_pdf


@pytest.fixture
def registry() -> ExtractorRegistry:
    return ExtractorRegistry.default()


VTT = b"""WEBVTT

1
00:00:01.000 --> 00:00:04.000
Hello there.

2
00:00:05.000 --> 00:00:07.500
General Kenobi.
"""

SRT = b"""1
00:00:01,000 --> 00:00:04,000
First line.

2
00:00:05,000 --> 00:00:07,000
Second line.
"""


class TestTypeHints:
    @pytest.mark.parametrize(
        "hint,expected",
        [
            ("pdf", "pdf"),
            (".PDF", "pdf"),
            ("reports/q3.final.pdf", "pdf"),
            ("application/pdf", "pdf"),
            ("text/csv; charset=utf-8", "csv"),
            ("text/html", "html"),
        ],
    )
    def test_normalize(self, hint, expected):
        assert normalize_type_hint(hint) == expected


class TestRegistry:
    def test_supported_types(self, registry):
        for file_type in ("pdf", "docx", "txt", "md", "csv", "vtt", "srt", "html"):
            assert registry.supports(file_type)

    def test_unsupported_type(self, registry):
        with pytest.raises(ExtractionError, match="Unsupported"):
            registry.extract(b"data", "exe", ExtractOptions())

    def test_empty_payload(self, registry):
        with pytest.raises(ExtractionError, match="Empty"):
            registry.extract(b"", "txt", ExtractOptions())

    def test_duplicate_registration_rejected(self, registry):
        with pytest.raises(ValueError, match="already registered"):
            registry.register(registry.get("txt"))

    def test_crlf_normalized_and_trimmed(self, registry):
        text = registry.extract(b"  line one\r\nline two\r\n\r\n", "txt", ExtractOptions())
        assert text == "line one\nline two"


class TestFormats:
    def test_pdf(self, registry):
        text = registry.extract(make_pdf("Quarterly revenue grew"), "pdf", ExtractOptions())
        assert "Quarterly revenue grew" in text

    def test_corrupt_pdf(self, registry):
        with pytest.raises(ExtractionError):
            registry.extract(b"not a pdf", "pdf", ExtractOptions())

    def test_docx(self, registry):
        document = Document()
        document.add_paragraph("Meeting notes")
        table = document.add_table(rows=1, cols=2)
        table.rows[0].cells[0].text = "owner"
        table.rows[0].cells[1].text = "alice"
        buffer = io.BytesIO()
        document.save(buffer)

        text = registry.extract(buffer.getvalue(), "docx", ExtractOptions())

        assert "Meeting notes" in text
        assert "owner | alice" in text

    def test_corrupt_docx(self, registry):
        with pytest.raises(ExtractionError):
            registry.extract(b"PK\x03\x04garbage", "docx", ExtractOptions())

    def test_markdown_verbatim(self, registry):
        assert registry.extract(b"# Title\n\nBody", "md", ExtractOptions()) == "# Title\n\nBody"

    def test_csv_rows_flattened(self, registry):
        text = registry.extract(b"name,role\nAda, engineer \n,\n", "csv", ExtractOptions())
        assert text == "name | role\nAda | engineer"

    def test_vtt_stripped(self, registry):
        text = registry.extract(VTT, "vtt", ExtractOptions(strip_subtitle_timestamps=True))
        assert text == "Hello there.\nGeneral Kenobi."

    def test_vtt_preserved(self, registry):
        text = registry.extract(VTT, "vtt", ExtractOptions(strip_subtitle_timestamps=False))
        assert "00:00:01.000 --> 00:00:04.000" in text
        assert "WEBVTT" not in text

    def test_srt_stripped(self, registry):
        text = registry.extract(SRT, "srt", ExtractOptions())
        assert text == "First line.\nSecond line."

    def test_subtitle_without_text(self, registry):
        with pytest.raises(ExtractionError):
            registry.extract(b"WEBVTT\n\n1\n00:00:01.000 --> 00:00:02.000\n", "vtt", ExtractOptions())

    def test_html_main_content(self, registry):
        html = b"<html><body><nav>Menu</nav><main><p>Article body</p></main></body></html>"
        assert registry.extract(html, "html", ExtractOptions()) == "Article body"


class TestParsePage:
    def test_prefers_main_and_drops_boilerplate(self):
        page = parse_page(
            """
            <html><head><title> Docs Home </title><style>p{}</style></head>
            <body>
              <header>Site header</header>
              <main>
                <h1>Welcome</h1>
                <script>var x = 1;</script>
                <div class="ads">Buy now</div>
                <p>Read the <a href="/guide">guide</a>.</p>
              </main>
              <footer><a href="/legal">Legal</a></footer>
            </body></html>
            """
        )

        assert page.title == "Docs Home"
        assert page.text == "Welcome Read the guide ."
        assert page.links == ["/guide"]

    def test_article_fallback(self):
        page = parse_page("<body><div>outside</div><article>inside</article></body>")
        assert page.text == "inside"

    def test_untitled(self):
        assert parse_page("<body>hi</body>").title == "Untitled Document"
