"""Unit tests for chat markdown rendering."""

import pytest_check as check

from research_chat.models.schemas import GroundingChunk, WebSource
from research_chat.ui.markdown import citations_to_html, markdown_to_html


class TestMarkdownToHtml:
    """Tests for markdown conversion."""

    def test_escapes_html(self) -> None:
        """Raw HTML in model output is escaped."""
        result = markdown_to_html("<script>alert(1)</script>")

        check.is_not_in("<script>", result)
        check.is_in("&lt;script&gt;", result)

    def test_report_headings_and_rules(self) -> None:
        """Headings and horizontal rules of the report layout are rendered."""
        result = markdown_to_html("---\n### 🛡️ Validation Status\ntext")

        check.is_in("<hr", result)
        check.is_in("<h3", result)
        check.is_in("🛡️ Validation Status</h3>", result)

    def test_bullets_with_bold_labels(self) -> None:
        """Star bullets with bold labels become list items."""
        result = markdown_to_html("*   **[Domain.com]:** Official docs")

        check.is_in("<ul", result)
        check.is_in("<li><strong>[Domain.com]:</strong> Official docs</li>", result)

    def test_links_with_underscores_survive(self) -> None:
        """URLs containing underscores are not turned into emphasis."""
        result = markdown_to_html("[report](https://example.gov/annual_report_2024.pdf)")

        assert 'href="https://example.gov/annual_report_2024.pdf"' in result

    def test_inline_code_and_italics(self) -> None:
        """Search operators in backticks and single-star italics render."""
        result = markdown_to_html("Use `filetype:pdf` for *documents*")

        check.is_in("<code", result)
        check.is_in("<em>documents</em>", result)


class TestCitationsToHtml:
    """Tests for citation list rendering."""

    def test_no_citations_renders_nothing(self) -> None:
        """None or empty citation lists produce an empty string."""
        check.equal(citations_to_html(None), "")
        check.equal(citations_to_html([GroundingChunk()]), "")

    def test_citations_render_titles_and_links(self) -> None:
        """Each citation becomes a link labelled with its title or URI."""
        chunks = [
            GroundingChunk(web=WebSource(uri="https://a.gov", title="Agency")),
            GroundingChunk(web=WebSource(uri="https://b.edu")),
        ]

        result = citations_to_html(chunks)

        check.is_in('href="https://a.gov"', result)
        check.is_in(">Agency</a>", result)
        check.is_in(">https://b.edu</a>", result)
