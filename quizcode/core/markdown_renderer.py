"""Markdown rendering for question text and quiz descriptions.

Raw HTML in the source is escaped rather than passed through, because the
text is authored by hosts and shown in every participant's browser.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts markdown into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str, placeholder: str = "") -> str:
        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return placeholder
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render a single line (option labels) without a wrapping paragraph."""
        return self._markdown.renderInline((markdown_text or "").strip())


# MarkdownIt is safe for concurrent read-only renders, so the API thread and
# the Qt thread share this instance.
renderer = MarkdownRenderer()
