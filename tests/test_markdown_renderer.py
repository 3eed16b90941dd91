from __future__ import annotations

from quizcode.core.markdown_renderer import MarkdownRenderer, renderer
from quizcode.core.services.identity import StaticIdentity


def test_blank_text_renders_placeholder():
    assert renderer.render_fragment("   ", placeholder="<p>none</p>") == "<p>none</p>"


def test_raw_html_is_escaped_by_default():
    html = renderer.render_fragment("<script>alert(1)</script>")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_html_passthrough_can_be_enabled():
    assert "<b>bold</b>" in MarkdownRenderer(enable_html=True).render_fragment("<b>bold</b>")


def test_inline_render_has_no_paragraph():
    assert renderer.render_inline("*Paris*") == "<em>Paris</em>"


def test_static_identity_trims_and_treats_blank_as_signed_out():
    assert StaticIdentity("  Ann ").get_current_identity() == "Ann"
    assert StaticIdentity("   ").get_current_identity() is None
    assert StaticIdentity().get_current_identity() is None
