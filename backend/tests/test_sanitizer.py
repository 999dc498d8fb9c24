import re

import pytest

from services.sanitizer import escape_html, render_markup


def test_bold_and_italic():
    assert render_markup("**Key** point and *nuance*") == "<strong>Key</strong> point and <em>nuance</em>"


def test_newlines_become_breaks():
    assert render_markup("**x**\n") == "<strong>x</strong><br />"
    assert render_markup("one\ntwo") == "one<br />two"


def test_script_tags_are_escaped():
    html = render_markup("<script>alert('x')</script>")
    assert "<script" not in html
    assert html == "&lt;script&gt;alert(&#x27;x&#x27;)&lt;&#x2F;script&gt;"


@pytest.mark.parametrize(
    "text",
    [
        "<img src=x onerror=alert(1)>",
        "**<script>**",
        "*<b>hi</b>*",
        '"><svg onload=alert(1)>',
    ],
)
def test_only_known_tags_survive(text):
    html = render_markup(text)
    stripped = html.replace("<strong>", "").replace("</strong>", "").replace("<em>", "").replace("</em>", "")
    stripped = stripped.replace("<br />", "")
    assert "<" not in stripped
    assert ">" not in stripped


def test_ampersand_is_escaped_once():
    assert escape_html("a & b") == "a &amp; b"
    assert escape_html("&lt;") == "&amp;lt;"


@pytest.mark.parametrize("text", ["", None])
def test_empty_input(text):
    assert render_markup(text) == ""


def test_bold_italic():
    assert render_markup("***x***") == "<strong><em>x</em></strong>"


def test_italic_wrapping_bold():
    assert render_markup("*a **b** c*") == "<em>a <strong>b</strong> c</em>"


def _well_nested(html):
    stack = []
    for closing, name in re.findall(r"<(/?)(strong|em)>", html):
        if not closing:
            stack.append(name)
        elif not stack or stack.pop() != name:
            return False
    return not stack


@pytest.mark.parametrize("text", ["***x***", "***x**", "***a** b*", "**a *b** c*", "*a **b** c*"])
def test_tags_never_cross(text):
    assert _well_nested(render_markup(text))
