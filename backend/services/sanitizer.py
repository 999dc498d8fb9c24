"""Escape user text and render the small markup subset used in explanations."""
import re

_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#x27;"),
    ("/", "&#x2F;"),
)

BOLD_ITALIC_PATTERN = re.compile(r"\*\*\*(.+?)\*\*\*", re.DOTALL)
BOLD_PATTERN = re.compile(r"\*\*(.+?)\*\*", re.DOTALL)
# Italic text may wrap a whole <strong> element but never cross a tag boundary.
ITALIC_PATTERN = re.compile(r"\*((?:[^*<]|<strong>[^<*]*</strong>)+?)\*")


def escape_html(text: str) -> str:
    # "&" must go first so later entities are not double-escaped.
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


def render_markup(text: str | None) -> str:
    """Return an HTML fragment that is safe to inject into a page.

    Input is fully escaped before markup is applied, so the only tags in the
    output are <strong>, <em> and <br />.
    """
    if not text:
        return ""
    html = escape_html(text)
    html = BOLD_ITALIC_PATTERN.sub(r"<strong><em>\1</em></strong>", html)
    html = BOLD_PATTERN.sub(r"<strong>\1</strong>", html)
    html = ITALIC_PATTERN.sub(r"<em>\1</em>", html)
    return html.replace("\n", "<br />")
