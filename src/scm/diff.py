"""Conversion of ANSI colored diff output to inline-styled HTML."""

import html
from collections.abc import Iterator

from rich.ansi import AnsiDecoder
from rich.color import Color, ColorType
from rich.style import Style
from rich.text import Text

from common.constants import GREEN_BACKGROUND, NO_CHANGES_HTML, RED_BACKGROUND

_ANSI_COLOR_NAMES = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")

# Removed and added lines get a light background as well
_HIGHLIGHTS = {"red": RED_BACKGROUND, "green": GREEN_BACKGROUND}

_PAGE_HEADER = '<html>\n<body>\n<p style="font-family: monospace">'
_PAGE_FOOTER = "</p>\n</body>\n</html>"


def _css_color(color: Color | None) -> str | None:
    if color is None or color.is_default:
        return None
    if color.type == ColorType.STANDARD and color.number is not None:
        return _ANSI_COLOR_NAMES[color.number % 8]
    return color.get_truecolor().hex


def style_to_css(style: Style) -> str:
    """Translate a rich style to CSS declarations, empty if it is plain."""
    declarations = []
    color = _css_color(style.color)
    background = _css_color(style.bgcolor)
    if color:
        declarations.append(f"color: {color};")
    if background:
        declarations.append(f"background-color: {background};")
    elif color in _HIGHLIGHTS:
        declarations.append(f"background-color: {_HIGHLIGHTS[color]};")
    if style.bold:
        declarations.append("font-weight: bold;")
    if style.italic:
        declarations.append("font-style: italic;")
    if style.underline:
        declarations.append("text-decoration: underline;")
    return " ".join(declarations)


def _escape(text: str) -> str:
    return html.escape(text, quote=False).replace(" ", "&nbsp;")


def text_to_html(text: Text) -> str:
    """Render one decoded line, wrapping each styled run in a span."""
    plain = text.plain
    parts = []
    position = 0
    for span in sorted(text.spans, key=lambda s: s.start):
        if span.start > position:
            parts.append(_escape(plain[position : span.start]))
        chunk = _escape(plain[span.start : span.end])
        css = style_to_css(span.style) if isinstance(span.style, Style) else ""
        parts.append(f'<span style="{css}">{chunk}</span>' if css else chunk)
        position = max(position, span.end)
    if position < len(plain):
        parts.append(_escape(plain[position:]))
    return "".join(parts)


def ansi_to_html(ansi_text: str) -> Iterator[str]:
    """Yield one HTML fragment per line of ANSI colored text.

    SGR state carries across lines, as it does on a terminal.

    Example:
        >>> list(ansi_to_html("\\x1b[31m-old\\x1b[m"))
        ['<span style="color: red; background-color: #ffcccc;">-old</span>']
    """
    decoder = AnsiDecoder()
    for line in decoder.decode(ansi_text):
        yield text_to_html(line)


def render_diff_html(diff_output: str) -> str:
    """Render ``git diff --color`` output as a standalone HTML page."""
    if diff_output.strip():
        lines = list(ansi_to_html(diff_output))
    else:
        lines = [NO_CHANGES_HTML]
    body = "".join(f"{line}<br>\n" for line in lines)
    return f"{_PAGE_HEADER}{body}{_PAGE_FOOTER}"
