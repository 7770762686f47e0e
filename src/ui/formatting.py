"""Convert tutor replies into HTML for the chat bubbles.

Handles the lightweight markdown the model produces: headings, bold,
bullet markers, pipe tables, and a handful of LaTeX escapes. Any markup
other than the tags this module emits is escaped, so the output can be
injected into the page directly. Running it through ``format_response``
again yields the same HTML.
"""

import re

# Previously rendered markup, mapped back to markdown before re-rendering
_BR_RE = re.compile(r"<br\s*/?>")
_HTML_BOLD_RE = re.compile(r"<b>(.*?)</b>")

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_HEADING_RE = re.compile(r"^\s*(#{1,6})\s+(.+?)\s*$")
_BULLET_RE = re.compile(r"^\s*[-*•]\s+")
_BR_RUN_RE = re.compile(r"(?:<br/>){3,}")

# Any "<" that does not open one of the attribute-free tags produced here
_UNSAFE_TAG_RE = re.compile(
    r"<(?!/?(?:b|h[1-6]|table|thead|tbody|tr|th|td)>|br\s*/?>)"
)

# Header row, separator row, then one or more body rows
_TABLE_RE = re.compile(
    r"^[ \t]*(\|[^\n]*\|)[ \t]*\n"
    r"[ \t]*(\|[ \t:|]*-[ \t:|-]*\|)[ \t]*\n"
    r"((?:[ \t]*\|[^\n]*\|[ \t]*(?:\n|$))+)",
    re.MULTILINE,
)

_LATEX_DELIMITERS_RE = re.compile(r"\\[()\[\]]")
_LATEX_FRAC_RE = re.compile(r"\\frac\{([^{}]*)\}\{([^{}]*)\}")
_LATEX_SQRT_RE = re.compile(r"\\sqrt\{([^{}]*)\}")
_LATEX_SYMBOLS = {
    "times": "×",
    "div": "÷",
    "pm": "±",
    "cdot": "·",
    "leq": "≤",
    "geq": "≥",
    "neq": "≠",
    "approx": "≈",
    "infty": "∞",
    "pi": "π",
}
_LATEX_SYMBOL_RE = re.compile(r"\\(" + "|".join(_LATEX_SYMBOLS) + r")(?![A-Za-z])")


def _split_row(row: str) -> list[str]:
    return [cell.strip() for cell in row.strip().strip("|").split("|")]


def _render_table(match: re.Match[str]) -> str:
    header = _split_row(match.group(1))
    body = [_split_row(row) for row in match.group(3).splitlines() if row.strip()]

    if any(len(row) != len(header) for row in body):
        return match.group(0)

    head_html = "".join(f"<th>{cell}</th>" for cell in header)
    body_html = "".join(
        "<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>" for row in body
    )
    html = f"<table><thead><tr>{head_html}</tr></thead><tbody>{body_html}</tbody></table>"
    return html + ("\n" if match.group(0).endswith("\n") else "")


def render_tables(text: str) -> str:
    """Replace markdown pipe tables with single-line HTML tables."""
    return _TABLE_RE.sub(_render_table, text)


def render_latex(text: str) -> str:
    """Replace common LaTeX escapes with plain-text equivalents."""
    # Every pass shortens the text, so this reaches a fixed point
    previous = None
    while text != previous:
        previous = text
        text = _LATEX_FRAC_RE.sub(r"\1/\2", text)
        text = _LATEX_SQRT_RE.sub(r"√(\1)", text)
        text = _LATEX_DELIMITERS_RE.sub("", text)
        text = _LATEX_SYMBOL_RE.sub(lambda m: _LATEX_SYMBOLS[m.group(1)], text)
    return text


def _render_line(line: str) -> str:
    heading = _HEADING_RE.match(line)
    if heading:
        level = len(heading.group(1))
        return f"<h{level}>{heading.group(2)}</h{level}>"

    if _BULLET_RE.match(line):
        return "• " + _BULLET_RE.sub("", line, count=1)

    return line


def format_response(text: str) -> str:
    """Format a tutor reply as HTML.

    Args:
        text: Raw model output, or HTML previously produced by this function.

    Returns:
        HTML with ``<br/>`` line breaks, ready for direct injection.
    """
    text = _UNSAFE_TAG_RE.sub("&lt;", text)
    text = _BR_RE.sub("\n", text)
    text = _HTML_BOLD_RE.sub(r"**\1**", text)
    text = text.replace("\r\n", "\n").strip()

    text = render_latex(text)
    text = _BOLD_RE.sub(r"<b>\1</b>", text)
    text = render_tables(text)

    html = "<br/>".join(_render_line(line) for line in text.split("\n"))
    return _BR_RUN_RE.sub("<br/><br/>", html)
