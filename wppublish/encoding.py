"""Wrap Markdown in the block markup the WordPress editor stores."""

import json
import re

import mistune

from .config import DEFAULT_THEME

MARKDOWN_BLOCK = "wp:markdown"
GFM_BLOCK = "wp:gfm-renderer/markdown"

_SMART_SUBSTITUTIONS = [
    (re.compile(r"---"), "—"),
    (re.compile(r"--"), "–"),
    (re.compile(r"\.\.\."), "…"),
    (re.compile(r"\((c|C)\)"), "©"),
    (re.compile(r"\((r|R)\)"), "®"),
    (re.compile(r"\((tm|TM)\)"), "™"),
]

# a quote after one of these (or at the start of a block) opens
_OPENERS = "([{—–“‘"
_QUOTES = {'"': ("“", "”"), "'": ("‘", "’")}

# block tokens whose inline text starts with no left context
_TEXT_BLOCKS = {"paragraph", "heading", "block_text", "table_cell", "table_head", "table_body"}

_ESCAPED_QUOTE = re.compile(r'(?<!\\)((?:\\\\)*)\\"')


def smarten(text, prev=""):
    """Typographic quotes, dashes and ellipses for a plain text run.

    `prev` is the character rendered just before `text` in the same block;
    it decides whether a leading quote opens or closes.
    """
    for pattern, replacement in _SMART_SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    out = []
    for ch in text:
        if ch in _QUOTES:
            opening, closing = _QUOTES[ch]
            ch = opening if (not prev or prev.isspace() or prev in _OPENERS) else closing
        out.append(ch)
        prev = ch
    return "".join(out)


class TypographicRenderer(mistune.HTMLRenderer):
    """Smart punctuation for text nodes, carrying left context across inline markup.

    Code spans, code blocks and urls stay verbatim.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._prev = ""

    def render_token(self, token, state):
        if token["type"] in _TEXT_BLOCKS:
            self._prev = ""
        return super().render_token(token, state)

    def text(self, text):
        smart = smarten(text, self._prev)
        if smart:
            self._prev = smart[-1]
        return super().text(smart)

    def codespan(self, text):
        if text:
            self._prev = text[-1]
        return super().codespan(text)

    def linebreak(self):
        self._prev = "\n"
        return super().linebreak()

    def softbreak(self):
        self._prev = "\n"
        return super().softbreak()


def create_renderer():
    return mistune.create_markdown(
        escape=False,
        hard_wrap=True,
        renderer=TypographicRenderer(escape=False),
        plugins=["strikethrough", "table", "url", "task_lists"],
    )


def serialize_block_attributes(attributes):
    """JSON for a block comment, escaped like the block editor's serializer.

    The escapes keep `--` and `>` from closing the surrounding HTML comment.
    Only escaped quotes inside strings become `\\u0022`, so a value ending
    in a backslash still closes its string.
    """
    encoded = json.dumps(attributes, ensure_ascii=False, separators=(",", ":"))
    encoded = _ESCAPED_QUOTE.sub(r"\1\\u0022", encoded)
    return (encoded
            .replace("--", "\\u002d\\u002d")
            .replace("<", "\\u003c")
            .replace(">", "\\u003e")
            .replace("&", "\\u0026"))


def markdown_block(body):
    return f"<!-- {MARKDOWN_BLOCK} -->\n{body.strip()}\n<!-- /{MARKDOWN_BLOCK} -->"


def gfm_block(body, theme=DEFAULT_THEME, renderer=None):
    renderer = create_renderer() if renderer is None else renderer
    attributes = {
        "content": body,
        "html": renderer(body),
        "shikiTheme": theme,
    }
    return f"<!-- {GFM_BLOCK} {serialize_block_attributes(attributes)} /-->"


def encode_content(body, *, block_format="gfm", theme=DEFAULT_THEME):
    if block_format == "markdown":
        return markdown_block(body)
    if block_format == "gfm":
        return gfm_block(body, theme=theme)
    raise ValueError(f"Unknown block format: {block_format!r}")
