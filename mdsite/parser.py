"""Markdown to HTML conversion with Tailwind utility classes."""

from __future__ import annotations

from collections.abc import Iterable

import jinja2
from markdown_it import MarkdownIt
from markdown_it.token import Token

IMAGE_TEMPLATE = "partials/image.html"
IMAGE_FAILURE = "<!-- Failed to render image -->"

_HEADING_CLASSES = {
    1: "text-3xl font-bold text-black-600 mb-6",
    2: "text-2xl font-semibold text-black-500 mb-4",
    3: "text-xl font-medium text-black-400 mb-2",
}
_DEFAULT_HEADING_CLASS = "text-xl font-medium text-black-300"

_PARAGRAPH_OPEN = '<p class="text-base font-normal leading-relaxed mb-3">'
_LIST_OPEN = '<ul class="list-disc text-base font-normal list-inside ml-4">'
_LINK_OPEN = '<a class="text-base font-bold leading-relaxed text-green-700" href="{href}" title="{title}">'
_CODE_BLOCK_OPEN = (
    '<pre class="bg-gray-900 text-base font-normal text-white p-4 rounded-lg '
    'overflow-x-auto"><code class="{language}">'
)
_INLINE_CODE = '<code class="bg-gray-200 font-normal text-red-600 px-1 py-0.5 rounded">{code}</code>'

# Tokens whose HTML does not depend on their attributes or on parser state.
_FIXED_OUTPUT = {
    "em_open": "<em>",
    "em_close": "</em>",
    "strong_open": "<strong>",
    "strong_close": "</strong>",
    "s_open": "<del>",
    "s_close": "</del>",
    "list_item_open": "<li>",
    "list_item_close": "</li>\n",
    "bullet_list_close": "</ul>",
    "ordered_list_close": "</ul>",
    "blockquote_open": "<blockquote>\n",
    "blockquote_close": "</blockquote>\n",
    "softbreak": "\n",
    "hardbreak": "<br />\n",
    "hr": "<hr />\n",
    "link_close": "</a>",
    "table_open": "<table>",
    "table_close": "</tbody></table>\n",
    "thead_open": "<thead><tr>",
    "thead_close": "</tr></thead><tbody>\n",
    "th_open": "<td>",
    "td_open": "<td>",
    "th_close": "</td>",
    "td_close": "</td>",
}

_markdown = MarkdownIt("commonmark").enable(["table", "strikethrough"])


def replace_file_extension(file_path: str, new_extension: str) -> str:
    """Replace everything after the last dot with ``new_extension``.

    Without a dot the extension is appended.
    """
    stem, dot, _ = file_path.rpartition(".")
    if dot:
        return f"{stem}.{new_extension}"
    return f"{file_path}.{new_extension}"


class _TailwindRenderer:
    """Turns markdown-it tokens into Tailwind-styled HTML."""

    def __init__(self, env: jinja2.Environment) -> None:
        self._env = env
        self._out: list[str] = []
        self._inside_header = False
        self._inside_image = False
        self._inside_thead = False
        self.image_alt_text = ""

    def render(self, tokens: Iterable[Token]) -> str:
        self._walk(tokens)
        return "".join(self._out)

    def _walk(self, tokens: Iterable[Token]) -> None:
        for token in tokens:
            self._handle(token)

    def _handle(self, token: Token) -> None:
        kind = token.type
        if kind == "inline":
            self._walk(token.children or [])
        elif kind in ("paragraph_open", "paragraph_close"):
            if not token.hidden:
                self._out.append(_PARAGRAPH_OPEN if kind == "paragraph_open" else "</p>")
        elif kind == "heading_open":
            if self._inside_header:
                raise ValueError("Nested headers are not allowed")
            self._inside_header = True
            level = int(token.tag[1:])
            css = _HEADING_CLASSES.get(level, _DEFAULT_HEADING_CLASS)
            self._out.append(f'<h{level} class="{css}">')
        elif kind == "heading_close":
            if self._inside_header:
                self._out.append(f"</{token.tag}>")
                self._inside_header = False
        elif kind == "text":
            self._text(token.content)
        elif kind == "image":
            self._image(token)
        elif kind == "link_open":
            self._out.append(
                _LINK_OPEN.format(
                    href=token.attrGet("href") or "",
                    title=token.attrGet("title") or "",
                )
            )
        elif kind == "bullet_list_open":
            self._out.append(_LIST_OPEN)
        elif kind == "ordered_list_open":
            start = token.attrGet("start")
            self._out.append("<ol>\n" if start is None else f'<ol start="{start}">\n')
        elif kind == "fence":
            info = token.info.strip()
            self._code_block(f"language-{info}", token.content)
        elif kind == "code_block":
            self._code_block("language-none", token.content)
        elif kind == "code_inline":
            self._out.append(_INLINE_CODE.format(code=token.content))
        elif kind in ("html_block", "html_inline"):
            self._out.append(token.content)
        elif kind in ("thead_open", "thead_close"):
            self._inside_thead = kind == "thead_open"
            self._out.append(_FIXED_OUTPUT[kind])
        elif kind == "tr_open":
            if not self._inside_thead:
                self._out.append("<tr>")
        elif kind == "tr_close":
            if not self._inside_thead:
                self._out.append("</tr>\n")
        elif kind in _FIXED_OUTPUT:
            self._out.append(_FIXED_OUTPUT[kind])

    def _text(self, text: str) -> None:
        if self._inside_image:
            self.image_alt_text = text
            self._inside_image = False
        else:
            self._out.append(text)

    def _code_block(self, language: str, content: str) -> None:
        self._out.append(_CODE_BLOCK_OPEN.format(language=language))
        self._out.append(content)
        self._out.append("</code></pre>")

    def _image(self, token: Token) -> None:
        self._inside_image = True
        self.image_alt_text = ""
        src = "./static/" + replace_file_extension(token.attrGet("src") or "", "webp")
        alt = token.attrGet("title") or ""
        try:
            rendered = self._env.get_template(IMAGE_TEMPLATE).render(src=src, alt=alt)
        except jinja2.TemplateError:
            rendered = IMAGE_FAILURE
        self._out.append(rendered)
        self._walk(token.children or [])


def parse_markdown_with_tailwind(md_content: str, env: jinja2.Environment) -> str:
    """Render Markdown to HTML decorated with Tailwind classes.

    Images are rendered through the ``partials/image.html`` template of ``env``
    with ``src`` pointing at the WebP copy under ``./static/`` and ``alt`` set
    to the image title.
    """
    return _TailwindRenderer(env).render(_markdown.parse(md_content))