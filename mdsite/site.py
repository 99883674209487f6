"""Pages, posts and the rendering of a site's HTML files."""

from __future__ import annotations

import enum
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jinja2
import yaml

from .config import Config
from .parser import parse_markdown_with_tailwind

FRONTMATTER_DELIMITER = "---"

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _FrontmatterLoader(yaml.SafeLoader):
    """Safe YAML loader that keeps dates as plain strings."""

    yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
        for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }


class PageType(enum.Enum):
    """Kind of page, taken from the folder its Markdown file lives in."""

    INDEX = "index"
    PAGE = "page"
    POST = "post"
    UNKNOWN = "unknown"

    def template_name(self) -> str:
        """Return the template name (without ``.html``) used to render this kind."""
        return "" if self is PageType.UNKNOWN else self.value


@dataclass(frozen=True)
class Frontmatter:
    """Metadata block at the top of a Markdown file."""

    title: str | None = None
    date: str | None = None
    tags: list[str] | None = None
    description: str | None = None


@dataclass
class Page:
    """A page or post of the site together with its Markdown body."""

    page_type: PageType
    name: str
    title: str | None
    url: str | None
    description: str | None
    tags: list[str] | None
    date: str | None
    content: str


@dataclass
class Site:
    """All pages of a site and the configuration used to render them."""

    configuration: Config
    index: Page | None = None
    pages: list[Page] = field(default_factory=list)
    posts: list[Page] = field(default_factory=list)

    def add_page(self, page: Page, page_type: PageType) -> None:
        """File ``page`` under the collection for ``page_type``; unknown pages are dropped."""
        if page_type is PageType.INDEX:
            self.index = page
        elif page_type is PageType.PAGE:
            self.pages.append(page)
        elif page_type is PageType.POST:
            self.posts.append(page)

    def generate_page(self, page: Page, env: jinja2.Environment) -> Path:
        """Render ``page`` through its template into the output directory.

        Returns the path written. Template errors and I/O errors propagate.
        """
        html_output = parse_markdown_with_tailwind(page.content, env)
        metadata = self.configuration.metadata
        context = {
            "title": page.title,
            "date": page.date,
            "content": html_output,
            "author": metadata.author,
            "description": metadata.description,
            "pages": self.pages,
            "posts": self.posts,
            "tags": page.tags,
        }
        template = env.get_template(f"{page.page_type.template_name()}.html")
        rendered = template.render(context)
        if self.configuration.build.minify_html:
            rendered = minify_html(rendered)
        output_path = Path(self.configuration.paths.output_dir) / f"{page.name}.html"
        output_path.write_text(rendered, encoding="utf-8")
        return output_path


def _optional_string(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"frontmatter field '{key}' must be a string")


def _frontmatter_from(data: Any) -> Frontmatter:
    if not isinstance(data, dict):
        raise ValueError("frontmatter must be a mapping")
    tags = data.get("tags")
    if tags is not None and not (
        isinstance(tags, list) and all(isinstance(tag, str) for tag in tags)
    ):
        raise ValueError("frontmatter field 'tags' must be a list of strings")
    return Frontmatter(
        title=_optional_string(data, "title"),
        date=_optional_string(data, "date"),
        tags=tags,
        description=_optional_string(data, "description"),
    )


def split_frontmatter(text: str) -> tuple[Frontmatter | None, str]:
    """Separate a ``---`` delimited YAML block from the Markdown that follows it.

    Returns ``(None, text)`` when the text has no frontmatter block, and
    ``(None, body)`` when the block is empty.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != FRONTMATTER_DELIMITER:
        return None, text
    for position, line in enumerate(lines[1:], start=1):
        if line.rstrip() == FRONTMATTER_DELIMITER:
            matter = "".join(lines[1:position])
            content = "".join(lines[position + 1 :])
            break
    else:
        return None, text
    if not matter.strip():
        return None, content
    data = yaml.load(matter, Loader=_FrontmatterLoader)
    if data is None:
        return None, content
    return _frontmatter_from(data), content


def template_folder_name(path: str | os.PathLike[str]) -> str:
    """Return the name of the folder holding ``path``, which selects its template."""
    name = Path(path).parent.name
    if not name:
        raise ValueError(f"{path} is not inside a named folder")
    return name


def extract_page_info(
    base_url: str,
    path: str | os.PathLike[str],
    frontmatter: Frontmatter,
    content: str,
    page_type: PageType,
) -> Page:
    """Build a :class:`Page` for the Markdown file at ``path``."""
    name = Path(path).stem
    return Page(
        page_type=page_type,
        name=name,
        title=frontmatter.title,
        url=f"{base_url}/{name}.html",
        description=frontmatter.description,
        tags=frontmatter.tags,
        date=frontmatter.date,
        content=content,
    )


_PRESERVED = re.compile(r"<(pre|textarea|script|style)\b.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_COMMENT = re.compile(r"<!--(?!\[if).*?-->", re.DOTALL)
_INTER_TAG_BREAK = re.compile(r">\s*\n\s*<")
_WHITESPACE = re.compile(r"\s+")


def _squeeze(fragment: str) -> str:
    fragment = _COMMENT.sub("", fragment)
    fragment = _INTER_TAG_BREAK.sub("><", fragment)
    return _WHITESPACE.sub(" ", fragment)


def minify_html(html: str) -> str:
    """Drop comments and collapse whitespace outside ``pre``, ``textarea``, ``script`` and ``style``."""
    parts: list[str] = []
    position = 0
    for match in _PRESERVED.finditer(html):
        parts.append(_squeeze(html[position : match.start()]))
        parts.append(match.group(0))
        position = match.end()
    parts.append(_squeeze(html[position:]))
    return "".join(parts).strip()