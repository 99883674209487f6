# mdsite

A small static site generator. Pages are written in Markdown with YAML
front matter, rendered through Jinja2 templates, and styled with Tailwind
utility classes. Static images are resized and converted to WebP, and
caches skip Markdown and static files that have not changed since the
last build.

## Installation

```
pip install .
```

The stylesheet is built with `npx tailwindcss`, run in the template
directory with `input.css` as its input, so Node.js and Tailwind must be
available on `PATH` if you want it generated. Without them the HTML is
still produced and the skipped stylesheet is logged.

## Configuration

The site is described by a YAML file. Its location is read from the
`CONFIG_PATH` environment variable; if it is unset, `../config.yml`
relative to the current directory is used. Directory paths are resolved
relative to the directory holding the configuration file. Every key below
is required; a missing key or a value of the wrong type is an error.

```yaml
metadata:
  base_url: "https://blog.example.com"
  author: "Jane Doe"
  description: "Notes and articles"

paths:
  content_dir: content
  template_dir: templates
  output_dir: output
  static_dir: static

build:
  minify_html: true
  generate_sitemap: false
  cache: true
```

## Content layout

The folder containing a Markdown file decides what kind of page it is and
which template renders it:

| Folder                | Page type | Template     |
|-----------------------|-----------|--------------|
| `<content_dir>/index` | index     | `index.html` |
| `<content_dir>/page`  | page      | `page.html`  |
| `<content_dir>/post`  | post      | `post.html`  |

Markdown files in other folders, and files without (or with empty) front
matter, are not rendered. Front matter may carry `title`, `date`, `tags`
(a list of strings) and `description`; dates are kept as written:

```markdown
---
title: Hello
date: 2024-01-01
tags: [intro]
description: The first post
---

# Hello

Some text with an image: ![](photos/cat.png "A cat")
```

Markdown is parsed as CommonMark with tables and strikethrough. Headings,
paragraphs, bullet lists, links, code blocks and inline code get Tailwind
classes. Images are referenced relative to the static directory; each is
rendered through the `partials/image.html` template with `src` set to the
WebP copy under `./static/` and `alt` set to the image's title. If that
template cannot be rendered, an HTML comment is written in its place.

Templates receive `title`, `date`, `content`, `author`, `description`,
`tags`, and the lists `pages` and `posts`, each entry of which has `name`,
`title`, `url` (`<base_url>/<name>.html`), `description`, `tags` and
`date`.

## Building

```
CONFIG_PATH=site/config.yml mdsite
```

Pass `-v` for progress messages and `-vv` for debug output. The command
exits with status 1 if the configuration cannot be loaded or the static
directory is missing.

Each page is written to `<output_dir>/<name>.html`, minified when
`minify_html` is set. Files in the static directory are written under
`<output_dir>/static`, keeping subfolders: images are scaled to fit within
1920x1080 and saved as lossless WebP, `.ico` files stay icons, and files
that cannot be decoded as images are skipped with a warning. The
stylesheet goes to `<output_dir>/static/styles/tailwind.css`.

## Caching

Static files are always checked against `<output_dir>/static-cache.json`.
When `build.cache` is true, Markdown files are checked against
`<output_dir>/cache.json`. A file counts as unchanged when either its
modification time or its content hash matches the cached entry, and an
unchanged file is skipped.

## What it does not do

- No sitemap is produced; `generate_sitemap` is read and logged only.
- With the Markdown cache enabled, skipped pages are not collected, so the
  `pages` and `posts` lists given to templates hold only the pages rebuilt
  in that run.
- Non-image static files (CSS, fonts, scripts) are not copied.

## Using it from Python

```python
from mdsite.config import load_yaml_config, reconcile_configuration_directory_paths
from mdsite.cli import build
import dataclasses

config = load_yaml_config("site/config.yml")
config = dataclasses.replace(
    config, paths=reconcile_configuration_directory_paths("site", config.paths)
)
site = build(config)
```

`mdsite.config.retrieve_configuration()` does the same lookup and path
resolution as the command. `mdsite.parser.parse_markdown_with_tailwind`
turns a Markdown string into Tailwind-classed HTML on its own, given a
Jinja2 environment that holds the `partials/image.html` template.
`mdsite.site.split_frontmatter` separates front matter from a Markdown
body, and `mdsite.site.minify_html` collapses whitespace and drops comments
outside `pre`, `textarea`, `script` and `style`.