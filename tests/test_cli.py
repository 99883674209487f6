import shutil
import subprocess
from pathlib import Path

import pytest
from PIL import Image

from mdsite.cli import build, build_tailwind, main
from mdsite.config import BuildOptions, Config, Paths, SiteMetadata, load_yaml_config, reconcile_configuration_directory_paths
from mdsite.site import Site

CONFIG_TEMPLATE = """\
metadata:
  base_url: https://example.com
  author: Jane Doe
  description: A test site
paths:
  content_dir: content
  template_dir: templates
  output_dir: output
  static_dir: static
build:
  minify_html: false
  generate_sitemap: false
  cache: {cache}
"""

TEMPLATES = {
    "index.html": "<h0>{{ title }}</h0>{{ content | safe }}<ul>{% for post in posts %}<li>{{ post.title }}</li>{% endfor %}</ul>",
    "page.html": "<main>{{ title }}{{ content | safe }}</main>",
    "post.html": "<article>{{ title }}{{ content | safe }}</article>",
    "partials/image.html": '<img src="{{ src }}" alt="{{ alt }}">',
}

CONTENT = {
    "index/index.md": "---\ntitle: Home\n---\n# Welcome\n",
    "page/about.md": "---\ntitle: About\n---\nAbout us\n",
    "post/a.md": "---\ntitle: Alpha\n---\nFirst\n",
    "post/b.md": '---\ntitle: Beta\n---\n![cat](img/cat.png "A cat")\n',
    "post/draft.md": "No frontmatter here\n",
}


@pytest.fixture(autouse=True)
def _no_npx(monkeypatch):
    monkeypatch.setattr(shutil, "which", lambda name: None)


def _project(tmp_path: Path, cache: bool = False) -> Path:
    for name, text in TEMPLATES.items():
        target = tmp_path / "templates" / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    for name, text in CONTENT.items():
        target = tmp_path / "content" / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    static = tmp_path / "static"
    static.mkdir()
    Image.new("RGB", (4, 4), (10, 20, 30)).save(static / "logo.png")
    (static / "notes.txt").write_text("not an image", encoding="utf-8")
    config_path = tmp_path / "config.yml"
    config_path.write_text(CONFIG_TEMPLATE.format(cache=str(cache).lower()), encoding="utf-8")
    return config_path


def _load(config_path: Path) -> Config:
    config = load_yaml_config(config_path)
    return Config(
        config.metadata,
        reconcile_configuration_directory_paths(config_path.parent, config.paths),
        config.build,
    )


def _site(tmp_path: Path) -> Site:
    templates = tmp_path / "templates"
    templates.mkdir(exist_ok=True)
    return Site(
        Config(
            SiteMetadata("https://example.com", "Jane Doe", "A test site"),
            Paths(tmp_path / "content", templates, tmp_path / "output", tmp_path / "static"),
            BuildOptions(False, False, False),
        )
    )


def test_build_writes_all_pages(tmp_path):
    site = build(_load(_project(tmp_path)))
    output = tmp_path / "output"
    assert site.index is not None and site.index.title == "Home"
    assert [page.name for page in site.pages] == ["about"]
    assert [post.name for post in site.posts] == ["b", "a"]
    for name in ("index", "about", "a", "b"):
        assert (output / f"{name}.html").is_file()
    assert not (output / "draft.html").exists()
    index_html = (output / "index.html").read_text(encoding="utf-8")
    assert "<li>Beta</li><li>Alpha</li>" in index_html
    assert "Welcome</h1>" in index_html
    assert "./static/img/cat.webp" in (output / "b.html").read_text(encoding="utf-8")
    assert (output / "static" / "logo.webp").is_file()
    assert not (output / "static" / "notes.txt").exists()


def test_build_with_cache_skips_unchanged_files(tmp_path):
    config = _load(_project(tmp_path, cache=True))
    first = build(config)
    assert len(first.posts) == 2
    assert (tmp_path / "output" / "cache.json").is_file()
    second = build(config)
    assert second.posts == []
    assert second.index is None
    assert (tmp_path / "output" / "index.html").is_file()


def test_build_requires_static_folder(tmp_path):
    config = _load(_project(tmp_path))
    shutil.rmtree(tmp_path / "static")
    with pytest.raises(FileNotFoundError):
        build(config)


def test_build_tailwind_missing_working_directory(tmp_path):
    site = _site(tmp_path)
    (tmp_path / "templates").rmdir()
    with pytest.raises(FileNotFoundError):
        build_tailwind(site)


def test_build_tailwind_missing_npx(tmp_path):
    with pytest.raises(FileNotFoundError, match="npx"):
        build_tailwind(_site(tmp_path))


def test_build_tailwind_runs_command(tmp_path, monkeypatch):
    calls = []

    def fake_run(command, **kwargs):
        calls.append((command, kwargs))
        return subprocess.CompletedProcess(command, 0, b"", b"")

    monkeypatch.setattr(shutil, "which", lambda name: "/usr/bin/npx")
    monkeypatch.setattr(subprocess, "run", fake_run)
    site = _site(tmp_path)
    build_tailwind(site)
    command, kwargs = calls[0]
    expected_output = tmp_path / "output" / "static" / "styles" / "tailwind.css"
    assert command == ["npx", "tailwindcss", "-i", "input.css", "-o", str(expected_output), "--minify"]
    assert kwargs["cwd"] == tmp_path / "templates"


def test_build_tailwind_failure(tmp_path, monkeypatch):
    monkeypatch.setattr(shutil, "which", lambda name: "/usr/bin/npx")
    monkeypatch.setattr(
        subprocess, "run", lambda command, **kwargs: subprocess.CompletedProcess(command, 1, b"", b"boom")
    )
    with pytest.raises(OSError, match="Tailwind build failed"):
        build_tailwind(_site(tmp_path))


def test_main_builds_from_config_path(tmp_path, monkeypatch):
    monkeypatch.setenv("CONFIG_PATH", str(_project(tmp_path)))
    assert main([]) == 0
    assert (tmp_path / "output" / "about.html").is_file()


def test_main_reports_missing_config(tmp_path, monkeypatch):
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "absent.yml"))
    assert main([]) == 1