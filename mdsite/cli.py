"""Command-line entry point that builds the whole site."""

from __future__ import annotations

import argparse
import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

import jinja2
import yaml

from .cache import CacheContext
from .config import Config, retrieve_configuration
from .resources import optimize_and_copy_static_folder
from .site import PageType, Site, extract_page_info, split_frontmatter, template_folder_name

logger = logging.getLogger(__name__)

TAILWIND_OUTPUT = Path("static/styles/tailwind.css")


def _template_environment(template_dir: Path) -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(template_dir)),
        autoescape=jinja2.select_autoescape(["html"]),
    )


def build_tailwind(site: Site) -> None:
    """Run ``npx tailwindcss`` in the template directory to produce the stylesheet.

    Raises ``FileNotFoundError`` when the template directory or ``npx`` is
    missing, and ``OSError`` when the build fails.
    """
    output_path = site.configuration.paths.output_dir / TAILWIND_OUTPUT
    working_dir = site.configuration.paths.template_dir

    logger.info("Tailwind build starting")
    logger.info("Output path: %s", output_path)
    logger.info("Working directory: %s", working_dir)

    if not working_dir.exists():
        logger.error("Working directory does not exist: %s", working_dir)
        raise FileNotFoundError(f"Directory not found: {working_dir}")

    if shutil.which("npx") is None:
        logger.error("`npx` not found in PATH!")
        raise FileNotFoundError("npx not found in PATH")

    command = ["npx", "tailwindcss", "-i", "input.css", "-o", str(output_path), "--minify"]
    logger.info("Running command: %s", " ".join(command))
    try:
        result = subprocess.run(command, cwd=working_dir, capture_output=True, check=False)
    except OSError as exc:
        logger.error("Failed to spawn command: %s", exc)
        raise

    logger.info("Command completed with status: %s", result.returncode)
    if result.returncode != 0:
        logger.error("Tailwind build failed")
        logger.error("stdout:\n%s", result.stdout.decode("utf-8", "replace"))
        logger.error("stderr:\n%s", result.stderr.decode("utf-8", "replace"))
        raise OSError("Tailwind build failed")
    logger.info("Tailwind build succeeded")


def _page_type_for(folder: str) -> PageType:
    try:
        return PageType(folder)
    except ValueError:
        return PageType.UNKNOWN


def _collect_pages(site: Site, cache_context: CacheContext) -> None:
    configuration = site.configuration
    entries = sorted(configuration.paths.content_dir.rglob("*"), key=lambda p: p.name, reverse=True)
    for path in entries:
        if path.suffix != ".md" or not path.is_file():
            continue
        if configuration.build.cache:
            if not cache_context.update_file_if_changed(path):
                continue
            logger.info("File %s was changed. Rebuilding", path)
        else:
            logger.info(
                "File %s was not cached. Cache on this build is disabled (check config.yml file)",
                path,
            )

        frontmatter, content = split_frontmatter(path.read_text(encoding="utf-8"))
        page_type = _page_type_for(template_folder_name(path))
        if frontmatter is not None:
            page = extract_page_info(
                configuration.metadata.base_url, path, frontmatter, content, page_type
            )
            site.add_page(page, page_type)


def _render(site: Site, env: jinja2.Environment) -> None:
    if site.index is None:
        logger.error("No index page found in site data")
        labelled = []
    else:
        labelled = [("index page", site.index)]
    labelled += [("page", page) for page in site.pages]
    labelled += [("post", post) for post in site.posts]
    for label, page in labelled:
        try:
            site.generate_page(page, env)
        except (jinja2.TemplateError, OSError, ValueError) as exc:
            logger.error("Failed to generate %s '%s': %s", label, page.name, exc)


def build(config: Config) -> Site:
    """Build the site described by ``config`` and return the pages it collected."""
    paths = config.paths
    cache_context = CacheContext.load_or_default(paths.output_dir / "cache.json")
    site = Site(config)
    logger.info("Start generation for site with base URL: %s", config.metadata.base_url)
    logger.info(
        "Build configuration: \n Minify HTML: %s \n Sitemap generation: %s",
        config.build.minify_html,
        config.build.generate_sitemap,
    )

    env = _template_environment(paths.template_dir)

    static_output = paths.output_dir / "static"
    static_output.mkdir(parents=True, exist_ok=True)
    optimize_and_copy_static_folder(
        paths.static_dir, static_output, paths.output_dir / "static-cache.json"
    )
    paths.output_dir.mkdir(parents=True, exist_ok=True)

    _collect_pages(site, cache_context)
    _render(site, env)

    try:
        build_tailwind(site)
    except OSError as exc:
        logger.info("Skipping Tailwind stylesheet: %s", exc)
    logger.info("Static site generated in '%s'", paths.output_dir)
    logger.debug("Site generated: %s", site)
    return site


def main(argv: Sequence[str] | None = None) -> int:
    """Build the site configured by ``$CONFIG_PATH``; return the exit status."""
    parser = argparse.ArgumentParser(
        prog="mdsite",
        description=(
            "Build a static site from Markdown. The configuration file is read "
            "from $CONFIG_PATH (default ../config.yml)."
        ),
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="log more (repeat for debug output)"
    )
    args = parser.parse_args(argv)
    level = {0: logging.ERROR, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level)

    try:
        build(retrieve_configuration())
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("Build failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())