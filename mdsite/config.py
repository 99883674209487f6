"""Site configuration loaded from a YAML file."""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .paths import resolve_environment_variable_path

logger = logging.getLogger(__name__)

CONFIG_PATH_VARIABLE = "CONFIG_PATH"
DEFAULT_CONFIG_PATH = "../config.yml"


@dataclass(frozen=True)
class SiteMetadata:
    """Descriptive information about the site."""

    base_url: str
    author: str
    description: str


@dataclass(frozen=True)
class Paths:
    """Directories used by a build, relative to the configuration file until reconciled."""

    content_dir: Path
    template_dir: Path
    output_dir: Path
    static_dir: Path


@dataclass(frozen=True)
class BuildOptions:
    """Switches controlling how the site is built."""

    minify_html: bool
    generate_sitemap: bool
    cache: bool


@dataclass(frozen=True)
class Config:
    """The complete site configuration."""

    metadata: SiteMetadata
    paths: Paths
    build: BuildOptions


def _section(document: dict[str, Any], name: str) -> dict[str, Any]:
    if name not in document:
        raise ValueError(f"missing configuration section '{name}'")
    value = document[name]
    if not isinstance(value, dict):
        raise ValueError(f"configuration section '{name}' must be a mapping")
    return value


def _field(section: dict[str, Any], section_name: str, key: str, kind: type) -> Any:
    if key not in section:
        raise ValueError(f"missing configuration field '{section_name}.{key}'")
    value = section[key]
    if not isinstance(value, kind):
        raise ValueError(
            f"configuration field '{section_name}.{key}' must be of type {kind.__name__}"
        )
    return value


def _parse_config(document: Any) -> Config:
    if not isinstance(document, dict):
        raise ValueError("configuration document must be a mapping")

    metadata = _section(document, "metadata")
    paths = _section(document, "paths")
    build = _section(document, "build")

    return Config(
        metadata=SiteMetadata(
            **{key: _field(metadata, "metadata", key, str) for key in ("base_url", "author", "description")}
        ),
        paths=Paths(
            **{
                key: Path(_field(paths, "paths", key, str))
                for key in ("content_dir", "template_dir", "output_dir", "static_dir")
            }
        ),
        build=BuildOptions(
            **{key: _field(build, "build", key, bool) for key in ("minify_html", "generate_sitemap", "cache")}
        ),
    )


def load_yaml_config(file_path: str | os.PathLike[str]) -> Config:
    """Read and validate the YAML configuration at ``file_path``.

    Raises ``ValueError`` when a section or field is missing or has the wrong type.
    """
    text = Path(file_path).read_text(encoding="utf-8")
    return _parse_config(yaml.safe_load(text))


def reconcile_configuration_directory_paths(base_path: str | os.PathLike[str], paths: Paths) -> Paths:
    """Resolve every directory of ``paths`` against ``base_path``."""
    base = Path(base_path)
    return Paths(
        content_dir=base / paths.content_dir,
        template_dir=base / paths.template_dir,
        output_dir=base / paths.output_dir,
        static_dir=base / paths.static_dir,
    )


def retrieve_configuration() -> Config:
    """Load the configuration named by ``$CONFIG_PATH`` (default ``../config.yml``).

    Directory paths are made relative to the directory holding the file.
    """
    logger.info("Retrieving config file")
    config_path = resolve_environment_variable_path(CONFIG_PATH_VARIABLE, DEFAULT_CONFIG_PATH)
    logger.debug("%s", config_path)
    config = load_yaml_config(config_path)
    config = dataclasses.replace(
        config,
        paths=reconcile_configuration_directory_paths(config_path.parent, config.paths),
    )
    logger.debug("%s", config)
    return config