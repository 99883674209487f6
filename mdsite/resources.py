"""Copying of static resources, with images resized and converted to WebP."""

from __future__ import annotations

import logging
import math
import os
from pathlib import Path

from PIL import Image

from .cache import CacheContext

logger = logging.getLogger(__name__)

MAX_WIDTH = 1920
MAX_HEIGHT = 1080

_FORMATS_BY_EXTENSION = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "jfif": "JPEG",
    "png": "PNG",
    "apng": "PNG",
    "gif": "GIF",
    "webp": "WEBP",
    "tif": "TIFF",
    "tiff": "TIFF",
    "tga": "TGA",
    "dds": "DDS",
    "bmp": "BMP",
    "ico": "ICO",
    "pbm": "PPM",
    "pgm": "PPM",
    "ppm": "PPM",
    "qoi": "QOI",
}


def _fit_dimensions(width: int, height: int) -> tuple[int, int]:
    ratio = min(MAX_WIDTH / width, MAX_HEIGHT / height)
    return (
        max(math.floor(width * ratio + 0.5), 1),
        max(math.floor(height * ratio + 0.5), 1),
    )


def _has_alpha(image: Image.Image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


def save_optimized_image(image: Image.Image, output_path: str | os.PathLike[str]) -> Path:
    """Scale ``image`` to fit 1920x1080 and write it as WebP beside ``output_path``.

    The extension of ``output_path`` is replaced by ``.webp``; the written path
    is returned.
    """
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA" if _has_alpha(image) else "RGB")
    resized = image.resize(_fit_dimensions(*image.size), Image.Resampling.LANCZOS)
    target = Path(output_path).with_suffix(".webp")
    resized.save(target, format="WEBP", lossless=True)
    return target


def _decode(path: Path) -> tuple[Image.Image, str] | None:
    image_format = _FORMATS_BY_EXTENSION.get(path.suffix.lstrip(".").lower())
    with path.open("rb") as handle:
        if image_format is None:
            return None
        try:
            image = Image.open(handle, formats=[image_format])
            image.load()
        except (OSError, SyntaxError, ValueError):
            return None
    return image, image_format


def optimize_and_copy_static_folder(
    static_path: str | os.PathLike[str],
    static_output_path: str | os.PathLike[str],
    cache_path: str | os.PathLike[str],
) -> None:
    """Copy changed files from ``static_path`` into ``static_output_path``.

    Images are converted to WebP (icons stay ICO); files that cannot be decoded
    as images are skipped with a warning. Subdirectories are processed
    recursively, and unchanged files are skipped according to the cache.
    """
    source = Path(static_path)
    destination = Path(static_output_path)
    cache_context = CacheContext.load_or_default(cache_path)

    if not source.exists():
        raise FileNotFoundError("Static folder does not exist")

    for path in sorted(source.iterdir()):
        if path.is_file():
            target = destination / path.name
            if not cache_context.update_file_if_changed(path):
                logger.info("Skipping already copied file: %s", path)
                continue
            logger.info("Copying/optimizing static file: %s", path)

            decoded = _decode(path)
            if decoded is None:
                logger.warning(
                    "Could not decode the following file as an image (optimization failed): %s",
                    path,
                )
                continue
            image, image_format = decoded
            if image_format == "ICO":
                image.save(target.with_suffix(".ico"), format="ICO", sizes=[image.size])
            else:
                save_optimized_image(image, target)
        elif path.is_dir():
            subfolder = destination / path.name
            subfolder.mkdir(parents=True, exist_ok=True)
            optimize_and_copy_static_folder(path, subfolder, cache_path)