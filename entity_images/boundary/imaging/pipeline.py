"""
Derivation pipeline for image variants.

Reads a source raster, resizes it to a variant's dimensions while keeping
the aspect ratio, encodes it in the variant's format and writes it to the
target path. Also produces the fully blurred copy used as the source for
access-gated variants, and removes derived files.

Dependencies: Pillow
System role: Image transform and file materialization
"""

import logging
import tempfile
from pathlib import Path

from PIL import Image, ImageFilter, UnidentifiedImageError

from entity_images.core.exceptions import DecodeError, UnsupportedFormat
from entity_images.core.schema import FileVariantSpec

logger = logging.getLogger(__name__)

BLUR_RADIUS = 20
BLUR_TEMP_PREFIX = "IM_SER_"

# Modes every encoder used here accepts without conversion
_SAFE_MODES = ("RGB", "RGBA", "L", "LA")
_NO_ALPHA_FORMATS = ("JPEG", "BMP")


def target_size(
    source_size: tuple[int, int],
    width: int | None,
    height: int | None,
) -> tuple[int, int]:
    """
    Compute output dimensions preserving the source aspect ratio.

    With one dimension configured, the other follows the source ratio.
    With both, the requested box is clamped: when it is wider than the
    source ratio the width is recomputed from the height, otherwise the
    height is recomputed from the width.

    Args:
        source_size: Source (width, height)
        width: Configured width, None to derive
        height: Configured height, None to derive

    Returns:
        tuple[int, int]: Output (width, height), each at least 1
    """
    source_width, source_height = source_size

    if width is None and height is None:
        return source_width, source_height
    if height is None:
        return width, max(1, round(width * source_height / source_width))
    if width is None:
        return max(1, round(height * source_width / source_height)), height

    if width / height > source_width / source_height:
        return max(1, round(height * source_width / source_height)), height
    return width, max(1, round(width * source_height / source_width))


def _pil_format(fmt: str, path: str) -> str:
    pil_format = Image.registered_extensions().get(f".{fmt.lower()}")
    if pil_format is None or pil_format not in Image.SAVE:
        raise UnsupportedFormat(f"No encoder for image format \"{fmt}\"", path=path)
    return pil_format


def _open(source: str | Path) -> Image.Image:
    try:
        with Image.open(source) as image:
            image.load()
            return image.copy()
    except (UnidentifiedImageError, OSError) as exc:
        raise DecodeError(f"File is not a readable image: {source}", path=str(source)) from exc


class DerivationPipeline:
    """Pillow-backed resize, blur and removal of derived image files."""

    def __init__(self, blur_radius: int = BLUR_RADIUS) -> None:
        self.blur_radius = blur_radius

    def resize(self, source: str | Path, target: str | Path, spec: FileVariantSpec) -> None:
        """
        Write ``source`` resized and re-encoded according to ``spec``.

        Args:
            source: Source image file
            target: Destination path, parent directories are created
            spec: Variant format and dimensions

        Raises:
            DecodeError: If the source cannot be decoded
            UnsupportedFormat: If the target format has no encoder
        """
        pil_format = _pil_format(spec.format, str(target))
        image = _open(source)

        if image.mode not in _SAFE_MODES:
            image = image.convert("RGBA")

        size = target_size(image.size, spec.width, spec.height)
        if size != image.size:
            image = image.resize(size, resample=Image.Resampling.LANCZOS)

        if pil_format in _NO_ALPHA_FORMATS and image.mode not in ("RGB", "L"):
            image = image.convert("RGB")

        target_path = Path(target)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            image.save(target_path, format=pil_format)
        except (KeyError, ValueError) as exc:
            raise UnsupportedFormat(
                f"Can't encode image as \"{spec.format}\"",
                path=str(target_path),
            ) from exc

        logger.debug(
            "Derived image written",
            extra={"target": str(target_path), "variant": spec.name, "size": size},
        )

    def blur_full(self, source: str | Path) -> Path:
        """
        Write a heavily blurred, full-resolution copy of ``source``.

        The caller owns the returned temporary file and removes it.

        Raises:
            DecodeError: If the source cannot be decoded
        """
        image = _open(source)
        if image.mode not in _SAFE_MODES:
            image = image.convert("RGBA")

        blurred = image.filter(ImageFilter.GaussianBlur(radius=self.blur_radius))

        with tempfile.NamedTemporaryFile(prefix=BLUR_TEMP_PREFIX, suffix=".png", delete=False) as tmp:
            result = Path(tmp.name)
        try:
            blurred.save(result, format="PNG")
        except Exception:
            result.unlink(missing_ok=True)
            raise
        return result

    def remove(self, path: str | Path) -> None:
        """Delete ``path`` if it exists."""
        target = Path(path)
        if target.exists():
            target.unlink()
            logger.debug("Derived image removed", extra={"path": str(target)})
