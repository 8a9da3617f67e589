"""Image normalization ahead of text recognition.

Every accepted image format is decoded and re-encoded as an RGB PNG, so
the recognizer and the searchable-PDF builder always see one lossless,
consistent raster form. Transparency is flattened onto white.
"""

import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

DEFAULT_DPI = 150.0


class ImagePreprocessingError(Exception):
    """Raised when image bytes cannot be decoded or re-encoded."""


@dataclass(frozen=True)
class NormalizedImage:
    png_bytes: bytes
    width: int
    height: int
    dpi: float

    @property
    def width_points(self) -> float:
        return self.width * 72.0 / self.dpi

    @property
    def height_points(self) -> float:
        return self.height * 72.0 / self.dpi


def normalize_image(image_bytes: bytes) -> NormalizedImage:
    """Decode image bytes and re-encode them as an RGB PNG.

    Multi-frame images (animated GIF) contribute their first frame only.

    Raises:
        ImagePreprocessingError: if the bytes are not a decodable image.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as source:
            source.seek(0)
            rgb = _to_rgb(source)
            dpi = _resolve_dpi(source.info.get("dpi"))
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImagePreprocessingError(f"cannot decode image: {exc}") from exc

    buf = io.BytesIO()
    rgb.save(buf, format="PNG", dpi=(dpi, dpi))
    return NormalizedImage(
        png_bytes=buf.getvalue(),
        width=rgb.width,
        height=rgb.height,
        dpi=dpi,
    )


def _to_rgb(image: Image.Image) -> Image.Image:
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")


def _resolve_dpi(raw: object) -> float:
    if isinstance(raw, tuple) and raw:
        try:
            value = float(raw[0])
        except (TypeError, ValueError):
            return DEFAULT_DPI
        if value > 1:
            return value
    return DEFAULT_DPI
