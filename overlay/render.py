import io
import logging
from typing import Optional

import cairosvg
from PIL import Image, ImageFilter

from .config import OverlaySettings
from .errors import InvalidOverlayInput, OverlayRenderError
from .models import Canvas, StyleBlock
from .scene import DropShadow, Scene, build_scene

logger = logging.getLogger(__name__)


def rasterize(svg: str, canvas: Canvas, scale: float = 1.0) -> Image.Image:
    """
    Render an SVG document to an RGBA image of exactly `canvas.size`.

    With `scale > 1` the document is rendered larger and downsampled, which
    gives smoother glyph edges than rendering at the target size.
    """
    width = max(1, round(canvas.width * scale))
    height = max(1, round(canvas.height * scale))
    png_bytes = cairosvg.svg2png(
        bytestring=svg.encode("utf-8"),
        output_width=width,
        output_height=height,
    )
    with Image.open(io.BytesIO(png_bytes)) as raster:
        layer = raster.convert("RGBA")
    if layer.size != canvas.size:
        layer = layer.resize(canvas.size, Image.LANCZOS)
    return layer


def drop_shadow(layer: Image.Image, shadow: DropShadow) -> Image.Image:
    """Black shadow built from the layer's alpha: scaled, blurred, then offset."""
    alpha = layer.getchannel("A")
    alpha = alpha.point(lambda value: round(value * shadow.opacity))
    alpha = alpha.filter(ImageFilter.GaussianBlur(shadow.std_deviation))

    shifted = Image.new("L", layer.size, 0)
    shifted.paste(alpha, (round(shadow.dx), round(shadow.dy)))

    result = Image.new("RGBA", layer.size, (0, 0, 0, 0))
    result.putalpha(shifted)
    return result


def _blur(layer: Image.Image, std_deviation: float) -> Image.Image:
    # Blur premultiplied so transparent pixels don't darken the edges.
    blurred = layer.convert("RGBa").filter(ImageFilter.GaussianBlur(std_deviation))
    return blurred.convert("RGBA")


def _render_layers(scene: Scene, scale: float) -> Image.Image:
    overlay = Image.new("RGBA", scene.canvas.size, (0, 0, 0, 0))
    for layer in scene.layers:
        raster = rasterize(scene.to_svg([layer], filters=False), scene.canvas, scale)
        if layer.blur:
            raster = _blur(raster, layer.blur)
        if layer.shadow is not None:
            overlay = Image.alpha_composite(overlay, drop_shadow(raster, layer.shadow))
        overlay = Image.alpha_composite(overlay, raster)
    return overlay


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info)


def composite(
    base_image: Image.Image,
    scene: Scene,
    settings: Optional[OverlaySettings] = None,
) -> Image.Image:
    """
    Rasterize `scene` and alpha-composite it over `base_image`.

    The layers are rendered at `settings.raster_density` with the shadow and
    blur effects applied on the bitmap. If that fails the whole SVG document
    is rendered once at the base image size instead, trading effect fidelity
    for a usable image.
    """
    settings = settings or OverlaySettings()
    if base_image.size != scene.canvas.size:
        raise OverlayRenderError(
            f"Scene is {scene.canvas.width}x{scene.canvas.height} but the base image is "
            f"{base_image.width}x{base_image.height}"
        )

    try:
        base = base_image.convert("RGBA")
    except (OSError, ValueError) as exc:
        logger.error("Could not read base image for overlay: %s", exc)
        raise OverlayRenderError(f"Failed to read base image: {exc}") from exc

    try:
        overlay = _render_layers(scene, settings.raster_scale)
    except Exception as exc:
        logger.warning(
            "High-density overlay rendering failed, compositing the scene directly: %s", exc
        )
        try:
            overlay = rasterize(scene.to_svg(), scene.canvas)
        except Exception as fallback_exc:
            logger.error("Overlay rasterization failed: %s", fallback_exc)
            raise OverlayRenderError(
                f"Failed to rasterize text overlay: {fallback_exc}"
            ) from fallback_exc

    result = Image.alpha_composite(base, overlay)
    return result if _has_alpha(base_image) else result.convert("RGB")


def render_overlay(
    base_image: Image.Image,
    title: Optional[StyleBlock] = None,
    subtitle: Optional[StyleBlock] = None,
    settings: Optional[OverlaySettings] = None,
) -> Image.Image:
    """
    Burn the title and subtitle blocks into `base_image`.

    Either block may be None or empty; the other is laid out exactly as it
    would be on its own. At least one of them must carry text.
    """
    title = title if title is not None and title.has_text else None
    subtitle = subtitle if subtitle is not None and subtitle.has_text else None
    if title is None and subtitle is None:
        raise InvalidOverlayInput("Title or subtitle text is required for overlay")

    canvas = Canvas(width=base_image.width, height=base_image.height)
    scene = build_scene(canvas, title=title, subtitle=subtitle, settings=settings)
    if not scene.blocks:
        raise InvalidOverlayInput("Overlay has no visible text to render")

    for role, placed in scene.blocks.items():
        logger.info(
            "Overlay %s: %d line(s) %r at (%.1f, %.1f), font %.1fpx, image %dx%d",
            role,
            len(placed.box.lines),
            [line.text for line in placed.box.lines],
            placed.box.x,
            placed.box.y,
            placed.font_size_px,
            canvas.width,
            canvas.height,
        )

    return composite(base_image, scene, settings)
