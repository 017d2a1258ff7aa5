import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import OverlayError


# Fonts installed on the render hosts; the first available one is used.
DEFAULT_SANS_SERIF_FONTS = "DejaVu Sans, Liberation Sans, sans-serif"
DEFAULT_SERIF_FONTS = "DejaVu Serif, Liberation Serif, serif"


@dataclass(frozen=True)
class OverlaySettings:
    """
    Rendering knobs that are deployment choices rather than per-request style.

    `raster_density` is in DPI relative to the 72 DPI scene, so 288 renders
    the vector layers at 4x before downsampling to the base image size.
    """

    raster_density: float = 288.0
    subtitle_opacity_factor: float = 1.0
    sans_serif_fonts: str = DEFAULT_SANS_SERIF_FONTS
    serif_fonts: str = DEFAULT_SERIF_FONTS

    @property
    def raster_scale(self) -> float:
        return max(self.raster_density / 72.0, 1.0)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OverlaySettings":
        env = os.environ if environ is None else environ
        try:
            return cls(
                raster_density=float(env.get("OVERLAY_RASTER_DENSITY", cls.raster_density)),
                subtitle_opacity_factor=float(
                    env.get("OVERLAY_SUBTITLE_OPACITY_FACTOR", cls.subtitle_opacity_factor)
                ),
                sans_serif_fonts=env.get("OVERLAY_SANS_SERIF_FONTS") or DEFAULT_SANS_SERIF_FONTS,
                serif_fonts=env.get("OVERLAY_SERIF_FONTS") or DEFAULT_SERIF_FONTS,
            )
        except ValueError as exc:
            raise OverlayError(f"Invalid overlay setting: {exc}") from exc
