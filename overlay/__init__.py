"""
Text overlay engine for brand marketing creatives.

Modules:
- models: style blocks, canvas and loading from flat overlay configs
- text: text transforms and width-estimated line wrapping
- layout: anchoring and clamping blocks inside the canvas margin
- panels: background shapes behind text blocks
- scene: assembling blocks into one SVG scene
- render: rasterizing the scene and compositing it over the base image
- codec: base64 / data URL image boundary helpers
- core: config-in, data-URL-out entry point for the asset service
"""

from .config import OverlaySettings
from .core import apply_overlay
from .errors import InvalidOverlayInput, OverlayError, OverlayRenderError
from .models import Canvas, StyleBlock, overlay_request_from_dict
from .render import render_overlay

__all__ = [
    "Canvas",
    "InvalidOverlayInput",
    "OverlayError",
    "OverlayRenderError",
    "OverlaySettings",
    "StyleBlock",
    "apply_overlay",
    "overlay_request_from_dict",
    "render_overlay",
]
