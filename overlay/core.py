import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .codec import decode_image, encode_png, to_data_url
from .config import OverlaySettings
from .errors import InvalidOverlayInput
from .models import overlay_request_from_dict
from .render import render_overlay

logger = logging.getLogger(__name__)


def load_overlay_config(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise InvalidOverlayInput(f"{path} must contain a JSON object")
    # Asset records nest the config under `overlay_config`.
    return data.get("overlay_config", data)


def apply_overlay(
    image_data: Union[bytes, str],
    overlay_config: Mapping[str, Any],
    settings: Optional[OverlaySettings] = None,
) -> str:
    """
    Decode the base image, burn in the title/subtitle described by a flat
    overlay config and return the result as a PNG data URL.

    This is the seam the asset service calls both for freshly generated
    images and for edits of an existing asset's overlay.
    """
    base_img = decode_image(image_data)
    title, subtitle = overlay_request_from_dict(overlay_config)
    rendered = render_overlay(base_img, title=title, subtitle=subtitle, settings=settings)
    logger.debug("Rendered overlay onto %dx%d image", rendered.width, rendered.height)
    return to_data_url(encode_png(rendered))
