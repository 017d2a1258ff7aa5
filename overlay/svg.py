import logging
import re
from typing import Optional
from xml.sax.saxutils import escape

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_text(text: str) -> str:
    """Escape `& < > " '` so a line can be embedded in SVG markup."""
    return escape(text, _XML_ENTITIES)


def fmt_number(value: float) -> str:
    """Format a coordinate compactly and identically on every call."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def normalize_color(color_str: Optional[str], default: str) -> str:
    """
    Normalise '#FFF', 'FFFFFF' or '#ffffff' to '#FFFFFF'.
    Falls back to `default` when the value is not a hex colour.
    """
    match = _HEX_COLOR.match((color_str or "").strip())
    if not match:
        if color_str:
            logger.warning("Ignoring invalid colour %r, using %s", color_str, default)
        return default
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits.upper()}"
