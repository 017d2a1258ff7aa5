import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from .errors import InvalidOverlayInput


FontFamily = Literal["sans-serif", "serif", "cursive", "handwritten"]
FontWeight = Literal["light", "regular", "bold"]
TextTransform = Literal["uppercase", "lowercase", "capitalize", "none"]
LetterSpacing = Literal["normal", "wide"]
TextAnchor = Literal["start", "middle", "end"]
BackgroundType = Literal["gradient", "solid", "blur", "shape", "none"]
BackgroundShape = Literal["rectangle", "rounded", "pill", "circle"]
BlockRole = Literal["title", "subtitle"]

FONT_FAMILIES = ("sans-serif", "serif", "cursive", "handwritten")
FONT_WEIGHTS = ("light", "regular", "bold")
TEXT_TRANSFORMS = ("uppercase", "lowercase", "capitalize", "none")
LETTER_SPACINGS = ("normal", "wide")
TEXT_ANCHORS = ("start", "middle", "end")
BACKGROUND_TYPES = ("gradient", "solid", "blur", "shape", "none")
BACKGROUND_SHAPES = ("rectangle", "rounded", "pill", "circle")

LINE_HEIGHT_RATIO = 1.2


@dataclass
class StyleBlock:
    """
    Styling and placement for one text block (the title or the subtitle).

    Percent fields are relative to the decoded base image, never to a
    scaled preview of it.
    """

    text: str
    font_family: FontFamily = "sans-serif"
    font_weight: FontWeight = "regular"
    text_transform: TextTransform = "none"
    letter_spacing: LetterSpacing = "normal"
    color_hex: str = "#FFFFFF"
    x_percent: float = 50.0
    y_percent: float = 50.0
    text_anchor: TextAnchor = "middle"
    max_width_percent: float = 80.0
    max_lines: int = 3
    opacity: float = 1.0
    font_size_px: Optional[float] = None
    background_type: BackgroundType = "none"
    background_color_hex: Optional[str] = None
    background_opacity: float = 0.6
    background_shape: BackgroundShape = "rectangle"
    background_padding: float = 24.0
    # Line breaks computed by a preview tool; used instead of auto-wrapping.
    lines: Optional[List[str]] = None

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip()) or bool(
            self.lines and any(line.strip() for line in self.lines)
        )

    @property
    def has_background(self) -> bool:
        return self.background_type != "none" and bool(self.background_color_hex)


@dataclass(frozen=True)
class Canvas:
    width: int
    height: int

    @property
    def padding(self) -> float:
        """Margin every block is kept inside of."""
        return max(30.0, 0.03 * min(self.width, self.height))

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class RenderedLine:
    text: str
    baseline_y: float


@dataclass
class TextBox:
    """
    Placed block: `x` is the anchor x after clamping and `y` the first
    line's baseline, both in canvas pixels.
    """

    x: float
    y: float
    width: float
    height: float
    line_height: float
    lines: List[RenderedLine] = field(default_factory=list)

    @property
    def top(self) -> float:
        return self.y - self.line_height

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2


def default_font_size(role: BlockRole, image_width: int) -> float:
    if role == "title":
        return max(56.0, min(image_width / 10, 120.0))
    return max(32.0, min(image_width / 16, 64.0))


_MARKDOWN_PATTERNS = [
    re.compile(r"\*\*(.*?)\*\*"),
    re.compile(r"\*(.*?)\*"),
    re.compile(r"__(.*?)__"),
    re.compile(r"_(.*?)_"),
    re.compile(r"~~(.*?)~~"),
    re.compile(r"`(.*?)`"),
]


def strip_markdown(text: str) -> str:
    """Drop inline markdown emphasis that copy generators like to add."""
    if not text:
        return ""
    for pattern in _MARKDOWN_PATTERNS:
        text = pattern.sub(r"\1", text)
    return text.strip()


_BLOCK_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "title": {"font_weight": "bold", "y_percent": 40.0},
    "subtitle": {"font_weight": "regular", "y_percent": 60.0},
}

# Keys shared by both blocks in older configs, used when the per-block key is absent.
_LEGACY_KEYS = {
    "font_family": "font_family",
    "font_weight": "font_weight",
    "font_transform": "text_transform",
    "letter_spacing": "letter_spacing",
    "text_color_hex": "color_hex",
    "text_anchor": "text_anchor",
    "x_percent": "x_percent",
    "y_percent": "y_percent",
    "max_width_percent": "max_width_percent",
    "opacity": "opacity",
}

_PREFIXED_KEYS = {
    "font_family": "font_family",
    "font_weight": "font_weight",
    "font_transform": "text_transform",
    "letter_spacing": "letter_spacing",
    "color_hex": "color_hex",
    "x_percent": "x_percent",
    "y_percent": "y_percent",
    "text_anchor": "text_anchor",
    "max_width_percent": "max_width_percent",
    "max_lines": "max_lines",
    "opacity": "opacity",
    "font_size": "font_size_px",
    "overlay_background_type": "background_type",
    "overlay_background_color": "background_color_hex",
    "overlay_background_opacity": "background_opacity",
    "overlay_background_shape": "background_shape",
    "overlay_background_padding": "background_padding",
    "lines": "lines",
}

_CHOICES = {
    "font_family": FONT_FAMILIES,
    "font_weight": FONT_WEIGHTS,
    "text_transform": TEXT_TRANSFORMS,
    "letter_spacing": LETTER_SPACINGS,
    "text_anchor": TEXT_ANCHORS,
    "background_type": BACKGROUND_TYPES,
    "background_shape": BACKGROUND_SHAPES,
}

_FLOAT_FIELDS = {
    "x_percent",
    "y_percent",
    "max_width_percent",
    "opacity",
    "font_size_px",
    "background_opacity",
    "background_padding",
}


def style_block_from_dict(data: Mapping[str, Any], role: BlockRole) -> StyleBlock:
    """
    Build one block from a flat overlay config using `{role}_*` keys,
    falling back to the shared legacy keys and then to the block defaults.
    """
    if role == "title":
        text = data.get("title") or data.get("text") or ""
    else:
        text = data.get("subtitle") or ""

    values: Dict[str, Any] = dict(_BLOCK_DEFAULTS[role])
    for legacy_key, attr in _LEGACY_KEYS.items():
        if data.get(legacy_key) is not None:
            values[attr] = data[legacy_key]
    for suffix, attr in _PREFIXED_KEYS.items():
        value = data.get(f"{role}_{suffix}")
        if value is not None:
            values[attr] = value

    for attr, choices in _CHOICES.items():
        if attr in values and values[attr] not in choices:
            raise InvalidOverlayInput(
                f"{role}: unsupported {attr} {values[attr]!r}; expected one of {', '.join(choices)}"
            )

    try:
        for attr in _FLOAT_FIELDS:
            if attr in values:
                values[attr] = float(values[attr])
        if "max_lines" in values:
            values["max_lines"] = int(values["max_lines"])
    except (TypeError, ValueError) as exc:
        raise InvalidOverlayInput(f"{role}: {exc}") from exc

    if values.get("max_lines", 1) < 1:
        raise InvalidOverlayInput(f"{role}: max_lines must be at least 1")

    lines = values.pop("lines", None)
    if lines is not None:
        if not isinstance(lines, (list, tuple)):
            raise InvalidOverlayInput(f"{role}: lines must be a list of strings")
        lines = [strip_markdown(str(line)) for line in lines]
        lines = [line for line in lines if line.strip()]

    return StyleBlock(text=strip_markdown(str(text)), lines=lines or None, **values)


def overlay_request_from_dict(
    data: Mapping[str, Any],
) -> Tuple[Optional[StyleBlock], Optional[StyleBlock]]:
    """Split a flat overlay config into its (title, subtitle) blocks."""
    title = style_block_from_dict(data, "title")
    subtitle = style_block_from_dict(data, "subtitle")
    return (
        title if title.has_text else None,
        subtitle if subtitle.has_text else None,
    )
