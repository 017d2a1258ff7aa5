from dataclasses import dataclass
from typing import List, Optional, Tuple

from .layout import clamp
from .models import BackgroundShape, BackgroundType, Canvas, StyleBlock, TextBox
from .svg import fmt_number as _num, normalize_color


MAX_PANEL_WIDTH_RATIO = 0.9
ROUNDED_RADIUS = 12.0
BLUR_STD_DEVIATION = 10.0
GRADIENT_TOP_RATIO = 0.8


@dataclass
class Panel:
    """Backing shape drawn behind one text block, in canvas pixels."""

    x: float
    y: float
    width: float
    height: float
    shape: BackgroundShape
    kind: BackgroundType
    color: str
    opacity: float

    @property
    def radius(self) -> float:
        if self.shape == "pill":
            return self.height / 2
        if self.shape == "rounded":
            return ROUNDED_RADIUS
        if self.shape == "circle":
            return min(self.width, self.height) / 2
        return 0.0

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def blur(self) -> float:
        return BLUR_STD_DEVIATION if self.kind == "blur" else 0.0


def panel(box: TextBox, block: StyleBlock, canvas: Canvas) -> Optional[Panel]:
    """
    Size and place the background for a laid-out block, or return None when
    the block has no background.
    """
    if not block.has_background:
        return None

    pad = block.background_padding
    width = min(box.width + 2 * pad, canvas.width * MAX_PANEL_WIDTH_RATIO)
    height = box.height + 2 * pad

    if block.text_anchor == "start":
        left = box.x - pad
    elif block.text_anchor == "end":
        left = box.x + pad - width
    else:
        left = box.x - width / 2
    left = clamp(left, canvas.padding, canvas.width - width - canvas.padding)

    # box.y is the first baseline, so the text's top sits one line higher.
    top = box.center_y - height / 2
    top = clamp(top, canvas.padding, canvas.height - height - canvas.padding)

    return Panel(
        x=left,
        y=top,
        width=width,
        height=height,
        shape=block.background_shape,
        kind=block.background_type,
        color=normalize_color(block.background_color_hex, "#000000"),
        opacity=max(0.0, min(block.background_opacity, 1.0)),
    )


def panel_svg(item: Panel, ident: str) -> Tuple[List[str], str, Optional[str]]:
    """
    Return the `<defs>` entries, the shape element and the id of the blur
    filter meant for it (None unless the panel is blurred).

    Ids are prefixed with `ident` so title and subtitle panels never collide
    inside one document. The filter is not referenced from the element; the
    scene decides whether to apply it.
    """
    defs: List[str] = []

    if item.kind == "gradient":
        gradient_id = f"{ident}-gradient"
        defs.append(
            f'<linearGradient id="{gradient_id}" x1="0" y1="0" x2="0" y2="1">'
            f'<stop offset="0%" stop-color="{item.color}" stop-opacity="{_num(item.opacity * GRADIENT_TOP_RATIO)}"/>'
            f'<stop offset="100%" stop-color="{item.color}" stop-opacity="{_num(item.opacity)}"/>'
            "</linearGradient>"
        )
        paint = f'fill="url(#{gradient_id})"'
    else:
        paint = f'fill="{item.color}" fill-opacity="{_num(item.opacity)}"'

    filter_id = None
    if item.blur:
        filter_id = f"{ident}-blur"
        defs.append(
            f'<filter id="{filter_id}" x="-50%" y="-50%" width="200%" height="200%">'
            f'<feGaussianBlur stdDeviation="{_num(item.blur)}"/>'
            "</filter>"
        )

    if item.shape == "circle":
        cx, cy = item.center
        element = f'<circle cx="{_num(cx)}" cy="{_num(cy)}" r="{_num(item.radius)}" {paint}/>'
    else:
        radius = _num(item.radius)
        element = (
            f'<rect x="{_num(item.x)}" y="{_num(item.y)}" width="{_num(item.width)}" '
            f'height="{_num(item.height)}" rx="{radius}" ry="{radius}" {paint}/>'
        )
    return defs, element, filter_id
