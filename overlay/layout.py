from typing import List, Tuple

from .models import LINE_HEIGHT_RATIO, Canvas, RenderedLine, StyleBlock, TextAnchor, TextBox
from .text import estimate_width


def clamp(value: float, low: float, high: float) -> float:
    """
    Clamp `value` into `[low, high]`.

    When the range is empty (the thing being placed is bigger than the room
    available) the midpoint is returned, which centres the overflow.
    """
    if low > high:
        return (low + high) / 2
    return max(low, min(value, high))


def horizontal_bounds(anchor: TextAnchor, width: float, canvas: Canvas) -> Tuple[float, float]:
    """Allowed range for the anchor x of a box `width` pixels wide."""
    padding = canvas.padding
    if anchor == "start":
        return padding, canvas.width - width - padding
    if anchor == "end":
        return width + padding, canvas.width - padding
    return width / 2 + padding, canvas.width - width / 2 - padding


def place(
    lines: List[str],
    font_size_px: float,
    block: StyleBlock,
    canvas: Canvas,
) -> TextBox:
    """
    Position wrapped lines on the canvas.

    The requested point is read as the block's anchor x and vertical centre,
    then clamped so the whole box stays inside the canvas padding margin.
    """
    line_height = font_size_px * LINE_HEIGHT_RATIO
    height = len(lines) * line_height
    width = max(
        (estimate_width(line, font_size_px, block.font_weight) for line in lines),
        default=0.0,
    )

    requested_x = canvas.width * block.x_percent / 100
    requested_y = canvas.height * block.y_percent / 100

    x = clamp(requested_x, *horizontal_bounds(block.text_anchor, width, canvas))
    center_y = clamp(
        requested_y,
        height / 2 + canvas.padding,
        canvas.height - height / 2 - canvas.padding,
    )

    first_baseline = center_y - height / 2 + line_height
    return TextBox(
        x=x,
        y=first_baseline,
        width=width,
        height=height,
        line_height=line_height,
        lines=[
            RenderedLine(text=line, baseline_y=first_baseline + index * line_height)
            for index, line in enumerate(lines)
        ],
    )
