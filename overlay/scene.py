from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .config import OverlaySettings
from .layout import place
from .models import BlockRole, Canvas, FontFamily, StyleBlock, TextBox, default_font_size
from .panels import Panel, panel, panel_svg
from .svg import escape_text, fmt_number, normalize_color
from .text import apply_transform, wrap


FONT_WEIGHT_VALUES = {"light": "300", "regular": "400", "bold": "700"}
WIDE_LETTER_SPACING = "0.15em"
TEXT_SHADOW_ID = "textShadow"


@dataclass(frozen=True)
class DropShadow:
    std_deviation: float = 3.0
    dx: float = 2.0
    dy: float = 2.0
    opacity: float = 0.6

    def filter_svg(self, filter_id: str) -> str:
        return (
            f'<filter id="{filter_id}" x="-50%" y="-50%" width="200%" height="200%">'
            f'<feGaussianBlur in="SourceAlpha" stdDeviation="{fmt_number(self.std_deviation)}"/>'
            f'<feOffset dx="{fmt_number(self.dx)}" dy="{fmt_number(self.dy)}" result="offsetblur"/>'
            '<feComponentTransfer result="shadow">'
            f'<feFuncA type="linear" slope="{fmt_number(self.opacity)}"/>'
            "</feComponentTransfer>"
            '<feMerge><feMergeNode in="shadow"/><feMergeNode in="SourceGraphic"/></feMerge>'
            "</filter>"
        )


TEXT_SHADOW = DropShadow()


@dataclass
class PlacedBlock:
    """A block after wrapping, layout and background sizing."""

    role: BlockRole
    block: StyleBlock
    font_size_px: float
    box: TextBox
    panel: Optional[Panel] = None


@dataclass
class SceneLayer:
    """
    Elements that rasterize together. `blur` and `shadow` mirror the SVG
    filter named by `filter_id` so a rasterizer without filter support can
    reproduce it.
    """

    name: str
    elements: List[str]
    filter_id: Optional[str] = None
    blur: float = 0.0
    shadow: Optional[DropShadow] = None

    def to_svg(self, filters: bool = True) -> str:
        body = "\n    ".join(self.elements)
        if filters and self.filter_id:
            return f'<g filter="url(#{self.filter_id})">\n    {body}\n  </g>'
        return body


@dataclass
class Scene:
    canvas: Canvas
    defs: List[str] = field(default_factory=list)
    layers: List[SceneLayer] = field(default_factory=list)
    blocks: Dict[str, PlacedBlock] = field(default_factory=dict)

    def to_svg(self, layers: Optional[Iterable[SceneLayer]] = None, filters: bool = True) -> str:
        """
        Serialise the scene, or only `layers` of it, as one SVG document in
        canvas pixel coordinates. With `filters=False` the layers are emitted
        without their filter references.
        """
        selected = self.layers if layers is None else list(layers)
        width, height = self.canvas.width, self.canvas.height
        parts = [
            f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
            'xmlns="http://www.w3.org/2000/svg">',
            "  <defs>",
        ]
        parts.extend(f"    {entry}" for entry in self.defs)
        parts.append("  </defs>")
        parts.extend(f"  {layer.to_svg(filters=filters)}" for layer in selected)
        parts.append("</svg>")
        return "\n".join(parts)


def resolve_font_family(family: FontFamily, settings: OverlaySettings) -> str:
    # No script faces are installed, cursive and handwritten use the serif stack.
    if family in ("serif", "cursive", "handwritten"):
        return settings.serif_fonts
    return settings.sans_serif_fonts


def shape_lines(block: StyleBlock, font_size_px: float, canvas: Canvas) -> List[str]:
    """
    Transform and wrap a block's text; preset `lines` bypass wrapping unless
    they are all blank.
    """
    lines = [
        apply_transform(line.strip(), block.text_transform)
        for line in block.lines or []
        if line.strip()
    ]
    if lines:
        return lines[: block.max_lines]
    text = apply_transform(block.text, block.text_transform)
    max_width = canvas.width * block.max_width_percent / 100
    return wrap(text, font_size_px, max_width, block.max_lines, block.font_weight)


def layout_block(role: BlockRole, block: StyleBlock, canvas: Canvas) -> Optional[PlacedBlock]:
    """Wrap, place and size the background of one block; None if it has no text."""
    font_size = block.font_size_px or default_font_size(role, canvas.width)
    lines = shape_lines(block, font_size, canvas)
    if not lines:
        return None
    box = place(lines, font_size, block, canvas)
    return PlacedBlock(
        role=role,
        block=block,
        font_size_px=font_size,
        box=box,
        panel=panel(box, block, canvas),
    )


def _text_elements(placed: PlacedBlock, opacity: float, settings: OverlaySettings) -> List[str]:
    block = placed.block
    attrs = (
        f'font-family="{escape_text(resolve_font_family(block.font_family, settings))}" '
        f'font-size="{fmt_number(placed.font_size_px)}" '
        f'font-weight="{FONT_WEIGHT_VALUES[block.font_weight]}" '
        f'fill="{normalize_color(block.color_hex, "#FFFFFF")}" '
        f'text-anchor="{block.text_anchor}" '
        f'opacity="{fmt_number(opacity)}"'
    )
    if block.letter_spacing == "wide":
        attrs += f' letter-spacing="{WIDE_LETTER_SPACING}"'
    return [
        f'<text x="{fmt_number(placed.box.x)}" y="{fmt_number(line.baseline_y)}" {attrs}>'
        f"{escape_text(line.text)}</text>"
        for line in placed.box.lines
    ]


def build_scene(
    canvas: Canvas,
    title: Optional[StyleBlock] = None,
    subtitle: Optional[StyleBlock] = None,
    settings: Optional[OverlaySettings] = None,
) -> Scene:
    """
    Lay out both blocks independently and assemble them into one scene.

    Layers are ordered so both backgrounds sit beneath both text blocks:
    title panel, subtitle panel, title text, subtitle text.
    """
    settings = settings or OverlaySettings()
    scene = Scene(canvas=canvas, defs=[TEXT_SHADOW.filter_svg(TEXT_SHADOW_ID)])

    placed_blocks: List[PlacedBlock] = []
    for role, block in (("title", title), ("subtitle", subtitle)):
        if block is None:
            continue
        placed = layout_block(role, block, canvas)
        if placed is not None:
            scene.blocks[role] = placed
            placed_blocks.append(placed)

    for placed in placed_blocks:
        if placed.panel is None:
            continue
        ident = f"{placed.role}-panel"
        defs, element, filter_id = panel_svg(placed.panel, ident)
        scene.defs.extend(defs)
        scene.layers.append(
            SceneLayer(name=ident, elements=[element], filter_id=filter_id, blur=placed.panel.blur)
        )

    for placed in placed_blocks:
        opacity = placed.block.opacity
        if placed.role == "subtitle":
            opacity *= settings.subtitle_opacity_factor
        opacity = max(0.0, min(opacity, 1.0))
        scene.layers.append(
            SceneLayer(
                name=f"{placed.role}-text",
                elements=_text_elements(placed, opacity, settings),
                filter_id=TEXT_SHADOW_ID,
                shadow=TEXT_SHADOW,
            )
        )

    return scene
