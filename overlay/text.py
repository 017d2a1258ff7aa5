"""
Line wrapping for overlay text.

Widths are estimated as `characters x font size x factor` instead of being
measured from glyphs. The editor preview replicates the same factors, so
changing them changes where lines break in both places.
"""

import re
from typing import Callable, List

from .models import FontWeight, TextTransform


WIDTH_FACTORS = {
    "light": 0.6,
    "regular": 0.6,
    "bold": 0.7,
}

ELLIPSIS = "…"


def width_factor(font_weight: FontWeight) -> float:
    return WIDTH_FACTORS.get(font_weight, WIDTH_FACTORS["regular"])


def estimate_width(text: str, font_size_px: float, font_weight: FontWeight) -> float:
    return len(text) * font_size_px * width_factor(font_weight)


def apply_transform(text: str, transform: TextTransform) -> str:
    if transform == "uppercase":
        return text.upper()
    if transform == "lowercase":
        return text.lower()
    if transform == "capitalize":
        return re.sub(r"\S+", lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)
    return text


def wrap(
    text: str,
    font_size_px: float,
    max_width_px: float,
    max_lines: int,
    font_weight: FontWeight = "regular",
) -> List[str]:
    """
    Break `text` into at most `max_lines` lines.

    Explicit newlines win over width-based wrapping whenever they produce more
    than one non-empty segment. Otherwise words are packed greedily; a word
    that is wider than `max_width_px` on its own still gets a line. Text that
    does not fit into the last allowed line is cut and ends in an ellipsis.
    """
    if max_lines < 1 or not text or not text.strip():
        return []

    manual_lines = [segment.strip() for segment in text.split("\n") if segment.strip()]
    if len(manual_lines) > 1:
        return manual_lines[:max_lines]

    def fits(candidate: str) -> bool:
        return estimate_width(candidate, font_size_px, font_weight) <= max_width_px

    words = text.split()
    lines: List[str] = []
    current = ""
    for index, word in enumerate(words):
        candidate = f"{current} {word}" if current else word
        if not current or fits(candidate):
            current = candidate
            continue
        if len(lines) < max_lines - 1:
            lines.append(current)
            current = word
            continue
        # Last allowed line: take everything that is left and cut it down.
        remainder = " ".join([current] + words[index:])
        current = remainder if fits(remainder) else _ellipsize(remainder, fits)
        break

    if current:
        lines.append(current)
    return lines[:max_lines]


def _ellipsize(line: str, fits: Callable[[str], bool]) -> str:
    words = line.split()
    while len(words) > 1 and not fits(" ".join(words) + ELLIPSIS):
        words.pop()
    head = " ".join(words)
    while len(head) > 1 and not fits(head + ELLIPSIS):
        head = head[:-1]
    return head.rstrip() + ELLIPSIS
