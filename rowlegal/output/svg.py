"""
SVG export of cell placements.

The document uses the placement coordinates directly: no scaling, and the
y axis is not flipped, so the SVG user space is the layout space.
"""

import logging
from pathlib import Path
from typing import Iterable, Union

from ..layout.abstraction import Rectangle

logger = logging.getLogger(__name__)

COLORS = {
    "white": "white",
    "black": "black",
    "red": "red",
    "green": "green",
    "blue": "blue",
}


def _fmt(value: float) -> str:
    """Format a coordinate without a trailing '.0' for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _rect_element(rect: Rectangle, fill: str = "white") -> str:
    if fill not in COLORS:
        available = ", ".join(sorted(COLORS))
        raise ValueError(f"Unknown fill color '{fill}'. Available: {available}")
    return (
        f'    <rect x="{_fmt(rect.x)}" y="{_fmt(rect.y)}" '
        f'width="{_fmt(rect.width)}" height="{_fmt(rect.height)}" '
        f'fill="{COLORS[fill]}"/>'
    )


def render_svg(boundary: Rectangle, rectangles: Iterable[Rectangle], fill: str = "red") -> str:
    """Render the boundary (white) and every rectangle (``fill``) as an SVG document.

    Args:
        boundary: Canvas rectangle; sets the document width and height
        rectangles: Cells to draw, one <rect> each, in order
        fill: Palette color for the cells

    Returns:
        SVG string
    """
    svg_parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" version="1.1" baseProfile="full" '
        f'width="{_fmt(boundary.width)}" height="{_fmt(boundary.height)}">',
        _rect_element(boundary),
    ]
    svg_parts.extend(_rect_element(rect, fill) for rect in rectangles)
    svg_parts.append("</svg>")
    return "\n".join(svg_parts) + "\n"


def write_svg(
    path: Union[str, Path],
    boundary: Rectangle,
    rectangles: Iterable[Rectangle],
    fill: str = "red",
) -> Path:
    """
    Write an SVG document for a cell set.

    Returns:
        Path to the written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_svg(boundary, rectangles, fill))
    logger.info(f"Saved SVG: {path}")
    return path
