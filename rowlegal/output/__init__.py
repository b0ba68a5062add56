"""Output writers for cell placements."""

from .svg import render_svg, write_svg, COLORS

__all__ = ["render_svg", "write_svg", "COLORS"]
