"""
Layout Abstraction Layer

Value types shared by every stage of the legalization pipeline. Points and
rectangles are immutable; each stage builds new values instead of editing
the ones it was given.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Union
import math


@dataclass(frozen=True)
class Point:
    """A pair of coordinates (or a width/height pair when used as a size)."""
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __mul__(self, other: "Point") -> "Point":
        return Point(self.x * other.x, self.y * other.y)

    def __truediv__(self, other: Union["Point", float]) -> "Point":
        if isinstance(other, Point):
            return Point(self.x / other.x, self.y / other.y)
        return Point(self.x / other, self.y / other)

    def floor(self) -> "Point":
        """Componentwise floor, keeping float coordinates."""
        return Point(float(math.floor(self.x)), float(math.floor(self.y)))


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class Rectangle:
    """
    Axis-aligned rectangle.

    ``position`` is the lower-left corner and ``size`` the (width, height)
    extent. Corners and center are derived on demand, never stored.
    """
    position: Point
    size: Point

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @property
    def width(self) -> float:
        return self.size.x

    @property
    def height(self) -> float:
        return self.size.y

    def lower_corner(self) -> Point:
        return self.position

    def upper_corner(self) -> Point:
        return self.position + self.size

    def center(self) -> Point:
        return self.lower_corner() + (self.size / 2.0)

    def right(self) -> float:
        """X coordinate of the right edge."""
        return self.position.x + self.size.x

    def with_position(self, position: Point) -> "Rectangle":
        """Copy of this rectangle moved to ``position``, size unchanged."""
        return replace(self, position=position)

    def overlaps_x(self, other: "Rectangle") -> bool:
        """
        Check whether the x-extents of two rectangles overlap.

        Abutting rectangles (one's right edge equal to the other's left edge)
        do not overlap.
        """
        return self.position.x < other.right() and other.position.x < self.right()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "x": self.position.x,
            "y": self.position.y,
            "width": self.size.x,
            "height": self.size.y,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rectangle":
        """Create from dictionary."""
        return cls(
            position=Point(float(data.get("x", 0.0)), float(data.get("y", 0.0))),
            size=Point(float(data["width"]), float(data["height"])),
        )

    @classmethod
    def from_xywh(cls, x: float, y: float, width: float, height: float) -> "Rectangle":
        return cls(Point(float(x), float(y)), Point(float(width), float(height)))
