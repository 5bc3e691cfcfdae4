"""
Axis-aligned rectangles in court coordinates (origin top-left, y down).
"""

from dataclasses import dataclass


@dataclass
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    def to_dict(self) -> dict:
        return {"x": float(self.x), "y": float(self.y),
                "width": float(self.width), "height": float(self.height)}


def overlaps(a: Rect, b: Rect) -> bool:
    """Strict AABB intersection; rectangles that only touch do not overlap."""
    return (a.x < b.x + b.width and
            a.x + a.width > b.x and
            a.y < b.y + b.height and
            a.y + a.height > b.y)
