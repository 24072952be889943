# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Module to represent shapes and axis-aligned rectangles
"""

from dataclasses import dataclass


@dataclass
class Shape:
    """
    A class to represent a two-dimensional rectilinear shape (width and height)
    """
    w: float
    h: float


@dataclass(frozen=True)
class Rect:
    """
    A class to represent an axis-aligned rectangle by its lower-left (lx, ly)
    and upper-right (ux, uy) corners
    """
    lx: float
    ly: float
    ux: float
    uy: float

    def __post_init__(self) -> None:
        assert self.lx <= self.ux and self.ly <= self.uy, f"Incorrect rectangle {self}"

    @property
    def width(self) -> float:
        return self.ux - self.lx

    @property
    def height(self) -> float:
        return self.uy - self.ly

    def overlap_area(self, other: 'Rect') -> float:
        """Returns the area of the intersection with another rectangle"""
        return overlap_area(self.lx, self.ly, self.ux, self.uy,
                            other.lx, other.ly, other.ux, other.uy)


def overlap_area(lx1: float, ly1: float, ux1: float, uy1: float,
                 lx2: float, ly2: float, ux2: float, uy2: float) -> float:
    """
    Area of the intersection of two rectangles given by their corners.
    Rectangles that only touch have zero overlap.
    """
    w = min(ux1, ux2) - max(lx1, lx2)
    if w <= 0:
        return 0.0
    h = min(uy1, uy2) - max(ly1, ly2)
    if h <= 0:
        return 0.0
    return w * h
