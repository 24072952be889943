# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Blocks of a floorplan: soft clusters and hard macros
"""

import math
import copy
from typing import Sequence

import numpy as np

from blockfp.geometry.geometry import Rect

# (min, max) interval of a soft block or (width, height) option of a hard block
Pair = tuple[float, float]


class Block:
    """
    Class to represent a placeable block. A soft block (num_macro == 0) has a
    fixed area and a continuous shape inside a set of aspect-ratio intervals
    (height/width). A hard block (num_macro > 0) can only take one of a
    discrete set of (width, height) options.
    """

    _name: str  # Name of the block
    _area: float  # Area of the block
    _num_macro: int  # Number of macros (0 for soft blocks)
    _aspect_ratio: list[Pair]  # Ratio intervals (soft) or shape options (hard)
    _width_limit: list[Pair]  # Width intervals (high, low), non-increasing
    _height_limit: list[Pair]  # Height intervals (low, high), non-decreasing
    _option: int  # Current shape option of a hard block (-1 for soft blocks)
    _width: float
    _height: float
    _x: float  # Lower-left corner
    _y: float

    def __init__(self, name: str, area: float, num_macro: int = 0,
                 aspect_ratio: Sequence[Pair] = ((1.0, 1.0),)):
        """
        Constructor
        :param name: name of the block
        :param area: area of the block
        :param num_macro: number of macros (0 means soft block)
        :param aspect_ratio: list of (min, max) height/width ratios for soft blocks,
        or list of (width, height) options for hard blocks
        """
        assert area > 0, f"Block {name}: incorrect area"
        assert num_macro >= 0, f"Block {name}: incorrect number of macros"
        assert len(aspect_ratio) > 0, f"Block {name}: no aspect ratio defined"
        self._name = name
        self._area = float(area)
        self._num_macro = num_macro
        self._x = self._y = 0.0
        self._option = -1
        if num_macro > 0:
            self._aspect_ratio = [(float(w), float(h)) for w, h in aspect_ratio]
            assert all(w > 0 and h > 0 for w, h in self._aspect_ratio), \
                f"Block {name}: incorrect macro shape"
            self._compute_limits()
            self.set_option(0)
        else:
            self._aspect_ratio = sorted((float(lo), float(hi)) for lo, hi in aspect_ratio)
            assert all(0 < lo <= hi for lo, hi in self._aspect_ratio), \
                f"Block {name}: incorrect aspect ratio"
            self._compute_limits()
            self.set_aspect_ratio(self._aspect_ratio[0][0])

    def _compute_limits(self) -> None:
        """Derives the width and height intervals of a soft block from its area"""
        self._width_limit, self._height_limit = [], []
        if self.is_macro:
            for w, h in self._aspect_ratio:
                self._width_limit.append((w, w))
                self._height_limit.append((h, h))
            return
        for ar_low, ar_high in self._aspect_ratio:
            height_low = math.sqrt(self._area * ar_low)
            height_high = math.sqrt(self._area * ar_high)
            self._height_limit.append((height_low, height_high))
            self._width_limit.append((self._area / height_low, self._area / height_high))

    @property
    def name(self) -> str:
        return self._name

    @property
    def area(self) -> float:
        return self._area

    @property
    def num_macro(self) -> int:
        return self._num_macro

    @property
    def is_soft(self) -> bool:
        return self._num_macro == 0

    @property
    def is_macro(self) -> bool:
        return self._num_macro > 0

    @property
    def aspect_ratio(self) -> list[Pair]:
        """Ratio intervals of a soft block, or shape options of a hard block"""
        return self._aspect_ratio

    @property
    def width_limit(self) -> list[Pair]:
        return self._width_limit

    @property
    def height_limit(self) -> list[Pair]:
        return self._height_limit

    @property
    def option(self) -> int:
        """Index of the current shape option (hard blocks only)"""
        return self._option

    @property
    def is_resizable(self) -> bool:
        return self.is_soft or len(self._aspect_ratio) > 1

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value: float) -> None:
        self._x = value

    @property
    def y(self) -> float:
        return self._y

    @y.setter
    def y(self, value: float) -> None:
        self._y = value

    @property
    def ux(self) -> float:
        return self._x + self._width

    @property
    def uy(self) -> float:
        return self._y + self._height

    @property
    def rect(self) -> Rect:
        return Rect(self._x, self._y, self.ux, self.uy)

    def set_option(self, option: int) -> None:
        """Sets the shape of a hard block to one of its options"""
        assert self.is_macro, f"Block {self.name}: only hard blocks have shape options"
        self._option = option
        self._width, self._height = self._aspect_ratio[option]

    def set_aspect_ratio(self, aspect_ratio: float) -> None:
        """Sets the height/width ratio of a soft block, keeping its area"""
        self._height = math.sqrt(self._area * aspect_ratio)
        self._width = self._area / self._height

    def change_width(self, width: float) -> None:
        """
        Changes the width of a soft block. The width is clamped into the
        allowed intervals; a width falling between two intervals is moved to
        the closest bound. The height is recomputed from the area.
        Hard blocks are not affected.
        :param width: the requested width
        """
        if not self.is_soft:
            return
        limits = self._width_limit
        if width >= limits[0][0]:
            width = limits[0][0]
        elif width <= limits[-1][1]:
            width = limits[-1][1]
        else:
            i = 0
            while limits[i][1] > width:
                i += 1
            if width > limits[i][0]:
                # In the gap between intervals i-1 and i
                width_low, width_high = limits[i][0], limits[i - 1][1]
                width = width_high if width - width_low > width_high - width else width_low
        self._width = width
        self._height = self._area / width

    def change_height(self, height: float) -> None:
        """
        Changes the height of a soft block (see change_width).
        :param height: the requested height
        """
        if not self.is_soft:
            return
        limits = self._height_limit
        if height <= limits[0][0]:
            height = limits[0][0]
        elif height >= limits[-1][1]:
            height = limits[-1][1]
        else:
            i = 0
            while limits[i][1] < height:
                i += 1
            if height < limits[i][0]:
                height_high, height_low = limits[i][0], limits[i - 1][1]
                height = height_high if height - height_low > height_high - height else height_low
        self._height = height
        self._width = self._area / height

    def choose_random_aspect_ratio(self, rng: np.random.Generator) -> None:
        """Picks a random interval and a random ratio inside it (soft blocks)"""
        ar_low, ar_high = self._aspect_ratio[int(rng.integers(len(self._aspect_ratio)))]
        if ar_low == ar_high:
            self.set_aspect_ratio(ar_low)
        else:
            self.set_aspect_ratio(ar_low + (ar_high - ar_low) * rng.random())

    def resize_hard_block(self, rng: np.random.Generator) -> None:
        """Switches a hard block to a different shape option (if any)"""
        n = len(self._aspect_ratio)
        if not self.is_macro or n < 2:
            return
        option = int(rng.integers(n - 1))
        self.set_option(option if option < self._option else option + 1)

    def set_random_shape(self, rng: np.random.Generator) -> None:
        """Random initial shape: any option of a hard block, any ratio of a soft one"""
        if self.is_macro:
            self.set_option(int(rng.integers(len(self._aspect_ratio))))
        else:
            self.choose_random_aspect_ratio(rng)

    def shrink(self, factor: float) -> None:
        """Shrinks a soft block in both dimensions. The area and the limits are updated"""
        if not self.is_soft:
            return
        self._width *= factor
        self._height *= factor
        self._area = self._width * self._height
        self._compute_limits()

    def shape_state(self) -> tuple[float, float, float, int]:
        """Minimal state to restore the shape of the block (width, height, area, option)"""
        return self._width, self._height, self._area, self._option

    def restore_shape(self, state: tuple[float, float, float, int]) -> None:
        """Restores a shape obtained with shape_state"""
        area = self._area
        self._width, self._height, self._area, self._option = state
        if self.is_soft and area != self._area:
            self._compute_limits()

    def copy(self) -> 'Block':
        """Returns an independent copy of the block"""
        return copy.deepcopy(self)

    def __str__(self) -> str:
        kind = f"macros={self.num_macro}" if self.is_macro else "soft"
        return f"Block({self.name}, {kind}, x={self.x}, y={self.y}, " \
               f"w={self.width}, h={self.height})"

    __repr__ = __str__
