# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Alignment of hard macros. Macros close to the outline are snapped to it,
and then the alignment is propagated breadth-first from the macros on each
side of the outline (left, right, bottom and top) to the macros that are
close to them. A move is only committed if it does not create overlaps
between macros.
"""

from collections import deque
from dataclasses import dataclass

from blockfp.geometry.geometry import overlap_area
from blockfp.netlist.block import Block


@dataclass(frozen=True)
class _Axis:
    """Accessors of the blocks along one direction of the layout"""
    coord: str  # Attribute of the lower coordinate ('x' or 'y')
    size: str  # Attribute of the size ('width' or 'height')

    def lo(self, b: Block) -> float:
        return getattr(b, self.coord)

    def hi(self, b: Block) -> float:
        return getattr(b, self.coord) + getattr(b, self.size)

    def length(self, b: Block) -> float:
        return getattr(b, self.size)

    def move(self, b: Block, value: float) -> None:
        setattr(b, self.coord, value)


_X = _Axis("x", "width")
_Y = _Axis("y", "height")


def macros_overlap(macros: list[Block]) -> bool:
    """
    Checks whether some pair of blocks overlaps (touching is allowed)
    :param macros: the blocks
    :return: True if there is some overlap
    """
    for i, b1 in enumerate(macros):
        for b2 in macros[i + 1:]:
            if overlap_area(b1.x, b1.y, b1.ux, b1.uy, b2.x, b2.y, b2.ux, b2.uy) > 0:
                return True
    return False


def alignment_thresholds(blocks: list[Block], outline_w: float, outline_h: float) -> tuple[float, float]:
    """
    Horizontal and vertical thresholds: 10% of the outline, but never
    larger than the smallest macro
    """
    th_h, th_v = outline_w / 10, outline_h / 10
    for b in blocks:
        if b.is_macro:
            th_h = min(th_h, b.width)
            th_v = min(th_v, b.height)
    return th_h, th_v


def _snap_to_outline(macros: list[Block], outline_w: float, outline_h: float,
                     th_h: float, th_v: float) -> None:
    """Moves the macros close to the outline onto it"""
    for b in macros:
        if b.x < th_h:
            b.x = 0.0
        elif b.ux < outline_w and outline_w - b.ux < th_h:
            b.x = outline_w - b.width
        if b.y < th_v:
            b.y = 0.0
        elif b.uy < outline_h and outline_h - b.uy < th_v:
            b.y = outline_h - b.height


def _propagate(macros: list[Block], axis: _Axis, perp: _Axis, outline: float,
               th: float, th_perp: float, low_side: bool) -> None:
    """
    Breadth-first propagation of the alignment from one side of the outline
    :param macros: the macros
    :param axis: direction of the alignment
    :param perp: perpendicular direction
    :param outline: size of the outline along the axis
    :param th: threshold along the axis
    :param th_perp: threshold along the perpendicular direction
    :param low_side: True for left/bottom, False for right/top
    """
    aligned, rejected = set[int](), set[int]()
    queue = deque[int]()
    for i, b in enumerate(macros):
        at_low, at_high = axis.lo(b) == 0.0, axis.hi(b) >= outline
        if (low_side and at_low) or (not low_side and at_high):
            aligned.add(i)
            queue.append(i)
        elif at_low or at_high:
            aligned.add(i)

    while queue:
        src = macros[queue.popleft()]
        lo, hi = axis.lo(src), axis.hi(src)
        plo, phi = perp.lo(src), perp.hi(src)
        for i, b in enumerate(macros):
            if i in aligned or i in rejected:
                continue
            plo_b, phi_b = perp.lo(b), perp.hi(b)
            if min(abs(plo - plo_b), abs(phi - phi_b), abs(plo - phi_b), abs(phi - plo_b)) > th_perp:
                continue

            lo_b, hi_b = axis.lo(b), axis.hi(b)
            new_lo = None
            if low_side:
                if lo <= lo_b <= lo + th:
                    new_lo = lo
                elif hi <= lo_b <= hi + th:
                    new_lo = hi
            elif hi - th <= hi_b <= hi:
                new_lo = hi - axis.length(b)
            elif lo - th <= hi_b <= lo:
                new_lo = lo - axis.length(b)
            if new_lo is None:
                continue

            axis.move(b, new_lo)
            if macros_overlap(macros):
                axis.move(b, lo_b)
                rejected.add(i)
            else:
                aligned.add(i)
                queue.append(i)


def align_macros(blocks: list[Block], outline_w: float, outline_h: float) -> None:
    """
    Aligns the macros of a placement (the coordinates of the blocks are modified).
    Soft blocks are not moved
    :param blocks: the placed blocks
    :param outline_w: width of the outline
    :param outline_h: height of the outline
    """
    macros = [b for b in blocks if b.is_macro]
    if not macros:
        return
    th_h, th_v = alignment_thresholds(macros, outline_w, outline_h)
    _snap_to_outline(macros, outline_w, outline_h, th_h, th_v)
    _propagate(macros, _X, _Y, outline_w, th_h, th_v, low_side=True)  # left
    _propagate(macros, _X, _Y, outline_w, th_h, th_v, low_side=False)  # right
    _propagate(macros, _Y, _X, outline_h, th_v, th_h, low_side=True)  # bottom
    _propagate(macros, _Y, _X, outline_h, th_v, th_h, low_side=False)  # top
