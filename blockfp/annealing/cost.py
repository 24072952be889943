# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Cost function of the floorplanner. The cost is a weighted sum of seven
terms (area, wirelength, outline, boundary, macro blockage, location and
notch penalties), each one normalized by its average value observed while
sampling random floorplans.
"""

import math
from dataclasses import dataclass, astuple
from typing import Iterable

import numpy as np

from blockfp.geometry.geometry import Shape, Rect
from blockfp.netlist.block import Block
from blockfp.netlist.netlist_types import Net, Region, Location, TerminalMap
from blockfp.annealing.align import align_macros
from blockfp.annealing.params import AnnealParams
from blockfp.utils.keywords import KW


@dataclass(frozen=True)
class CostTerms:
    """Values of the cost terms of a floorplan"""
    area: float = 0.0
    wirelength: float = 0.0
    outline: float = 0.0
    boundary: float = 0.0
    macro_blockage: float = 0.0
    location: float = 0.0
    notch: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return {
            KW.AREA: self.area,
            KW.WIRELENGTH: self.wirelength,
            KW.OUTLINE_PENALTY: self.outline,
            KW.BOUNDARY: self.boundary,
            KW.MACRO_BLOCKAGE: self.macro_blockage,
            KW.LOCATION: self.location,
            KW.NOTCH: self.notch,
        }

    def __iter__(self):
        return iter(astuple(self))

    @staticmethod
    def mean(terms: list['CostTerms']) -> 'CostTerms':
        """Average of a non-empty list of terms"""
        assert len(terms) > 0, "Cannot average an empty list of cost terms"
        n = len(terms)
        return CostTerms(*(sum(values) / n for values in zip(*terms)))


# A net with its pins resolved: block indices, terminal positions, weight
_ResolvedNet = tuple[list[int], list[tuple[float, float]], int]


class CostModel:
    """
    Evaluation of the cost terms of a packed floorplan. The names of the
    nets and location guides are resolved into block indices once.
    """

    _outline: Shape
    _weights: CostTerms
    _nets: list[_ResolvedNet]
    _regions: list[Rect]
    _locations: list[tuple[int, Rect]]
    _notch_cap: float
    _notch_align: bool

    def __init__(self, outline: Shape, blocks: list[Block], nets: Iterable[Net],
                 regions: Iterable[Region], locations: Iterable[Location],
                 terminals: TerminalMap, params: AnnealParams):
        """
        Constructor
        :param outline: fixed outline
        :param blocks: the blocks (their order defines the indices)
        :param nets: the nets
        :param regions: keep-out regions for macros
        :param locations: location guides
        :param terminals: positions of the terminals
        :param params: annealing parameters (weights and notch settings)
        """
        self._outline = outline
        self._weights = CostTerms(params.area_weight, params.wirelength_weight, params.outline_weight,
                                  params.boundary_weight, params.macro_blockage_weight,
                                  params.location_weight, params.notch_weight)
        name2idx = {b.name: i for i, b in enumerate(blocks)}
        self._nets = []
        for net in nets:
            idx = [name2idx[name] for name in net.blocks]
            pins = [terminals[name] for name in net.terminals]
            if idx or pins:
                self._nets.append((idx, pins, net.weight))
        self._regions = [r.rect for r in regions]
        self._locations = [(name2idx[loc.name], loc.rect) for loc in locations]
        self._notch_cap = params.notch_size_cap
        self._notch_align = params.notch_align

    @property
    def outline(self) -> Shape:
        return self._outline

    @property
    def weights(self) -> CostTerms:
        return self._weights

    def evaluate(self, blocks: list[Block], width: float, height: float) -> CostTerms:
        """
        Computes all the cost terms of a packed floorplan
        :param blocks: the placed blocks
        :param width: width of the packing
        :param height: height of the packing
        :return: the cost terms
        """
        return CostTerms(area=width * height,
                         wirelength=self.wirelength(blocks),
                         outline=self.outline_penalty(width, height),
                         boundary=self.boundary_penalty(blocks),
                         macro_blockage=self.macro_blockage_penalty(blocks),
                         location=self.location_penalty(blocks),
                         notch=self.notch_penalty(blocks, width, height))

    def wirelength(self, blocks: list[Block]) -> float:
        """Weighted half-perimeter wirelength of the bounding boxes of the nets"""
        total = 0.0
        for idx, pins, weight in self._nets:
            lx = ly = math.inf
            ux = uy = -math.inf
            for i in idx:
                b = blocks[i]
                lx, ly = min(lx, b.x), min(ly, b.y)
                ux, uy = max(ux, b.ux), max(uy, b.uy)
            for x, y in pins:
                lx, ly = min(lx, x), min(ly, y)
                ux, uy = max(ux, x), max(uy, y)
            total += (ux - lx + uy - ly) * weight
        return total

    def outline_penalty(self, width: float, height: float) -> float:
        """Area of the bounding box of the packing and the outline minus the area of the outline"""
        w, h = self._outline.w, self._outline.h
        return max(w, width) * max(h, height) - w * h

    def boundary_penalty(self, blocks: list[Block]) -> float:
        """Squared distance of each macro to the closest side of the outline, weighted by its macros"""
        w, h = self._outline.w, self._outline.h
        penalty = 0.0
        for b in blocks:
            if b.is_macro:
                d = min(b.x, abs(w - b.ux), b.y, abs(h - b.uy))
                penalty += d * d * b.num_macro * b.num_macro
        return penalty

    def macro_blockage_penalty(self, blocks: list[Block]) -> float:
        """Overlap area between macros and keep-out regions"""
        penalty = 0.0
        for r in self._regions:
            for b in blocks:
                if b.is_macro:
                    penalty += b.rect.overlap_area(r)
        return penalty

    def location_penalty(self, blocks: list[Block]) -> float:
        """Distance between the blocks and their location guides (zero if they overlap)"""
        penalty = 0.0
        for i, r in self._locations:
            b = blocks[i]
            dx = abs(b.x + b.width / 2 - (r.lx + r.ux) / 2) - (b.width + r.width) / 2
            dy = abs(b.y + b.height / 2 - (r.ly + r.uy) / 2) - (b.height + r.height) / 2
            penalty += min(max(dx, 0.0), max(dy, 0.0))
        return penalty

    def notch_penalty(self, blocks: list[Block], width: float, height: float) -> float:
        """
        Penalty for the small empty areas (notches) left between the macros and the outline.
        The outline is split into a non-uniform grid defined by the edges of the macros.
        An empty cell is a notch if it is small and enough of its neighbours are
        covered by macros (two for interior cells, one for cells on the border).
        If the packing does not fit in the outline, the penalty is proportional
        to the size of the bounding box
        :param blocks: the placed blocks
        :param width: width of the packing
        :param height: height of the packing
        :return: the penalty
        """
        w, h = self._outline.w, self._outline.h
        if width > w or height > h:
            return math.sqrt(max(width, w) * max(height, h) / (w * h))

        macros = [b for b in blocks if b.is_macro]
        if not macros:
            return 0.0
        saved = [(b.x, b.y) for b in macros]
        if self._notch_align:
            align_macros(macros, w, h)
        rects = [(b.x, b.y, b.ux, b.uy) for b in macros]
        for b, (x, y) in zip(macros, saved):
            b.x, b.y = x, y

        x_grid = np.unique([0.0, w] + [c for r in rects for c in (r[0], r[2])])
        y_grid = np.unique([0.0, h] + [c for r in rects for c in (r[1], r[3])])
        nx, ny = len(x_grid) - 1, len(y_grid) - 1
        covered = np.zeros((nx + 2, ny + 2), dtype=bool)  # Padded with an empty frame
        for lx, ly, ux, uy in rects:
            i0, i1 = np.searchsorted(x_grid, [lx, ux])
            j0, j1 = np.searchsorted(y_grid, [ly, uy])
            covered[i0 + 1:i1 + 1, j0 + 1:j1 + 1] = True

        th_h = min(self._notch_cap, w / 10)
        th_v = min(self._notch_cap, h / 10)
        penalty = 0.0
        for i in range(1, nx + 1):
            for j in range(1, ny + 1):
                if covered[i, j]:
                    continue
                neighbours = int(covered[i - 1, j]) + int(covered[i + 1, j]) + \
                    int(covered[i, j - 1]) + int(covered[i, j + 1])
                interior = 1 < i < nx and 1 < j < ny
                if neighbours < (2 if interior else 1):
                    continue
                cell_w = x_grid[i] - x_grid[i - 1]
                cell_h = y_grid[j] - y_grid[j - 1]
                if cell_w <= th_h or cell_h <= th_v:
                    penalty += math.sqrt(cell_w * cell_h / (w * h))
        return float(penalty)

    def norm_cost(self, terms: CostTerms, norms: CostTerms) -> float:
        """
        Weighted sum of the terms normalized by the norms. Terms with a
        non-positive norm are ignored
        :param terms: the cost terms
        :param norms: the normalization constants
        :return: the normalized cost
        """
        cost = 0.0
        for weight, term, norm in zip(self._weights, terms, norms):
            if norm > 0:
                cost += weight * term / norm
        return cost

    def is_feasible(self, width: float, height: float, tolerance: float) -> bool:
        """Checks whether a packing fits in the outline (with some relative tolerance)"""
        return width <= self._outline.w * (1 + tolerance) and height <= self._outline.h * (1 + tolerance)


