# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Simulated annealing core of the floorplanner. A core owns a copy of the
blocks and a sequence pair, and anneals them with the fast-SA schedule:
a sampling walk computes the normalization constants and the initial
temperature, and then the temperature decreases geometrically while
perturbations are accepted or undone. Soft blocks are shrunk while the
floorplan does not fit in the outline, and the schedule is restarted if
the best floorplan found at the end is still infeasible.
"""

import logging
import math
from typing import Iterable, Optional

import numpy as np

from blockfp.geometry.geometry import Shape
from blockfp.netlist.block import Block
from blockfp.netlist.netlist_types import Net, Region, Location, TerminalMap
from blockfp.annealing.align import align_macros
from blockfp.annealing.cost import CostModel, CostTerms
from blockfp.annealing.moves import Move, NoMove, Perturbation, undo
from blockfp.annealing.params import AnnealParams
from blockfp.annealing.sequence_pair import pack

logger = logging.getLogger(__name__)

# Lower bound of the initial temperature (when sampling observes no cost variation)
MIN_TEMPERATURE = 1e-12

# Snapshot of a floorplan: sequences and shapes of the blocks
_Snapshot = tuple[list[int], list[int], list[tuple[float, float, float, int]]]


class AnnealingCore:
    """
    A simulated annealing worker. The cores of the parallel driver are
    independent: each one has its own blocks, sequences and random generator.
    """

    _outline: Shape
    _blocks: list[Block]
    _pos_seq: list[int]
    _neg_seq: list[int]
    _params: AnnealParams
    _cooling_rate: float
    _rng: np.random.Generator
    _cost_model: CostModel
    _perturbation: Perturbation

    # Current floorplan
    _width: float
    _height: float
    _terms: CostTerms
    _cost: float

    # Normalization
    _norms: CostTerms
    _init_temp: float

    # Undo record of the last perturbation
    _move: Move
    _pre_coords: list[tuple[float, float]]
    _pre_width: float
    _pre_height: float
    _pre_terms: CostTerms
    _pre_cost: float

    _best: Optional[_Snapshot]

    def __init__(self, outline: Shape, blocks: list[Block], nets: Iterable[Net],
                 regions: Iterable[Region], locations: Iterable[Location],
                 terminals: TerminalMap, params: AnnealParams, cooling_rate: float,
                 seed: int, randomize_shapes: bool = False):
        """
        Constructor. The blocks are copied; the sequences are the identity
        :param outline: fixed outline
        :param blocks: the blocks
        :param nets: the nets
        :param regions: keep-out regions for macros
        :param locations: location guides
        :param terminals: positions of the terminals
        :param params: annealing parameters
        :param cooling_rate: factor applied to the temperature at every step
        :param seed: seed of the random generator
        :param randomize_shapes: whether the blocks take a random initial shape
        """
        self._outline = outline
        self._blocks = [b.copy() for b in blocks]
        self._params = params
        self._cooling_rate = cooling_rate
        self._rng = np.random.default_rng(seed)
        if randomize_shapes:
            for b in self._blocks:
                b.set_random_shape(self._rng)
        n = len(self._blocks)
        self._pos_seq, self._neg_seq = list(range(n)), list(range(n))
        self._cost_model = CostModel(outline, self._blocks, nets, regions, locations, terminals, params)
        self._perturbation = Perturbation(self._blocks, params)
        self._norms = CostTerms()
        self._init_temp = MIN_TEMPERATURE
        self._move = NoMove()
        self._best = None
        self._pack_and_evaluate()

    @property
    def blocks(self) -> list[Block]:
        return self._blocks

    @property
    def pos_seq(self) -> list[int]:
        return self._pos_seq

    @property
    def neg_seq(self) -> list[int]:
        return self._neg_seq

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def area(self) -> float:
        return self._width * self._height

    @property
    def terms(self) -> CostTerms:
        return self._terms

    @property
    def cost(self) -> float:
        """Normalized cost of the current floorplan"""
        return self._cost

    @property
    def cooling_rate(self) -> float:
        return self._cooling_rate

    @property
    def init_temp(self) -> float:
        return self._init_temp

    @property
    def norms(self) -> CostTerms:
        return self._norms

    def is_feasible(self) -> bool:
        """Checks whether the current floorplan fits in the outline"""
        return self._cost_model.is_feasible(self._width, self._height, self._params.feasibility_tolerance)

    def set_normalization(self, init_temp: float, norms: CostTerms) -> None:
        """
        Sets the initial temperature and the normalization constants (obtained by another core)
        :param init_temp: initial temperature
        :param norms: normalization constants
        """
        self._init_temp = init_temp
        self._norms = norms
        self._cost = self._cost_model.norm_cost(self._terms, norms)

    def set_sequences(self, pos_seq: list[int], neg_seq: list[int]) -> None:
        """
        Sets the sequence pair and packs the floorplan
        :param pos_seq: positive sequence
        :param neg_seq: negative sequence
        """
        n = len(self._blocks)
        assert sorted(pos_seq) == list(range(n)) and sorted(neg_seq) == list(range(n)), \
            "The sequences must be permutations of the blocks"
        self._pos_seq, self._neg_seq = list(pos_seq), list(neg_seq)
        self._pack_and_evaluate()

    def sample(self) -> None:
        """
        Random walk to compute the normalization constants (average of every cost term)
        and the initial temperature (the one accepting the average cost variation with
        the initial acceptance probability)
        """
        n = self._params.perturb_per_step
        samples = list[CostTerms]()
        for _ in range(n):
            self._perturb()
            samples.append(self._terms)
        self._norms = CostTerms.mean(samples)

        costs = [self._cost_model.norm_cost(t, self._norms) for t in samples]
        delta_cost = sum(abs(c2 - c1) for c1, c2 in zip(costs, costs[1:]))
        init_temp = self._params.initial_temperature(delta_cost / max(1, n - 1))
        self._init_temp = init_temp if init_temp > 0 else MIN_TEMPERATURE
        self._cost = self._cost_model.norm_cost(self._terms, self._norms)
        self._best = self._snapshot()
        logger.debug("Sampling: init_T=%g norms=%s", self._init_temp, self._norms)

    def run(self) -> None:
        """
        Fast simulated annealing. At the end, the core holds the best floorplan found
        """
        params = self._params
        pre_cost = self._cost
        best_cost = pre_cost
        self._best = self._snapshot()
        temp = self._init_temp
        step = 1
        num_restart = num_shrink = 0
        max_num_shrink, shrink_period = params.max_num_shrink, params.shrink_period

        while step < params.max_num_step:
            num_accepted = 0
            for _ in range(params.perturb_per_step):
                self._perturb()
                cost = self._cost
                delta_cost = cost - pre_cost
                if delta_cost <= 0:
                    prob = 1.0
                elif temp > 0:
                    prob = math.exp(-delta_cost / temp)
                else:
                    prob = 0.0  # Frozen: uphill moves are rejected
                if delta_cost < 0 or self._rng.random() < prob:
                    num_accepted += 1
                    pre_cost = cost
                    if cost < best_cost:
                        best_cost = cost
                        if num_shrink <= max_num_shrink and step % shrink_period == 0 \
                                and not self.is_feasible():
                            num_shrink += 1
                            self._shrink_soft_blocks()
                            pre_cost = best_cost = self._cost
                            logger.debug("Step %d: soft blocks shrunk (%d)", step, num_shrink)
                        self._best = self._snapshot()
                else:
                    self._undo()

            logger.debug("Step %d: T=%g cost=%g best=%g accepted=%d/%d", step, temp, pre_cost,
                         best_cost, num_accepted, params.perturb_per_step)
            step += 1
            temp *= self._cooling_rate

            if step == params.max_num_step:
                self._restore(self._best)
                pre_cost = self._cost
                if not self.is_feasible() and num_restart < params.max_num_restart:
                    num_restart += 1
                    step = 1
                    temp = self._init_temp
                    logger.debug("Infeasible floorplan (%g x %g): restart %d", self._width,
                                 self._height, num_restart)

    def align_macros(self) -> None:
        """Aligns the macros of the current floorplan and updates its cost"""
        align_macros(self._blocks, self._outline.w, self._outline.h)
        if self._blocks:
            self._width = max(b.ux for b in self._blocks)
            self._height = max(b.uy for b in self._blocks)
        self._evaluate()

    def _pack_and_evaluate(self) -> None:
        self._width, self._height = pack(self._pos_seq, self._neg_seq, self._blocks)
        self._evaluate()

    def _evaluate(self) -> None:
        self._terms = self._cost_model.evaluate(self._blocks, self._width, self._height)
        self._cost = self._cost_model.norm_cost(self._terms, self._norms)

    def _perturb(self) -> None:
        """Applies a random move and repacks. The previous state is kept to undo it"""
        self._pre_coords = [(b.x, b.y) for b in self._blocks]
        self._pre_width, self._pre_height = self._width, self._height
        self._pre_terms, self._pre_cost = self._terms, self._cost
        self._move = self._perturbation.perturb(self._rng, self._blocks, self._pos_seq,
                                                self._neg_seq, self._outline)
        self._pack_and_evaluate()

    def _undo(self) -> None:
        """Restores the state before the last perturbation (no repacking needed)"""
        undo(self._move, self._blocks, self._pos_seq, self._neg_seq)
        for b, (x, y) in zip(self._blocks, self._pre_coords):
            b.x, b.y = x, y
        self._width, self._height = self._pre_width, self._pre_height
        self._terms, self._cost = self._pre_terms, self._pre_cost
        self._move = NoMove()

    def _shrink_soft_blocks(self) -> None:
        for b in self._blocks:
            b.shrink(self._params.shrink_factor)
        self._pack_and_evaluate()

    def _snapshot(self) -> _Snapshot:
        return list(self._pos_seq), list(self._neg_seq), [b.shape_state() for b in self._blocks]

    def _restore(self, snapshot: Optional[_Snapshot]) -> None:
        """Restores a snapshot and packs it"""
        assert snapshot is not None, "No floorplan to restore"
        pos_seq, neg_seq, shapes = snapshot
        self._pos_seq, self._neg_seq = list(pos_seq), list(neg_seq)
        for b, state in zip(self._blocks, shapes):
            b.restore_shape(state)
        self._pack_and_evaluate()
