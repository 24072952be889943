# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Parallel multi-level floorplanner. A sampling core computes the
normalization constants and the initial temperature. Then, at every level,
a set of workers with different cooling rates anneal copies of the best
floorplan found so far, with a temperature that decreases from level to
level. The best floorplan of the last level has its macros aligned.
"""

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from blockfp.geometry.geometry import Shape
from blockfp.netlist.block import Block
from blockfp.netlist.problem import Problem
from blockfp.annealing.core import AnnealingCore
from blockfp.annealing.cost import CostTerms
from blockfp.annealing.params import AnnealParams

logger = logging.getLogger(__name__)


@dataclass
class FloorplanResult:
    """Result of the floorplanner"""
    blocks: list[Block]  # Placed blocks (in the order of the problem)
    width: float  # Width of the floorplan
    height: float  # Height of the floorplan
    feasible: bool  # Whether the floorplan fits in the outline
    terms: CostTerms  # Cost terms
    cost: float  # Normalized cost
    norms: CostTerms  # Normalization constants


def _run_core(core: AnnealingCore) -> AnnealingCore:
    """Runs a core (top-level function so that it can be sent to another process)"""
    core.run()
    return core


def _run_level(cores: list[AnnealingCore], parallel: bool) -> list[AnnealingCore]:
    if not parallel or len(cores) == 1:
        return [_run_core(c) for c in cores]
    with concurrent.futures.ProcessPoolExecutor(max_workers=len(cores)) as executor:
        return list(executor.map(_run_core, cores))


def floorplan(problem: Problem, params: Optional[AnnealParams] = None) -> FloorplanResult:
    """
    Computes a floorplan for a problem
    :param problem: the problem (outline, blocks, nets, terminals, regions and locations)
    :param params: annealing parameters (default values if None)
    :return: the placed blocks, with the feasibility and the cost of the floorplan
    """
    if params is None:
        params = AnnealParams()
    outline: Shape = problem.outline
    blocks, nets = problem.blocks, problem.nets
    regions, locations, terminals = problem.regions, problem.locations, problem.terminals

    master = np.random.default_rng(params.seed)
    seeds = [int(s) for s in master.integers(0, 2**32, size=params.num_level * params.num_worker + 1)]
    logger.info("Floorplanning %d blocks and %d nets in a %gx%g outline", len(blocks), len(nets),
                outline.w, outline.h)

    sampler = AnnealingCore(outline, blocks, nets, regions, locations, terminals, params,
                            params.cooling_rate_high, seeds[0], randomize_shapes=True)
    sampler.sample()
    init_temp, norms = sampler.init_temp, sampler.norms
    logger.info("Initial temperature: %g", init_temp)
    logger.info("Normalization: %s", norms)

    best = sampler
    best_cost = np.inf
    cooling_rates = params.cooling_rates()
    heat_count = 1.0
    seed_id = 1
    for level in range(params.num_level):
        init_temp *= heat_count
        heat_count *= params.heat_rate
        cores = list[AnnealingCore]()
        for rate in cooling_rates:
            core = AnnealingCore(outline, best.blocks, nets, regions, locations, terminals, params,
                                 rate, seeds[seed_id])
            seed_id += 1
            core.set_normalization(init_temp, norms)
            core.set_sequences(best.pos_seq, best.neg_seq)
            cores.append(core)

        for core in _run_level(cores, params.parallel):
            if core.cost < best_cost:
                best_cost, best = core.cost, core

        t = best.terms
        logger.info("Level %d: cost=%.4f area=%g wirelength=%g outline=%g boundary=%g "
                    "macro_blockage=%g location=%g notch=%g", level, best.cost, t.area, t.wirelength,
                    t.outline, t.boundary, t.macro_blockage, t.location, t.notch)

    best.align_macros()
    feasible = best.is_feasible()
    logger.info("Floorplan: %gx%g (outline %gx%g)", best.width, best.height, outline.w, outline.h)
    if not feasible:
        logger.warning("No feasible floorplan found: %gx%g does not fit in the %gx%g outline",
                       best.width, best.height, outline.w, outline.h)
    return FloorplanResult(best.blocks, best.width, best.height, feasible, best.terms, best.cost, norms)
