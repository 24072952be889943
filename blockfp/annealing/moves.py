# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Perturbations of a floorplan represented as a sequence pair: resizing of a
block, swap of two blocks in one of the sequences, or swap of two blocks in
both sequences. Every perturbation returns a move that can be undone.
"""

from dataclasses import dataclass
from typing import Union

import numpy as np

from blockfp.geometry.geometry import Shape
from blockfp.netlist.block import Block
from blockfp.annealing.params import AnnealParams


@dataclass(frozen=True)
class ResizeMove:
    block: int  # Index of the resized block
    state: tuple[float, float, float, int]  # Previous shape of the block


@dataclass(frozen=True)
class SwapMove:
    positive: bool  # Swap in the positive (True) or negative (False) sequence
    i: int
    j: int


@dataclass(frozen=True)
class DoubleSwapMove:
    pos_i: int
    pos_j: int
    neg_i: int
    neg_j: int


@dataclass(frozen=True)
class NoMove:
    pass


Move = Union[ResizeMove, SwapMove, DoubleSwapMove, NoMove]


def _random_pair(n: int, rng: np.random.Generator) -> tuple[int, int]:
    """Two different random indices in [0, n)"""
    i = int(rng.integers(n))
    j = int(rng.integers(n - 1))
    return i, (j + 1 if j >= i else j)


class Perturbation:
    """
    Generator of random moves. The probabilities of the moves are normalized
    and turned into cumulative thresholds. If no block can be resized, the
    probability of resizing is distributed among the swaps.
    """

    _thresholds: tuple[float, float, float]  # Resize, positive swap, negative swap
    _resizable: list[int]  # Indices of the resizable blocks

    def __init__(self, blocks: list[Block], params: AnnealParams):
        self._resizable = [i for i, b in enumerate(blocks) if b.is_resizable]
        resize = params.resize_prob if self._resizable else 0.0
        probs = [resize, params.pos_swap_prob, params.neg_swap_prob, params.double_swap_prob]
        total = sum(probs)
        if total == 0:
            # Only resizing was allowed, but nothing can be resized
            probs, total = [0.0, 0.0, 0.0, 1.0], 1.0
        t1 = probs[0] / total
        t2 = t1 + probs[1] / total
        t3 = t2 + probs[2] / total
        self._thresholds = (t1, t2, t3)

    @property
    def thresholds(self) -> tuple[float, float, float]:
        return self._thresholds

    @property
    def resizable(self) -> list[int]:
        return self._resizable

    def perturb(self, rng: np.random.Generator, blocks: list[Block], pos_seq: list[int],
                neg_seq: list[int], outline: Shape) -> Move:
        """
        Applies a random move to the floorplan (the floorplan is not repacked)
        :param rng: random generator
        :param blocks: the blocks (with the coordinates of the current packing)
        :param pos_seq: positive sequence (modified)
        :param neg_seq: negative sequence (modified)
        :param outline: the fixed outline
        :return: the move
        """
        n = len(blocks)
        if n < 2:
            return NoMove()
        op = rng.random()
        t_resize, t_pos, t_neg = self._thresholds
        if op < t_resize:
            idx = self._resizable[int(rng.integers(len(self._resizable)))]
            move = ResizeMove(idx, blocks[idx].shape_state())
            resize_block(rng, idx, blocks, outline)
            return move
        if op < t_neg:
            positive = op < t_pos
            seq = pos_seq if positive else neg_seq
            i, j = _random_pair(n, rng)
            seq[i], seq[j] = seq[j], seq[i]
            return SwapMove(positive, i, j)
        i, j = _random_pair(n, rng)
        pos_seq[i], pos_seq[j] = pos_seq[j], pos_seq[i]
        neg_i, neg_j = neg_seq.index(pos_seq[i]), neg_seq.index(pos_seq[j])
        neg_seq[neg_i], neg_seq[neg_j] = neg_seq[neg_j], neg_seq[neg_i]
        return DoubleSwapMove(i, j, neg_i, neg_j)


def undo(move: Move, blocks: list[Block], pos_seq: list[int], neg_seq: list[int]) -> None:
    """
    Undoes a move (the coordinates of the blocks are not restored)
    :param move: the move
    :param blocks: the blocks
    :param pos_seq: positive sequence
    :param neg_seq: negative sequence
    """
    match move:
        case ResizeMove(block=idx, state=state):
            blocks[idx].restore_shape(state)
        case SwapMove(positive=positive, i=i, j=j):
            seq = pos_seq if positive else neg_seq
            seq[i], seq[j] = seq[j], seq[i]
        case DoubleSwapMove(pos_i=pi, pos_j=pj, neg_i=ni, neg_j=nj):
            neg_seq[ni], neg_seq[nj] = neg_seq[nj], neg_seq[ni]
            pos_seq[pi], pos_seq[pj] = pos_seq[pj], pos_seq[pi]
        case NoMove():
            pass


def resize_block(rng: np.random.Generator, idx: int, blocks: list[Block], outline: Shape) -> None:
    """
    Resizes a block. A hard block takes another shape option. A soft block
    either takes a random aspect ratio or has one of its edges moved to the
    edge of a neighbouring block (stretch right, narrow left, stretch up
    or narrow down), with the same probability
    :param rng: random generator
    :param idx: index of the block
    :param blocks: the blocks
    :param outline: the fixed outline
    """
    b = blocks[idx]
    if b.is_macro:
        b.resize_hard_block(rng)
        return

    option = rng.random()
    if option < 0.2:
        b.choose_random_aspect_ratio(rng)
    elif option < 0.4:
        _stretch(b, blocks, outline.w, horizontal=True)
    elif option < 0.6:
        _narrow(b, blocks, horizontal=True)
    elif option < 0.8:
        _stretch(b, blocks, outline.h, horizontal=False)
    else:
        _narrow(b, blocks, horizontal=False)


def _stretch(b: Block, blocks: list[Block], limit: float, horizontal: bool) -> None:
    """Moves the upper edge of b to the closest upper edge of another block beyond it (or to the outline)"""
    lo, hi = (b.x, b.ux) if horizontal else (b.y, b.uy)
    if lo >= limit:
        return
    target = limit
    for other in blocks:
        edge = other.ux if horizontal else other.uy
        if hi < edge < target:
            target = edge
    if horizontal:
        b.change_width(target - lo)
    else:
        b.change_height(target - lo)


def _narrow(b: Block, blocks: list[Block], horizontal: bool) -> None:
    """Moves the upper edge of b to the closest upper edge of another block inside its span"""
    lo, hi = (b.x, b.ux) if horizontal else (b.y, b.uy)
    target = lo
    for other in blocks:
        edge = other.ux if horizontal else other.uy
        if target < edge < hi:
            target = edge
    if target <= lo:
        return
    if horizontal:
        b.change_width(target - lo)
    else:
        b.change_height(target - lo)
