# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

import unittest

import numpy as np

from blockfp.geometry.geometry import Shape
from blockfp.netlist.block import Block
from blockfp.annealing.moves import (Perturbation, ResizeMove, SwapMove, DoubleSwapMove, NoMove,
                                     undo, resize_block)
from blockfp.annealing.params import AnnealParams
from blockfp.annealing.sequence_pair import pack


def make_blocks() -> list[Block]:
    return [Block("s0", 16, 0, [(0.25, 4)]), Block("s1", 9, 0, [(0.5, 2)]),
            Block("m0", 8, 1, [(2, 4), (4, 2)]), Block("m1", 6, 2, [(2, 3)]),
            Block("s2", 4)]


class TestPerturbation(unittest.TestCase):

    def test_thresholds(self):
        params = AnnealParams(resize_prob=0.4, pos_swap_prob=0.2, neg_swap_prob=0.2, double_swap_prob=0.2)
        t = Perturbation(make_blocks(), params).thresholds
        self.assertAlmostEqual(t[0], 0.4)
        self.assertAlmostEqual(t[1], 0.6)
        self.assertAlmostEqual(t[2], 0.8)

    def test_no_resizable_blocks(self):
        blocks = [Block("m0", 8, 1, [(2, 4)]), Block("m1", 6, 1, [(2, 3)])]
        params = AnnealParams(resize_prob=0.5, pos_swap_prob=0.25, neg_swap_prob=0.25, double_swap_prob=0)
        p = Perturbation(blocks, params)
        self.assertEqual(p.resizable, [])
        self.assertEqual(p.thresholds, (0.0, 0.5, 1.0))
        rng = np.random.default_rng(3)
        for _ in range(50):
            move = p.perturb(rng, blocks, [0, 1], [0, 1], Shape(10, 10))
            self.assertIsInstance(move, SwapMove)

    def test_single_block(self):
        blocks = [Block("s0", 16)]
        p = Perturbation(blocks, AnnealParams())
        rng = np.random.default_rng(3)
        pos, neg = [0], [0]
        for _ in range(10):
            self.assertEqual(p.perturb(rng, blocks, pos, neg, Shape(10, 10)), NoMove())
        self.assertEqual((blocks[0].width, blocks[0].height), (4, 4))

    def test_permutations_and_undo(self):
        blocks = make_blocks()
        n = len(blocks)
        p = Perturbation(blocks, AnnealParams())
        rng = np.random.default_rng(11)
        pos, neg = list(range(n)), list(range(n))
        outline = Shape(12, 12)
        kinds = set()
        for _ in range(300):
            pack(pos, neg, blocks)
            pre_pos, pre_neg = list(pos), list(neg)
            pre_shapes = [b.shape_state() for b in blocks]
            move = p.perturb(rng, blocks, pos, neg, outline)
            kinds.add(type(move))
            self.assertEqual(sorted(pos), list(range(n)))
            self.assertEqual(sorted(neg), list(range(n)))
            for b in blocks:
                self.assertAlmostEqual(b.width * b.height, b.area)
            undo(move, blocks, pos, neg)
            self.assertEqual(pos, pre_pos)
            self.assertEqual(neg, pre_neg)
            self.assertEqual([b.shape_state() for b in blocks], pre_shapes)
            # Keep some of the moves
            if rng.random() < 0.5:
                p.perturb(rng, blocks, pos, neg, outline)
        self.assertEqual(kinds, {ResizeMove, SwapMove, DoubleSwapMove})

    def test_double_swap(self):
        blocks = make_blocks()
        params = AnnealParams(resize_prob=0, pos_swap_prob=0, neg_swap_prob=0, double_swap_prob=1)
        p = Perturbation(blocks, params)
        rng = np.random.default_rng(5)
        pos, neg = [0, 1, 2, 3, 4], [4, 3, 2, 1, 0]
        move = p.perturb(rng, blocks, pos, neg, Shape(10, 10))
        self.assertIsInstance(move, DoubleSwapMove)
        # The same two blocks are swapped in both sequences
        self.assertEqual({pos[move.pos_i], pos[move.pos_j]}, {neg[move.neg_i], neg[move.neg_j]})
        self.assertEqual([neg.index(b) for b in pos], [4, 3, 2, 1, 0])


class TestResize(unittest.TestCase):

    def test_hard_block(self):
        blocks = make_blocks()
        rng = np.random.default_rng(2)
        resize_block(rng, 2, blocks, Shape(10, 10))
        self.assertEqual((blocks[2].width, blocks[2].height), (4, 2))

    def test_soft_blocks_keep_area(self):
        blocks = make_blocks()
        rng = np.random.default_rng(4)
        outline = Shape(12, 12)
        pos, neg = [0, 1, 2, 3, 4], [2, 0, 4, 1, 3]
        for _ in range(200):
            pack(pos, neg, blocks)
            idx = int(rng.choice([0, 1, 4]))
            resize_block(rng, idx, blocks, outline)
            b = blocks[idx]
            self.assertAlmostEqual(b.width * b.height, b.area)
            ar = b.height / b.width
            lo, hi = b.aspect_ratio[0]
            self.assertTrue(lo - 1e-9 <= ar <= hi + 1e-9)


if __name__ == '__main__':
    unittest.main()
