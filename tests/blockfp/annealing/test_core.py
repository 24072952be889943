# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

import unittest

from blockfp.geometry.geometry import Shape, Rect, overlap_area
from blockfp.netlist.block import Block
from blockfp.netlist.netlist_types import Net, Region, default_terminals
from blockfp.annealing.core import AnnealingCore, MIN_TEMPERATURE
from blockfp.annealing.cost import CostTerms
from blockfp.annealing.params import AnnealParams
from blockfp.annealing.sequence_pair import pack

PARAMS = AnnealParams(max_num_step=30, perturb_per_step=20, num_level=1, num_worker=1, parallel=False)


def make_core(outline: Shape, blocks: list[Block], nets=(), regions=(), params=PARAMS,
              seed: int = 1) -> AnnealingCore:
    return AnnealingCore(outline, blocks, list(nets), list(regions), [],
                         default_terminals(outline.w, outline.h), params, 0.95, seed,
                         randomize_shapes=True)


class TestCore(unittest.TestCase):

    def setUp(self) -> None:
        self.blocks = [Block("a", 20, 0, [(0.5, 2)]), Block("b", 30, 0, [(0.5, 2)]),
                       Block("c", 12, 1, [(3, 4), (4, 3)]), Block("d", 10, 0, [(0.2, 5)])]
        self.nets = [Net(["a", "b"], [], 2), Net(["c", "d"], ["LL"])]

    def test_sampling(self):
        core = make_core(Shape(12, 12), self.blocks, self.nets)
        core.sample()
        self.assertGreater(core.init_temp, 0)
        self.assertGreater(core.norms.area, 0)
        self.assertGreater(core.norms.wirelength, 0)

    def test_input_blocks_not_modified(self):
        shapes = [(b.width, b.height) for b in self.blocks]
        core = make_core(Shape(12, 12), self.blocks, self.nets)
        core.sample()
        core.run()
        self.assertEqual(shapes, [(b.width, b.height) for b in self.blocks])

    def test_run_consistency(self):
        core = make_core(Shape(12, 12), self.blocks, self.nets)
        core.sample()
        core.run()
        n = len(self.blocks)
        self.assertEqual(sorted(core.pos_seq), list(range(n)))
        self.assertEqual(sorted(core.neg_seq), list(range(n)))
        # The reported floorplan is the packing of the sequences
        coords = [(b.x, b.y) for b in core.blocks]
        width, height = pack(core.pos_seq, core.neg_seq, core.blocks)
        self.assertAlmostEqual(width, core.width)
        self.assertAlmostEqual(height, core.height)
        self.assertEqual(coords, [(b.x, b.y) for b in core.blocks])
        for i, b1 in enumerate(core.blocks):
            for b2 in core.blocks[i + 1:]:
                self.assertAlmostEqual(overlap_area(b1.x, b1.y, b1.ux, b1.uy, b2.x, b2.y, b2.ux, b2.uy), 0)
        self.assertIn((core.blocks[2].width, core.blocks[2].height), [(3, 4), (4, 3)])

    def test_deterministic(self):
        results = []
        for _ in range(2):
            core = make_core(Shape(12, 12), self.blocks, self.nets, seed=17)
            core.sample()
            core.run()
            results.append((core.cost, core.pos_seq, core.neg_seq, [(b.x, b.y) for b in core.blocks]))
        self.assertEqual(results[0], results[1])

    def test_set_sequences(self):
        core = make_core(Shape(12, 12), self.blocks, self.nets)
        core.set_normalization(2.0, CostTerms(area=100))
        core.set_sequences([3, 2, 1, 0], [3, 2, 1, 0])
        self.assertEqual(core.init_temp, 2.0)
        self.assertEqual(core.norms, CostTerms(area=100))
        self.assertAlmostEqual(core.cost, PARAMS.area_weight * core.area / 100)
        self.assertRaises(AssertionError, core.set_sequences, [0, 1, 2], [0, 1, 2, 3])

    def test_oversized_macro(self):
        # A single macro larger than the outline: no move is possible
        core = make_core(Shape(10, 10), [Block("m", 400, 1, [(20, 20)])])
        core.sample()
        self.assertEqual(core.init_temp, MIN_TEMPERATURE)
        core.run()
        self.assertFalse(core.is_feasible())
        self.assertEqual((core.width, core.height), (20, 20))
        self.assertEqual((core.blocks[0].width, core.blocks[0].height), (20, 20))

    def test_zero_temperature(self):
        # Uphill moves are rejected, but the run goes on
        core = make_core(Shape(12, 12), self.blocks, self.nets)
        core.sample()
        core.set_normalization(0.0, core.norms)
        core.run()
        width, height = pack(core.pos_seq, core.neg_seq, core.blocks)
        self.assertAlmostEqual(width, core.width)
        self.assertAlmostEqual(height, core.height)
        self.assertEqual(sorted(core.pos_seq), list(range(len(self.blocks))))

    def test_restarts(self):
        core = make_core(Shape(10, 10), [Block("m", 400, 1, [(20, 20)])])
        core.sample()
        with self.assertLogs("blockfp.annealing.core", level="DEBUG") as logs:
            core.run()
        restarts = [m for m in logs.output if "restart" in m]
        self.assertEqual(len(restarts), PARAMS.max_num_restart)

    def test_shrink(self):
        # The soft blocks do not fit: they are shrunk while the floorplan is infeasible
        blocks = [Block("a", 60, 0, [(0.5, 2)]), Block("b", 60, 0, [(0.5, 2)])]
        params = PARAMS.updated(shrink_factor=0.9, shrink_freq=0.05)
        core = make_core(Shape(10, 10), blocks, params=params)
        core.sample()
        core.run()
        self.assertLess(sum(b.area for b in core.blocks), 120)
        self.assertEqual(sum(b.area for b in blocks), 120)

    def test_macro_in_blockage(self):
        # The macro fills the outline, which is a keep-out region
        blocks = [Block("m", 100, 1, [(10, 10)]), Block("s1", 1), Block("s2", 1)]
        core = make_core(Shape(10, 10), blocks, regions=[Region(Rect(0, 0, 10, 10))])
        core.sample()
        core.run()
        self.assertGreaterEqual(core.terms.macro_blockage, 64 - 1e-9)
        self.assertFalse(core.is_feasible())

    def test_feasible(self):
        core = make_core(Shape(30, 30), self.blocks, self.nets)
        core.sample()
        core.run()
        self.assertTrue(core.is_feasible())
        self.assertEqual(core.terms.outline, 0)


if __name__ == '__main__':
    unittest.main()
