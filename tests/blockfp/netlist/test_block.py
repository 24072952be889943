# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

import math
import unittest

import numpy as np

from blockfp.netlist.block import Block


class TestSoftBlock(unittest.TestCase):

    def setUp(self) -> None:
        # Two intervals of aspect ratio: [0.25, 0.5] and [2, 4]
        self.block = Block("A", 100, 0, [(2.0, 4.0), (0.25, 0.5)])

    def test_initial_shape(self):
        b = self.block
        self.assertTrue(b.is_soft)
        self.assertTrue(b.is_resizable)
        self.assertEqual(b.aspect_ratio, [(0.25, 0.5), (2.0, 4.0)])
        self.assertAlmostEqual(b.height / b.width, 0.25)
        self.assertAlmostEqual(b.width * b.height, 100)

    def test_limits(self):
        b = self.block
        self.assertAlmostEqual(b.height_limit[0][0], 5)
        self.assertAlmostEqual(b.height_limit[1][1], 20)
        self.assertAlmostEqual(b.width_limit[0][0], 20)
        self.assertAlmostEqual(b.width_limit[1][1], 5)

    def test_change_width(self):
        b = self.block
        b.change_width(1000)  # Clamped to the widest shape
        self.assertAlmostEqual(b.width, 20)
        b.change_width(1)  # Clamped to the narrowest shape
        self.assertAlmostEqual(b.width, 5)
        # Between the intervals [14.14, 20] and [5, 7.07]: closest bound
        b.change_width(8)
        self.assertAlmostEqual(b.width, math.sqrt(50))
        b.change_width(13)
        self.assertAlmostEqual(b.width, math.sqrt(200))
        b.change_width(15)
        self.assertAlmostEqual(b.width, 15)
        self.assertAlmostEqual(b.width * b.height, 100)

    def test_change_height(self):
        b = self.block
        b.change_height(100)
        self.assertAlmostEqual(b.height, 20)
        b.change_height(0.1)
        self.assertAlmostEqual(b.height, 5)
        b.change_height(6)
        self.assertAlmostEqual(b.height, 6)
        self.assertAlmostEqual(b.width * b.height, 100)

    def test_random_shapes_keep_area(self):
        rng = np.random.default_rng(7)
        b = self.block
        for _ in range(50):
            b.choose_random_aspect_ratio(rng)
            self.assertAlmostEqual(b.width * b.height, 100)
            ar = b.height / b.width
            self.assertTrue(0.25 - 1e-9 <= ar <= 0.5 + 1e-9 or 2 - 1e-9 <= ar <= 4 + 1e-9)

    def test_shrink(self):
        b = self.block
        w, h = b.width, b.height
        b.shrink(0.5)
        self.assertAlmostEqual(b.width, w / 2)
        self.assertAlmostEqual(b.height, h / 2)
        self.assertAlmostEqual(b.area, 25)
        self.assertAlmostEqual(b.height_limit[1][1], 10)

    def test_restore_shape(self):
        b = self.block
        state = b.shape_state()
        b.shrink(0.9)
        b.change_width(17)
        b.restore_shape(state)
        self.assertEqual(b.shape_state(), state)
        self.assertAlmostEqual(b.width_limit[0][0], 20)

    def test_copy(self):
        b = self.block
        c = b.copy()
        c.x = 10
        c.change_width(15)
        self.assertEqual(b.x, 0)
        self.assertNotEqual(b.width, c.width)


class TestHardBlock(unittest.TestCase):

    def test_options(self):
        b = Block("M", 200, 2, [(10, 20), (20, 10), (40, 5)])
        self.assertTrue(b.is_macro)
        self.assertTrue(b.is_resizable)
        self.assertEqual((b.width, b.height), (10, 20))
        rng = np.random.default_rng(1)
        for _ in range(20):
            option = b.option
            b.resize_hard_block(rng)
            self.assertNotEqual(b.option, option)
            self.assertIn((b.width, b.height), b.aspect_ratio)

    def test_not_resizable(self):
        b = Block("M", 200, 1, [(10, 20)])
        self.assertFalse(b.is_resizable)
        b.resize_hard_block(np.random.default_rng(1))
        b.change_width(5)
        b.shrink(0.5)
        self.assertEqual((b.width, b.height), (10, 20))

    def test_bad_blocks(self):
        self.assertRaises(AssertionError, Block, "A", 0)
        self.assertRaises(AssertionError, Block, "A", 10, 0, [(2, 1)])
        self.assertRaises(AssertionError, Block, "A", 10, 1, [(0, 1)])


if __name__ == '__main__':
    unittest.main()
