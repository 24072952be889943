# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

import math
import os
import tempfile
import unittest

from blockfp.annealing.params import AnnealParams


class TestParams(unittest.TestCase):

    def test_defaults(self):
        p = AnnealParams()
        self.assertEqual(p.max_num_restart, 2)
        self.assertEqual(p.feasibility_tolerance, 0.001)
        self.assertEqual(p.notch_size_cap, 50.0)
        self.assertNotIn("sampling_cooling_rate", p.as_dict())

    def test_cooling_rates(self):
        rates = AnnealParams(num_worker=3).cooling_rates()
        self.assertEqual(len(rates), 3)
        self.assertAlmostEqual(rates[0], 0.995)
        self.assertAlmostEqual(rates[1], 0.99)
        self.assertAlmostEqual(rates[2], 0.985)
        self.assertEqual(AnnealParams(num_worker=1).cooling_rates(), [0.995])

    def test_shrink_schedule(self):
        p = AnnealParams(max_num_step=300, shrink_freq=0.01)
        self.assertEqual(p.max_num_shrink, 100)
        self.assertEqual(p.shrink_period, 3)
        self.assertEqual(AnnealParams(max_num_step=10, shrink_freq=0.01).shrink_period, 1)

    def test_initial_temperature(self):
        p = AnnealParams(init_prob=0.9)
        t = p.initial_temperature(2.0)
        self.assertAlmostEqual(math.exp(-2.0 / t), 0.9)

    def test_from_dict(self):
        p = AnnealParams.from_dict({"num_level": 2, "area_weight": 1, "parallel": False})
        self.assertEqual(p.num_level, 2)
        self.assertEqual(p.area_weight, 1.0)
        self.assertIsInstance(p.area_weight, float)
        self.assertFalse(p.parallel)
        self.assertEqual(AnnealParams.from_dict(None), AnnealParams())

    def test_bad_params(self):
        self.assertRaises(AssertionError, AnnealParams.from_dict, {"unknown": 1})
        self.assertRaises(AssertionError, AnnealParams.from_dict, {"num_level": 2.5})
        self.assertRaises(AssertionError, AnnealParams.from_dict, {"parallel": 1})
        self.assertRaises(AssertionError, AnnealParams, resize_prob=1.5)
        self.assertRaises(AssertionError, AnnealParams, init_prob=1.0)
        self.assertRaises(AssertionError, AnnealParams, num_worker=0)
        self.assertRaises(AssertionError, AnnealParams, resize_prob=0, pos_swap_prob=0,
                          neg_swap_prob=0, double_swap_prob=0)

    def test_updated(self):
        p = AnnealParams().updated(seed=5, num_level=None)
        self.assertEqual(p.seed, 5)
        self.assertEqual(p.num_level, AnnealParams().num_level)

    def test_read(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            filename = os.path.join(tmpdir, "params.yaml")
            with open(filename, "w") as f:
                f.write("max_num_step: 20\nperturb_per_step: 10\nnotch_align: false\n")
            p = AnnealParams.read(filename)
        self.assertEqual(p.max_num_step, 20)
        self.assertEqual(p.perturb_per_step, 10)
        self.assertFalse(p.notch_align)


if __name__ == '__main__':
    unittest.main()
