# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

import contextlib
import io
import os
import tempfile
import unittest

from blockfp.netlist.yaml_read_problem import parse_yaml_placement
from blockfp.utils.utils import read_json_yaml_file
from tools.place.place import main, parse_options, read_params, read_problem
from tools.verifier.verifier import verify

PROBLEM = """\
Outline: [50, 40]
Blocks:
  cpu: {area: 120, aspect_ratio: [[0.5, 2.0]]}
  gpu: {area: 80, aspect_ratio: 2}
  io: {area: 30}
Nets:
  - [cpu, gpu, 2]
  - [gpu, io, LL]
"""

FAST = ["--levels", "1", "--workers", "2", "--steps", "10", "--serial", "--seed", "4"]


class TestPlace(unittest.TestCase):

    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.problem = self.write("problem.yaml", PROBLEM)

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def write(self, name: str, text: str) -> str:
        filename = os.path.join(self.tmpdir.name, name)
        with open(filename, "w") as f:
            f.write(text)
        return filename

    def test_options(self):
        params_file = self.write("params.yml", "perturb_per_step: 12\nnum_level: 4\n")
        options = parse_options("place", [self.problem, "-p", params_file, "--levels", "2", "--serial"])
        params = read_params(options)
        self.assertEqual(params.perturb_per_step, 12)
        self.assertEqual(params.num_level, 2)  # The command line has priority
        self.assertFalse(params.parallel)

    def test_extra_files(self):
        nets = self.write("nets.txt", "source: cpu io 3\n")
        regions = self.write("regions.txt", "r0 0 0 5 5\n")
        locations = self.write("locations.txt", "io 30 20 40 30\n")
        options = parse_options("place", [self.problem, "--nets", nets, "--regions", regions,
                                          "--locations", locations])
        problem = read_problem(options)
        self.assertEqual(len(problem.nets), 3)
        self.assertEqual(len(problem.regions), 1)
        self.assertEqual(problem.locations[0].name, "io")

    def test_place_and_verify(self):
        outfile = os.path.join(self.tmpdir.name, "floorplan.yaml")
        self.assertEqual(main("place", [self.problem, "-o", outfile] + FAST), 0)
        data = read_json_yaml_file(outfile)
        self.assertEqual(set(data["Blocks"].keys()), {"cpu", "gpu", "io"})
        self.assertTrue(data["Feasible"])
        self.assertIn("normalized", data["Cost"])
        placement, feasible = parse_yaml_placement(outfile)
        self.assertTrue(feasible)
        self.assertTrue(verify(self.problem, outfile, 1e-6, True))

    def test_verify_within_tolerance(self):
        # The macro is slightly wider than the outline, but within the feasibility tolerance
        problem = self.write("wide.yaml", "Outline: [100, 100]\n"
                                          "Blocks:\n"
                                          "  m: {macros: 1, shapes: [[100.05, 50]]}\n"
                                          "  s: {area: 2000, aspect_ratio: [[0.2, 1]]}\n")
        outfile = os.path.join(self.tmpdir.name, "wide_floorplan.yaml")
        self.assertEqual(main("place", [problem, "-o", outfile] + FAST), 0)
        self.assertTrue(verify(problem, outfile, 1e-6, False))
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertFalse(verify(problem, outfile, 1e-6, False, 0.0))

    def test_json_output(self):
        outfile = os.path.join(self.tmpdir.name, "floorplan.json")
        main("place", [self.problem, "-o", outfile] + FAST)
        self.assertEqual(read_json_yaml_file(outfile)["Outline"], [50, 40])


if __name__ == '__main__':
    unittest.main()
