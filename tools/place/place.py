# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Block placement with simulated annealing on sequence pairs
"""

import logging
from argparse import ArgumentParser
from typing import Any

from blockfp.annealing.driver import floorplan, FloorplanResult
from blockfp.annealing.params import AnnealParams
from blockfp.netlist.problem import Problem
from blockfp.netlist.text_read_problem import parse_net_file, parse_region_file, parse_location_file
from blockfp.netlist.yaml_read_problem import parse_yaml_problem
from blockfp.netlist.yaml_write_problem import dump_yaml_floorplan
from blockfp.utils.utils import write_by_suffix, write_json_yaml


def parse_options(prog: str | None = None, args: list[str] | None = None) -> dict[str, Any]:
    """
    Parse the command-line arguments for the tool
    :param prog: tool name
    :param args: command-line arguments
    :return: a dictionary with the arguments
    """
    parser = ArgumentParser(prog=prog, description="Places the blocks of a problem inside a fixed outline "
                                                   "with simulated annealing on sequence pairs",
                            usage='%(prog)s [options]')
    parser.add_argument("problem", type=str, help="Input problem (.yaml or .json)")
    parser.add_argument("-o", "--outfile", type=str, help="Output floorplan (.yaml or .json)")
    parser.add_argument("-p", "--params", type=str, help="Annealing parameters (.yaml or .json)")
    parser.add_argument("--nets", type=str, help="Net file (source: <src> <sink> <weight> ...)")
    parser.add_argument("--regions", type=str, help="Region file (<name> lx ly ux uy)")
    parser.add_argument("--locations", type=str, help="Location file (<name> lx ly ux uy)")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--levels", type=int, help="Number of levels of the parallel annealing")
    parser.add_argument("--workers", type=int, help="Number of workers at every level")
    parser.add_argument("--steps", type=int, help="Number of temperature steps of every worker")
    parser.add_argument("--serial", action="store_true", help="Run the workers sequentially")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print progress information")
    return vars(parser.parse_args(args))


def read_problem(options: dict[str, Any]) -> Problem:
    """Reads the problem and the optional net, region and location files"""
    problem = parse_yaml_problem(options["problem"])
    if options["nets"] is not None:
        problem.add_nets(parse_net_file(options["nets"], problem.terminals))
    if options["regions"] is not None:
        problem.add_regions(parse_region_file(options["regions"]))
    if options["locations"] is not None:
        problem.add_locations(parse_location_file(options["locations"]))
    return problem


def read_params(options: dict[str, Any]) -> AnnealParams:
    """Reads the parameters. The command-line options override the values of the file"""
    params = AnnealParams() if options["params"] is None else AnnealParams.read(options["params"])
    return params.updated(seed=options["seed"], num_level=options["levels"],
                          num_worker=options["workers"], max_num_step=options["steps"],
                          parallel=False if options["serial"] else None)


def result_to_dict(problem: Problem, result: FloorplanResult) -> dict[str, Any]:
    return dump_yaml_floorplan(problem.outline, result.blocks, result.feasible,
                               result.terms.as_dict(), result.cost)


def main(prog: str | None = None, args: list[str] | None = None) -> int:
    """Main function."""
    options = parse_options(prog, args)
    logging.basicConfig(level=logging.INFO if options["verbose"] else logging.WARNING,
                        format="%(name)s: %(message)s")
    problem = read_problem(options)
    params = read_params(options)
    result = floorplan(problem, params)
    data = result_to_dict(problem, result)
    if options["outfile"] is None:
        print(write_json_yaml(data, False))
    else:
        write_by_suffix(data, options["outfile"])
    return 0 if result.feasible else 1


if __name__ == "__main__":
    main()
