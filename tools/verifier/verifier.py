# (c) Víctor Franco Sanchez 2022
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Verifies that a floorplan is a legal placement of the blocks of a problem.
The outline has the same relative slack as the feasibility check of the
placer. Every pair of overlapping blocks is reported, including a macro
moved onto a soft block by the alignment of the macros.
"""

from argparse import ArgumentParser
from typing import Any

from blockfp.geometry.geometry import Shape, overlap_area
from blockfp.annealing.params import AnnealParams
from blockfp.netlist.block import Block
from blockfp.netlist.yaml_read_problem import parse_yaml_problem, parse_yaml_placement

# (x, y, width, height)
Placed = tuple[float, float, float, float]


def parse_options(prog: str | None = None, args: list[str] | None = None) -> dict[str, Any]:
    """
    Parse the command-line arguments for the tool
    :param prog: tool name
    :param args: command-line arguments
    :return: a dictionary with the arguments
    """
    parser = ArgumentParser(prog=prog, description="Verifies that a floorplan places all the blocks of a "
                                                   "problem with valid shapes and without overlaps",
                            usage='%(prog)s [options]')
    parser.add_argument("problem", type=str, help="Input problem (.yaml or .json)")
    parser.add_argument("floorplan", type=str, help="Floorplan (.yaml or .json)")
    parser.add_argument("--epsilon", type=float, dest='epsilon', default=1e-6,
                        help="The maximum allowable relative error")
    parser.add_argument("--outline", action="store_true",
                        help="Check that the blocks are inside the outline")
    parser.add_argument("--tolerance", type=float, dest='tolerance',
                        default=AnnealParams().feasibility_tolerance,
                        help="Relative slack of the outline (feasibility tolerance of the placer)")
    return vars(parser.parse_args(args))


def shape_check(b: Block, p: Placed, epsilon: float) -> bool:
    """Soft blocks must keep their area (or less, if shrunk). Hard blocks must take one of their options"""
    _, _, w, h = p
    if b.is_macro:
        for ow, oh in b.aspect_ratio:
            if abs(ow - w) <= epsilon * ow and abs(oh - h) <= epsilon * oh:
                return True
        print("Block", b.name, "is hard, but its shape is not one of its options")
        return False
    if w * h > b.area * (1 + epsilon):
        print("Block", b.name, "has an area larger than the input area")
        return False
    return True


def outline_check(name: str, p: Placed, outline: Shape, epsilon: float, tolerance: float) -> bool:
    """The blocks must be inside the outline, enlarged by the relative tolerance"""
    x, y, w, h = p
    eps_w, eps_h = epsilon * outline.w, epsilon * outline.h
    max_w, max_h = outline.w * (1 + tolerance) + eps_w, outline.h * (1 + tolerance) + eps_h
    if x < -eps_w or y < -eps_h or x + w > max_w or y + h > max_h:
        print("Block", name, "falls outside of the outline")
        return False
    return True


def overlap_check(n1: str, p1: Placed, n2: str, p2: Placed, epsilon: float) -> bool:
    x1, y1, w1, h1 = p1
    x2, y2, w2, h2 = p2
    overlap = overlap_area(x1, y1, x1 + w1, y1 + h1, x2, y2, x2 + w2, y2 + h2)
    if overlap > epsilon * min(w1 * h1, w2 * h2):
        print("Blocks", n1, "and", n2, "intersect")
        return False
    return True


def verify(problem_file: str, floorplan_file: str, epsilon: float, check_outline: bool,
           tolerance: float = AnnealParams().feasibility_tolerance) -> bool:
    """
    Verifies a floorplan and prints the errors found
    :param problem_file: the problem
    :param floorplan_file: the floorplan
    :param epsilon: relative tolerance
    :param check_outline: whether the blocks must be inside the outline
    :param tolerance: relative slack of the outline
    :return: True if no errors were found
    """
    problem = parse_yaml_problem(problem_file)
    placement, feasible = parse_yaml_placement(floorplan_file)
    ok = True

    for name in placement:
        if name not in [b.name for b in problem.blocks]:
            print("Block", name, "is present on the floorplan, but not on the problem")
            ok = False

    placed = list[tuple[str, Placed]]()
    for b in problem.blocks:
        if b.name not in placement:
            print("Block", b.name, "is present on the problem, but not on the floorplan")
            ok = False
            continue
        p = placement[b.name]
        ok &= shape_check(b, p, epsilon)
        if check_outline or feasible:
            ok &= outline_check(b.name, p, problem.outline, epsilon, tolerance)
        placed.append((b.name, p))

    for i, (n1, p1) in enumerate(placed):
        for n2, p2 in placed[i + 1:]:
            ok &= overlap_check(n1, p1, n2, p2, epsilon)
    return ok


def main(prog: str | None = None, args: list[str] | None = None) -> int:
    """
    Main function.
    """
    options = parse_options(prog, args)
    ok = verify(options['problem'], options['floorplan'], options['epsilon'], options['outline'],
                options['tolerance'])
    if ok:
        print("No errors were found!")
    else:
        print("Some errors were found")
    return 0 if ok else 1


if __name__ == "__main__":
    main()
