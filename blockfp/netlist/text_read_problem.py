# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Readers for the plain-text net, region and location files of block placers.

Net file: every line of the form
    source: <src> <sink1> <weight1> <sink2> <weight2> ...
produces one two-pin net per sink. Names found in the terminal map are
terminals, the other ones are blocks. Other lines are ignored.

Region and location files: one rectangle per line
    <name> <lx> <ly> <ux> <uy>
For regions the name is only informative.
"""

from blockfp.geometry.geometry import Rect
from blockfp.netlist.netlist_types import Net, Region, Location, TerminalMap
from blockfp.utils.utils import string_is_number


def parse_net_file(filename: str, terminals: TerminalMap) -> list[Net]:
    """
    Reads a net file
    :param filename: name of the file
    :param terminals: known terminals
    :return: the list of nets
    """
    nets = list[Net]()
    with open(filename, "r") as f:
        for line in f:
            words = line.split()
            if len(words) <= 2 or words[0] != "source:":
                continue
            source = words[1]
            assert len(words) % 2 == 0, f"Incorrect net line: {line.strip()}"
            for i in range(2, len(words), 2):
                sink, weight = words[i], words[i + 1]
                assert weight.isdigit(), f"Incorrect weight of net {source}-{sink}: {weight}"
                pins = [source, sink]
                blocks = [p for p in pins if p not in terminals]
                pin_terminals = [p for p in pins if p in terminals]
                nets.append(Net(blocks, pin_terminals, int(weight)))
    return nets


def _parse_rect_lines(filename: str) -> list[tuple[str, Rect]]:
    """Reads the lines <name> <lx> <ly> <ux> <uy> of a file (empty lines are skipped)"""
    rects = list[tuple[str, Rect]]()
    with open(filename, "r") as f:
        for line in f:
            words = line.split()
            if len(words) == 0:
                continue
            assert len(words) == 5 and all(string_is_number(w) for w in words[1:]), \
                f"Incorrect rectangle line: {line.strip()}"
            lx, ly, ux, uy = (float(w) for w in words[1:])
            rects.append((words[0], Rect(lx, ly, ux, uy)))
    return rects


def parse_region_file(filename: str) -> list[Region]:
    """
    Reads a region (keep-out) file
    :param filename: name of the file
    :return: the list of regions
    """
    return [Region(r) for _, r in _parse_rect_lines(filename)]


def parse_location_file(filename: str) -> list[Location]:
    """
    Reads a location file
    :param filename: name of the file
    :return: the list of locations
    """
    return [Location(name, r) for name, r in _parse_rect_lines(filename)]
