# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Module to read floorplanning problems in JSON/YAML format
"""

from typing import Any, cast

from blockfp.geometry.geometry import Shape, Rect
from blockfp.netlist.block import Block, Pair
from blockfp.netlist.netlist_types import Net, Region, Location, TerminalMap, default_terminals
from blockfp.netlist.problem import Problem
from blockfp.utils.keywords import KW
from blockfp.utils.utils import valid_identifier, is_number, string_is_number, read_json_yaml


def parse_yaml_problem(stream: str) -> Problem:
    """
    Parses a problem from a file (JSON or YAML) or from a string of text (YAML).
    If the text has only one line, it is assumed to be a file name
    :param stream: name of the file or YAML text
    :return: the problem
    """
    tree = read_json_yaml(stream)
    assert isinstance(tree, dict), "The YAML root node is not a dictionary"
    for key in tree:
        assert key in [KW.OUTLINE, KW.BLOCKS, KW.NETS, KW.TERMINALS, KW.REGIONS, KW.LOCATIONS], \
            f"Unknown key {key}"
    assert KW.OUTLINE in tree, "Missing outline"
    assert KW.BLOCKS in tree, "Missing blocks"

    outline = parse_yaml_outline(tree[KW.OUTLINE])
    blocks = parse_yaml_blocks(tree[KW.BLOCKS])
    terminals = default_terminals(outline.w, outline.h)
    if KW.TERMINALS in tree:
        terminals.update(parse_yaml_terminals(tree[KW.TERMINALS]))
    nets = parse_yaml_nets(tree.get(KW.NETS, []), terminals)
    regions = [Region(r) for r in parse_yaml_rects(tree.get(KW.REGIONS, []), "region")]
    locations = parse_yaml_locations(tree.get(KW.LOCATIONS, {}))
    return Problem(outline, blocks, nets, regions, locations, terminals)


def parse_yaml_outline(outline: Any) -> Shape:
    """
    Parses the outline: [width, height], {width: w, height: h} or "<width>x<height>"
    :param outline: YAML description of the outline
    :return: the shape of the outline
    """
    if isinstance(outline, str):
        numbers = outline.split("x")
        assert len(numbers) == 2 and all(string_is_number(n) for n in numbers), \
            f"Incorrect outline {outline}"
        w, h = float(numbers[0]), float(numbers[1])
    elif isinstance(outline, dict):
        assert set(outline.keys()) == {KW.WIDTH, KW.HEIGHT}, f"Incorrect outline {outline}"
        w, h = outline[KW.WIDTH], outline[KW.HEIGHT]
    else:
        assert isinstance(outline, list) and len(outline) == 2, f"Incorrect outline {outline}"
        w, h = outline
    assert is_number(w) and is_number(h) and w > 0 and h > 0, \
        "The width and height of the outline must be positive"
    return Shape(float(w), float(h))


def parse_yaml_blocks(blocks: dict) -> list[Block]:
    """
    Parses the blocks of the problem
    :param blocks: The collection of blocks
    :return: the list of blocks
    """
    assert isinstance(blocks, dict) and len(blocks) > 0, \
        "The YAML node for blocks is not a non-empty dictionary"
    _blocks = list[Block]()
    for name, info in blocks.items():
        assert valid_identifier(name), f"Invalid block name: {name}"
        _blocks.append(parse_yaml_block(name, info))
    return _blocks


def parse_yaml_block(name: str, info: dict[str, Any]) -> Block:
    """
    Parses the information of a block
    :param name: name of the block
    :param info: information of the block
    :return: a block
    """
    assert isinstance(info, dict), f"The information for block {name} is not a dictionary"
    for key in info:
        assert key in [KW.AREA, KW.ASPECT_RATIO, KW.MACROS, KW.SHAPES], \
            f"Unknown block attribute {key}"

    num_macro = info.get(KW.MACROS, 0)
    assert isinstance(num_macro, int) and num_macro >= 0, \
        f"Block {name}: incorrect number of macros"

    if num_macro > 0:
        assert KW.SHAPES in info, f"Hard block {name} must define its shapes"
        assert KW.ASPECT_RATIO not in info, f"Hard block {name} cannot define an aspect ratio"
        shapes = parse_yaml_pairs(info[KW.SHAPES], name)
        area = info.get(KW.AREA, shapes[0][0] * shapes[0][1])
        assert is_number(area) and area > 0, f"Block {name}: incorrect area"
        return Block(name, float(area), num_macro, shapes)

    assert KW.SHAPES not in info, f"Soft block {name} cannot define shapes"
    assert KW.AREA in info, f"Soft block {name} must define its area"
    area = info[KW.AREA]
    assert is_number(area) and area > 0, f"Block {name}: incorrect area"
    aspect_ratio: list[Pair] = [(1.0, 1.0)]
    if KW.ASPECT_RATIO in info:
        aspect_ratio = parse_yaml_aspect_ratio(info[KW.ASPECT_RATIO], name)
    return Block(name, float(area), 0, aspect_ratio)


def parse_yaml_aspect_ratio(aspect_ratio: Any, name: str) -> list[Pair]:
    """
    Parses the aspect ratio (height/width) of a soft block. If only one value is given,
    the interval [value, 1/value] or [1/value, value] is taken, in such a way that the
    first component is smaller than the second. A list of intervals can also be given.
    :param aspect_ratio: block attribute
    :param name: name of the block
    :return: the list of intervals
    """
    if is_number(aspect_ratio):
        ar = cast(float, aspect_ratio)
        assert ar > 0, f"Incorrect aspect ratio for block {name}"
        return [(float(min(ar, 1 / ar)), float(max(ar, 1 / ar)))]
    intervals = parse_yaml_pairs(aspect_ratio, name)
    for lo, hi in intervals:
        assert lo <= hi, f"Incorrect aspect ratio interval for block {name}"
    return intervals


def parse_yaml_pairs(pairs: Any, name: str) -> list[Pair]:
    """
    Parses a pair of positive numbers or a list of pairs
    :param pairs: YAML description
    :param name: name of the block
    :return: the list of pairs
    """
    assert isinstance(pairs, list) and len(pairs) > 0, f"Incorrect format for block {name}"
    if is_number(pairs[0]):
        pairs = [pairs]  # Only one pair
    result = list[Pair]()
    for p in pairs:
        assert isinstance(p, list) and len(p) == 2 and all(is_number(v) and v > 0 for v in p), \
            f"Incorrect pair {p} for block {name}"
        result.append((float(p[0]), float(p[1])))
    return result


def parse_yaml_terminals(terminals: dict) -> TerminalMap:
    """
    Parses the terminals: a dictionary of names and [x, y] positions
    :param terminals: YAML description of the terminals
    :return: the map of terminals
    """
    assert isinstance(terminals, dict), "The YAML node for terminals is not a dictionary"
    result = TerminalMap()
    for name, pos in terminals.items():
        assert valid_identifier(name), f"Invalid terminal name: {name}"
        assert isinstance(pos, list) and len(pos) == 2 and all(is_number(v) for v in pos), \
            f"Incorrect position for terminal {name}"
        result[name] = (float(pos[0]), float(pos[1]))
    return result


def parse_yaml_nets(nets: list, terminals: TerminalMap) -> list[Net]:
    """
    Parses the nets. Each net is a list of names with an optional (integer) weight at the end.
    Names of terminals are recognized as terminals, the other ones are blocks.
    :param nets: YAML description of the nets
    :param terminals: known terminals
    :return: the list of nets
    """
    assert isinstance(nets, list), "Incorrect format for the list of nets"
    _nets = list[Net]()
    error_str = "Incorrect specification of net"
    for n in nets:
        assert isinstance(n, list) and len(n) >= 2, error_str
        has_weight = is_number(n[-1])
        names = n[:-1] if has_weight else n[:]
        assert all(isinstance(name, str) for name in names), error_str
        weight = 1
        if has_weight:
            assert float(n[-1]).is_integer(), f"Net weights must be integers: {n}"
            weight = int(n[-1])
        blocks = [name for name in names if name not in terminals]
        pins = [name for name in names if name in terminals]
        _nets.append(Net(blocks, pins, weight))
    return _nets


def parse_yaml_rects(rects: list, what: str) -> list[Rect]:
    """
    Parses a list of rectangles [lx, ly, ux, uy]
    :param rects: YAML description of the rectangles (or a single rectangle)
    :param what: type of rectangles (for error messages)
    :return: the list of rectangles
    """
    assert isinstance(rects, list), f"Incorrect specification of {what}s"
    if len(rects) > 0 and is_number(rects[0]):
        rects = [rects]  # Only one rectangle
    return [parse_yaml_rect(r, what) for r in rects]


def parse_yaml_rect(r: Any, what: str) -> Rect:
    assert isinstance(r, list) and len(r) == 4 and all(is_number(v) for v in r), \
        f"Incorrect format of {what} {r}"
    assert r[0] <= r[2] and r[1] <= r[3], f"Incorrect corners of {what} {r}"
    return Rect(float(r[0]), float(r[1]), float(r[2]), float(r[3]))


def parse_yaml_locations(locations: dict) -> list[Location]:
    """
    Parses the location guides: a dictionary of block names and rectangles
    :param locations: YAML description of the locations
    :return: the list of locations
    """
    assert isinstance(locations, dict), "The YAML node for locations is not a dictionary"
    return [Location(name, parse_yaml_rect(r, "location")) for name, r in locations.items()]


# Placed rectangle of a block: (x, y, width, height)
Placement = dict[str, tuple[float, float, float, float]]


def parse_yaml_placement(stream: str) -> tuple[Placement, bool]:
    """
    Parses a placed floorplan (as written by dump_yaml_floorplan)
    :param stream: name of the file or YAML text
    :return: the placement of every block and the feasibility flag
    """
    tree = read_json_yaml(stream)
    assert isinstance(tree, dict) and KW.BLOCKS in tree, "Incorrect floorplan: missing blocks"
    placement = Placement()
    for name, info in tree[KW.BLOCKS].items():
        assert isinstance(info, dict), f"Incorrect placement of block {name}"
        for key in [KW.X, KW.Y, KW.WIDTH, KW.HEIGHT]:
            assert key in info and is_number(info[key]), f"Block {name}: missing {key}"
        placement[name] = (float(info[KW.X]), float(info[KW.Y]),
                           float(info[KW.WIDTH]), float(info[KW.HEIGHT]))
    return placement, bool(tree.get(KW.FEASIBLE, False))
