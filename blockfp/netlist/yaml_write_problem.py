# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

from typing import Any

from ..geometry.geometry import Shape
from ..utils.keywords import KW
from .block import Block


def dump_yaml_floorplan(outline: Shape, blocks: list[Block], feasible: bool,
                        terms: dict[str, float], cost: float) -> dict[str, Any]:
    """
    Generates a data structure for a placed floorplan that can be dumped in YAML/JSON
    :param outline: the fixed outline
    :param blocks: the placed blocks
    :param feasible: whether the floorplan fits in the outline
    :param terms: cost breakdown
    :param cost: normalized cost
    :return: the data structure
    """
    cost_info = {k: float(v) for k, v in terms.items()}
    cost_info[KW.NORMALIZED] = float(cost)
    return {
        KW.OUTLINE: [outline.w, outline.h],
        KW.BLOCKS: dump_yaml_blocks(blocks),
        KW.FEASIBLE: feasible,
        KW.COST: cost_info,
    }


def dump_yaml_blocks(blocks: list[Block]) -> dict[str, dict[str, Any]]:
    """
    Generates a data structure for the placed blocks
    :param blocks: list of blocks
    :return: the data structure
    """
    return {b.name: dump_yaml_block(b) for b in blocks}


def dump_yaml_block(block: Block) -> dict[str, Any]:
    info: dict[str, Any] = {
        KW.X: float(block.x),
        KW.Y: float(block.y),
        KW.WIDTH: float(block.width),
        KW.HEIGHT: float(block.height),
        KW.AREA: float(block.area),
    }
    if block.is_macro:
        info[KW.MACROS] = block.num_macro
    return info
