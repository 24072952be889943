# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Module to represent a floorplanning problem: outline, blocks, nets,
terminals, keep-out regions and location guides
"""

from typing import Iterable, Optional

from blockfp.geometry.geometry import Shape
from blockfp.netlist.block import Block
from blockfp.netlist.netlist_types import Net, Region, Location, TerminalMap, default_terminals


class Problem:
    """
    Class to represent the input of the floorplanner. The consistency of the
    names (nets and locations referring to existing blocks and terminals) is
    checked here, so that the optimizer can trust its input.
    """

    _outline: Shape  # Fixed outline
    _blocks: list[Block]  # Blocks to be placed
    _name2block: dict[str, Block]  # Map from block names to blocks
    _nets: list[Net]
    _terminals: TerminalMap  # Positions of the fixed terminals
    _regions: list[Region]  # Keep-out regions for macros
    _locations: list[Location]  # Location guides

    def __init__(self, outline: Shape, blocks: Iterable[Block],
                 nets: Iterable[Net] = (), regions: Iterable[Region] = (),
                 locations: Iterable[Location] = (),
                 terminals: Optional[TerminalMap] = None):
        """
        Constructor of a problem
        :param outline: width and height of the fixed outline
        :param blocks: blocks to be placed
        :param nets: nets of the problem
        :param regions: keep-out regions for the macros
        :param locations: location guides for the blocks
        :param terminals: extra terminals (the standard boundary terminals are always defined)
        """
        assert outline.w > 0 and outline.h > 0, "The outline must have a positive width and height"
        self._outline = outline
        self._blocks = list(blocks)
        self._name2block = {}
        for b in self._blocks:
            assert b.name not in self._name2block, f"Duplicated block {b.name}"
            self._name2block[b.name] = b
        self._terminals = default_terminals(outline.w, outline.h)
        if terminals is not None:
            self._terminals.update(terminals)
        for t in self._terminals:
            assert t not in self._name2block, f"Terminal {t} has the same name as a block"
        self._nets, self._regions, self._locations = [], [], []
        self.add_nets(nets)
        self.add_regions(regions)
        self.add_locations(locations)

    @property
    def outline(self) -> Shape:
        return self._outline

    @property
    def blocks(self) -> list[Block]:
        return self._blocks

    @property
    def num_blocks(self) -> int:
        return len(self._blocks)

    @property
    def nets(self) -> list[Net]:
        return self._nets

    @property
    def terminals(self) -> TerminalMap:
        return self._terminals

    @property
    def regions(self) -> list[Region]:
        return self._regions

    @property
    def locations(self) -> list[Location]:
        return self._locations

    def get_block(self, name: str) -> Block:
        """
        Returns the block with a certain name
        :param name: name of the block
        :return: the block
        """
        assert name in self._name2block, f"Block {name} does not exist"
        return self._name2block[name]

    def add_nets(self, nets: Iterable[Net]) -> None:
        """Adds nets, checking that all their pins exist"""
        for n in nets:
            for b in n.blocks:
                assert b in self._name2block, f"Unknown block {b} in net"
            for t in n.terminals:
                assert t in self._terminals, f"Unknown terminal {t} in net"
            assert n.weight > 0, f"Incorrect net weight {n.weight}"
            self._nets.append(n)

    def add_regions(self, regions: Iterable[Region]) -> None:
        self._regions.extend(regions)

    def add_locations(self, locations: Iterable[Location]) -> None:
        """Adds location guides, checking that their blocks exist"""
        for loc in locations:
            assert loc.name in self._name2block, f"Unknown block {loc.name} in location"
            self._locations.append(loc)
