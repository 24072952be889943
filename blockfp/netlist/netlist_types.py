# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

from dataclasses import dataclass, field

from ..geometry.geometry import Rect

# Position of a fixed terminal
TerminalMap = dict[str, tuple[float, float]]


@dataclass(frozen=True)
class Net:
    """Representation of a net: blocks and terminals connected with a weight"""
    blocks: list[str]  # Names of the blocks of the net
    terminals: list[str] = field(default_factory=list)  # Names of the terminals
    weight: int = 1  # Weight of the net

    def __repr__(self) -> str:
        pins = self.blocks + self.terminals
        if self.weight == 1:
            return f'Net<pins={pins}>'
        return f'Net<pins={pins}, weight={self.weight}>'


@dataclass(frozen=True)
class Region:
    """Keep-out rectangle for hard macros"""
    rect: Rect


@dataclass(frozen=True)
class Location:
    """Guidance rectangle for a block"""
    name: str  # Name of the block
    rect: Rect


def default_terminals(width: float, height: float) -> TerminalMap:
    """
    Returns the positions of the twelve standard terminals on the outline:
    L/R/B/T for the side and L/M/U for the lower (1/6), middle (1/2) and
    upper (5/6) position along the side.
    :param width: width of the outline
    :param height: height of the outline
    :return: the map from terminal names to positions
    """
    terminals = TerminalMap()
    for suffix, f in (("L", 1 / 6), ("M", 1 / 2), ("U", 5 / 6)):
        terminals["L" + suffix] = (0.0, height * f)
        terminals["R" + suffix] = (width, height * f)
        terminals["B" + suffix] = (width * f, 0.0)
        terminals["T" + suffix] = (width * f, height)
    return terminals
