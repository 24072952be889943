# (c) The FRAME Authors 2025
# For the FRAME Project.
# Licensed under the MIT License
# (see https://github.com/jordicf/FRAME/blob/master/LICENSE.txt).

"""
Sequence-pair packing. A sequence pair (pos, neg) encodes the relative
positions of the blocks: if a precedes b in both sequences, a is at the
left of b; if a precedes b in pos and follows b in neg, a is above b.
The packing computes the lower-left corners of the blocks with the
longest-common-subsequence formulation (O(n^2) in the worst case).
"""

from typing import Sequence

from blockfp.netlist.block import Block


def random_sequence_pair(n: int, rng) -> tuple[list[int], list[int]]:
    """
    Returns a random sequence pair for n blocks
    :param n: number of blocks
    :param rng: numpy random generator
    :return: the positive and negative sequences
    """
    pos = [int(i) for i in rng.permutation(n)]
    neg = [int(i) for i in rng.permutation(n)]
    return pos, neg


def _longest_chain(seq: list[int], match: list[int], sizes: list[float],
                   coords: list[float]) -> float:
    """
    Computes the coordinates of the blocks along one axis
    :param seq: sequence traversed in order
    :param match: position of every block in the other sequence
    :param sizes: size of every block along the axis
    :param coords: output coordinates (indexed by block)
    :return: the length of the packing along the axis
    """
    n = len(seq)
    length = [0.0] * n
    for b in seq:
        p = match[b]
        coords[b] = length[p]
        t = coords[b] + sizes[b]
        for j in range(p, n):
            if t > length[j]:
                length[j] = t
            else:
                break
    return length[n - 1]


def pack(pos_seq: Sequence[int], neg_seq: Sequence[int], blocks: list[Block]) -> tuple[float, float]:
    """
    Places the blocks according to a sequence pair. The x and y coordinates
    of the blocks are updated
    :param pos_seq: positive sequence (permutation of the block indices)
    :param neg_seq: negative sequence (permutation of the block indices)
    :param blocks: the blocks
    :return: width and height of the bounding box of the packing
    """
    n = len(blocks)
    assert len(pos_seq) == n and len(neg_seq) == n, "Incorrect length of the sequence pair"
    if n == 0:
        return 0.0, 0.0

    match = [0] * n
    for i, b in enumerate(neg_seq):
        match[b] = i

    xs, ys = [0.0] * n, [0.0] * n
    width = _longest_chain(list(pos_seq), match, [b.width for b in blocks], xs)
    height = _longest_chain(list(reversed(pos_seq)), match, [b.height for b in blocks], ys)
    for b, x, y in zip(blocks, xs, ys):
        b.x, b.y = x, y
    return width, height
