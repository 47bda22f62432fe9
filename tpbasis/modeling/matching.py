"""Map a set of vectors onto another one by maximal overlap.

The typical use is labelling dressed eigenvectors of an interacting
Hamiltonian with the bare product states they are closest to. Every vector of
``X`` is sent to the vector of ``Y`` with the largest overlap; when several
vectors of ``X`` land on the same target a tie-break heuristic reassigns all
but the strongest of them to their best target among the remaining ones.

The heuristic is greedy. It is not a maximum-weight bipartite matching and it
is not guaranteed to converge to an injective mapping: after ``max_rounds``
rounds the current mapping is returned as is, flagged as non-injective.
"""

import numpy as np
from collections import namedtuple
from tpbasis.tools import validate_parameters, SizeError
from .vectors import overlap, _as_vector_list
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "VectorMapping",
    "match_vectors",
    "group_indices",
]

VectorMapping = namedtuple("VectorMapping", ["mapping", "is_injective"])
VectorMapping.__doc__ = """Result of :func:`match_vectors`.

mapping : numpy.ndarray
    ``mapping[i]`` is the 0-based position in ``Y`` assigned to ``X[i]``.
is_injective : bool
    ``False`` only if the tie-break rounds were exhausted with repeated targets.
"""


def group_indices(values):
    """Positions holding each value, in first-occurrence order.

    >>> group_indices([2, 0, 2])
    {2: [0, 2], 0: [1]}
    """
    groups = {}
    for pos, value in enumerate(values):
        groups.setdefault(value, []).append(pos)
    return groups


def _best_targets(overlaps, x_indices, y_indices):
    # np.argmax keeps the first of equal maxima
    y_indices = np.asarray(y_indices)
    block = overlaps[np.ix_(x_indices, y_indices)]
    return y_indices[np.argmax(block, axis=1)]


def _break_ties(mapping, overlaps):
    ny = overlaps.shape[1]
    for iy, contenders in group_indices(mapping.tolist()).items():
        if len(contenders) < 2:
            continue
        # the contender with the largest overlap keeps iy
        winner = contenders[int(np.argmax(overlaps[contenders, iy]))]
        losers = [ix for ix in contenders if ix != winner]
        others = [jj for jj in range(ny) if jj != iy]
        mapping[losers] = _best_targets(overlaps, losers, others)
        logger.debug(f"target {iy}: kept {winner}, reassigned {losers}")
    return mapping


def match_vectors(X, Y, max_rounds=10):
    """Injective map from the vectors of ``X`` to the vectors of ``Y``.

    Parameters
    ----------
    X, Y : sequence of vectors or 2D array
        Vector sets; 2D arrays are read column by column. ``len(Y)`` must be
        at least ``len(X)``.
    max_rounds : int, optional
        Number of tie-break rounds before giving up.

    Returns
    -------
    VectorMapping
        ``(mapping, is_injective)``. A non-injective result is also reported
        through a logged warning.

    Raises
    ------
    SizeError
        If ``Y`` holds fewer vectors than ``X``.
    RangeError
        If ``max_rounds`` is negative.

    Notes
    -----
    At most ``max_rounds`` tie-break rounds are run, and injectivity is
    checked again after the last one, so a mapping fixed by the last round is
    reported as injective. A recursive formulation that resolves at depths
    ``0..max_rounds`` runs one round more and warns even when that round
    succeeds.
    """
    validate_parameters(max_rounds=max_rounds)
    X, Y = _as_vector_list(X), _as_vector_list(Y)
    nx, ny = len(X), len(Y)
    if ny < nx:
        raise SizeError(
            f"an injective mapping needs len(Y) >= len(X), got {ny} < {nx}"
        )
    if nx == 0:
        return VectorMapping(np.zeros(0, dtype=np.int64), True)
    overlaps = np.asarray(overlap(X, Y), dtype=float)
    mapping = _best_targets(overlaps, list(range(nx)), list(range(ny)))
    for round_index in range(max_rounds):
        if len(np.unique(mapping)) == nx:
            return VectorMapping(mapping, True)
        logger.debug(f"tie-break round {round_index}")
        mapping = _break_ties(mapping, overlaps)
    if len(np.unique(mapping)) == nx:
        return VectorMapping(mapping, True)
    repeated = [iy for iy, pos in group_indices(mapping.tolist()).items() if len(pos) > 1]
    logger.warning(
        f"Maximum number of tie-break rounds ({max_rounds}) reached: "
        f"targets {repeated} are still shared. Check for degeneracies."
    )
    return VectorMapping(mapping, False)
