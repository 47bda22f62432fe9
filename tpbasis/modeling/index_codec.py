"""Mixed-radix conversion between excitation tuples and linear basis indices.

A ket ``|e_0> (x) |e_1> (x) ... (x) |e_{N-1}>`` of a tensor-product space whose
subsystems have dimensions ``dims`` is the column vector with a single non-zero
entry. Its position is the linear index returned by :func:`encode`: the
excitations are read as the digits of a mixed-radix number whose last subsystem
is the least significant digit (the Kronecker-product convention), shifted by
one so that the all-zero tuple sits at index ``1``.

Single conversions use Python integers, so they are exact for any number of
subsystems. :func:`configs_to_indices` encodes many configurations at once with
a compiled kernel and is bounded by int64.
"""

import numpy as np
from tpbasis.tools import (
    validate_parameters,
    RangeError,
    ArityError,
    compute_strides,
    encode_all_configs,
)
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "encode",
    "decode",
    "configs_to_indices",
    "total_dimension",
]


def total_dimension(dims):
    """Product of the subsystem dimensions."""
    total = 1
    for dim in dims:
        total *= int(dim)
    return total


def encode(excitations, dims):
    """Convert an excitation tuple into its 1-based linear index.

    Parameters
    ----------
    excitations : sequence of int
        One 0-based excitation per subsystem.
    dims : sequence of int
        Subsystem dimensions, in the same order as ``excitations``.

    Returns
    -------
    int
        Linear index in ``[1, prod(dims)]``.

    Raises
    ------
    ArityError
        If ``excitations`` and ``dims`` have different lengths.
    RangeError
        If any ``excitations[i]`` is not in ``[0, dims[i])``.

    Examples
    --------
    >>> encode((1, 0), (2, 2))
    3
    """
    validate_parameters(excitations=excitations, dims=dims)
    if len(excitations) != len(dims):
        raise ArityError(
            f"{len(excitations)} excitations given for {len(dims)} subsystems"
        )
    index = 0
    for site, (exc, dim) in enumerate(zip(excitations, dims)):
        if not 0 <= exc < dim:
            raise RangeError(
                f"excitation {exc} on subsystem {site} outside [0, {dim})"
            )
        index = index * int(dim) + int(exc)
    return index + 1


def decode(index, dims):
    """Convert a 1-based linear index into its excitation tuple.

    Inverse of :func:`encode` for fixed ``dims``:
    ``decode(encode(e, dims), dims) == e``.

    Parameters
    ----------
    index : int
        Linear index in ``[1, prod(dims)]``.
    dims : sequence of int
        Subsystem dimensions.

    Returns
    -------
    tuple of int
        One 0-based excitation per subsystem.

    Raises
    ------
    RangeError
        If ``index`` is outside ``[1, prod(dims)]``.
    """
    validate_parameters(index=index, dims=dims)
    total = total_dimension(dims)
    if not 1 <= index <= total:
        raise RangeError(f"index {index} outside [1, {total}]")
    remainder = int(index) - 1
    excitations = [0] * len(dims)
    # last subsystem is the fastest digit
    for site in reversed(range(len(dims))):
        remainder, excitations[site] = divmod(remainder, int(dims[site]))
    return tuple(excitations)


def configs_to_indices(configs, dims):
    """Encode many excitation tuples at once.

    Parameters
    ----------
    configs : array-like
        Integer array of shape (n_configs, n_subsystems).
    dims : sequence of int
        Subsystem dimensions.

    Returns
    -------
    numpy.ndarray
        int64 array of 1-based linear indices, one per row of ``configs``.
    """
    validate_parameters(dims=dims)
    loc_dims = np.asarray(dims, dtype=np.int64)
    configs = np.atleast_2d(np.asarray(configs, dtype=np.int64))
    if configs.shape[1] != loc_dims.shape[0]:
        raise ArityError(
            f"configs have {configs.shape[1]} columns for {loc_dims.shape[0]} subsystems"
        )
    if np.any(configs < 0) or np.any(configs >= loc_dims):
        raise RangeError(f"configs out of range for dims {tuple(loc_dims)}")
    return encode_all_configs(configs, compute_strides(loc_dims)) + 1
