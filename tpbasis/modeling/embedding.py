"""Embedding of local operators into the full tensor-product operator space.

An operator ``m`` acting on a subset of subsystems is lifted to the full space
as ``m (x) 1`` on the remaining subsystems, with the factors reordered to the
subsystem order. The lifted matrix has the block structure

    M[key(a, e), key(b, e)] = m[a, b]

for every configuration ``e`` of the subsystems not acted on, where
``key(a, e)`` is the global basis index of the configuration that puts the
local configuration ``a`` on the acted-on subsystems and ``e`` elsewhere. It is
filled directly from these index correspondences, without building the
Kronecker products: ``d**2 * D / d`` writes instead of ``D**2``.

The correspondence only depends on the subsystem layout, so it is stored in an
:class:`EmbedMap` and reused for any number of operators. Positions in the map
are 0-based row-major offsets ``row * D + col`` of the ``D x D`` target matrix.
"""

import numpy as np
from functools import lru_cache
from scipy.sparse import issparse
from tpbasis.tools import (
    validate_parameters,
    get_time,
    RangeError,
    SizeError,
    compute_strides,
    get_state_configs,
    subsystem_global_indices,
)
from .index_codec import total_dimension
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "EmbedMap",
    "compute_embed_map",
    "clear_embed_map_cache",
    "global_indices",
    "iter_embed_positions",
    "embed",
    "embed_into",
    "embed_add",
]


class EmbedMap:
    """Precomputed positions of the entries of a local operator in the full matrix.

    The entry ``m[i, j]`` of the local operator is written to the flat
    positions ``firstcol[i, j] + strides`` of the ``D x D`` target.

    Attributes
    ----------
    firstcol : numpy.ndarray
        int64 array of shape (d, d): flat position of each local entry for the
        first configuration of the subsystems not acted on.
    strides : numpy.ndarray
        int64 array of shape (D // d,): offsets of the remaining configurations
        relative to the first one, shared by every local entry.
    global_dim : int
        Dimension ``D`` of the full space.
    """

    __slots__ = ("_firstcol", "_strides", "_global_dim")

    def __init__(self, firstcol, strides, global_dim):
        self._firstcol = np.array(firstcol, dtype=np.int64)
        self._strides = np.array(strides, dtype=np.int64)
        self._firstcol.flags.writeable = False
        self._strides.flags.writeable = False
        self._global_dim = int(global_dim)

    @property
    def firstcol(self) -> np.ndarray:
        return self._firstcol

    @property
    def strides(self) -> np.ndarray:
        return self._strides

    @property
    def global_dim(self) -> int:
        return self._global_dim

    @property
    def local_dim(self) -> int:
        return self._firstcol.shape[0]

    def positions(self, row, col) -> np.ndarray:
        """Flat positions receiving the local entry ``m[row, col]``."""
        return self._firstcol[row, col] + self._strides

    def _targets(self, m):
        if issparse(m):
            m = m.toarray()
        m = np.asarray(m)
        n_rows, n_cols = m.shape
        flat = self._firstcol[:n_rows, :n_cols, None] + self._strides
        rows, cols = np.divmod(flat.ravel(), self._global_dim)
        values = np.broadcast_to(m[:, :, None], flat.shape).ravel()
        return rows, cols, values

    def set(self, M, m):
        """Overwrite ``M`` with the entries of ``m`` at the mapped positions."""
        rows, cols, values = self._targets(m)
        M[rows, cols] = values

    def add(self, M, m):
        """Add the entries of ``m`` to ``M`` at the mapped positions."""
        rows, cols, values = self._targets(m)
        # mapped positions are distinct, so fancy-index += does not lose updates
        M[rows, cols] += values

    def __repr__(self):
        return (
            f"EmbedMap(local_dim={self.local_dim}, global_dim={self._global_dim}, "
            f"n_copies={self._strides.shape[0]})"
        )


def _subsystem_layout(acting_on, dims):
    """0-based acted-on and remaining subsystems, and the dims as an int64 array."""
    validate_parameters(acting_on=list(acting_on), dims=list(dims))
    loc_dims = np.asarray(dims, dtype=np.int64)
    n_sites = loc_dims.shape[0]
    acting = np.asarray(acting_on, dtype=np.int64) - 1
    if np.any(acting < 0) or np.any(acting >= n_sites):
        raise RangeError(f"acting_on {list(acting_on)} outside [1, {n_sites}]")
    if len(np.unique(acting)) != len(acting):
        raise ValueError(f"acting_on must not repeat subsystems, got {list(acting_on)}")
    acted = set(acting.tolist())
    env = np.array([ii for ii in range(n_sites) if ii not in acted], dtype=np.int64)
    return acting, env, loc_dims


def _local_global_keys(acting, env, loc_dims):
    local_configs = get_state_configs(loc_dims[acting])
    env_configs = get_state_configs(loc_dims[env])
    return subsystem_global_indices(
        local_configs, env_configs, acting, env, compute_strides(loc_dims)
    )


def global_indices(local_row, local_col, acting_on, dims):
    """Flat positions of the full matrix that the local entry ``(local_row, local_col)`` maps to.

    Parameters
    ----------
    local_row, local_col : int
        0-based indices into the local operator.
    acting_on : sequence of int
        1-based labels of the subsystems the local operator acts on.
    dims : sequence of int
        Dimensions of all subsystems.

    Returns
    -------
    numpy.ndarray
        int64 array of length ``prod(dims) // prod(dims[acting_on])``, one
        0-based row-major position per configuration of the other subsystems.
    """
    acting, env, loc_dims = _subsystem_layout(acting_on, dims)
    keys = _local_global_keys(acting, env, loc_dims)
    D = total_dimension(dims)
    return keys[local_row] * D + keys[local_col]


def iter_embed_positions(acting_on, dims):
    """Lazily yield ``((row, col), positions)`` for every local entry, row by row."""
    acting, env, loc_dims = _subsystem_layout(acting_on, dims)
    keys = _local_global_keys(acting, env, loc_dims)
    D = total_dimension(dims)
    d = keys.shape[0]
    for row in range(d):
        for col in range(d):
            yield (row, col), keys[row] * D + keys[col]


@get_time
def _build_embed_map(acting_on, dims):
    acting, env, loc_dims = _subsystem_layout(acting_on, dims)
    keys = _local_global_keys(acting, env, loc_dims)
    D = total_dimension(dims)
    logger.debug(
        f"embed map: local dim {keys.shape[0]}, global dim {D}, {keys.shape[1]} copies"
    )
    # the environment contributes the same offset to every local entry
    first_keys = keys[:, 0]
    firstcol = first_keys[:, None] * D + first_keys[None, :]
    first_sequence = keys[0] * D + keys[0]
    strides = first_sequence - first_sequence[0]
    return EmbedMap(firstcol, strides, D)


@lru_cache(maxsize=128)
def _cached_embed_map(acting_on, dims):
    return _build_embed_map(acting_on, dims)


def compute_embed_map(acting_on, dims) -> EmbedMap:
    """Precompute the embedding of operators acting on ``acting_on``.

    Parameters
    ----------
    acting_on : sequence of int
        1-based labels of the subsystems the local operators act on.
    dims : sequence of int
        Dimensions of all subsystems.

    Returns
    -------
    EmbedMap
        Immutable map, shared between calls with the same layout.

    Raises
    ------
    RangeError
        If a label is outside ``[1, len(dims)]``.
    ValueError
        If a label is repeated.
    """
    validate_parameters(acting_on=list(acting_on), dims=list(dims))
    return _cached_embed_map(
        tuple(int(ii) for ii in acting_on), tuple(int(dim) for dim in dims)
    )


def clear_embed_map_cache():
    _cached_embed_map.cache_clear()


def _check_local_operator(m, embed_map):
    n_rows, n_cols = m.shape
    if n_rows != n_cols:
        raise SizeError(f"local operator must be square, got shape {m.shape}")
    if n_rows > embed_map.local_dim:
        raise SizeError(
            f"local operator of size {n_rows} is too large for the acted-on "
            f"subsystems of dimension {embed_map.local_dim}"
        )


def embed(m, acting_on, dims):
    """Embed the local operator ``m`` into the full tensor-product space.

    Parameters
    ----------
    m : numpy.ndarray or scipy sparse matrix
        Square operator on the acted-on subsystems.
    acting_on : sequence of int
        1-based labels of the subsystems ``m`` acts on.
    dims : sequence of int
        Dimensions of all subsystems.

    Returns
    -------
    numpy.ndarray
        Dense ``D x D`` matrix with the dtype of ``m``.

    Raises
    ------
    SizeError
        If ``m`` is not square or exceeds the acted-on dimension.

    Examples
    --------
    >>> sx = np.array([[0, 1], [1, 0]])
    >>> np.array_equal(embed(sx, [1], [2, 2]), np.kron(sx, np.eye(2)))
    True
    """
    validate_parameters(operator=m)
    embed_map = compute_embed_map(acting_on, dims)
    _check_local_operator(m, embed_map)
    D = embed_map.global_dim
    M = np.zeros((D, D), dtype=m.dtype)
    embed_into(M, m, acting_on, dims, embed_map=embed_map)
    return M


def embed_into(M, m, acting_on, dims, embed_map=None):
    """In place version of :func:`embed`: overwrite the mapped entries of ``M``.

    Entries of ``M`` outside the mapped positions are left untouched.

    Raises
    ------
    SizeError
        If ``M`` is not ``D x D`` or ``m`` does not fit the acted-on subsystems.
    """
    validate_parameters(matrix=M, operator=m)
    if embed_map is None:
        embed_map = compute_embed_map(acting_on, dims)
    D = embed_map.global_dim
    if M.shape != (D, D):
        raise SizeError(f"target matrix must have shape {(D, D)}, got {M.shape}")
    _check_local_operator(m, embed_map)
    embed_map.set(M, m)


def embed_add(M, m, acting_on=None, dims=None, embed_map=None):
    """Inplace addition of a local operator ``m`` into the full matrix ``M``.

    Either ``acting_on`` and ``dims`` or a precomputed ``embed_map`` must be
    given.

    *Warning*: no check is done on the matrix sizes, it is up to the caller
    to pass consistent shapes.
    """
    if embed_map is None:
        embed_map = compute_embed_map(acting_on, dims)
    embed_map.add(M, m)
