"""Sparse basis vectors and overlaps between state vectors.

Basis vectors are returned as scipy sparse column vectors of shape ``(n, 1)``.
Overlaps accept dense 1D arrays, sparse column vectors, 2D arrays whose columns
are vectors, or sequences of vectors.
"""

import numpy as np
from numbers import Integral
from scipy.sparse import csc_matrix, issparse
from tpbasis.dtype_config import resolve_dtype
from tpbasis.tools import validate_parameters, RangeError, ArityError
from .index_codec import encode, total_dimension
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "site_vector",
    "basis_vector",
    "overlap",
]


def site_vector(excitation, max_excitation):
    """One-hot sparse vector of a single subsystem.

    Parameters
    ----------
    excitation : int
        0-based excitation of the subsystem.
    max_excitation : int
        Dimension of the subsystem.

    Returns
    -------
    scipy.sparse.csc_matrix
        Boolean column vector of shape ``(max_excitation, 1)`` whose only stored
        entry sits at row ``excitation``.

    Examples
    --------
    >>> site_vector(1, 3).nonzero()[0]
    array([1], dtype=int32)
    """
    validate_parameters(index=excitation)
    if not 0 <= excitation < max_excitation:
        raise RangeError(f"excitation {excitation} outside [0, {max_excitation})")
    return csc_matrix(
        ([True], ([excitation], [0])), shape=(max_excitation, 1), dtype=bool
    )


def basis_vector(excitations, sites, dims, dtype=None):
    """Sparse basis vector of a tensor-product space.

    The excitations are placed on the given subsystems, every other subsystem
    stays in its ground state ``0``, and the resulting tuple is one-hot encoded.

    Parameters
    ----------
    excitations : int or sequence of int
        Excitations to place.
    sites : int or sequence of int or None
        1-based subsystem labels receiving ``excitations``. ``None`` means
        ``excitations`` already lists one value per subsystem.
    dims : sequence of int
        Subsystem dimensions.
    dtype : numpy dtype, optional
        Scalar type of the stored one (global dtype mode by default).

    Returns
    -------
    scipy.sparse.csc_matrix
        Column vector of shape ``(prod(dims), 1)``.

    Raises
    ------
    RangeError
        If an excitation exceeds its subsystem dimension minus one, or a site
        label is outside ``[1, len(dims)]``.
    """
    if isinstance(excitations, Integral):
        excitations = [excitations]
    if isinstance(sites, Integral):
        sites = [sites]
    validate_parameters(excitations=list(excitations), dims=dims)
    n_sites = len(dims)
    if sites is None:
        config = list(excitations)
    else:
        validate_parameters(sites=list(sites))
        if len(sites) != len(excitations):
            raise ArityError(
                f"{len(excitations)} excitations given for {len(sites)} sites"
            )
        if len(set(sites)) != len(sites):
            raise ValueError(f"sites must be distinct, got {list(sites)}")
        config = [0] * n_sites
        for site, exc in zip(sites, excitations):
            if not 1 <= site <= n_sites:
                raise RangeError(f"site {site} outside [1, {n_sites}]")
            config[site - 1] = exc
    index = encode(config, dims)
    return csc_matrix(
        ([1], ([index - 1], [0])),
        shape=(total_dimension(dims), 1),
        dtype=resolve_dtype(dtype),
    )


def _is_vector_set(obj):
    return isinstance(obj, (list, tuple))


def _as_vector_list(vectors):
    if isinstance(vectors, (list, tuple)):
        return list(vectors)
    if isinstance(vectors, np.ndarray) or issparse(vectors):
        if vectors.ndim != 2:
            raise TypeError("a vector set must be a 2D array of column vectors")
        return [vectors[:, [jj]] if issparse(vectors) else vectors[:, jj]
                for jj in range(vectors.shape[1])]
    raise TypeError(f"cannot interpret {type(vectors)} as a set of vectors")


def _as_dense(vec):
    if issparse(vec):
        vec = vec.toarray()
        if 1 in vec.shape:
            vec = vec.ravel()
    return np.asarray(vec)


def overlap(x, y):
    """Absolute value of the inner product ``|x^H y|``.

    Parameters
    ----------
    x, y : numpy.ndarray, scipy sparse matrix, or sequence of vectors
        Two vectors of the same length give a non-negative float. Two 2D
        arrays give the matrix ``|X^H Y|``, i.e. the overlaps between their
        columns. Two sequences of vectors give the matrix whose entry
        ``(i, j)`` is ``overlap(x[i], y[j])``; a 2D array paired with a
        sequence contributes its columns.

    Examples
    --------
    >>> x = np.array([1, 2, 2, 1]) / np.sqrt(10)
    >>> y = np.array([1, -2, 2, -1]) / np.sqrt(10)
    >>> round(overlap(x, x), 12), overlap(x, y)
    (1.0, 0.0)
    """
    if _is_vector_set(x) or _is_vector_set(y):
        # a 2D array next to a sequence is read column by column
        x, y = _as_vector_list(x), _as_vector_list(y)
        result = np.zeros((len(x), len(y)))
        for ii, xvec in enumerate(x):
            for jj, yvec in enumerate(y):
                result[ii, jj] = overlap(xvec, yvec)
        return result
    if issparse(x) and issparse(y):
        prod = (x.conj().T @ y).toarray()
    else:
        x, y = _as_dense(x), _as_dense(y)
        if x.ndim == 1 and y.ndim == 1:
            return float(np.abs(np.vdot(x, y)))
        prod = x.conj().T @ y
    prod = np.abs(np.asarray(prod))
    if prod.size == 1:
        return float(prod.item())
    return prod
