"""Product basis of a tensor-product (Kronecker) space.

:class:`TensorBasis` wraps the subsystem dimensions of the space, and
:class:`BasisState` is one element of its product basis. States are numbered
``1, ..., total_dim`` in the canonical Kronecker order, in which the last
subsystem varies fastest: for two qubits the states ``(0,0), (0,1), (1,0),
(1,1)`` have indices ``1, 2, 3, 4``.
"""

import numpy as np
from itertools import product
from numbers import Integral
from tpbasis.dtype_config import resolve_dtype
from tpbasis.tools import (
    validate_parameters,
    ArityError,
    RangeError,
    get_state_configs,
)
from .index_codec import encode, decode, total_dimension
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "TensorBasis",
    "BasisState",
    "linear_index",
    "state_at",
    "basis_states",
    "state_configs",
]


class TensorBasis:
    """Subsystem dimensions of a tensor-product space.

    Parameters
    ----------
    *dims : int or sequence of int
        Either the dimensions as separate integers, ``TensorBasis(2, 3)``, or a
        single tuple/list/array of them, ``TensorBasis((2, 3))``.

    Raises
    ------
    RangeError
        If any dimension is smaller than 1.

    Examples
    --------
    >>> basis = TensorBasis((2, 3))
    >>> basis.total_dim
    6
    >>> basis[4].excitations
    (1, 0)
    """

    __slots__ = ("_dims",)

    def __init__(self, *dims):
        if len(dims) == 1 and not isinstance(dims[0], Integral):
            dims = dims[0]
        if isinstance(dims, np.ndarray):
            dims = dims.tolist()
        validate_parameters(dims=list(dims))
        if any(dim < 1 for dim in dims):
            raise RangeError(f"subsystem dimensions must be >= 1, got {tuple(dims)}")
        self._dims = tuple(int(dim) for dim in dims)

    @property
    def dims(self) -> tuple:
        """Dimensions of each subsystem."""
        return self._dims

    @property
    def n_sites(self) -> int:
        """Number of subsystems."""
        return len(self._dims)

    @property
    def total_dim(self) -> int:
        """Dimension of the full tensor-product space."""
        return total_dimension(self._dims)

    def __len__(self):
        return self.total_dim

    def __iter__(self):
        # fresh generator on every call: enumeration can be restarted
        for excitations in product(*(range(dim) for dim in self._dims)):
            yield BasisState(self, excitations)

    def __getitem__(self, index):
        if isinstance(index, Integral):
            return state_at(self, index)
        if isinstance(index, (list, tuple, np.ndarray)):
            return [state_at(self, int(ii)) for ii in index]
        raise TypeError(f"TensorBasis indices must be INTs, not {type(index)}")

    def __eq__(self, other):
        if not isinstance(other, TensorBasis):
            return NotImplemented
        return self._dims == other._dims

    def __hash__(self):
        return hash(("TensorBasis", self._dims))

    def __repr__(self):
        return f"TensorBasis({self._dims})"


class BasisState:
    """One element of the product basis of a :class:`TensorBasis`.

    Parameters
    ----------
    basis : TensorBasis
        Basis the state belongs to.
    excitations : sequence of int
        One 0-based excitation per subsystem.

    Raises
    ------
    ArityError
        If ``len(excitations) != basis.n_sites``.
    RangeError
        If ``excitations[i]`` is not in ``[0, basis.dims[i])``.
    """

    __slots__ = ("_basis", "_excitations")

    def __init__(self, basis: TensorBasis, excitations):
        if not isinstance(basis, TensorBasis):
            raise TypeError(f"basis must be a TensorBasis, not {type(basis)}")
        if isinstance(excitations, np.ndarray):
            excitations = excitations.tolist()
        excitations = tuple(excitations)
        validate_parameters(excitations=excitations)
        if len(excitations) != basis.n_sites:
            raise ArityError(
                f"{len(excitations)} excitations given for {basis.n_sites} subsystems"
            )
        for site, (exc, dim) in enumerate(zip(excitations, basis.dims)):
            if not 0 <= exc < dim:
                raise RangeError(
                    f"excitation {exc} on subsystem {site} outside [0, {dim})"
                )
        self._basis = basis
        self._excitations = tuple(int(exc) for exc in excitations)

    @property
    def basis(self) -> TensorBasis:
        return self._basis

    @property
    def excitations(self) -> tuple:
        return self._excitations

    @property
    def index(self) -> int:
        """1-based position of the state in the canonical order."""
        return encode(self._excitations, self._basis.dims)

    def to_vector(self, dtype=None) -> np.ndarray:
        """Dense one-hot vector of the state.

        Parameters
        ----------
        dtype : numpy dtype, optional
            Scalar type of the vector. Defaults to the global dtype mode
            (complex128 unless switched to real).

        Returns
        -------
        numpy.ndarray
            Vector of length ``basis.total_dim`` with a one at ``index - 1``.
        """
        vec = np.zeros(self._basis.total_dim, dtype=resolve_dtype(dtype))
        vec[self.index - 1] = 1
        return vec

    def __eq__(self, other):
        if not isinstance(other, BasisState):
            return NotImplemented
        return self._basis == other._basis and self._excitations == other._excitations

    def __hash__(self):
        return hash((self._basis, self._excitations))

    def __repr__(self):
        return f"BasisState({self._basis!r}, {self._excitations})"


def linear_index(state: BasisState) -> int:
    return state.index


def state_at(basis: TensorBasis, index) -> BasisState:
    """State at the 1-based position ``index`` of the canonical order.

    Raises
    ------
    RangeError
        If ``index`` is outside ``[1, basis.total_dim]``.
    """
    return BasisState(basis, decode(index, basis.dims))


def basis_states(basis: TensorBasis) -> list:
    """All basis states in canonical Kronecker order.

    ``basis_states(basis)[k - 1] == state_at(basis, k)`` for every ``k``.

    Examples
    --------
    >>> [bs.excitations for bs in basis_states(TensorBasis((2, 2)))]
    [(0, 0), (0, 1), (1, 0), (1, 1)]
    """
    return list(basis)


def state_configs(basis: TensorBasis) -> np.ndarray:
    """Excitations of all basis states as an int64 array of shape (total_dim, n_sites)."""
    return get_state_configs(np.asarray(basis.dims, dtype=np.int64))
